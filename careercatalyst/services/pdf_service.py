"""
Roadmap PDF export.

render_roadmap_pdf() turns a roadmap and its gap analysis into an A4 PDF.
It is a pure function of its inputs: build_document_outline() produces the
ordered (style, text) lines and the reportlab layer only draws them, so the
same input always yields the same content. Bytes can still differ between
runs because reportlab stamps creation time and document id.
"""

import html
import io
from typing import Any, List, Optional, Tuple, Union

from pydantic import ValidationError as SchemaValidationError
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer
from loguru import logger

from careercatalyst.core.errors import RenderError
from careercatalyst.schemas.schemas import GapAnalysisResult, RoadmapResult

OutlineLine = Tuple[str, str]

FOOTER_TEXT = "Generated by CareerCatalyst - Your Career Development Partner"

SUCCESS_TIPS = [
    "Set aside dedicated time each day for learning",
    "Focus on hands-on practice and project work",
    "Join relevant online communities for support",
    "Track your progress regularly",
    "Take breaks and avoid burnout",
]


def _coerce(value: Union[dict, Any], model):
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except SchemaValidationError as e:
        logger.error(f"Cannot render {model.__name__}: {e}")
        raise RenderError() from e


def build_document_outline(
    roadmap: Union[RoadmapResult, dict],
    analysis: Union[GapAnalysisResult, dict],
    audience: Optional[str] = None,
    educational_context: Optional[dict] = None,
) -> List[OutlineLine]:
    """
    Ordered document content.

    Raises:
        RenderError if either input is missing required fields
    """
    roadmap = _coerce(roadmap, RoadmapResult)
    analysis = _coerce(analysis, GapAnalysisResult)

    heading = "Your Student Learning Roadmap" if audience == "student" else "Your Learning Roadmap"
    lines: List[OutlineLine] = [("title", heading)]
    if analysis.role:
        lines.append(("subtitle", f"Target role: {analysis.role}"))

    # Current skills
    lines.append(("section", "Current Skills Assessment"))
    for strength in analysis.current_skills_assessment.strengths:
        lines.append(("bullet", strength))
    lines.append(("subsection", "Skills Relevance:"))
    lines.append(("body", analysis.current_skills_assessment.relevance))

    # Missing skills
    lines.append(("section", "Skills to Develop"))
    for skill in analysis.missing_skills:
        lines.append(("subsection", skill.skill))
        lines.append(("body", f"Priority: {skill.priority.value}"))
        lines.append(("body", f"Time to Acquire: {skill.time_to_acquire}"))
        lines.append(("body", f"Impact: {skill.impact}"))

    if analysis.transition_plan:
        lines.append(("section", "Transition Timeline"))
        for phase in analysis.transition_plan.phases:
            lines.append(("subsection", f"{phase.name} ({phase.duration})"))
            for activity in phase.activities:
                lines.append(("bullet", activity))

    # Roadmap
    lines.append(("section", "Learning Roadmap"))
    lines.append(("subsection", f"Total Duration: {roadmap.estimated_total_duration}"))
    for phase in roadmap.phases:
        lines.append(("phase", f"Phase {phase.phase}: {phase.title}"))
        lines.append(("body", f"Duration: {phase.duration}"))

        if phase.focus_areas:
            lines.append(("label", "Focus Areas:"))
            for area in phase.focus_areas:
                lines.append(("bullet", area))

        for skill in phase.skills:
            lines.append(("subsection", skill.skill))
            lines.append(("body", f"Target Level: {skill.level}"))
            if skill.resources:
                lines.append(("label", "Learning Resources:"))
                for resource in skill.resources:
                    kind = f" ({resource.type})" if resource.type else ""
                    lines.append(("bullet", f"{resource.name}{kind}"))
                    if resource.platform:
                        lines.append(("detail", f"Platform: {resource.platform}"))
                    if resource.duration:
                        lines.append(("detail", f"Duration: {resource.duration}"))
                    lines.append(("detail", f"Cost: {resource.cost.value}"))
            if skill.projects:
                lines.append(("label", "Practice Projects:"))
                for project in skill.projects:
                    lines.append(("bullet", project.title))
                    lines.append(("detail", project.description))
                    if project.difficulty:
                        lines.append(("detail", f"Difficulty: {project.difficulty}"))

        if phase.milestones:
            lines.append(("label", "Milestones:"))
            for milestone in phase.milestones:
                lines.append(("bullet", milestone))

    if educational_context:
        try:
            lines.extend(_educational_context_lines(educational_context))
        except (KeyError, TypeError, AttributeError) as e:
            logger.error(f"Cannot render educational context: {e!r}")
            raise RenderError() from e

    lines.append(("section", "Tips for Success"))
    for tip in SUCCESS_TIPS:
        lines.append(("bullet", tip))

    lines.append(("footer", FOOTER_TEXT))
    return lines


def _educational_context_lines(context: dict) -> List[OutlineLine]:
    lines: List[OutlineLine] = [("section", "Educational Pathway")]
    courses = context.get("relevantCourses") or []
    if courses:
        lines.append(("label", "Relevant Courses:"))
        for course in courses:
            lines.append(("bullet", f"{course['name']} - {course['provider']} ({course['duration']}, {course['level']})"))
    prerequisites = context.get("prerequisites") or []
    if prerequisites:
        lines.append(("label", "Prerequisites:"))
        for item in prerequisites:
            lines.append(("bullet", f"{item['skill']} - {item['level']} (importance: {item['importance']})"))
    pathway = context.get("academicPathway") or {}
    if pathway.get("recommendations"):
        lines.append(("label", "Academic Pathway:"))
        for rec in pathway["recommendations"]:
            lines.append(("bullet", rec))
    if pathway.get("certifications"):
        lines.append(("label", "Certifications:"))
        for cert in pathway["certifications"]:
            lines.append(("bullet", cert))
    if pathway.get("timeline"):
        lines.append(("body", f"Timeline: {pathway['timeline']}"))
    return lines


def build_pdf_styles() -> dict:
    sample = getSampleStyleSheet()
    accent = colors.HexColor("#1F3A5F")
    return {
        "title": ParagraphStyle("title", parent=sample["Title"], fontName="Helvetica-Bold",
                                fontSize=24, leading=28, textColor=accent, spaceAfter=6),
        "subtitle": ParagraphStyle("subtitle", parent=sample["Normal"], fontName="Helvetica",
                                   fontSize=12, leading=15, alignment=1, spaceAfter=10),
        "section": ParagraphStyle("section", parent=sample["Heading1"], fontName="Helvetica-Bold",
                                  fontSize=18, leading=22, textColor=accent, spaceBefore=12, spaceAfter=6),
        "phase": ParagraphStyle("phase", parent=sample["Heading2"], fontName="Helvetica-Bold",
                                fontSize=16, leading=20, spaceBefore=10, spaceAfter=4),
        "subsection": ParagraphStyle("subsection", parent=sample["Heading3"], fontName="Helvetica-Bold",
                                     fontSize=14, leading=17, spaceBefore=6, spaceAfter=2),
        "label": ParagraphStyle("label", parent=sample["Normal"], fontName="Helvetica-Bold",
                                fontSize=12, leading=15, spaceBefore=4),
        "body": ParagraphStyle("body", parent=sample["Normal"], fontName="Helvetica",
                               fontSize=12, leading=15),
        "bullet": ParagraphStyle("bullet", parent=sample["Normal"], fontName="Helvetica",
                                 fontSize=12, leading=15, leftIndent=14, bulletIndent=4),
        "detail": ParagraphStyle("detail", parent=sample["Normal"], fontName="Helvetica",
                                 fontSize=11, leading=14, leftIndent=24, textColor=colors.HexColor("#444444")),
        "footer": ParagraphStyle("footer", parent=sample["Normal"], fontName="Helvetica",
                                 fontSize=10, leading=12, alignment=1, textColor=colors.grey, spaceBefore=14),
    }


def render_roadmap_pdf(
    roadmap: Union[RoadmapResult, dict],
    analysis: Union[GapAnalysisResult, dict],
    audience: Optional[str] = None,
    educational_context: Optional[dict] = None,
) -> bytes:
    """
    Render the roadmap document.

    Returns:
        PDF bytes

    Raises:
        RenderError on malformed input or a reportlab failure
    """
    outline = build_document_outline(roadmap, analysis, audience, educational_context)
    styles = build_pdf_styles()

    story: List[Any] = []
    for style, text in outline:
        if style == "section":
            story.append(Spacer(1, 6))
        if style == "footer":
            story.append(HRFlowable(width="100%", color=colors.lightgrey, thickness=0.7, spaceBefore=8))
        if style == "bullet":
            story.append(Paragraph(html.escape(text), styles[style], bulletText="•"))
        else:
            story.append(Paragraph(html.escape(text), styles[style]))

    output = io.BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=A4,
        leftMargin=50,
        rightMargin=50,
        topMargin=50,
        bottomMargin=50,
        title="Career Roadmap",
        author="CareerCatalyst",
    )
    try:
        doc.build(story)
    except Exception as e:
        logger.exception("PDF layout failed")
        raise RenderError() from e
    return output.getvalue()
