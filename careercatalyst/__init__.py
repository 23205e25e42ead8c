"""
CareerCatalyst
Career guidance for students, fresh graduates and experienced professionals.

Architecture:
- MongoDB: Users and one role profile per user
- Groq (OpenAI-compatible API): Recommendations, skill gaps, roadmaps
- Google Custom Search: Public LinkedIn profiles for a role
"""

__version__ = "1.0.0"
