"""
Profile Search Service - public LinkedIn profiles via Google Custom Search.

The query is "site:linkedin.com/in/ <role> <up to 3 skills>". Result titles
usually look like "Name - Position - Company | LinkedIn"; they are split on
" - " and the LinkedIn boilerplate is stripped.
"""

from typing import List, Optional
import httpx
from loguru import logger

from careercatalyst.core.config import get_settings
from careercatalyst.core.errors import UpstreamSearchError
from careercatalyst.schemas.schemas import ProfileSummary

settings = get_settings()

MAX_QUERY_SKILLS = 3
RESULTS_PER_QUERY = 5
BOILERPLATE = (" | LinkedIn", "View profile on LinkedIn.")


def build_search_query(role: str, skills: Optional[List[str]] = None) -> str:
    """Role name plus the first three non-blank skills."""
    top_skills = [s.strip() for s in (skills or []) if s and s.strip()][:MAX_QUERY_SKILLS]
    return " ".join([role.strip(), *top_skills]).strip()


def _strip_boilerplate(text: str) -> str:
    for fragment in BOILERPLATE:
        text = text.replace(fragment, "")
    return text.strip()


def parse_search_item(item: dict) -> ProfileSummary:
    """Turn one Custom Search result into a profile summary."""
    title_parts = [part.strip() for part in (item.get("title") or "").split(" - ")]

    name = _strip_boilerplate(title_parts[0]) if title_parts[0] else "Unknown"
    position = _strip_boilerplate(title_parts[1]) if len(title_parts) > 1 and title_parts[1] else ""
    company = _strip_boilerplate(title_parts[2]) if len(title_parts) > 2 and title_parts[2] else ""

    thumbnails = (item.get("pagemap") or {}).get("cse_thumbnail") or []
    thumbnail_url = thumbnails[0].get("src") if thumbnails else None

    return ProfileSummary(
        name=name,
        title=position or "Position not specified",
        company=company or "Company not specified",
        description=_strip_boilerplate(item.get("snippet") or ""),
        profile_url=item.get("link") or "",
        thumbnail_url=thumbnail_url,
    )


class ProfileSearchClient:
    """
    Thin wrapper over the Custom Search JSON API.
    """

    def __init__(self, http_client: Optional[httpx.Client] = None):
        self.http_client = http_client or httpx.Client(timeout=30.0)
        self.api_key = settings.google_api_key
        self.engine_id = settings.google_cse_id

    def search_profiles(self, role: str, skills: Optional[List[str]] = None) -> List[ProfileSummary]:
        """
        Search public profiles for a role.

        Returns:
            Possibly empty list of profile summaries

        Raises:
            UpstreamSearchError on transport, auth or API errors
        """
        query = build_search_query(role, skills)
        params = {
            "key": self.api_key,
            "cx": self.engine_id,
            "q": f"site:linkedin.com/in/ {query}",
            "num": RESULTS_PER_QUERY,
        }

        try:
            response = self.http_client.get(settings.google_search_url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Google CSE request failed: {e}")
            raise UpstreamSearchError() from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error:
            message = (data.get("error") or {}).get("message") if isinstance(data, dict) else None
            logger.error(f"Google CSE error {response.status_code}: {message or response.text[:500]}")
            raise UpstreamSearchError()

        items = (data.get("items") or []) if isinstance(data, dict) else []
        profiles = [parse_search_item(item) for item in items if item.get("link")]
        logger.info(f"Profile search '{query}' returned {len(profiles)} profiles")
        return profiles


# Singleton instance
_search_client: ProfileSearchClient = None


def get_search_client() -> ProfileSearchClient:
    """Get or create search client (singleton pattern)"""
    global _search_client
    if _search_client is None:
        _search_client = ProfileSearchClient()
    return _search_client
