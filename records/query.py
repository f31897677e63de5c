from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Iterable, List, Optional
from .errors import InvalidQuery

if TYPE_CHECKING:
    from .models import CourseRecord, TraineeProfile

logger = logging.getLogger(__name__)


def _clean_query(query) -> str:
    if not isinstance(query, str):
        raise InvalidQuery(f"query must be text, got {type(query).__name__}")
    term = query.strip()
    if not term:
        raise InvalidQuery("query is empty")
    return term

def match_reason(profile: "TraineeProfile", query: str) -> Optional[str]:
    """
    Which rule makes the profile match, checked in order:
      "id"    - exact training id
      "name"  - substring of the name (case-sensitive, as stored)
      "phone" - substring of a value under a phone-like header
    """
    term = _clean_query(query)

    if profile.id == term:
        return "id"
    if term in profile.name:
        return "name"
    if any(term in phone for phone in profile.phone_numbers()):
        return "phone"
    return None

def find_trainee(profiles: Iterable["TraineeProfile"], query: str) -> Optional["TraineeProfile"]:
    """
    First profile in collection order that matches (see match_reason), or None when nothing matches.
    Linear scan; the first hit stops it, there is no ranking.
    """
    term = _clean_query(query)

    for profile in profiles:
        reason = match_reason(profile, term)
        if reason:
            logger.debug("query matched trainee %s by %s", profile.id, reason)
            return profile

    logger.debug("query matched no trainee")
    return None

def sort_courses(courses: Iterable["CourseRecord"]) -> List["CourseRecord"]:
    # by semester (lexicographic); courses without one go last; ties keep source order
    return sorted(courses, key=lambda c: (0, c.semester) if c.semester else (1, ""))
