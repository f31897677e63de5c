from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union
from .headers import is_phone_header, rank_detail_keys
from .query import sort_courses
from .utils import norm_text, load_rules

RULES = load_rules()

Scalar = Union[str, int, float]

PROJECT_MARKER = str(RULES.get("project_marker", "المشروع الإنتاجي"))

COMPLETION_YES = {norm_text(x) for x in RULES.get("completion_yes", ["yes", "true", "نعم", "مستوفى", "مستوفي"])}
COMPLETION_NO = {norm_text(x) for x in RULES.get("completion_no", ["no", "false", "لا", "غير مستوفى", "غير مستوفي"])}

UNKNOWN_MARK = "-"


def parse_completion(value: Any) -> Optional[bool]:
    # tri-state: True / False / None (unknown). Anything unrecognised is unknown, never False.
    if isinstance(value, bool):
        return value
    t = norm_text(value)
    if t in COMPLETION_YES:
        return True
    if t in COMPLETION_NO:
        return False
    return None


@dataclass
class CourseRecord:
    course_name: str
    course_code: str = ""
    credits: Scalar = ""
    is_completed: Optional[bool] = None
    semester: str = ""

    @property
    def is_project(self) -> bool:
        # the production project is listed but not counted in the plan yet
        return bool(PROJECT_MARKER) and PROJECT_MARKER in self.course_name

    @property
    def completion_label(self) -> str:
        if self.is_completed is True:
            return "✓"
        if self.is_completed is False:
            return "✗"
        return UNKNOWN_MARK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "courseCode": self.course_code,
            "courseName": self.course_name,
            "credits": self.credits,
            "isCompleted": self.is_completed,
            "semester": self.semester,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CourseRecord":
        done = d.get("isCompleted")
        return cls(
            course_name=str(d.get("courseName", "") or ""),
            course_code=str(d.get("courseCode", "") or ""),
            credits=d.get("credits", "") if d.get("credits") is not None else "",
            is_completed=done if isinstance(done, bool) else parse_completion(done),
            semester=str(d.get("semester", "") or ""),
        )


@dataclass
class TraineeProfile:
    """
    One trainee: identity, an open detail bag (raw header -> value) and the course list.
    Details keep whatever headers the upload had; id and name are never repeated there.
    """
    id: str
    name: str = ""
    details: Dict[str, Scalar] = field(default_factory=dict)
    courses: List[CourseRecord] = field(default_factory=list)

    def phone_numbers(self) -> List[str]:
        return [str(v).strip() for k, v in self.details.items() if is_phone_header(k)]

    def detail(self, keyword: str) -> Optional[Scalar]:
        # first detail whose key contains the keyword (normalised)
        kw = norm_text(keyword)
        for k, v in self.details.items():
            if kw and kw in norm_text(k):
                return v
        return None

    def sorted_details(self) -> List[Tuple[str, Scalar]]:
        return [(k, self.details[k]) for k in rank_detail_keys(list(self.details.keys()))]

    def sorted_courses(self) -> List[CourseRecord]:
        return sort_courses(self.courses)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "details": dict(self.details),
            "courses": [c.to_dict() for c in self.courses],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TraineeProfile":
        details = d.get("details") or {}
        courses = d.get("courses") or []
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", "") or ""),
            details={str(k): v for k, v in details.items()} if isinstance(details, dict) else {},
            courses=[CourseRecord.from_dict(c) for c in courses if isinstance(c, dict)],
        )
