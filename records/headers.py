from __future__ import annotations
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from .utils import norm_text, load_rules

RULES = load_rules()


class HeaderCategory(str, Enum):
    ID = "id"
    NAME = "name"
    PHONE = "phone"
    DETAIL = "detail"
    COURSE_CODE = "course_code"
    COURSE_NAME = "course_name"
    COURSE_CREDITS = "course_credits"
    COURSE_COMPLETED = "course_completed"
    COURSE_SEMESTER = "course_semester"


COURSE_FIELDS: Dict[HeaderCategory, str] = {
    HeaderCategory.COURSE_CODE: "code",
    HeaderCategory.COURSE_NAME: "name",
    HeaderCategory.COURSE_CREDITS: "credits",
    HeaderCategory.COURSE_COMPLETED: "completed",
    HeaderCategory.COURSE_SEMESTER: "semester",
}


@dataclass(frozen=True)
class HeaderRule:
    category: HeaderCategory
    contains: Tuple[str, ...] = ()
    # whole-header tokens; too short to be safe as substrings
    exact: Tuple[str, ...] = ()

    def matches(self, header_norm: str) -> bool:
        if header_norm in self.exact:
            return True
        return any(k in header_norm for k in self.contains)


# =========================

# Classification table, evaluated top to bottom, first hit wins.
# Course rules come first: course headers contain generic words ("اسم", "رقم").
# =========================
HEADER_RULES: Tuple[HeaderRule, ...] = (
    HeaderRule(HeaderCategory.COURSE_CODE, contains=(
        "رمز المقرر", "كود المقرر", "رقم المقرر", "course code", "course id", "course no",
    )),
    HeaderRule(HeaderCategory.COURSE_NAME, contains=(
        "اسم المقرر", "إسم المقرر", "عنوان المقرر", "course name", "course title",
    )),
    HeaderRule(HeaderCategory.COURSE_CREDITS, contains=(
        "الوحدات المعتمدة للمقرر", "الوحدات المعتمده للمقرر", "وحدات المقرر", "ساعات المقرر",
        "course credits", "course units", "credit hours",
    )),
    HeaderRule(HeaderCategory.COURSE_COMPLETED, contains=(
        "مستوفى", "مستوفي", "حالة المقرر", "حاله المقرر",
        "course status", "course completed", "completion status",
    )),
    HeaderRule(HeaderCategory.COURSE_SEMESTER, contains=(
        "فصل المقرر", "الفصل التدريبي للمقرر", "الفصل الدراسي للمقرر", "course semester", "course term",
    )),
    HeaderRule(HeaderCategory.PHONE, contains=(
        "جوال", "هاتف", "موبايل", "phone", "mobile",
    )),
    HeaderRule(HeaderCategory.ID, contains=(
        "الرقم التدريبي", "رقم المتدرب", "رقم تدريبي", "الرقم الأكاديمي", "الرقم الاكاديمي",
        "رقم الطالب", "الرقم الجامعي",
        "trainee id", "training id", "trainee number", "training number", "student id", "student number",
    ), exact=("id", "الرقم", "رقم", "trainee no", "student no")),
    HeaderRule(HeaderCategory.NAME, contains=(
        "اسم المتدرب", "إسم المتدرب", "اسم الطالب", "إسم الطالب", "الاسم", "الإسم",
        "full name", "trainee name", "student name",
    ), exact=("name", "اسم", "إسم", "المتدرب")),
)

# SH06 report field order
DEFAULT_DETAIL_ORDER: List[str] = [
    "القسم",
    "التخصص",
    "حالة المتدرب",
    "فصل القبول",
    "عدد الفصول",
    "المرشد الأكاديمي",
    "رقم الهاتف الجوال",
    "المعدل التراكمي",
    "وصف المستوى",
    "عدد المقررات المطلوبة للبرنامج",
    "عدد الوحدات المعتمده للبرنامج",
    "عدد المقررات المنجزه للبرنامج",
    "عدد الوحدات المنجزه للبرنامج",
]

DETAIL_ORDER: List[str] = [str(x) for x in RULES.get("detail_order", DEFAULT_DETAIL_ORDER)]

# presentation hint per detail key
DETAIL_KINDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("phone", ("جوال", "هاتف", "phone", "mobile")),
    ("department", ("قسم", "تخصص", "major", "dept")),
    ("gpa", ("معدل", "gpa")),
    ("semester", ("فصل", "semester")),
    ("credits", ("وحدات", "credits")),
    ("status", ("حالة", "status")),
    ("advisor", ("مرشد", "advisor")),
)

_SLOT_PATTERNS = (
    (re.compile(r"^(.*?)\s*__(\d+)$"), 0),
    (re.compile(r"^(.*?)\.(\d+)$"), 1),  # pandas duplicate mangling is zero-based
    (re.compile(r"^(.*?)\s*[\(\[]\s*(\d+)\s*[\)\]]$"), 0),
    (re.compile(r"^(.*?)\s+(\d+)$"), 0),
)
# =========================

# Classification
# =========================
def _rule_category(header_norm: str) -> HeaderCategory:
    for rule in HEADER_RULES:
        if rule.matches(header_norm):
            return rule.category
    return HeaderCategory.DETAIL

def _split_slot(header_norm: str) -> Tuple[str, Optional[int]]:
    for rx, shift in _SLOT_PATTERNS:
        m = rx.match(header_norm)
        if m and m.group(1).strip():
            return m.group(1).strip(), int(m.group(2)) + shift
    return header_norm, None

def classify_with_slot(header: str) -> Tuple[HeaderCategory, Optional[int]]:
    """
    Returns (category, course slot). Slot is None for non-course headers.
    "اسم المقرر 2" / "اسم المقرر (2)" / "اسم المقرر__2" -> slot 2, "اسم المقرر.1" -> slot 2,
    plain "اسم المقرر" -> slot 1.
    """
    h = norm_text(header)
    if not h:
        return HeaderCategory.DETAIL, None

    base, slot = _split_slot(h)
    if slot is not None:
        cat = _rule_category(base)
        if cat in COURSE_FIELDS:
            return cat, slot

    cat = _rule_category(h)
    if cat in COURSE_FIELDS:
        return cat, 1
    return cat, None

def classify_header(header: str) -> HeaderCategory:
    return classify_with_slot(header)[0]

def is_phone_header(header: str) -> bool:
    return classify_header(header) == HeaderCategory.PHONE

def detail_kind(key: str) -> str:
    k = norm_text(key)
    for kind, kws in DETAIL_KINDS:
        if any(kw in k for kw in kws):
            return kind
    return "other"
# =========================

# Header map for one upload
# =========================
@dataclass
class HeaderMap:
    headers: Tuple[str, ...]
    categories: Dict[str, HeaderCategory] = field(default_factory=dict)
    slots: Dict[str, int] = field(default_factory=dict)

    def category(self, header: str) -> HeaderCategory:
        return self.categories.get(header, HeaderCategory.DETAIL)

    def slot(self, header: str) -> Optional[int]:
        return self.slots.get(header)

    def _ranked(self, cat: HeaderCategory) -> List[str]:
        # best keyword first, so the pick between several id/name columns ignores column order
        return sorted((h for h in self.headers if self.category(h) == cat),
                      key=lambda h: (_keyword_rank(h, cat), norm_text(h), h))

    @property
    def id_headers(self) -> List[str]:
        return self._ranked(HeaderCategory.ID)

    @property
    def name_headers(self) -> List[str]:
        return self._ranked(HeaderCategory.NAME)

    @property
    def course_slots(self) -> Dict[int, Dict[str, str]]:
        # slot -> {"code"/"name"/"credits"/"completed"/"semester": header}, slots ascending
        out: Dict[int, Dict[str, str]] = {}
        for h in self.headers:
            cat = self.category(h)
            if cat not in COURSE_FIELDS:
                continue
            out.setdefault(self.slots[h], {})[COURSE_FIELDS[cat]] = h
        return dict(sorted(out.items()))


def _keyword_rank(header: str, cat: HeaderCategory) -> int:
    # position of the first keyword of the category's rule found in the header
    base, _ = _split_slot(norm_text(header))
    for rule in HEADER_RULES:
        if rule.category != cat:
            continue
        for i, k in enumerate(rule.contains):
            if k in base:
                return i
        return len(rule.contains)
    return 0

def resolve_headers(headers: Iterable[str]) -> HeaderMap:
    """
    Classifies one upload's header set.
    When several headers land on the same (slot, course field), the one whose keyword comes first in the
    rule wins (then the smaller header text); the others are left as plain details.
    The result does not depend on the column order. Never raises: anything unrecognised is a detail.
    """
    hs: List[str] = []
    seen = set()
    for h in headers:
        h = "" if h is None else str(h)
        if h in seen:
            continue
        seen.add(h)
        hs.append(h)

    hmap = HeaderMap(headers=tuple(hs))
    competing: Dict[Tuple[int, HeaderCategory], List[str]] = {}
    for h in hs:
        cat, slot = classify_with_slot(h)
        hmap.categories[h] = cat
        if cat in COURSE_FIELDS:
            competing.setdefault((slot, cat), []).append(h)

    for (slot, cat), candidates in competing.items():
        winner = min(candidates, key=lambda h: (_keyword_rank(h, cat), norm_text(h), h))
        hmap.slots[winner] = slot
        for h in candidates:
            if h != winner:
                hmap.categories[h] = HeaderCategory.DETAIL
    return hmap
# =========================

# Display order
# =========================
def rank_detail_keys(keys: Sequence[str], preferred: Optional[Sequence[str]] = None) -> List[str]:
    """
    Display order for detail keys: each preferred name takes the first remaining key equal to it
    (after trim) or containing it; the rest keep their encounter order.
    """
    order = DETAIL_ORDER if preferred is None else list(preferred)
    remaining = list(keys)
    out: List[str] = []

    for name in order:
        p = str(name).strip()
        if not p:
            continue
        found = None
        for k in remaining:
            ks = str(k).strip()
            if ks == p or p in ks:
                found = k
                break
        if found is not None:
            out.append(found)
            remaining.remove(found)

    return out + remaining
