from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
import pandas as pd
from .headers import HeaderCategory, HeaderMap, resolve_headers
from .models import CourseRecord, TraineeProfile, parse_completion
from .utils import cell_text, clean_cell

logger = logging.getLogger(__name__)

_DETAIL_CATS = (HeaderCategory.DETAIL, HeaderCategory.PHONE, HeaderCategory.ID, HeaderCategory.NAME)
# =========================

# Row pieces
# =========================
def _first_filled(row: Mapping[str, Any], headers: Sequence[str]) -> Tuple[str, Optional[str]]:
    # first header (in column order) whose cell is not empty
    for h in headers:
        v = cell_text(row.get(h))
        if v:
            return v, h
    return "", None

def _row_details(row: Mapping[str, Any], hmap: HeaderMap, skip: set) -> Dict[str, Any]:
    details: Dict[str, Any] = {}
    for h in hmap.headers:
        if h in skip or hmap.category(h) not in _DETAIL_CATS:
            continue
        v = clean_cell(row.get(h))
        if v == "":
            continue
        details[h] = v
    return details

def _row_courses(row: Mapping[str, Any], hmap: HeaderMap) -> List[CourseRecord]:
    courses: List[CourseRecord] = []
    for slot, fields in hmap.course_slots.items():
        name_h = fields.get("name")
        name = cell_text(row.get(name_h)) if name_h else ""
        if not name:
            # a slot without a course name is an unused slot
            continue
        courses.append(CourseRecord(
            course_name=name,
            course_code=cell_text(row.get(fields["code"])) if "code" in fields else "",
            credits=clean_cell(row.get(fields["credits"])) if "credits" in fields else "",
            is_completed=parse_completion(row.get(fields["completed"])) if "completed" in fields else None,
            semester=cell_text(row.get(fields["semester"])) if "semester" in fields else "",
        ))
    return courses

def _collect_headers(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    seen: Dict[str, None] = {}
    for r in rows:
        for k in r.keys():
            seen.setdefault(str(k), None)
    return list(seen)
# =========================

# Main: rows -> profiles
# =========================
def normalize_rows(rows: Iterable[Mapping[str, Any]], headers: Optional[Sequence[str]] = None) -> List[TraineeProfile]:
    """
    Turns upload rows (header -> cell) into trainee profiles.

    - id: first id-like column with a value; rows without one are skipped
    - name: first name-like column with a value (trimmed)
    - details: every other non-course column with a value, keyed by the raw header
    - courses: one record per course slot that has a course name
    - rows repeating an id (one row per course in SH06) extend the first profile:
      courses appended, details only fill missing keys

    Output order is the order ids first appear. Empty list when no row has an id.
    Input rows are left untouched.
    """
    rows = list(rows)
    if headers is None:
        headers = _collect_headers(rows)
    hmap = resolve_headers(headers)

    if not hmap.id_headers:
        logger.warning("no training id column among headers: %s", list(hmap.headers))

    profiles: Dict[str, TraineeProfile] = {}
    dropped = 0
    merged = 0

    for i, row in enumerate(rows):
        tid, id_h = _first_filled(row, hmap.id_headers)
        if not tid:
            dropped += 1
            logger.debug("row %d skipped: no training id", i + 1)
            continue

        name, name_h = _first_filled(row, hmap.name_headers)
        details = _row_details(row, hmap, skip={id_h, name_h})
        courses = _row_courses(row, hmap)

        prof = profiles.get(tid)
        if prof is None:
            profiles[tid] = TraineeProfile(id=tid, name=name, details=details, courses=courses)
            continue

        merged += 1
        if not prof.name and name:
            prof.name = name
        for k, v in details.items():
            prof.details.setdefault(k, v)
        prof.courses.extend(courses)

    logger.info(
        "normalized %d rows into %d trainees (%d skipped without id, %d merged into earlier rows)",
        len(rows), len(profiles), dropped, merged,
    )
    return list(profiles.values())

def normalize_frame(df: pd.DataFrame) -> List[TraineeProfile]:
    headers = [str(c) for c in df.columns]
    rows = [{str(k): v for k, v in r.items()} for r in df.to_dict(orient="records")]
    return normalize_rows(rows, headers)
