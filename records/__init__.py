"""
This package contains:
- header classification for trainee report uploads (Arabic/English column names)
- reading CSV/XLSX uploads into rows
- normalisation of rows into trainee profiles (identity, detail bag, courses)
- search by training id, name or phone number
- the profile store (replace-all publish, fetch)
"""
from .errors import RecordsError, EmptyBatch, InvalidQuery, StoreUnavailable, RowSourceError
from .headers import HeaderCategory, classify_header, resolve_headers, rank_detail_keys
from .models import TraineeProfile, CourseRecord, parse_completion
from .normalize import normalize_rows, normalize_frame
from .query import find_trainee, match_reason, sort_courses
from .ingest import load_table, load_table_from_upload
from .store import ProfileStore, JsonProfileStore, MemoryProfileStore
from .service import publish_upload, load_profiles

__all__ = [
    "RecordsError",
    "EmptyBatch",
    "InvalidQuery",
    "StoreUnavailable",
    "RowSourceError",
    "HeaderCategory",
    "classify_header",
    "resolve_headers",
    "rank_detail_keys",
    "TraineeProfile",
    "CourseRecord",
    "parse_completion",
    "normalize_rows",
    "normalize_frame",
    "find_trainee",
    "match_reason",
    "sort_courses",
    "load_table",
    "load_table_from_upload",
    "ProfileStore",
    "JsonProfileStore",
    "MemoryProfileStore",
    "publish_upload",
    "load_profiles",
]
