import os
import re
import json
from pathlib import Path
from typing import Any
import pandas as pd

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DATA_DIR = BASE_DIR / "data"

APPDATA = os.environ.get("APPDATA")
if os.environ.get("TRAINEE_DATA_DIR"):
    USER_DATA_DIR = Path(os.environ["TRAINEE_DATA_DIR"])
elif APPDATA:
    USER_DATA_DIR = Path(APPDATA) / "TraineeRecords" / "data"
else:
    USER_DATA_DIR = DEFAULT_DATA_DIR  # fallback

SUPERVISOR_PASSWORD = os.environ.get("SUPERVISOR_PASSWORD", "")

def load_json(path: Path, default: Any):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        return default

_NBSP_RE = re.compile(r"[\u00A0\u2007\u202F]")  # NBSP variants
_BIDI_RE = re.compile(r"[\u200E\u200F\u202A-\u202E\u2066-\u2069]")  # RTL/LTR marks from Excel exports
_TATWEEL = "\u0640"
_NUMERIC_RE = re.compile(r"^[-+]?\d+(?:\.\d+)?$")


def norm_text(s: Any) -> str:
    """
    Text normalisation used for header matching and token comparison:
    - BOM, bidi marks, non-breaking spaces
    - outer quotes
    - Arabic tatweel
    - lower (affects Latin only)
    - collapsed whitespace
    """
    if s is None:
        return ""

    s = str(s)

    s = s.replace("\ufeff", "")
    s = _BIDI_RE.sub("", s)
    s = _NBSP_RE.sub(" ", s)
    s = s.strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ('"', "'"):
        s = s[1:-1].strip()
    s = s.replace(_TATWEEL, "").lower()
    s = re.sub(r"\s+", " ", s).strip()
    return s

def is_blank(v: Any) -> bool:
    # None / NaN / NaT and whitespace-only text; words like "None" in a cell are real text
    if v is None:
        return True
    if isinstance(v, str):
        return v.strip() == ""
    try:
        return bool(pd.isna(v))
    except (TypeError, ValueError):
        return False

def clean_cell(v: Any):
    """
    Cell value as stored in a profile:
    - empty -> ""
    - bool -> "true"/"false"
    - int/float stay numbers (integral floats become int: 423901.0 -> 423901)
    - everything else is text, trimmed
    Text that merely looks numeric stays text so leading zeros survive ("0558...").
    """
    if is_blank(v):
        return ""
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v) if v.is_integer() else v
    # numpy scalars and other number-likes
    if hasattr(v, "item") and not isinstance(v, str):
        try:
            return clean_cell(v.item())
        except (TypeError, ValueError):
            pass
    return _NBSP_RE.sub(" ", str(v)).strip()

def cell_text(v: Any) -> str:
    # Text form of a cell, used for identifiers and substring search
    x = clean_cell(v)
    return x if isinstance(x, str) else str(x)

def looks_numeric(s: Any) -> bool:
    return bool(_NUMERIC_RE.match(str(s or "").strip()))

def rules_path() -> Path:
    return DEFAULT_DATA_DIR / "rules.json"

def profiles_path() -> Path:
    USER_DATA_DIR.mkdir(parents=True, exist_ok=True)
    return USER_DATA_DIR / "profiles.json"

def load_rules() -> dict:
    rules = load_json(rules_path(), {})
    return rules if isinstance(rules, dict) else {}
