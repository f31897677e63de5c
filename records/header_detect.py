from __future__ import annotations
from typing import Any
import pandas as pd
from .headers import HeaderCategory, classify_header
from .utils import is_blank, looks_numeric


def _row_header_score(values) -> float:
    # header-like: many recognised column names, few numbers
    recognised = 0
    nonempty = 0
    numeric = 0
    for v in values:
        if is_blank(v):
            continue
        nonempty += 1
        if isinstance(v, (int, float)) or looks_numeric(v):
            numeric += 1
            continue
        if classify_header(str(v)) != HeaderCategory.DETAIL:
            recognised += 1
    if nonempty == 0:
        return float("-inf")
    return 3.0 * recognised + 0.3 * nonempty - 0.8 * numeric

def detect_header_row(df_raw: pd.DataFrame, max_scan_rows: int = 30) -> int:
    """
    Index (0-based) of the header row in a raw sheet matrix.
    Report exports put a title block above the header; the header row is the one with the most
    recognised column names, with a small penalty for starting late.
    Falls back to the first non-empty row.
    """
    n = min(max_scan_rows, len(df_raw))
    best = None
    best_score = float("-inf")
    first_nonempty = None

    for i in range(n):
        values: list[Any] = df_raw.iloc[i].tolist()
        if first_nonempty is None and any(not is_blank(v) for v in values):
            first_nonempty = i
        score = _row_header_score(values)
        if score == float("-inf"):
            continue
        score -= 0.25 * i
        if score > best_score:
            best_score = score
            best = i

    if best is None:
        return first_nonempty or 0
    return best
