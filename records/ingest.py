from __future__ import annotations
import csv
import logging
import zipfile
from io import BytesIO, StringIO
from typing import Any, Dict, List, Optional, Tuple
import pandas as pd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from .errors import RowSourceError
from .header_detect import detect_header_row
from .headers import resolve_headers
from .utils import is_blank

logger = logging.getLogger(__name__)

Rows = List[Dict[str, Any]]
# =========================

# Excel: sheet as a matrix, merged cells expanded
# =========================
def _sheet_to_matrix_with_merged(ws) -> List[List[Any]]:
    merged_map = {}
    for r in ws.merged_cells.ranges:
        min_col, min_row, max_col, max_row = r.bounds
        top_val = ws.cell(min_row, min_col).value
        for rr in range(min_row, max_row + 1):
            for cc in range(min_col, max_col + 1):
                merged_map[(rr, cc)] = top_val

    rows = []
    for r in range(1, ws.max_row + 1):
        row_vals = []
        for c in range(1, ws.max_column + 1):
            v = ws.cell(r, c).value
            if (r, c) in merged_map and (v is None or str(v).strip() == ""):
                v = merged_map[(r, c)]
            row_vals.append(v)
        rows.append(row_vals)

    return rows
# =========================

# CSV: tolerant reading from bytes
# =========================
def _decode_sample(data: bytes, enc: str, limit: int = 65536) -> str:
    try:
        return data[:limit].decode(enc, errors="replace")
    except LookupError:
        return data[:limit].decode("utf-8", errors="replace")


def _guess_delimiter(sample_text: str) -> str:
    # ',' for en locales, ';' for Arabic Excel, sometimes tabs
    try:
        dialect = csv.Sniffer().sniff(sample_text, delimiters=";,\t|")
        if dialect.delimiter:
            return dialect.delimiter
    except csv.Error:
        pass

    candidates = [";", ",", "\t", "|"]
    lines = [ln for ln in sample_text.splitlines() if ln.strip()][:20]
    if not lines:
        return ","

    scores = {}
    for d in candidates:
        cnts = [ln.count(d) for ln in lines]
        scores[d] = sum(cnts) / max(1, len(cnts))

    best = max(scores.items(), key=lambda x: x[1])[0]
    return best if scores.get(best, 0) > 0 else ","


def _csv_matrix(text: str, delim: str) -> pd.DataFrame:
    # title lines above the header usually have fewer fields; pad every row to the widest one
    rows = [r for r in csv.reader(StringIO(text), delimiter=delim) if any(c.strip() for c in r)]
    width = max((len(r) for r in rows), default=0)
    return pd.DataFrame([r + [""] * (width - len(r)) for r in rows], dtype=object)

def _read_csv_bytes(data: bytes) -> pd.DataFrame:
    # cells stay text so leading zeros of phone numbers survive; the header row is detected later
    encodings = ["utf-8-sig", "utf-8", "cp1256"]
    last_err: Exception | None = None

    for enc in encodings:
        try:
            text = data.decode(enc)
        except UnicodeDecodeError as e:
            last_err = e
            continue

        delim = _guess_delimiter(_decode_sample(data, enc))
        try:
            return _csv_matrix(text, delim)
        except csv.Error as e:
            last_err = e
            continue

    raise RowSourceError(f"could not read CSV: {last_err}")


def _read_xlsx_matrices(data: bytes) -> List[Tuple[str, pd.DataFrame]]:
    wb = load_workbook(BytesIO(data), read_only=False, data_only=True)
    out = []
    for ws in wb.worksheets:
        matrix = _sheet_to_matrix_with_merged(ws)
        if matrix:
            out.append((ws.title, pd.DataFrame(matrix, dtype=object)))
    return out
# =========================

# Header row -> rows
# =========================
def _clean_header_cell(v: Any) -> str:
    if is_blank(v):
        return ""
    s = str(v).replace("\ufeff", "").strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ('"', "'"):
        s = s[1:-1].strip()
    return s

def _make_unique(cols: List[str]) -> List[str]:
    seen: Dict[str, int] = {}
    out = []
    for i, c in enumerate(cols):
        base = c or f"col_{i + 1}"
        n = seen.get(base, 0) + 1
        seen[base] = n
        out.append(base if n == 1 else f"{base}__{n}")
    return out

def _cell(v: Any) -> Any:
    return None if is_blank(v) else v

def frame_to_rows(df_raw: pd.DataFrame, header_row: Optional[int] = None) -> Tuple[List[str], Rows]:
    """
    Raw matrix -> (headers, rows).
    Rows above the header are dropped, empty rows skipped, missing cells become None.
    """
    if df_raw.empty:
        return [], []
    if header_row is None:
        header_row = detect_header_row(df_raw)

    headers = _make_unique([_clean_header_cell(v) for v in df_raw.iloc[header_row].tolist()])

    rows: Rows = []
    for i in range(header_row + 1, len(df_raw)):
        values = df_raw.iloc[i].tolist()
        if all(is_blank(v) for v in values):
            continue
        rows.append({h: _cell(v) for h, v in zip(headers, values)})

    return headers, rows
# =========================

# Main: upload -> headers + rows
# =========================
def load_table(name: str, data: bytes) -> Tuple[List[str], Rows]:
    """
    Reads an uploaded CSV/XLSX into (headers, rows).
    For workbooks the first sheet with a training id column is used, else the first sheet with rows.
    RowSourceError when the file cannot be read.
    """
    if name.lower().endswith(".csv"):
        headers, rows = frame_to_rows(_read_csv_bytes(data))
        logger.info("%s: %d columns, %d rows", name, len(headers), len(rows))
        return headers, rows

    try:
        sheets = _read_xlsx_matrices(data)
    except (zipfile.BadZipFile, InvalidFileException, KeyError, OSError, ValueError) as e:
        raise RowSourceError(f"could not read workbook {name}: {e}") from e

    fallback: Optional[Tuple[List[str], Rows]] = None
    for sheet_name, df_raw in sheets:
        headers, rows = frame_to_rows(df_raw)
        if not rows:
            continue
        if resolve_headers(headers).id_headers:
            logger.info("%s / %s: %d columns, %d rows", name, sheet_name, len(headers), len(rows))
            return headers, rows
        if fallback is None:
            fallback = (headers, rows)

    if fallback is None:
        return [], []
    return fallback

def load_table_from_upload(upload) -> Tuple[List[str], Rows]:
    # streamlit UploadedFile (or anything with .name and .getvalue())
    return load_table(upload.name, upload.getvalue())
