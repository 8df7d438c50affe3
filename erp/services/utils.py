from __future__ import annotations

# erp/services/utils.py
import io
from datetime import date
from typing import Iterable

import pandas as pd


def to_float_safe(x, default=None):
    try: return float(x)
    except (TypeError, ValueError): return default


def to_int_safe(x, default=0):
    try: return int(float(str(x).replace(",", "").strip()))
    except (TypeError, ValueError): return default


def today_str() -> str:
    return date.today().isoformat()


def rows_to_dicts(rows: Iterable) -> list[dict]:
    return [dict(r) for r in rows]


def blank(v) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def read_csv_upload(content: bytes, chunksize: int | None = None):
    """Parse an uploaded CSV (UTF-8, BOM tolerated) with every cell as text."""
    return pd.read_csv(
        io.BytesIO(content),
        dtype=str,
        keep_default_na=False,
        encoding="utf-8-sig",
        skipinitialspace=True,
        chunksize=chunksize,
    )


def to_csv_bytes(df: pd.DataFrame) -> bytes:
    # BOM so spreadsheet apps detect UTF-8 Korean headers
    return df.to_csv(index=False).encode("utf-8-sig")
