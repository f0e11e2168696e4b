"""
Flat hierarchy feed loader.

One feed row per local level (city/municipality):

    province_code, district_code, district_name, locallevel_code,
    name, name_native, type, wards

Accepts a JSON array of objects or a CSV with those headers. Extra columns
(country_code, locallevel_fullcode, ...) are ignored. Rows without a ward
count describe a district only and produce no city node.
"""

import io
import logging
from dataclasses import dataclass
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("province_code", "district_code", "district_name", "name")
OPTIONAL_COLUMNS = ("locallevel_code", "name_native", "type", "wards")


class FeedError(Exception):
    """Raised when a feed file cannot be read or lacks required columns."""


@dataclass
class FeedRow:
    province_code: str
    district_code: str
    district_name: str
    local_code: Optional[str]
    name: str
    name_native: Optional[str]
    type: Optional[str]
    wards: Optional[int]


def load_feed(data: bytes, filename: str) -> list[FeedRow]:
    """Parse a JSON or CSV feed into FeedRows, preserving file order."""
    try:
        if filename.lower().endswith(".json"):
            df = pd.read_json(
                io.StringIO(data.decode("utf-8")),
                orient="records",
                dtype=False,
                convert_dates=False,
            )
        else:
            df = pd.read_csv(io.BytesIO(data), dtype=str, keep_default_na=False)
    except (ValueError, UnicodeDecodeError) as e:
        raise FeedError(f"Cannot read feed {filename!r}: {e}") from e

    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise FeedError(f"Feed {filename!r} is missing columns: {', '.join(missing)}")

    rows: list[FeedRow] = []
    for record in df.to_dict(orient="records"):
        rows.append(
            FeedRow(
                province_code=_text(record.get("province_code")) or "",
                district_code=_text(record.get("district_code")) or "",
                district_name=_text(record.get("district_name")) or "",
                local_code=_text(record.get("locallevel_code")),
                name=_text(record.get("name")) or "",
                name_native=_text(record.get("name_native")),
                type=_text(record.get("type")),
                wards=_wards(record.get("wards")),
            )
        )
    logger.info("Loaded %d feed rows from %s", len(rows), filename)
    return rows


def _text(value) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)  # numeric codes in a column pandas widened to float
    text = str(value).strip()
    return text or None


def _wards(value) -> Optional[int]:
    text = _text(value)
    if text is None:
        return None
    try:
        return int(float(text))
    except ValueError:
        logger.warning("Ignoring non-numeric ward count %r", value)
        return None
