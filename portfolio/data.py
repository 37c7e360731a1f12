from __future__ import annotations

import io
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import IO, Dict, Iterable, List, Optional, Union

import pandas as pd
from pandas.errors import EmptyDataError

logger = logging.getLogger(__name__)

PROPERTY_COLUMNS = [
    "id",
    "address",
    "value",
    "monthly_rent",
    "annual_appreciation_pct",
    "operating_expense_pct",
]
NUMERIC_COLUMNS = ["value", "monthly_rent", "annual_appreciation_pct", "operating_expense_pct"]
REQUIRED_NUMERIC_COLUMNS = ["value", "monthly_rent"]

# Upload rows are mapped by position, header names are ignored.
UPLOAD_COLUMNS = ["address", "value", "monthly_rent", "annual_appreciation_pct", "operating_expense_pct"]

DEFAULT_PROPERTIES: List[Dict[str, object]] = [
    {"id": 1, "address": "123 Main St", "value": 250000.0, "monthly_rent": 1500.0, "annual_appreciation_pct": 3.0, "operating_expense_pct": 20.0},
    {"id": 2, "address": "456 Elm St", "value": 300000.0, "monthly_rent": 1800.0, "annual_appreciation_pct": 2.5, "operating_expense_pct": 18.0},
    {"id": 3, "address": "789 Oak St", "value": 280000.0, "monthly_rent": 1600.0, "annual_appreciation_pct": 2.8, "operating_expense_pct": 22.0},
]

PERFORMANCE_SERIES: List[Dict[str, object]] = [
    {"month": "Jan", "revenue": 5000.0, "expenses": 3000.0},
    {"month": "Feb", "revenue": 5200.0, "expenses": 3100.0},
    {"month": "Mar", "revenue": 5400.0, "expenses": 3200.0},
    {"month": "Apr", "revenue": 5600.0, "expenses": 3300.0},
    {"month": "May", "revenue": 5800.0, "expenses": 3400.0},
]

UPLOAD_SUCCESS_MESSAGE = "CSV file uploaded successfully"

CsvSource = Union[str, Path, bytes, bytearray, IO[bytes], IO[str]]


@dataclass(frozen=True)
class PropertyRecord:
    id: int
    address: str
    value: float
    monthly_rent: float
    annual_appreciation_pct: float = float("nan")
    operating_expense_pct: float = float("nan")


def _as_float(value: object) -> float:
    if value is None or pd.isna(value):
        return float("nan")
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def with_property_dtypes(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with exactly PROPERTY_COLUMNS, numeric columns as float64."""
    out = df.copy()
    for col in PROPERTY_COLUMNS:
        if col not in out.columns:
            out[col] = float("nan") if col in NUMERIC_COLUMNS else ""
    out = out[PROPERTY_COLUMNS].copy()
    out = numericize(out, NUMERIC_COLUMNS)
    for col in NUMERIC_COLUMNS:
        out[col] = out[col].astype("float64")
    out["id"] = pd.to_numeric(out["id"], errors="coerce").fillna(0).astype("int64")
    out["address"] = out["address"].fillna("").astype(str)
    return out.reset_index(drop=True)


def records_to_frame(records: Iterable[PropertyRecord]) -> pd.DataFrame:
    rows = [asdict(r) for r in records]
    return with_property_dtypes(pd.DataFrame(rows, columns=PROPERTY_COLUMNS))


def frame_to_records(df: pd.DataFrame) -> List[PropertyRecord]:
    out: List[PropertyRecord] = []
    for row in with_property_dtypes(df).itertuples(index=False):
        out.append(
            PropertyRecord(
                id=int(row.id),
                address=str(row.address),
                value=_as_float(row.value),
                monthly_rent=_as_float(row.monthly_rent),
                annual_appreciation_pct=_as_float(row.annual_appreciation_pct),
                operating_expense_pct=_as_float(row.operating_expense_pct),
            )
        )
    return out


def default_frame() -> pd.DataFrame:
    return with_property_dtypes(pd.DataFrame(DEFAULT_PROPERTIES))


def empty_frame() -> pd.DataFrame:
    return with_property_dtypes(pd.DataFrame(columns=PROPERTY_COLUMNS))


def performance_frame() -> pd.DataFrame:
    return pd.DataFrame(PERFORMANCE_SERIES)


def numericize(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def strip_str_columns(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = df[col].where(df[col].isna(), df[col].astype(str).str.strip())
    return df


def parse_property_csv(src: CsvSource) -> pd.DataFrame:
    """Parse an uploaded CSV into a property frame with fresh ids 1..N.

    The first non-blank line is treated as a header and discarded. Columns are taken by
    position: address, value, rent and optionally appreciation % and
    operating expense %. Non-numeric values become NaN; no row is rejected.
    """
    if isinstance(src, (bytes, bytearray)):
        src = io.BytesIO(bytes(src))
    try:
        raw = pd.read_csv(
            src,
            header=0,
            names=UPLOAD_COLUMNS,
            index_col=False,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except EmptyDataError:
        logger.info("Uploaded CSV has no data rows")
        return empty_frame()

    raw = strip_str_columns(raw, UPLOAD_COLUMNS)
    raw = numericize(raw, [c for c in UPLOAD_COLUMNS if c != "address"])
    raw.insert(0, "id", range(1, len(raw) + 1))
    return with_property_dtypes(raw)


def count_invalid_rows(df: pd.DataFrame) -> int:
    """Rows whose value or rent could not be read as a number."""
    if df.empty:
        return 0
    return int(df[REQUIRED_NUMERIC_COLUMNS].isna().any(axis=1).sum())


@dataclass(frozen=True)
class UploadResult:
    count: int
    invalid_rows: int
    message: str


class PortfolioStore:
    """Holds the working set of property records for one dashboard session.

    The set is only ever replaced wholesale, either by an upload or by a reset
    to the default records.
    """

    def __init__(self) -> None:
        self._frame = default_frame()
        self.source = "default"
        self.source_name: Optional[str] = None

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame.copy()

    @property
    def records(self) -> List[PropertyRecord]:
        return frame_to_records(self._frame)

    def __len__(self) -> int:
        return len(self._frame)

    def __bool__(self) -> bool:
        # An empty working set is still a store.
        return True

    def replace(self, df: pd.DataFrame, source_name: Optional[str] = None) -> None:
        self._frame = with_property_dtypes(df)
        self.source = "upload"
        self.source_name = source_name
        logger.info("Working set replaced with %d properties from %s", len(self._frame), source_name or "upload")

    def load_csv(self, src: CsvSource, source_name: Optional[str] = None) -> UploadResult:
        df = parse_property_csv(src)
        invalid = count_invalid_rows(df)
        if invalid:
            logger.warning("%d of %d uploaded rows have non-numeric value or rent", invalid, len(df))
        self.replace(df, source_name=source_name)
        return UploadResult(count=len(df), invalid_rows=invalid, message=UPLOAD_SUCCESS_MESSAGE)

    def reset(self) -> None:
        self._frame = default_frame()
        self.source = "default"
        self.source_name = None
        logger.info("Working set reset to %d default properties", len(self._frame))


def format_currency_0(value: object) -> str:
    if value is None:
        return "N/A"
    return f"${float(value):,.0f}"


def format_percent(value: object, decimals: int = 2) -> str:
    if value is None:
        return "N/A"
    return f"{float(value):.{decimals}f}%"


def format_currency_columns(df: pd.DataFrame, cols: Iterable[str], decimals: int = 0) -> pd.DataFrame:
    formatted = df.copy()
    for c in cols:
        if c in formatted.columns:
            formatted[c] = formatted[c].apply(lambda v: f"${float(v):,.{decimals}f}" if pd.notna(v) else "N/A")
    return formatted


def format_percent_columns(df: pd.DataFrame, cols: Iterable[str], decimals: int = 2) -> pd.DataFrame:
    formatted = df.copy()
    for c in cols:
        if c in formatted.columns:
            formatted[c] = formatted[c].apply(lambda v: f"{float(v):.{decimals}f}%" if pd.notna(v) else "N/A")
    return formatted
