"""
Client record normalizer - transform uploaded rows into ClientRecord objects.

Client uploads come from spreadsheets and CSV exports with inconsistent
column names (CustomerID, EmailAddress, SignupDate, Visit1, ...), Excel
serial dates and loosely typed numbers. The normalizer maps them onto the
ClientRecord schema.

Bad values on a single row are defaulted and counted so the batch still
succeeds. A collection without any signup-date column is rejected outright,
since customer classification cannot work without it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from matchback.matching.dates import parse_date
from matchback.matching.exceptions import SchemaError
from matchback.matching.schema import CLIENT_FIELD_ALIASES, ClientRecord

logger = logging.getLogger(__name__)

DATE_FIELDS = ("signup_date", "visit1_date", "visit2_date", "visit3_date")
TEXT_FIELDS = (
    "name",
    "first_name",
    "last_name",
    "email",
    "address",
    "city",
    "state",
    "zip",
    "phone",
    "customer_id",
    "market",
)


@dataclass
class NormalizationResult:
    """Outcome of normalizing a batch of uploaded rows."""

    records: list[ClientRecord] = field(default_factory=list)
    total_rows: int = 0
    invalid_dates: int = 0
    invalid_numbers: int = 0
    missing_signup_dates: int = 0
    issues: list[str] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        """Return True when any row needed a value defaulted."""
        return bool(self.issues)


def _is_missing(value: Any) -> bool:
    if value is None or value is pd.NaT:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _to_text(value: Any) -> str | None:
    if _is_missing(value):
        return None
    # Zip codes and phone numbers often arrive as floats from spreadsheets
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


class ClientRecordNormalizer:
    """
    Normalize uploaded client rows to ClientRecord objects.

    Example:
        normalizer = ClientRecordNormalizer(
            field_map={
                "Cust #": "customer_id",
                "Joined": "signup_date",
            }
        )
        result = normalizer.normalize(rows)
        records = result.records
    """

    def __init__(self, field_map: dict[str, str] | None = None):
        """
        Initialize normalizer.

        Args:
            field_map: Mapping of source columns to ClientRecord fields.
                Extends the default mapping.
        """
        self.field_map = self._default_field_map()
        if field_map:
            self.field_map.update(field_map)

    def _default_field_map(self) -> dict[str, str]:
        """Default field mappings for common client export layouts."""
        return dict(CLIENT_FIELD_ALIASES)

    def _to_dataframe(
        self,
        data: pd.DataFrame | list[dict[str, Any]],
    ) -> pd.DataFrame:
        """Convert input to DataFrame."""
        if isinstance(data, pd.DataFrame):
            return data
        return pd.DataFrame(data)

    def normalize(
        self,
        data: pd.DataFrame | list[dict[str, Any]],
    ) -> NormalizationResult:
        """
        Normalize uploaded rows to ClientRecord objects.

        Args:
            data: Source rows as DataFrame or list of dicts

        Returns:
            NormalizationResult with records and per-row issue counts

        Raises:
            SchemaError: If rows exist but no column maps to signup_date.
        """
        df = self._to_dataframe(data)
        result = NormalizationResult(total_rows=len(df))

        if df.empty:
            return result

        signup_columns = [
            col for col, target in self.field_map.items()
            if target == "signup_date" and col in df.columns
        ]
        if not signup_columns:
            raise SchemaError(
                f"No signup date column found. Columns: {', '.join(map(str, df.columns))}"
            )

        for index, row in df.iterrows():
            row_dict = row.to_dict()
            result.records.append(self._normalize_row(index, row_dict, result))

        logger.info(
            f"Normalized {len(result.records)} client rows "
            f"({result.invalid_dates} invalid dates, "
            f"{result.invalid_numbers} invalid numbers, "
            f"{result.missing_signup_dates} missing signup dates)"
        )

        return result

    def _normalize_row(
        self,
        index: Any,
        row_dict: dict[str, Any],
        result: NormalizationResult,
    ) -> ClientRecord:
        """Map, coerce and default a single row."""
        mapped: dict[str, Any] = {}
        extra: dict[str, Any] = {}

        for source_field, value in row_dict.items():
            target = self.field_map.get(source_field)
            if target is None:
                if not _is_missing(value):
                    extra[str(source_field)] = value
            elif target not in mapped or _is_missing(mapped[target]):
                mapped[target] = value

        values: dict[str, Any] = {}

        for name in TEXT_FIELDS:
            values[name] = _to_text(mapped.get(name))

        for name in DATE_FIELDS:
            raw = mapped.get(name)
            if _is_missing(raw):
                values[name] = None
                continue
            if isinstance(raw, pd.Timestamp):
                raw = raw.to_pydatetime()
            try:
                values[name] = parse_date(raw)
            except ValueError:
                values[name] = None
                result.invalid_dates += 1
                result.issues.append(f"Row {index}: unparseable {name} {raw!r}")

        if values["signup_date"] is None:
            result.missing_signup_dates += 1

        values["total_visits"] = self._coerce_visits(index, mapped.get("total_visits"), result)
        values["total_sales"] = self._coerce_sales(index, mapped.get("total_sales"), result)

        return ClientRecord(**values, extra=extra)

    def _coerce_visits(self, index: Any, raw: Any, result: NormalizationResult) -> int:
        if _is_missing(raw):
            return 0
        try:
            return int(float(raw))
        except (TypeError, ValueError, OverflowError):
            result.invalid_numbers += 1
            result.issues.append(f"Row {index}: invalid total_visits {raw!r}")
            return 0

    def _coerce_sales(self, index: Any, raw: Any, result: NormalizationResult) -> float | None:
        if _is_missing(raw):
            return None
        if isinstance(raw, str):
            raw = raw.replace("$", "").replace(",", "").strip()
        try:
            return float(raw)
        except (TypeError, ValueError):
            result.invalid_numbers += 1
            result.issues.append(f"Row {index}: invalid total_sales {raw!r}")
            return None


def normalize_client_rows(
    data: pd.DataFrame | list[dict[str, Any]],
    field_map: dict[str, str] | None = None,
) -> NormalizationResult:
    """Normalize uploaded rows with the default column mapping."""
    return ClientRecordNormalizer(field_map=field_map).normalize(data)
