"""
CSV import: column mapping and conversion into transactions.

The import works in three steps:

1. ``parse_csv`` splits the upload into a header row and data rows.
2. The user assigns columns to the target fields ``amount``, ``date``
   and ``payee`` (or ``"skip"``).  ``ColumnSelection`` holds that
   assignment and guarantees each field sits on at most one column.
3. ``map_rows`` projects every data row onto the selected fields and
   ``format_rows`` converts the amount to milliunits and the date to
   ISO format.

The functions above are pure; only ``ImportService`` touches the
database, by feeding the result to
``TransactionService.bulk_create_transactions``.  The command-line
importer uses the same functions on the client side.
"""

import csv
import io
import logging
import math
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..core.exceptions import NotFoundError
from ..core.utils import MAX_AMOUNT, convert_amount_to_milliunits
from ..schemas.transaction import ImportRequest, TransactionCreate, TransactionRead
from .account_service import AccountService
from .transaction_service import TransactionService


logger = logging.getLogger(__name__)

IMPORT_FIELDS = ("amount", "date", "payee")
SKIP = "skip"

# Dates in uploaded statements look like "2024-03-01 09:30:00".
IMPORT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
OUTPUT_DATE_FORMAT = "%Y-%m-%d"


class CsvImportError(ValueError):
    """Raised when an upload cannot be turned into transactions."""


def parse_csv(text: str) -> Tuple[List[str], List[List[str]]]:
    """Split CSV text into ``(headers, body)``.

    The first non-blank row is the header row.  Blank lines are
    skipped.  Raises ``CsvImportError`` if there is no header row.
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    try:
        rows = [row for row in reader if any(cell.strip() for cell in row)]
    except csv.Error as exc:
        raise CsvImportError(f"Malformed CSV: {exc}") from exc
    if not rows:
        raise CsvImportError("CSV file is empty")
    return rows[0], rows[1:]


class ColumnSelection:
    """Assignment of CSV column indexes to transaction fields.

    Selecting a field for a column takes it away from whichever column
    held it before, so a field always belongs to at most one column.
    Selecting ``"skip"`` (or ``None``) clears the column.
    """

    def __init__(self) -> None:
        self._columns: Dict[int, Optional[str]] = {}

    @classmethod
    def from_mapping(cls, columns: Mapping[int, Optional[str]]) -> "ColumnSelection":
        """Build a selection from ``{column_index: field}``.

        Unlike interactive selection, a mapping that names the same
        field for two columns is ambiguous and raises ``CsvImportError``.
        """
        selection = cls()
        seen: Dict[str, int] = {}
        for index in sorted(columns):
            value = columns[index]
            if value and value != SKIP:
                if value in seen:
                    raise CsvImportError(
                        f"Field '{value}' is assigned to columns {seen[value]} and {index}"
                    )
                seen[value] = index
            selection.select(index, value)
        return selection

    def select(self, column_index: int, value: Optional[str]) -> None:
        if column_index < 0:
            raise CsvImportError(f"Invalid column index {column_index}")
        if value is not None and value != SKIP and value not in IMPORT_FIELDS:
            raise CsvImportError(f"Unknown field '{value}'")
        if value == SKIP:
            value = None
        if value is not None:
            for index, current in self._columns.items():
                if current == value:
                    self._columns[index] = None
        self._columns[column_index] = value

    def field_for(self, column_index: int) -> Optional[str]:
        return self._columns.get(column_index)

    @property
    def progress(self) -> int:
        """Number of fields currently assigned to a column."""
        return sum(1 for value in self._columns.values() if value)

    @property
    def missing_fields(self) -> List[str]:
        assigned = set(self._columns.values())
        return [field for field in IMPORT_FIELDS if field not in assigned]

    def is_complete(self) -> bool:
        return not self.missing_fields

    def as_dict(self) -> Dict[int, Optional[str]]:
        return dict(self._columns)


def map_rows(body: Sequence[Sequence[str]], selection: ColumnSelection) -> List[Dict[str, str]]:
    """Project data rows onto the selected fields.

    Each row becomes ``{field: cell}`` for its selected columns.  Rows
    that have no cell in any selected column are dropped.
    """
    mapped = []
    for row in body:
        item = {}
        for index, cell in enumerate(row):
            field = selection.field_for(index)
            if field is not None:
                item[field] = cell
        if item:
            mapped.append(item)
    return mapped


def _parse_amount(value: str, row_number: int) -> int:
    try:
        amount = float(value.strip().replace(",", "").replace("$", ""))
    except (AttributeError, ValueError) as exc:
        raise CsvImportError(f"Row {row_number}: invalid amount '{value}'") from exc
    if not math.isfinite(amount):
        raise CsvImportError(f"Row {row_number}: invalid amount '{value}'")
    milliunits = convert_amount_to_milliunits(amount)
    if abs(milliunits) > MAX_AMOUNT:
        raise CsvImportError(f"Row {row_number}: invalid amount '{value}', out of range")
    return milliunits


def _parse_import_date(value: str, row_number: int) -> str:
    try:
        parsed = datetime.strptime(value.strip(), IMPORT_DATE_FORMAT)
    except (AttributeError, ValueError) as exc:
        raise CsvImportError(
            f"Row {row_number}: invalid date '{value}', expected YYYY-MM-DD HH:MM:SS"
        ) from exc
    return parsed.strftime(OUTPUT_DATE_FORMAT)


def format_rows(rows: Sequence[Mapping[str, str]]) -> List[Dict[str, object]]:
    """Convert mapped rows into transaction payloads.

    ``amount`` becomes integer milliunits and ``date`` an ISO calendar
    date; other selected fields pass through unchanged.  Raises
    ``CsvImportError`` naming the first offending row (1-based).
    """
    formatted = []
    for row_number, row in enumerate(rows, start=1):
        missing = [field for field in IMPORT_FIELDS if field not in row]
        if missing:
            raise CsvImportError(f"Row {row_number}: missing {', '.join(missing)}")
        item: Dict[str, object] = dict(row)
        item["amount"] = _parse_amount(row["amount"], row_number)
        item["date"] = _parse_import_date(row["date"], row_number)
        payee = row["payee"].strip()
        if not payee:
            raise CsvImportError(f"Row {row_number}: empty payee")
        item["payee"] = payee
        formatted.append(item)
    return formatted


def build_transactions(
    csv_text: str,
    columns: Mapping[int, Optional[str]],
    account_id: str,
) -> List[TransactionCreate]:
    """Run the whole mapping pipeline and attach every row to ``account_id``."""
    selection = ColumnSelection.from_mapping(columns)
    if not selection.is_complete():
        raise CsvImportError(
            f"Select a column for: {', '.join(selection.missing_fields)}"
        )
    _headers, body = parse_csv(csv_text)
    rows = format_rows(map_rows(body, selection))
    return [
        TransactionCreate(
            amount=row["amount"],
            payee=row["payee"],
            date=row["date"],
            account_id=account_id,
        )
        for row in rows
    ]


class ImportService:
    """Service that turns an uploaded CSV into stored transactions."""

    @classmethod
    async def preview(cls, csv_text: str) -> Tuple[List[str], List[List[str]]]:
        return parse_csv(csv_text)

    @classmethod
    async def import_transactions(cls, user_id: int, request: ImportRequest) -> List[TransactionRead]:
        """Import ``request.csv`` into ``request.account_id``.

        Raises ``ValueError`` for an unusable upload or mapping and for
        an account the user does not own, even when there are no rows.
        """
        try:
            await AccountService.get_account(user_id, request.account_id)
        except NotFoundError as exc:
            raise CsvImportError(str(exc)) from exc

        items = build_transactions(request.csv, request.columns, request.account_id)
        logger.info(
            "User %s is importing %d transaction(s) into account %s",
            user_id,
            len(items),
            request.account_id,
        )
        if not items:
            return []
        return await TransactionService.bulk_create_transactions(user_id, items)
