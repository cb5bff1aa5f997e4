"""Data models, category vocabularies and the persisted record format.

A :class:`Transaction` is immutable once created. The persisted shape is a
JSON array of objects::

    {
        "id": "6f1c...",
        "type": "expense",
        "amount": 12.5,
        "category": "Food & Dining",
        "description": "Lunch",
        "date": "2024-01-15T10:30:00+00:00"
    }

Amounts are carried as :class:`~decimal.Decimal` everywhere and only become
JSON numbers at the storage boundary. Decoding parses the number text back
into a ``Decimal`` so the round trip is exact.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from .config import DESCRIPTION_MAX_LENGTH
from .errors import PersistenceLoadError, ValidationError


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def parse(cls, value: TransactionType | str) -> TransactionType:
        """Accept an enum member or its wire value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValidationError(f"Unknown transaction type: {value!r}")


# Predefined categories for income and expenses
INCOME_CATEGORIES: tuple[str, ...] = (
    "Salary",
    "Freelance",
    "Investments",
    "Gifts",
    "Other Income",
)

EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Health",
    "Education",
    "Other",
)


def categories_for(kind: TransactionType | str) -> tuple[str, ...]:
    """Return the category vocabulary for a transaction type."""
    if TransactionType.parse(kind) is TransactionType.INCOME:
        return INCOME_CATEGORIES
    return EXPENSE_CATEGORIES


def ensure_aware(value: datetime) -> datetime:
    """Interpret naive datetimes as local time."""
    if value.tzinfo is None or value.utcoffset() is None:
        return value.astimezone()
    return value


def to_amount(raw: Any) -> Decimal:
    """Coerce user or stored input to a finite ``Decimal``.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion. Sign is not checked here.
    """
    if isinstance(raw, bool) or raw is None:
        raise ValidationError(f"Invalid amount: {raw!r}")
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int):
        value = Decimal(raw)
    elif isinstance(raw, float):
        if not math.isfinite(raw):
            raise ValidationError(f"Invalid amount: {raw!r}")
        value = Decimal(str(raw))
    elif isinstance(raw, str):
        try:
            value = Decimal(raw.strip())
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid amount: {raw!r}") from exc
    else:
        raise ValidationError(f"Invalid amount: {raw!r}")
    if not value.is_finite():
        raise ValidationError(f"Invalid amount: {raw!r}")
    return value


@dataclass(frozen=True, slots=True)
class Transaction:
    """A single recorded income or expense event.

    Construction validates the field invariants (positive amount, non-empty
    category, bounded description) and normalises the timestamp to an aware
    ``datetime``. Vocabulary membership of ``category`` is checked by the
    store when adding, not here, so previously saved records always load.
    """

    id: str
    kind: TransactionType
    amount: Decimal
    category: str
    description: str
    timestamp: datetime

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise ValidationError("Transaction id must be a non-empty string")
        object.__setattr__(self, "kind", TransactionType.parse(self.kind))

        amount = to_amount(self.amount)
        if amount <= 0:
            raise ValidationError(f"Amount must be greater than zero, got {amount}")
        if not _survives_json(amount):
            raise ValidationError(f"Amount {amount} has more digits than can be stored")
        object.__setattr__(self, "amount", amount)

        if not isinstance(self.category, str) or not self.category.strip():
            raise ValidationError("Category is required")

        description = self.description or ""
        if not isinstance(description, str):
            raise ValidationError("Description must be text")
        if len(description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters"
            )
        object.__setattr__(self, "description", description)

        if not isinstance(self.timestamp, datetime):
            raise ValidationError("Timestamp must be a datetime")
        object.__setattr__(self, "timestamp", ensure_aware(self.timestamp))

    @property
    def is_income(self) -> bool:
        return self.kind is TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.kind is TransactionType.EXPENSE


# ---------------------------------------------------------------------------
# Persisted record format
# ---------------------------------------------------------------------------


def _amount_to_json(amount: Decimal) -> int | float:
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def _survives_json(amount: Decimal) -> bool:
    # Fractional amounts are stored as floats, which keep about 15 significant digits
    stored = _amount_to_json(amount)
    return isinstance(stored, int) or Decimal(repr(stored)) == amount


def _parse_timestamp(raw: Any) -> datetime:
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError(f"Invalid date: {raw!r}")
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def encode_transaction(tx: Transaction) -> dict[str, Any]:
    """Serialize a transaction into its persisted record shape."""
    return {
        "id": tx.id,
        "type": tx.kind.value,
        "amount": _amount_to_json(tx.amount),
        "category": tx.category,
        "description": tx.description,
        "date": tx.timestamp.isoformat(),
    }


def decode_transaction(record: Mapping[str, Any]) -> Transaction:
    """Rebuild a transaction from a persisted record.

    Raises ``ValueError`` (``ValidationError`` included) for any missing or
    malformed field.
    """
    if not isinstance(record, Mapping):
        raise ValueError(f"Transaction record must be an object, got {type(record).__name__}")
    try:
        return Transaction(
            id=str(record["id"]),
            kind=TransactionType.parse(record["type"]),
            amount=to_amount(record["amount"]),
            category=record["category"],
            description=record.get("description") or "",
            timestamp=_parse_timestamp(record["date"]),
        )
    except KeyError as exc:
        raise ValueError(f"Transaction record is missing field {exc.args[0]!r}") from exc


def encode_transactions(transactions: Iterable[Transaction]) -> list[dict[str, Any]]:
    return [encode_transaction(tx) for tx in transactions]


def decode_transactions(records: Sequence[Mapping[str, Any]]) -> list[Transaction]:
    return [decode_transaction(record) for record in records]


def to_json(transactions: Iterable[Transaction], *, indent: int | None = 2) -> str:
    """Render a collection as the persisted JSON document."""
    return json.dumps(encode_transactions(transactions), indent=indent, ensure_ascii=False)


def parse_json_payload(text: str) -> list[Any]:
    """Parse a persisted document into raw records, numbers as ``Decimal``."""
    try:
        payload = json.loads(text, parse_float=Decimal)
    except (json.JSONDecodeError, TypeError) as exc:
        raise PersistenceLoadError(f"Stored transactions are not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise PersistenceLoadError(
            f"Stored transactions must be a JSON array, got {type(payload).__name__}"
        )
    return payload


def from_json(text: str) -> list[Transaction]:
    """Strictly decode a persisted JSON document.

    Any malformed record makes the whole document invalid.
    """
    records = parse_json_payload(text)
    try:
        return decode_transactions(records)
    except ValueError as exc:
        raise PersistenceLoadError(str(exc)) from exc
