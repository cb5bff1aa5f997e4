"""The transaction store: single owner of the mutable transaction collection.

The store starts out "not yet loaded". :meth:`TransactionStore.load` reads
the persistence collaborator once and moves it to "loaded"; only then are
``add`` and ``delete`` allowed. Every successful mutation writes the whole
collection back. Save failures are logged and remembered on
``last_save_error`` but never undo the in-memory change.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional, Set

from .config import DESCRIPTION_MAX_LENGTH
from .errors import PersistenceSaveError, StoreStateError, ValidationError
from .logging_setup import get_logger
from .models import Transaction, TransactionType, categories_for, ensure_aware, to_amount
from .storage import TransactionRepository

_logger = get_logger("expense_tracker.store")


def _default_clock() -> datetime:
    return datetime.now().astimezone()


def _default_id() -> str:
    return str(uuid.uuid4())


class TransactionStore:
    """Owns the canonical, newest-first list of transactions."""

    def __init__(
        self,
        repository: TransactionRepository,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._repository = repository
        self._clock = clock or _default_clock
        self._id_factory = id_factory or _default_id
        self._transactions: List[Transaction] = []
        self._loaded = False
        self.last_save_error: Optional[PersistenceSaveError] = None

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> List[Transaction]:
        """Populate the store from the repository (once per store)."""
        if self._loaded:
            raise StoreStateError("Transaction store is already loaded")
        stored = self._repository.load()
        self._transactions = list(stored) if stored else []
        self._loaded = True
        if stored is None:
            _logger.info("No stored transactions found; starting empty")
        else:
            _logger.info("Loaded %d transactions", len(self._transactions))
        return self.list()

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise StoreStateError("Transaction store used before load()")

    def add(
        self,
        kind: TransactionType | str,
        amount: Decimal | int | float | str,
        category: str,
        description: str = "",
    ) -> Transaction:
        """Validate and record a new transaction at the head of the list.

        Raises:
            ValidationError: If any field is invalid; the collection is left
                untouched.
            StoreStateError: If called before :meth:`load`.
        """
        self._require_loaded()

        kind = TransactionType.parse(kind)
        value = to_amount(amount)
        if value <= 0:
            raise ValidationError("Amount must be greater than zero")
        if not isinstance(category, str) or not category.strip():
            raise ValidationError("Category is required")
        if category not in categories_for(kind):
            raise ValidationError(f"Unknown {kind.value} category: {category!r}")
        description = (description or "").strip()
        if len(description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters"
            )

        tx_id = self._id_factory()
        if any(existing.id == tx_id for existing in self._transactions):
            raise StoreStateError(f"Identifier factory produced a duplicate id: {tx_id}")

        tx = Transaction(
            id=tx_id,
            kind=kind,
            amount=value,
            category=category,
            description=description,
            timestamp=ensure_aware(self._clock()),
        )
        self._transactions.insert(0, tx)
        _logger.debug("Added %s %s in %s (%s)", tx.kind.value, tx.amount, tx.category, tx.id)
        self._persist()
        return tx

    def delete(self, transaction_id: str) -> bool:
        """Remove a transaction by id; unknown ids are a no-op.

        Returns:
            ``True`` if a transaction was removed.
        """
        self._require_loaded()
        remaining = [tx for tx in self._transactions if tx.id != transaction_id]
        if len(remaining) == len(self._transactions):
            return False
        self._transactions = remaining
        _logger.debug("Deleted transaction %s", transaction_id)
        self._persist()
        return True

    def list(self) -> List[Transaction]:
        return list(self._transactions)

    def categories(self) -> Set[str]:
        """Distinct categories currently present across all transactions."""
        return {tx.category for tx in self._transactions}

    def __len__(self) -> int:
        return len(self._transactions)

    def _persist(self) -> None:
        try:
            self._repository.save(self._transactions)
        except PersistenceSaveError as e:
            self.last_save_error = e
            _logger.warning("Could not save transactions, keeping changes in memory: %s", e)
        else:
            self.last_save_error = None
