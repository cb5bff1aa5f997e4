"""Transaction storage and file I/O operations.

The whole collection lives in one JSON file named after the application's
storage key. Reads never raise for missing or corrupt data through
:meth:`JsonFileStorage.load`; writes raise :class:`PersistenceSaveError` and
leave it to the caller to decide how loudly to report them.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from .config import get_transactions_path
from .errors import PersistenceLoadError, PersistenceSaveError
from .logging_setup import get_logger
from .models import Transaction, decode_transaction, parse_json_payload, to_json

_logger = get_logger("expense_tracker.storage")


class TransactionRepository(Protocol):
    """Persistence collaborator consumed by the transaction store."""

    def load(self) -> Optional[List[Transaction]]:
        ...

    def save(self, transactions: Sequence[Transaction]) -> None:
        ...


class JsonFileStorage:
    """Handles reading and writing the transaction file."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize transaction storage.

        Args:
            path: Optional custom file location. Defaults to the
                  configured transactions path.
        """
        self.path = Path(path) if path is not None else get_transactions_path()

    def read(self) -> Optional[List[Transaction]]:
        """Read the stored collection.

        Returns:
            The decoded transactions, or ``None`` when nothing has been saved.

        Raises:
            PersistenceLoadError: If the file cannot be read or is not a JSON
                array of records.

        Note:
            Individual malformed records, and records repeating an id that
            was already seen, are skipped with a warning.
        """
        if not self.path.exists():
            return None

        try:
            with self.path.open('r', encoding='utf-8') as handle:
                text = handle.read()
        except OSError as e:
            raise PersistenceLoadError(f"Failed to read transactions from {self.path}: {e}") from e

        records = parse_json_payload(text)

        transactions: List[Transaction] = []
        seen_ids = set()
        for position, record in enumerate(records):
            try:
                tx = decode_transaction(record)
            except ValueError as e:
                _logger.warning("Skipping stored transaction #%d: %s", position, e)
                continue
            if tx.id in seen_ids:
                _logger.warning("Skipping stored transaction #%d: duplicate id %s", position, tx.id)
                continue
            seen_ids.add(tx.id)
            transactions.append(tx)
        return transactions

    def load(self) -> Optional[List[Transaction]]:
        """Load the stored collection, treating unreadable data as absent."""
        try:
            return self.read()
        except PersistenceLoadError as e:
            _logger.warning("Ignoring corrupt transaction data in %s: %s", self.path, e)
            return None

    def save(self, transactions: Sequence[Transaction]) -> None:
        """Overwrite the stored collection.

        The document is written to a sibling ``.tmp`` file first and then
        moved into place.

        Raises:
            PersistenceSaveError: If the file cannot be written.
        """
        tmp = self.path.with_name(self.path.name + '.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open('w', encoding='utf-8') as handle:
                handle.write(to_json(transactions))
            os.replace(tmp, self.path)
        except OSError as e:
            raise PersistenceSaveError(f"Failed to save transactions to {self.path}: {e}") from e
