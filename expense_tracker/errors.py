"""Exception types raised by the expense tracker."""

from __future__ import annotations


class ExpenseTrackerError(Exception):
    """Base class for all expense tracker errors."""


class ValidationError(ExpenseTrackerError, ValueError):
    """Input rejected before a transaction was constructed."""


class PersistenceLoadError(ExpenseTrackerError):
    """Stored transactions could not be read or decoded."""


class PersistenceSaveError(ExpenseTrackerError, OSError):
    """The transaction collection could not be written."""


class StoreStateError(ExpenseTrackerError, RuntimeError):
    """The store was used outside its loaded lifecycle."""
