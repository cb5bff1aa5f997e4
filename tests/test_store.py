import itertools
import logging
from datetime import timedelta
from decimal import Decimal

import pytest

from conftest import NOW, make_tx
from expense_tracker.errors import PersistenceSaveError, StoreStateError, ValidationError
from expense_tracker.models import TransactionType
from expense_tracker.storage import JsonFileStorage
from expense_tracker.store import TransactionStore


class _MemoryRepository:
    """In-memory persistence double that records every save."""

    def __init__(self, initial=None, fail_saves=False):
        self.initial = initial
        self.fail_saves = fail_saves
        self.saves = []

    def load(self):
        return None if self.initial is None else list(self.initial)

    def save(self, transactions):
        if self.fail_saves:
            raise PersistenceSaveError('disk full')
        self.saves.append(list(transactions))


def _store(repo=None, **kwargs):
    ticks = itertools.count()
    kwargs.setdefault('clock', lambda: NOW + timedelta(seconds=next(ticks)))
    store = TransactionStore(repo or _MemoryRepository(), **kwargs)
    store.load()
    return store


def test_add_records_fields_and_unique_ids():
    store = _store()
    first = store.add('income', '1000', 'Salary', 'March pay')
    second = store.add(TransactionType.EXPENSE, 200, 'Food & Dining')

    assert len(store) == 2
    assert first.id != second.id
    assert first.kind is TransactionType.INCOME
    assert first.amount == Decimal('1000')
    assert first.category == 'Salary'
    assert first.description == 'March pay'
    assert second.description == ''
    assert first.timestamp == NOW


def test_add_prepends_newest_first_by_insertion():
    clock_values = iter([NOW, NOW - timedelta(days=30)])
    store = _store(clock=lambda: next(clock_values))
    older_stamp_added_first = store.add('expense', 5, 'Other')
    added_second = store.add('expense', 6, 'Other')
    # Insertion order wins even though the second one has an earlier timestamp
    assert store.list() == [added_second, older_stamp_added_first]


@pytest.mark.parametrize('amount', [0, -1, '-0.01', '0.00'])
def test_add_rejects_non_positive_amount(amount):
    repo = _MemoryRepository()
    store = _store(repo)
    store.add('expense', 10, 'Health')

    with pytest.raises(ValidationError):
        store.add('expense', amount, 'Health')

    assert len(store) == 1
    assert len(repo.saves) == 1


@pytest.mark.parametrize(
    'kind, category',
    [('expense', ''), ('expense', '  '), ('expense', 'Salary'), ('income', 'Food & Dining')],
)
def test_add_rejects_missing_or_foreign_category(kind, category):
    store = _store()
    with pytest.raises(ValidationError):
        store.add(kind, 10, category)
    assert store.list() == []


def test_add_rejects_long_description_and_unknown_type():
    store = _store()
    with pytest.raises(ValidationError):
        store.add('expense', 10, 'Other', 'x' * 101)
    with pytest.raises(ValidationError):
        store.add('refund', 10, 'Other')
    assert len(store) == 0


def test_add_refuses_amounts_too_precise_to_store():
    repo = _MemoryRepository()
    store = _store(repo)
    with pytest.raises(ValidationError):
        store.add('expense', '1234567890123456.78', 'Shopping')
    assert store.list() == []
    assert repo.saves == []

    kept = store.add('expense', '1234567890.12', 'Shopping')
    assert kept.amount == Decimal('1234567890.12')


def test_mutations_before_load_are_usage_errors():
    store = TransactionStore(_MemoryRepository())
    assert not store.is_loaded
    with pytest.raises(StoreStateError):
        store.add('expense', 10, 'Other')
    with pytest.raises(StoreStateError):
        store.delete('anything')


def test_load_happens_once():
    store = _store()
    assert store.is_loaded
    with pytest.raises(StoreStateError):
        store.load()


def test_load_uses_repository_contents():
    existing = [make_tx(tx_id='a'), make_tx(tx_id='b', category='Shopping')]
    store = TransactionStore(_MemoryRepository(initial=existing))
    assert store.load() == existing
    assert store.categories() == {'Food & Dining', 'Shopping'}


def test_delete_unknown_id_is_a_no_op():
    repo = _MemoryRepository()
    store = _store(repo)
    store.add('expense', 1, 'Other')
    store.add('income', 2, 'Gifts')
    before = store.list()

    assert store.delete('missing') is False
    assert store.list() == before
    assert len(repo.saves) == 2


def test_delete_removes_and_persists():
    repo = _MemoryRepository()
    store = _store(repo)
    keep = store.add('expense', 1, 'Other')
    drop = store.add('expense', 2, 'Shopping')

    assert store.delete(drop.id) is True
    assert store.list() == [keep]
    assert repo.saves[-1] == [keep]
    assert store.categories() == {'Other'}


def test_list_is_a_snapshot():
    store = _store()
    store.add('expense', 1, 'Other')
    snapshot = store.list()
    snapshot.clear()
    assert len(store) == 1


def test_save_failure_keeps_memory_state_and_warns(caplog):
    store = _store(_MemoryRepository(fail_saves=True))

    with caplog.at_level(logging.WARNING, logger='expense_tracker'):
        tx = store.add('expense', 42, 'Entertainment')

    assert store.list() == [tx]
    assert isinstance(store.last_save_error, PersistenceSaveError)
    assert 'Could not save transactions' in caplog.text

    assert store.delete(tx.id) is True
    assert store.list() == []


def test_duplicate_generated_id_is_refused():
    store = _store(id_factory=lambda: 'fixed')
    store.add('expense', 1, 'Other')
    with pytest.raises(StoreStateError):
        store.add('expense', 2, 'Other')
    assert len(store) == 1


def test_state_survives_a_new_session(tmp_path):
    path = tmp_path / 'tx.json'
    first = _store(JsonFileStorage(path))
    first.add('income', '1000', 'Salary')
    first.add('expense', '0.10', 'Food & Dining', 'gum')

    second = TransactionStore(JsonFileStorage(path))
    assert second.load() == first.list()


def test_corrupt_storage_starts_empty(tmp_path):
    path = tmp_path / 'tx.json'
    path.write_text('not json at all', encoding='utf-8')
    store = TransactionStore(JsonFileStorage(path))
    assert store.load() == []
    store.add('expense', 3, 'Other')
    assert len(JsonFileStorage(path).load()) == 1
