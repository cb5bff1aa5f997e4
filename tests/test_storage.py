import json
import logging
import os
from datetime import timedelta
from pathlib import Path

import pytest

from conftest import NOW, make_tx
from expense_tracker.config import STORAGE_KEY
from expense_tracker.errors import PersistenceLoadError, PersistenceSaveError
from expense_tracker.storage import JsonFileStorage


def _record(**overrides):
    record = {
        'id': 'r1',
        'type': 'expense',
        'amount': 20,
        'category': 'Transportation',
        'description': 'Bus pass',
        'date': NOW.isoformat(),
    }
    record.update(overrides)
    return record


def test_default_path_uses_storage_key_in_data_dir():
    storage = JsonFileStorage()
    assert storage.path.name == f'{STORAGE_KEY}.json'
    assert storage.path.parent == Path(os.environ['EXPENSE_TRACKER_DATA_DIR'])


def test_missing_file_loads_as_none(tmp_path):
    storage = JsonFileStorage(tmp_path / 'missing.json')
    assert storage.load() is None
    assert storage.read() is None


def test_save_then_load_round_trips(tmp_path):
    storage = JsonFileStorage(tmp_path / 'nested' / 'tx.json')
    transactions = [
        make_tx(kind='income', amount='2500.75', category='Freelance'),
        make_tx(amount='19.99', description='Books', category='Education', timestamp=NOW - timedelta(days=3)),
    ]
    storage.save(transactions)

    assert storage.load() == transactions
    assert not (tmp_path / 'nested' / 'tx.json.tmp').exists()
    on_disk = json.loads(storage.path.read_text(encoding='utf-8'))
    assert [r['type'] for r in on_disk] == ['income', 'expense']


def test_save_overwrites_previous_collection(tmp_path):
    storage = JsonFileStorage(tmp_path / 'tx.json')
    storage.save([make_tx(), make_tx()])
    only = make_tx(category='Health')
    storage.save([only])
    assert storage.load() == [only]


def test_corrupt_payload_is_treated_as_no_data(tmp_path, caplog):
    path = tmp_path / 'tx.json'
    path.write_text('{"oops": ', encoding='utf-8')
    storage = JsonFileStorage(path)

    with caplog.at_level(logging.WARNING, logger='expense_tracker'):
        assert storage.load() is None
    assert 'corrupt' in caplog.text

    with pytest.raises(PersistenceLoadError):
        storage.read()


def test_non_array_payload_is_corrupt(tmp_path):
    path = tmp_path / 'tx.json'
    path.write_text(json.dumps({'id': 'x'}), encoding='utf-8')
    assert JsonFileStorage(path).load() is None


def test_malformed_and_duplicate_records_are_skipped(tmp_path, caplog):
    path = tmp_path / 'tx.json'
    path.write_text(
        json.dumps([
            _record(),
            _record(id='r2', amount=0),
            _record(id='r3', date='yesterday'),
            _record(amount=5),
            _record(id='r4', type='income', category='Gifts', amount=12.25),
        ]),
        encoding='utf-8',
    )

    with caplog.at_level(logging.WARNING, logger='expense_tracker'):
        loaded = JsonFileStorage(path).load()

    assert [tx.id for tx in loaded] == ['r1', 'r4']
    assert str(loaded[1].amount) == '12.25'
    assert caplog.text.count('Skipping stored transaction') == 3


def test_save_failure_raises_persistence_save_error(tmp_path):
    target = tmp_path / 'tx.json'
    target.mkdir()
    storage = JsonFileStorage(target)
    with pytest.raises(PersistenceSaveError):
        storage.save([make_tx()])
