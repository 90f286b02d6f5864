"""
Tests for the SQLite transaction store.
"""
from datetime import date

import pytest

from core.db import Database
from core.exceptions import StorageError
from core.schema import Transaction


def make_txn(user_id="u1", day=1, description="GROCERY", amount=100.0, category="Food", type="debit"):
    return Transaction(
        user_id=user_id,
        date=date(2023, 1, day),
        description=description,
        amount=amount,
        category=category,
        type=type,
    )


def test_insert_and_list_newest_first(db):
    saved = db.insert_transactions([make_txn(day=1), make_txn(day=3), make_txn(day=2)])

    rows = db.get_transactions("u1")

    assert saved == 3
    assert [row["date"] for row in rows] == ["2023-01-03", "2023-01-02", "2023-01-01"]
    assert rows[0]["category"] == "Food"
    assert rows[0]["type"] == "debit"


def test_insert_empty_batch(db):
    assert db.insert_transactions([]) == 0
    assert db.get_transactions("u1") == []


def test_transactions_are_scoped_per_user(db):
    db.insert_transactions([make_txn(user_id="u1"), make_txn(user_id="u2")])
    assert len(db.get_transactions("u1")) == 1
    assert len(db.get_transactions("u2")) == 1


def test_date_range_requires_both_bounds(db):
    db.insert_transactions([make_txn(day=d) for d in (1, 10, 20)])

    ranged = db.get_transactions("u1", date(2023, 1, 5), date(2023, 1, 20))
    open_ended = db.get_transactions("u1", date(2023, 1, 5), None)

    assert [row["date"] for row in ranged] == ["2023-01-20", "2023-01-10"]
    assert len(open_ended) == 3


def test_summarize_by_category(db):
    db.insert_transactions([
        make_txn(category="Food", amount=100.0),
        make_txn(category="Food", amount=50.0),
        make_txn(category="Bills", amount=400.0),
    ])

    summary = db.summarize_by_category("u1")

    assert summary == [
        {"category": "Bills", "total": 400.0, "count": 1},
        {"category": "Food", "total": 150.0, "count": 2},
    ]


def test_delete_all_only_touches_owner(db):
    db.insert_transactions([make_txn(user_id="u1"), make_txn(user_id="u1"), make_txn(user_id="u2")])

    assert db.delete_all("u1") == 2
    assert db.get_transactions("u1") == []
    assert len(db.get_transactions("u2")) == 1


def test_storage_errors_are_wrapped(tmp_path):
    broken = Database(str(tmp_path / "missing-dir" / "x.db"))
    with pytest.raises(StorageError):
        broken.init_db()


def test_transaction_model_rejects_invalid_values():
    with pytest.raises(ValueError):
        make_txn(amount=0)
    with pytest.raises(ValueError):
        make_txn(description="   ")
    with pytest.raises(ValueError):
        make_txn(category="Groceries")
    with pytest.raises(ValueError):
        make_txn(type="transfer")
