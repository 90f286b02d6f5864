"""
Shared pytest fixtures.
"""
import os
import sys
import tempfile
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Keep uploads and the database out of the working tree
_TMP_ROOT = tempfile.mkdtemp(prefix="expense-tracker-tests-")
os.environ.setdefault("STORAGE_PATH", os.path.join(_TMP_ROOT, "uploads"))
os.environ.setdefault("DATABASE_PATH", os.path.join(_TMP_ROOT, "expenses.db"))
os.environ["LLM_API_KEY"] = ""

from core.db import Database  # noqa: E402
from core.schema import DEFAULT_CATEGORY  # noqa: E402


class StubOracle:
    """Deterministic labeling oracle that records its calls."""

    def __init__(self, reply=DEFAULT_CATEGORY, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def label(self, description, amount):
        self.calls.append((description, amount))
        if self.error is not None:
            raise self.error
        if callable(self.reply):
            return self.reply(description, amount)
        return self.reply


@pytest.fixture
def stub_oracle():
    return StubOracle(reply="Shopping")


@pytest.fixture
def db(tmp_path):
    database = Database(str(tmp_path / "test.db"))
    database.init_db()
    return database


@pytest.fixture
def statement_header():
    return ["Date", "Narration", "Chq", "Withdrawal", "Deposit", "Balance"]
