"""
Statement ingestion service.
Turns uploaded statement rows into categorized transactions and stores them.
"""
import asyncio
from datetime import date
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

from core.config import get_settings
from core.db import Database, get_db
from core.direction import classify_direction
from core.exceptions import FileProcessingError
from core.logger import setup_logger
from core.normalize import cell_to_text, normalize_amount, normalize_date
from core.parsing import read_statement_rows, slice_data_rows
from core.schema import Transaction
from llm.categorize import CategoryOracle, LLMCategoryOracle, resolve_category

logger = setup_logger(__name__)

# date, description, reference, withdrawal, deposit, balance
MIN_ROW_CELLS = 6
DATE_COL = 0
DESCRIPTION_COL = 1
WITHDRAWAL_COL = 3
DEPOSIT_COL = 4


class PreparedRow(NamedTuple):
    """A row that passed every check except categorization."""
    date: date
    description: str
    amount: float
    direction: str


class TransactionService:
    """Service for ingesting bank statements into per-user transactions."""

    def __init__(
        self,
        oracle: Optional[CategoryOracle] = None,
        db: Optional[Database] = None
    ):
        """
        Initialize transaction service.

        Args:
            oracle: Category labeling oracle (defaults to the LLM gateway)
            db: Transaction store (defaults to the configured SQLite database)
        """
        self.settings = get_settings()
        self.oracle = oracle or LLMCategoryOracle()
        self._db = db

    @property
    def db(self) -> Database:
        if self._db is None:
            self._db = get_db()
        return self._db

    def prepare_row(self, row: Any) -> Optional[PreparedRow]:
        """
        Normalize and classify a raw row without calling the oracle.

        Args:
            row: Sequence of raw cells

        Returns:
            PreparedRow, or None if the row must be skipped
        """
        if not isinstance(row, (list, tuple)) or len(row) < MIN_ROW_CELLS:
            logger.debug("Skipping short row")
            return None

        row_date = normalize_date(row[DATE_COL], dayfirst=self.settings.date_dayfirst)
        description = cell_to_text(row[DESCRIPTION_COL])
        withdrawal = normalize_amount(row[WITHDRAWAL_COL])
        deposit = normalize_amount(row[DEPOSIT_COL])

        if row_date is None or not description:
            logger.debug(f"Skipping row without date or description: {row[:2]}")
            return None

        amount, direction = classify_direction(description, withdrawal, deposit)
        if amount <= 0:
            logger.debug(f"Skipping row without amount: '{description}'")
            return None

        return PreparedRow(row_date, description, amount, direction)

    async def convert_row(
        self,
        row: Any,
        user_id: str,
        semaphore: asyncio.Semaphore
    ) -> Optional[Transaction]:
        """
        Convert one raw row into a transaction.

        Args:
            row: Sequence of raw cells
            user_id: Owner identity attached to the transaction
            semaphore: Bounds concurrent oracle calls

        Returns:
            Transaction, or None if the row was skipped
        """
        prepared = self.prepare_row(row)
        if prepared is None:
            return None

        async with semaphore:
            category = await resolve_category(
                prepared.description,
                prepared.amount,
                self.oracle,
                self.settings.category_timeout,
            )

        return Transaction(
            user_id=user_id,
            date=prepared.date,
            description=prepared.description,
            amount=prepared.amount,
            category=category,
            type=prepared.direction,
        )

    async def ingest(self, grid: Sequence[Sequence[Any]], user_id: str) -> List[Transaction]:
        """
        Convert a raw statement grid into transactions.

        Rows are converted concurrently; the result keeps the original row
        order and leaves out skipped rows.

        Args:
            grid: Raw rows of cells, header included
            user_id: Owner identity

        Returns:
            Transactions in row order (possibly empty)
        """
        data_rows = slice_data_rows(grid)
        total = len(data_rows)
        semaphore = asyncio.Semaphore(self.settings.max_concurrent_llm_calls)
        completed = [0]

        async def process_single(row: Any) -> Optional[Transaction]:
            result = await self.convert_row(row, user_id, semaphore)
            completed[0] += 1
            if completed[0] % 10 == 0 or completed[0] == total:
                logger.info(f"Progress: {completed[0]}/{total} rows processed")
            return result

        results = await asyncio.gather(*(process_single(row) for row in data_rows))
        transactions = [txn for txn in results if txn is not None]

        logger.info(
            f"Ingested {len(transactions)} transactions, "
            f"skipped {total - len(transactions)} of {total} rows"
        )
        return transactions

    async def process_upload(self, file_path: str, user_id: str) -> int:
        """
        Read, ingest and store an uploaded statement.

        Args:
            file_path: Path to the saved upload
            user_id: Owner identity

        Returns:
            Number of transactions saved

        Raises:
            FileProcessingError: If the file cannot be read or stored
        """
        try:
            logger.info(f"Processing statement: {file_path}")
            grid = read_statement_rows(file_path)
            transactions = await self.ingest(grid, user_id)
            return self.db.insert_transactions(transactions)

        except Exception as e:
            logger.error(f"Statement processing failed for {file_path}: {e}", exc_info=True)
            raise FileProcessingError(
                "Failed to process statement",
                details={"file_path": file_path, "error": str(e)}
            )

    def list_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[Dict[str, Any]]:
        return self.db.get_transactions(user_id, start_date, end_date)

    def summarize(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[Dict[str, Any]]:
        return self.db.summarize_by_category(user_id, start_date, end_date)

    def delete_all(self, user_id: str) -> int:
        return self.db.delete_all(user_id)
