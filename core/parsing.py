"""
Bank statement file parsing.
Reads CSV/XLSX/XLS statements into a raw grid of cells and locates the
header row that precedes the transaction rows.
"""
from pathlib import Path
from typing import Any, List, Sequence

import pandas as pd

from core.exceptions import DataNotFoundError, ParsingError
from core.logger import setup_logger
from core.normalize import is_missing

logger = setup_logger(__name__)

SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".xls")

# Upper bound on CSV width; ragged rows are padded up to it and trailing
# empty columns are dropped afterwards.
MAX_CSV_COLUMNS = 64

Grid = List[List[Any]]


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        # One extra column catches rows wider than the limit
        df = pd.read_csv(
            path,
            header=None,
            names=list(range(MAX_CSV_COLUMNS + 1)),
            index_col=False,
            dtype=str,
            keep_default_na=False,
            na_values=[""],
            skip_blank_lines=True,
            encoding_errors="replace",
        )
        if df[MAX_CSV_COLUMNS].notna().any():
            raise ParsingError(
                f"Statement rows exceed {MAX_CSV_COLUMNS} columns",
                details={"file_path": str(path), "max_columns": MAX_CSV_COLUMNS}
            )
        return df.drop(columns=[MAX_CSV_COLUMNS])

    engine = "xlrd" if suffix == ".xls" else "openpyxl"
    logger.debug(f"Reading first sheet of {path.name} with engine={engine}")
    return pd.read_excel(path, sheet_name=0, header=None, dtype=object, engine=engine)


def read_statement_rows(file_path: str) -> Grid:
    """
    Read the first sheet of a statement file into rows of raw cells.

    Args:
        file_path: Path to a .csv, .xlsx or .xls file

    Returns:
        List of rows; missing cells are None

    Raises:
        DataNotFoundError: If file doesn't exist
        ParsingError: If the file type is unsupported or unreadable
    """
    path = Path(file_path)
    if not path.exists():
        raise DataNotFoundError(
            f"File not found: {file_path}",
            details={"file_path": file_path}
        )

    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise ParsingError(
            f"Unsupported statement type: {path.suffix}",
            details={"file_path": file_path, "supported": list(SUPPORTED_EXTENSIONS)}
        )

    try:
        df = _read_frame(path)
    except ParsingError:
        raise
    except Exception as e:
        logger.error(f"Failed to parse {file_path}: {str(e)}")
        raise ParsingError(
            "Invalid statement file format",
            details={"file_path": file_path, "error": str(e)}
        )

    # Remove completely empty rows and trailing empty columns; interior
    # columns stay so cell positions match the statement layout
    df = df.dropna(how="all")
    filled = [idx for idx, has_value in enumerate(df.notna().any()) if has_value]
    df = df.iloc[:, :filled[-1] + 1] if filled else df.iloc[:, :0]

    grid = [
        [None if is_missing(cell) else cell for cell in row]
        for row in df.itertuples(index=False, name=None)
    ]

    logger.info(f"Read {len(grid)} rows x {len(df.columns)} columns from {path.name}")
    return grid


def find_header_index(grid: Sequence[Sequence[Any]]) -> int:
    """
    Locate the header row: the first row whose first cell is text
    containing "date". Falls back to row 0 when no such row exists.

    Args:
        grid: Raw rows of cells

    Returns:
        Index of the header row
    """
    for idx, row in enumerate(grid):
        if not row:
            continue
        first = row[0]
        if isinstance(first, str) and "date" in first.lower():
            return idx
    return 0


def slice_data_rows(grid: Sequence[Sequence[Any]]) -> List[Sequence[Any]]:
    """
    Return the rows strictly after the header row.

    Args:
        grid: Raw rows of cells

    Returns:
        Data rows in original order
    """
    header_idx = find_header_index(grid)
    logger.info(f"Header row at index {header_idx}, {max(len(grid) - header_idx - 1, 0)} data rows")
    return list(grid[header_idx + 1:])
