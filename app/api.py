"""
FastAPI routes for statement upload and transaction queries.
"""
import uuid
from datetime import date
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Header, HTTPException, Query, UploadFile
from fastapi.responses import Response

from core.config import get_settings
from core.exceptions import FileProcessingError, StorageError
from core.logger import setup_logger
from core.parsing import SUPPORTED_EXTENSIONS
from core.schema import CategorySummary, UploadResult
from services.transaction_service import TransactionService

logger = setup_logger(__name__)
settings = get_settings()

# Initialize FastAPI app
app = FastAPI(
    title="Expense Tracker API",
    description="Upload bank statements and track categorized expenses",
    version="1.0.0"
)

_transaction_service: Optional[TransactionService] = None


def get_transaction_service() -> TransactionService:
    """Service dependency; tests override it with a stubbed oracle."""
    global _transaction_service
    if _transaction_service is None:
        _transaction_service = TransactionService()
    return _transaction_service


def get_current_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    """
    Resolve the caller identity.
    The header value is opaque and not looked up.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Not authorized")
    return x_user_id.strip()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "expense_tracker",
        "version": "1.0.0"
    }


@app.get("/favicon.ico")
async def favicon():
    """Return empty response for favicon to avoid 404 errors."""
    return Response(status_code=204)


def validate_file_extension(filename: Optional[str]) -> None:
    """
    Validate file has a supported statement extension.

    Raises:
        HTTPException: If file extension is invalid
    """
    if not filename or not filename.lower().endswith(SUPPORTED_EXTENSIONS):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type: {filename}. Only .csv, .xlsx and .xls are supported."
        )


@app.post("/api/transactions/upload", response_model=UploadResult)
async def upload_statement(
    file: Optional[UploadFile] = File(default=None),
    user_id: str = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service)
):
    """
    Ingest an uploaded bank statement for the caller.

    Returns:
        Upload message and the number of transactions saved
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    validate_file_extension(file.filename)
    logger.info(f"Received statement {file.filename} from user {user_id}")

    upload_path = Path(settings.temp_storage_path) / f"{uuid.uuid4()}_{Path(file.filename).name}"
    upload_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(upload_path, "wb") as f:
            f.write(await file.read())

        saved = await service.process_upload(str(upload_path), user_id)

        return UploadResult(saved=saved)

    except FileProcessingError as e:
        logger.error(f"Upload failed for user {user_id}: {e.message}")
        raise HTTPException(status_code=500, detail=e.message)

    finally:
        # Clean up uploaded file
        try:
            if upload_path.exists():
                upload_path.unlink()
                logger.debug(f"Cleaned up: {upload_path}")
        except OSError as cleanup_error:
            logger.warning(f"Failed to cleanup {upload_path}: {cleanup_error}")


@app.get("/api/transactions")
async def list_transactions(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    user_id: str = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service)
):
    """List the caller's transactions, newest first."""
    try:
        return service.list_transactions(user_id, start_date, end_date)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=e.message)


@app.get("/api/transactions/summary", response_model=List[CategorySummary])
async def transaction_summary(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    user_id: str = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service)
):
    """Per-category totals for the caller."""
    try:
        return service.summarize(user_id, start_date, end_date)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=e.message)


@app.delete("/api/transactions/all")
async def delete_all_transactions(
    user_id: str = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service)
):
    """Delete every transaction owned by the caller."""
    try:
        deleted = service.delete_all(user_id)
    except StorageError as e:
        raise HTTPException(status_code=500, detail=e.message)
    return {"message": "All transactions deleted", "deleted": deleted}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
