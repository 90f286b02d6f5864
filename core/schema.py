"""
Pydantic schemas for transactions and API payloads.
Defines the closed category and direction sets used by ingestion.
"""
import datetime as dt
from typing import Literal, Tuple, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

Category = Literal[
    "Food",
    "Transport",
    "Utilities",
    "Shopping",
    "Entertainment",
    "Healthcare",
    "Education",
    "Bills",
    "Other",
]

Direction = Literal["debit", "credit"]

CATEGORIES: Tuple[str, ...] = get_args(Category)
DEFAULT_CATEGORY = "Other"


class Transaction(BaseModel):
    """
    Finalized transaction produced by statement ingestion.
    Immutable once built; handed to storage as-is.
    """
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., description="Opaque owner identity, passed through unchecked")
    date: dt.date
    description: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    category: Category = DEFAULT_CATEGORY
    type: Direction = "debit"

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        """Reject descriptions that are blank after trimming."""
        v = v.strip()
        if not v:
            raise ValueError("Description must not be empty")
        return v


class UploadResult(BaseModel):
    """Response returned after a statement upload."""
    message: str = "Upload successful"
    saved: int = Field(default=0, ge=0)


class CategorySummary(BaseModel):
    """Aggregated spend for one category."""
    category: str
    total: float
    count: int
