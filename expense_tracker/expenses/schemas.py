import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


def _check_title(value: str) -> str:
    value = (value or "").strip()
    if len(value) < 2:
        raise ValueError("Title must be at least 2 characters long")
    if len(value) > 100:
        raise ValueError("Title must be less than or equal to 100 characters")
    return value


def _check_amount(value: float) -> float:
    if value <= 0:
        raise ValueError("Amount must be positive")
    return value


def _check_date_order(value: Optional[datetime.date], info: ValidationInfo) -> Optional[datetime.date]:
    start = info.data.get("start_date")
    if value is not None and start is not None and value < start:
        raise ValueError("End date must be after start date")
    return value


# =========================
# Create
# =========================
class ExpenseCreate(BaseModel):
    title: str
    amount: float = Field(..., allow_inf_nan=False)
    category: int
    date: datetime.date

    @field_validator("title")
    @classmethod
    def title_length(cls, value: str) -> str:
        return _check_title(value)

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, value: float) -> float:
        return _check_amount(value)


# =========================
# Update
# =========================
class ExpenseUpdate(BaseModel):
    title: Optional[str] = None
    amount: Optional[float] = Field(None, allow_inf_nan=False)
    category: Optional[int] = None
    date: Optional[datetime.date] = None

    @field_validator("title")
    @classmethod
    def title_length(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_title(value)

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, value: Optional[float]) -> Optional[float]:
        return None if value is None else _check_amount(value)


# =========================
# Query filters
# =========================
class DateRange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_date: Optional[datetime.date] = Field(None, alias="startDate")
    end_date: Optional[datetime.date] = Field(None, alias="endDate")

    @field_validator("end_date")
    @classmethod
    def end_after_start(cls, value: Optional[datetime.date], info: ValidationInfo) -> Optional[datetime.date]:
        return _check_date_order(value, info)


class ExpenseFilters(DateRange):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    category: Optional[int] = None
    month: Optional[str] = Field(None, pattern=r"^(0[1-9]|1[0-2])$")


class DashboardQuery(BaseModel):
    limit: int = Field(5, ge=1, le=20)
    months: int = Field(6, ge=1, le=12)
