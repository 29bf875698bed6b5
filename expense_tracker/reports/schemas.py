from pydantic import BaseModel, Field


class MonthlyBreakdownRequest(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900, le=2100)


class MonthlyBreakdownPage(MonthlyBreakdownRequest):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
