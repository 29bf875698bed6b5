from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from expense_tracker.database import get_db
from expense_tracker.expenses import formatters, schemas, service
from expense_tracker.responses import envelope
from expense_tracker.users.auth import get_current_user
from expense_tracker.users.models import User

router = APIRouter()


def expense_filters(
    page: int = 1,
    limit: int = 10,
    category: Optional[int] = None,
    month: Optional[str] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
) -> schemas.ExpenseFilters:
    return schemas.ExpenseFilters(
        page=page,
        limit=limit,
        category=category,
        month=month,
        startDate=start_date,
        endDate=end_date,
    )


def date_range(
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
) -> schemas.DateRange:
    return schemas.DateRange(startDate=start_date, endDate=end_date)


@router.get("/")
def list_expenses(
    filters: schemas.ExpenseFilters = Depends(expense_filters),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expenses, pagination = service.list_expenses(db, current_user.id, filters)
    return envelope(
        "Expenses retrieved successfully",
        formatters.format_expense_set(expenses),
        pagination=pagination,
    )


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_expense(
    expense: schemas.ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    created = service.create_expense(db, expense, current_user.id)
    return envelope("Expense created successfully", formatters.format_expense(created))


@router.get("/stats")
def get_expense_stats(
    dates: schemas.DateRange = Depends(date_range),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope("Statistics retrieved successfully", service.get_expense_stats(db, current_user.id, dates))


@router.get("/chart-data")
def get_chart_data(
    dates: schemas.DateRange = Depends(date_range),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return envelope("Chart data retrieved successfully", service.get_chart_data(db, current_user.id, dates))


@router.get("/export")
def export_expenses(
    filters: schemas.ExpenseFilters = Depends(expense_filters),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    content = service.export_expenses_csv(db, current_user.id, filters)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="expenses.csv"'},
    )


@router.get("/{expense_id}")
def get_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    expense = service.get_expense(db, expense_id, current_user.id)
    return envelope("Expense retrieved successfully", formatters.format_expense(expense))


@router.put("/{expense_id}")
def update_expense(
    expense_id: int,
    expense: schemas.ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    updated = service.update_expense(db, expense_id, expense, current_user.id)
    return envelope("Expense updated successfully", formatters.format_expense(updated))


@router.delete("/{expense_id}")
def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service.delete_expense(db, expense_id, current_user.id)
    return envelope("Expense deleted successfully", [])
