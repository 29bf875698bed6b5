from typing import Iterable, List

from expense_tracker.expenses.models import Expense
from expense_tracker.utils.formatting import (
    badge_color,
    build_csv,
    chart_color,
    export_row,
    format_date_for_display,
)


def format_expense(expense: Expense) -> dict:
    category = expense.category
    return {
        "id": expense.id,
        "title": expense.title,
        "amount": expense.amount,
        "category": {
            "id": category.id,
            "name": category.name,
            "isDefault": category.is_default,
        } if category else None,
        "date": expense.date,
        "formattedDate": format_date_for_display(expense.date),
        "createdBy": expense.created_by,
        "createdAt": expense.created_at,
        "updatedAt": expense.updated_at,
    }


def format_expense_set(expenses: Iterable[Expense]) -> List[dict]:
    return [format_expense(expense) for expense in expenses]


def format_category_distribution(rows: Iterable[dict]) -> List[dict]:
    return [
        {"name": row["name"], "value": row["value"], "color": chart_color(row["name"])}
        for row in rows
    ]


def format_chart_data(daily: Iterable[dict], distribution: Iterable[dict]) -> dict:
    return {
        "monthlyData": [{"date": item["date"], "amount": item["amount"]} for item in daily],
        "categoryDistribution": format_category_distribution(distribution),
    }


def format_recent_expenses(expenses: Iterable[Expense]) -> List[dict]:
    """Compact rows for the dashboard's recent list."""
    return [
        {
            "id": expense.id,
            "title": expense.title,
            "amount": expense.amount,
            "date": expense.date,
            "formattedDate": format_date_for_display(expense.date),
            "category": {
                "id": expense.category.id,
                "name": expense.category.name,
                "color": badge_color(expense.category.name),
            },
            "createdBy": expense.created_by,
        }
        for expense in expenses
    ]


def expenses_to_csv(expenses: Iterable[Expense]) -> str:
    return build_csv(
        export_row(e.title, e.amount, e.category.name if e.category else "", e.date)
        for e in expenses
    )
