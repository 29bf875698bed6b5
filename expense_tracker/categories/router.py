from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from expense_tracker.categories import schemas, service
from expense_tracker.database import get_db
from expense_tracker.responses import envelope
from expense_tracker.users.auth import get_current_user
from expense_tracker.users.models import User

router = APIRouter()


# ================= LIST =================
@router.get("/")
def list_categories(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    categories = service.list_categories(db, current_user.id)
    return envelope(
        "Categories retrieved successfully",
        [service.serialize_category(c) for c in categories],
    )


# ================= CREATE =================
@router.post("/", status_code=status.HTTP_201_CREATED)
def create_category(
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    created = service.create_category(db, category, current_user.id)
    return envelope("Category created successfully", service.serialize_category(created))


# ================= UPDATE =================
@router.put("/{category_id}")
def update_category(
    category_id: int,
    category: schemas.CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    updated = service.update_category(db, category_id, category, current_user.id)
    return envelope("Category updated successfully", service.serialize_category(updated))


# ================= DELETE =================
@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service.delete_category(db, category_id, current_user.id)
    return envelope("Category deleted successfully", [])
