from typing import List, Optional

from loguru import logger
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from expense_tracker.categories import models, schemas
from expense_tracker.exceptions import ConflictError, DuplicateError, ForbiddenError, NotFoundError
from expense_tracker.expenses.models import Expense


# =========================
# Helper: serialize category
# =========================
def serialize_category(category: models.Category) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "isDefault": category.is_default,
        "createdBy": category.created_by,
        "createdAt": category.created_at,
        "updatedAt": category.updated_at,
    }


def _visible_to(user_id: int):
    return or_(models.Category.is_default.is_(True), models.Category.created_by == user_id)


# ================= QUERIES =================
def list_categories(db: Session, user_id: int) -> List[models.Category]:
    """Default categories first, then the user's own, each alphabetical."""
    return (
        db.query(models.Category)
        .filter(_visible_to(user_id))
        .order_by(models.Category.is_default.desc(), models.Category.name)
        .all()
    )


def get_category(db: Session, category_id: int) -> Optional[models.Category]:
    return db.query(models.Category).filter(models.Category.id == category_id).first()


def get_visible_category(db: Session, category_id: int, user_id: int) -> Optional[models.Category]:
    return (
        db.query(models.Category)
        .filter(models.Category.id == category_id, _visible_to(user_id))
        .first()
    )


def category_name_exists(
    db: Session,
    name: str,
    user_id: int,
    exclude_id: Optional[int] = None,
) -> bool:
    """Case-insensitive name check across the default and the user's categories.

    Names are casefolded in Python; SQL lower() only folds ASCII.
    """
    key = name.strip().casefold()
    rows = db.query(models.Category.id, models.Category.name).filter(_visible_to(user_id))
    return any(
        category_id != exclude_id and category_name.casefold() == key
        for category_id, category_name in rows
    )


def _owned_category(db: Session, category_id: int, user_id: int, action: str) -> models.Category:
    category = get_category(db, category_id)
    if not category:
        raise NotFoundError("Category not found")
    if category.is_default:
        raise ForbiddenError(f"Cannot {action} default categories")
    if category.created_by != user_id:
        logger.warning(f"User {user_id} tried to {action} category {category_id}")
        raise ForbiddenError(f"Not authorized to {action} this category")
    return category


# ================= CREATE =================
def create_category(db: Session, category: schemas.CategoryCreate, user_id: int) -> models.Category:
    if category_name_exists(db, category.name, user_id):
        raise DuplicateError("name", "Category name already exists")

    db_category = models.Category(name=category.name, is_default=False, created_by=user_id)
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category


# ================= UPDATE =================
def update_category(
    db: Session,
    category_id: int,
    category: schemas.CategoryUpdate,
    user_id: int,
) -> models.Category:
    db_category = _owned_category(db, category_id, user_id, "update")

    if category_name_exists(db, category.name, user_id, exclude_id=category_id):
        raise DuplicateError("name", "Category name already exists")

    db_category.name = category.name
    db.commit()
    db.refresh(db_category)
    return db_category


# ================= DELETE =================
def delete_category(db: Session, category_id: int, user_id: int) -> None:
    db_category = _owned_category(db, category_id, user_id, "delete")

    in_use = db.query(func.count(Expense.id)).filter(Expense.category_id == category_id).scalar()
    if in_use:
        raise ConflictError(f"Category is used by {in_use} expense(s) and cannot be deleted")

    db.delete(db_category)
    db.commit()
