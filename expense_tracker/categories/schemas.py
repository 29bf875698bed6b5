from pydantic import BaseModel, field_validator


def _check_category_name(value: str) -> str:
    value = (value or "").strip()
    if len(value) < 2:
        raise ValueError("Category name must be at least 2 characters long")
    if len(value) > 50:
        raise ValueError("Category name must be less than or equal to 50 characters")
    return value


# ================= CREATE =================
class CategoryCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_length(cls, value: str) -> str:
        return _check_category_name(value)


# ================= UPDATE =================
class CategoryUpdate(CategoryCreate):
    pass
