from typing import List, Optional

from pydantic import BaseModel, Field, constr, field_validator

from zenith.schemas.base import BaseResponseSchema

# Same bound as the tags.name column
TagName = constr(max_length=50)


class NamedSchema(BaseModel):
    """Trims ``name`` and rejects names that are only whitespace."""

    @field_validator("name", check_fields=False)
    @classmethod
    def clean_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Name must not be blank")
        return value


class CategoryCreate(NamedSchema):
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None


class CategoryUpdate(NamedSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = None


class CategoryResponse(BaseResponseSchema):
    name: str
    description: Optional[str] = None
    post_count: int = 0


class TagCreate(NamedSchema):
    name: str = Field(..., min_length=1, max_length=50)


class TagUpdate(TagCreate):
    pass


class TagBulkCreate(BaseModel):
    names: List[TagName] = Field(..., min_length=1)


class TagResponse(BaseResponseSchema):
    name: str
    post_count: int = 0
