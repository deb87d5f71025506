"""Product models.

``ProductRef`` is the slim payload an interaction carries into the graph.
``Product`` is the full record read back from the document store when
recommendations are hydrated for display.
"""

from typing import Any, Self

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductRef(BaseModel):
    """Product identity plus the attributes mirrored onto the graph node."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Document store product ID")
    name: str | None = Field(None, description="Display name, overwritten on each interaction")
    category: str | None = Field(None, description="Category name used as a clustering key")

    @field_validator("id")
    @classmethod
    def _strip_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("product id must not be blank")
        return v

    @field_validator("category")
    @classmethod
    def _blank_category_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class Product(BaseModel):
    """Full product record from the document store.

    Unknown document fields are kept so callers can render whatever the
    catalog stores without this model having to list it.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    name: str | None = None
    description: str | None = None
    price: float | None = None
    stock: int | None = None
    category: str | None = None
    artisan_id: str | None = Field(None, alias="artisanId")
    image: str | None = None

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> Self:
        """Build a Product from a raw MongoDB document (``_id`` becomes ``id``)."""
        data = {key: str(value) if isinstance(value, ObjectId) else value for key, value in doc.items()}
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)
