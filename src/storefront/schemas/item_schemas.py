from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.models.item import CatalogItem


class ItemPayload(BaseModel):
    """Item record as returned by the item service"""
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "id": "a1f3",
                "name": "Linen Shirt",
                "description": "Breathable summer shirt",
                "price": 450,
                "imageUrl": "/uploads/linen-shirt.jpg",
                "category": "Shirts",
                "subCategory": "Summer",
                "priority": 2,
                "branch": "downtown",
                "isAvailable": True
            }
        },
    )

    id: str = Field(min_length=1, description="Item identifier")
    name: str = Field(description="Display name")
    description: str = Field(default="", description="Long description")
    price: float = Field(ge=0, description="Unit price")
    image_url: str = Field(default="", alias="imageUrl")
    category: str = Field(default="")
    sub_category: Optional[str] = Field(default=None, alias="subCategory")
    priority: int = Field(description="Display priority, lower first")
    branch: Optional[str] = Field(default=None)
    is_available: bool = Field(alias="isAvailable")

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v):
        # Some backends send numeric ids
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("description", "category", mode="before")
    @classmethod
    def validate_optional_text(cls, v):
        return "" if v is None else v

    def to_domain(self) -> CatalogItem:
        return CatalogItem(
            id=self.id,
            name=self.name,
            description=self.description,
            price=self.price,
            category=self.category,
            priority=self.priority,
            is_available=self.is_available,
            image_url=self.image_url,
            sub_category=self.sub_category,
            branch=self.branch
        )
