"""Asset schemas."""

from datetime import date
from typing import Annotated, List, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ImageUrls(CamelModel):
    """Dual-resolution image reference."""

    high: str = Field(..., description="High resolution URL (detail pages)")
    low: str = Field(..., description="Low resolution URL (list pages)")


# Legacy entries are plain URLs, newer ones carry both resolutions.
ImageRef = Union[ImageUrls, str]

MAX_IMAGES = 4


def blank_date_to_none(v):
    """Forms submit an untouched date input as ""; treat it as no date."""
    if isinstance(v, str) and not v.strip():
        return None
    return v


OptionalDate = Annotated[Optional[date], BeforeValidator(blank_date_to_none)]


class AssetBase(CamelModel):
    """Descriptive asset fields."""

    make: str = ""
    model: str = ""
    serial_number: str = ""
    description: str = ""
    category: str = ""


class AssetCreate(AssetBase):
    """Schema for creating an asset.

    ``id`` and ``householdId`` are assigned by the server; if a client sends
    them they are ignored.
    """

    value: float = Field(..., strict=True, description="Monetary value")
    date_purchased: OptionalDate = None
    image_url: Optional[str] = None
    image_urls: Optional[List[ImageRef]] = Field(None, max_length=MAX_IMAGES)


class AssetUpdate(CamelModel):
    """Schema for updating an asset. Only fields sent are applied."""

    make: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    value: Optional[float] = Field(None, strict=True)
    date_purchased: OptionalDate = None
    image_url: Optional[str] = None
    image_urls: Optional[List[ImageRef]] = Field(None, max_length=MAX_IMAGES)

    @field_validator("value")
    @classmethod
    def value_not_null(cls, v):
        if v is None:
            raise ValueError("Invalid value")
        return v


class AssetResponse(AssetBase):
    """Schema for asset response."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: str
    household_id: str
    value: float
    date_purchased: Optional[str] = None
    image_url: str = ""
    image_urls: List[ImageRef] = Field(default_factory=list)
    created_at: str
    updated_at: str


class AssetDeleteResponse(CamelModel):
    deleted: bool
    id: str


class CategorySummary(CamelModel):
    category: str
    count: int
    total_value: float


class AssetSummaryResponse(CamelModel):
    """Aggregate portfolio value for a household."""

    count: int
    total_value: float
    categories: List[CategorySummary] = Field(default_factory=list)


class UploadResponse(CamelModel):
    """Response for an image upload."""

    image_url: str = Field(..., description="Legacy field, same as imageUrls.high")
    image_urls: ImageUrls
