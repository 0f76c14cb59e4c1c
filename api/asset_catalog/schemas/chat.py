"""Chat and price estimation schemas."""

from datetime import date
from typing import List, Literal, Optional

from pydantic import Field

from asset_catalog.schemas.asset import CamelModel


class ChatAsset(CamelModel):
    """Asset summary sent along with a chat message."""

    id: Optional[str] = None
    make: str = ""
    model: str = ""
    category: Optional[str] = None
    value: float = 0
    date_purchased: Optional[str] = None


class ChatRequest(CamelModel):
    message: str = Field(..., min_length=1, description="User question")
    assets: List[ChatAsset] = Field(default_factory=list)
    language: str = "en"


class ChatResponse(CamelModel):
    response: str


class PriceEstimateRequest(CamelModel):
    make: str = ""
    model: str = ""
    category: Optional[str] = None
    serial_number: Optional[str] = None
    description: Optional[str] = None
    date_purchased: Optional[date] = None


class PriceEstimateResponse(CamelModel):
    estimated_value: float
    confidence: Literal["low", "medium", "high"]
    source: str
    notes: Optional[str] = None
