"""User preferences schemas."""

from typing import Literal, Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from asset_catalog.schemas.asset import CamelModel

Language = Literal["en", "fr", "de", "ja"]


class PreferencesUpdate(CamelModel):
    """Partial preferences update; omitted fields keep their stored value."""

    dark_mode: Optional[bool] = Field(None, strict=True)
    language: Optional[Language] = None


class PreferencesResponse(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: str
    user_id: str
    dark_mode: bool
    language: str
    updated_at: str
