"""Asset business logic service.

All operations are scoped by household id; an asset is never visible
outside the household partition it was created in.
"""

import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from asset_catalog.models.asset import Asset

TEXT_FIELDS = ("make", "model", "serial_number", "description", "category")


class AssetServiceError(Exception):
    """Base exception for asset service errors."""
    pass


class AssetNotFoundError(AssetServiceError):
    """Asset not found in the requester's household."""
    pass


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision, e.g. ``2024-05-01T10:00:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def primary_image_url(image_urls: Sequence[Any]) -> str:
    """High resolution URL of the first image, or "" when there are none."""
    if not image_urls:
        return ""
    first = image_urls[0]
    if isinstance(first, str):
        return first
    return first.get("high", "")


def collect_image_urls(asset: Asset) -> List[str]:
    """Every blob URL referenced by an asset (legacy field included)."""
    urls = []
    if asset.image_url:
        urls.append(asset.image_url)
    for ref in asset.image_urls or []:
        if isinstance(ref, str):
            urls.append(ref)
        elif isinstance(ref, dict):
            urls.extend(u for u in (ref.get("high"), ref.get("low")) if u)
    return list(OrderedDict.fromkeys(urls))


def _reconcile_images(asset: Asset, data: Dict[str, Any]) -> None:
    """Keep the legacy image_url in step with image_urls.

    An explicit array wins and drives the legacy field; a lone legacy URL is
    wrapped into a one-element array; with neither, nothing changes.
    """
    image_urls = data.get("image_urls")
    image_url = data.get("image_url")

    if image_urls is not None:
        asset.image_urls = list(image_urls)
        asset.image_url = primary_image_url(image_urls)
    elif image_url is not None:
        asset.image_url = image_url
        asset.image_urls = [image_url] if image_url else []


def _format_date(value: Any) -> Optional[str]:
    if value is None:
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def list_assets(db: Session, household_id: str) -> List[Asset]:
    """List the household's assets, newest first."""
    return (
        db.query(Asset)
        .filter(Asset.household_id == household_id)
        .order_by(Asset.created_at.desc())
        .all()
    )


def get_asset(db: Session, asset_id: str, household_id: str) -> Asset:
    """
    Get asset by ID within a household.

    Raises:
        AssetNotFoundError: If the asset does not exist in this household
    """
    asset = (
        db.query(Asset)
        .filter(Asset.id == asset_id, Asset.household_id == household_id)
        .first()
    )

    if not asset:
        raise AssetNotFoundError(f"Asset {asset_id} not found")

    return asset


def create_asset(db: Session, household_id: str, data: Dict[str, Any]) -> Asset:
    """Create an asset with a fresh id and timestamps.

    Args:
        db: Database session
        household_id: Owning household (partition key)
        data: Validated fields in snake_case (see ``AssetCreate``)

    Returns:
        The persisted Asset

    Examples:
        >>> asset = create_asset(db, "household-1", {"make": "Sony", "value": 899.0})
        >>> asset.image_urls
        []
    """
    now = utc_now_iso()
    asset = Asset(
        id=str(uuid.uuid4()),
        household_id=household_id,
        value=data["value"],
        date_purchased=_format_date(data.get("date_purchased")),
        image_url="",
        image_urls=[],
        created_at=now,
        updated_at=now,
    )
    for field in TEXT_FIELDS:
        setattr(asset, field, data.get(field) or "")

    _reconcile_images(asset, data)

    db.add(asset)
    db.commit()
    db.refresh(asset)
    return asset


def update_asset(
    db: Session, asset_id: str, household_id: str, changes: Dict[str, Any]
) -> Asset:
    """Apply the fields present in ``changes`` over the stored asset.

    ``id`` and ``household_id`` never change, whatever ``changes`` holds.

    Raises:
        AssetNotFoundError: If the asset does not exist in this household
    """
    asset = get_asset(db, asset_id, household_id)

    for field in TEXT_FIELDS:
        if field in changes:
            setattr(asset, field, changes[field] or "")

    if changes.get("value") is not None:
        asset.value = changes["value"]

    if "date_purchased" in changes:
        asset.date_purchased = _format_date(changes["date_purchased"])

    _reconcile_images(asset, changes)
    asset.updated_at = utc_now_iso()

    db.commit()
    db.refresh(asset)
    return asset


def delete_asset(db: Session, asset_id: str, household_id: str) -> None:
    """
    Delete asset by ID.

    Raises:
        AssetNotFoundError: If the asset does not exist in this household
    """
    asset = get_asset(db, asset_id, household_id)
    db.delete(asset)
    db.commit()


def summarize_assets(db: Session, household_id: str) -> Dict[str, Any]:
    """Aggregate count and value, overall and per category."""
    assets = list_assets(db, household_id)

    categories: Dict[str, Dict[str, Any]] = {}
    for asset in assets:
        key = asset.category or "uncategorized"
        bucket = categories.setdefault(
            key, {"category": key, "count": 0, "total_value": 0.0}
        )
        bucket["count"] += 1
        bucket["total_value"] += asset.value

    return {
        "count": len(assets),
        "total_value": sum(a.value for a in assets),
        "categories": sorted(
            categories.values(), key=lambda c: c["total_value"], reverse=True
        ),
    }
