"""Asset model."""

from sqlalchemy import JSON, Column, Float, String, Text

from asset_catalog.database import Base


class Asset(Base):
    """A household belonging, partitioned by household_id."""

    __tablename__ = "assets"

    id = Column(String(36), primary_key=True)
    household_id = Column(String(255), nullable=False, index=True)
    make = Column(String(255), nullable=False, default="")
    model = Column(String(255), nullable=False, default="")
    serial_number = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    category = Column(String(100), nullable=False, default="")
    value = Column(Float, nullable=False)
    date_purchased = Column(String(10), nullable=True)  # YYYY-MM-DD
    image_url = Column(Text, nullable=False, default="")  # legacy, mirrors image_urls[0]
    image_urls = Column(JSON, nullable=False, default=list)  # str or {"high", "low"}
    created_at = Column(String(32), nullable=False)  # ISO-8601 UTC
    updated_at = Column(String(32), nullable=False)

    def __repr__(self):
        return f"<Asset(id={self.id}, make={self.make}, household_id={self.household_id})>"
