"""User preferences model."""

from sqlalchemy import Boolean, Column, String

from asset_catalog.database import Base


class UserPreferences(Base):
    """Per-user UI preferences; the user id is both key and partition."""

    __tablename__ = "user_preferences"

    user_id = Column(String(255), primary_key=True)
    dark_mode = Column(Boolean, nullable=False, default=False)
    language = Column(String(8), nullable=False, default="en")
    updated_at = Column(String(32), nullable=False)

    @property
    def id(self) -> str:
        return self.user_id

    def __repr__(self):
        return f"<UserPreferences(user_id={self.user_id}, language={self.language})>"
