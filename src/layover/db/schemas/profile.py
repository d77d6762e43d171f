"""SQLAlchemy ORM model for the profiles table."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from layover.db.schemas.base import Base


class Profile(Base):
    __tablename__ = "profiles"

    principal: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
