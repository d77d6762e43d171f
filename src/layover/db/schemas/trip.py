"""SQLAlchemy ORM model for the trips table."""

from sqlalchemy import BigInteger, CheckConstraint, Identity, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from layover.db.schemas.base import Base


class Trip(Base):
    __tablename__ = "trips"

    id: Mapped[int] = mapped_column(BigInteger, Identity(start=1), primary_key=True)
    owner: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    destination: Mapped[str | None] = mapped_column(Text)
    # Instants are nanoseconds since the Unix epoch (UTC).
    start_date: Mapped[int | None] = mapped_column(BigInteger)
    end_date: Mapped[int | None] = mapped_column(BigInteger)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    share_token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    events: Mapped[list["Event"]] = relationship(back_populates="trip", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("length(trim(name)) > 0", name="chk_trips_name"),
        CheckConstraint(
            "start_date IS NULL OR (end_date IS NOT NULL AND end_date >= start_date)",
            name="chk_trips_date_range",
        ),
        Index("idx_trips_owner", "owner"),
    )


# Avoid circular import: Event is resolved by string reference above
from layover.db.schemas.event import Event  # noqa: E402, F401
