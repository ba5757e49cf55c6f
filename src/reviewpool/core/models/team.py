"""Team model."""
from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..storage.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Team(Base):
    """A team owning a roster of users."""

    __tablename__ = "teams"

    team_name: Mapped[str] = mapped_column(String(255), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    # Relationships
    members: Mapped[list["User"]] = relationship(
        "User", back_populates="team", order_by="User.user_id", lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Team(team_name='{self.team_name}')>"
