"""Pull request and reviewer slot models."""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..storage.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PRStatus(str, Enum):
    """Lifecycle status of a pull request."""
    OPEN = "OPEN"
    MERGED = "MERGED"


class PullRequest(Base):
    """A pull request with its ordered reviewer slots."""

    __tablename__ = "pull_requests"

    pull_request_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    pull_request_name: Mapped[str] = mapped_column(String(500), nullable=False)
    author_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.user_id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PRStatus.OPEN.value, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    merged_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    assignments: Mapped[list["ReviewerAssignment"]] = relationship(
        "ReviewerAssignment",
        back_populates="pull_request",
        cascade="all, delete-orphan",
        order_by="ReviewerAssignment.position",
        lazy="selectin",
    )

    @property
    def assigned_reviewers(self) -> list[str]:
        """Reviewer ids in selection order."""
        return [assignment.user_id for assignment in self.assignments]

    @property
    def is_merged(self) -> bool:
        return self.status == PRStatus.MERGED.value

    def __repr__(self) -> str:
        return f"<PullRequest(id='{self.pull_request_id}', status='{self.status}')>"


class ReviewerAssignment(Base):
    """One reviewer slot on a pull request.

    Reassignment rewrites ``user_id`` in place, so ``position`` keeps the
    original selection order.
    """

    __tablename__ = "pr_reviewers"
    __table_args__ = (
        UniqueConstraint("pull_request_id", "user_id", name="uq_pr_reviewers_pr_user"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pull_request_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("pull_requests.pull_request_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.user_id"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    # Relationships
    pull_request: Mapped["PullRequest"] = relationship(
        "PullRequest", back_populates="assignments"
    )

    def __repr__(self) -> str:
        return (
            f"<ReviewerAssignment(pr='{self.pull_request_id}', user='{self.user_id}', "
            f"position={self.position})>"
        )
