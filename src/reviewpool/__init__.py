"""reviewpool - pull request reviewer assignment service.

Teams own users, users author and review pull requests, and reviewers are
picked and re-picked from the right team as pull requests and users change.
"""
__version__ = "0.1.0"

from .core.assignment import (
    AssignmentEngine,
    DeactivationController,
    DeactivationReport,
    ReassignmentResult,
    ReviewerSelector,
    SlotOutcome,
    SlotStatus,
)
from .core.config.settings import ReviewPoolConfig, get_config, init_config
from .core.errors import (
    AlreadyAssignedError,
    AuthorNotFoundError,
    BatchValidationError,
    NoCandidateError,
    NotAssignedError,
    NotFoundError,
    PRExistsError,
    PRMergedError,
    PRNotFoundError,
    ReviewPoolError,
    TeamExistsError,
    TeamNotFoundError,
    UserNotFoundError,
)
from .core.models import PRStatus, PullRequest, ReviewerAssignment, Team, User
from .core.storage.database import Database, get_db, init_db

__all__ = [
    # Version
    "__version__",
    # Config
    "ReviewPoolConfig",
    "init_config",
    "get_config",
    # Database
    "Database",
    "init_db",
    "get_db",
    # Models
    "Team",
    "User",
    "PullRequest",
    "ReviewerAssignment",
    "PRStatus",
    # Assignment
    "AssignmentEngine",
    "ReassignmentResult",
    "ReviewerSelector",
    "DeactivationController",
    "DeactivationReport",
    "SlotOutcome",
    "SlotStatus",
    # Errors
    "ReviewPoolError",
    "NotFoundError",
    "PRNotFoundError",
    "UserNotFoundError",
    "TeamNotFoundError",
    "AuthorNotFoundError",
    "PRExistsError",
    "TeamExistsError",
    "PRMergedError",
    "NotAssignedError",
    "AlreadyAssignedError",
    "NoCandidateError",
    "BatchValidationError",
]
