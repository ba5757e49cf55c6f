"""Error taxonomy for reviewpool operations.

Every error carries a stable wire ``code`` and the HTTP status the serving
layer answers with.
"""


class ReviewPoolError(Exception):
    """Base class for domain errors surfaced to callers verbatim."""

    code = "INTERNAL"
    status_code = 500
    default_message = "internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(ReviewPoolError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "resource not found"


class PRNotFoundError(NotFoundError):
    default_message = "PR not found"


class UserNotFoundError(NotFoundError):
    default_message = "user not found"


class TeamNotFoundError(NotFoundError):
    default_message = "team not found"


class AuthorNotFoundError(NotFoundError):
    default_message = "author/team not found"


class PRExistsError(ReviewPoolError):
    code = "PR_EXISTS"
    status_code = 409
    default_message = "PR id already exists"


class TeamExistsError(ReviewPoolError):
    code = "TEAM_EXISTS"
    status_code = 400
    default_message = "team_name already exists"


class PRMergedError(ReviewPoolError):
    code = "PR_MERGED"
    status_code = 409
    default_message = "cannot reassign on merged PR"


class NotAssignedError(ReviewPoolError):
    code = "NOT_ASSIGNED"
    status_code = 409
    default_message = "reviewer is not assigned to this PR"


class AlreadyAssignedError(ReviewPoolError):
    code = "ALREADY_ASSIGNED"
    status_code = 409
    default_message = "user is already a reviewer on this PR"


class NoCandidateError(ReviewPoolError):
    code = "NO_CANDIDATE"
    status_code = 409
    default_message = "no active replacement candidate in team"


class BatchValidationError(ReviewPoolError):
    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "invalid batch request"
