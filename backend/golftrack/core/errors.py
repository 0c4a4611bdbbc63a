"""Domain errors shared by the API routers and the golf rules.

Every error carries a machine readable ``code`` and a human readable message.
The HTTP status is a class attribute so the exception handlers in
``golftrack.api.errors`` can render any subclass the same way.
"""

# Validation
VALIDATION_ERROR = "VALIDATION_ERROR"
INSUFFICIENT_SCORES = "INSUFFICIENT_SCORES"

# Authentication / authorization
INVALID_TOKEN = "INVALID_TOKEN"
INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

# Lookups
COURSE_NOT_FOUND = "COURSE_NOT_FOUND"
ROUND_NOT_FOUND = "ROUND_NOT_FOUND"
HOLE_NOT_FOUND = "HOLE_NOT_FOUND"
HOLE_SCORE_NOT_FOUND = "HOLE_SCORE_NOT_FOUND"
SHOT_NOT_FOUND = "SHOT_NOT_FOUND"

# Conflicts
DUPLICATE_SHOT_NUMBER = "DUPLICATE_SHOT_NUMBER"
COURSE_IN_USE = "COURSE_IN_USE"

INTERNAL_ERROR = "INTERNAL_ERROR"


class GolfTrackError(Exception):
    status_code = 500

    def __init__(self, code: str, message: str, field: str | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        body = {"detail": self.message, "code": self.code}
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(GolfTrackError):
    status_code = 400

    def __init__(self, message: str, field: str | None = None, code: str = VALIDATION_ERROR):
        super().__init__(code, message, field)


class AuthenticationError(GolfTrackError):
    status_code = 401

    def __init__(self, message: str, code: str = INVALID_TOKEN):
        super().__init__(code, message)


class AuthorizationError(GolfTrackError):
    status_code = 403

    def __init__(self, message: str, code: str = INSUFFICIENT_PERMISSIONS):
        super().__init__(code, message)


class NotFoundError(GolfTrackError):
    status_code = 404


class ConflictError(GolfTrackError):
    status_code = 409


def round_not_found() -> NotFoundError:
    # Other players' rounds are reported exactly like missing ones.
    return NotFoundError(ROUND_NOT_FOUND, "Round not found or access denied")


def hole_not_found() -> NotFoundError:
    return NotFoundError(HOLE_NOT_FOUND, "Hole not found")


def shot_not_found() -> NotFoundError:
    return NotFoundError(SHOT_NOT_FOUND, "Shot not found or access denied")


def duplicate_shot(shot_number: int) -> ConflictError:
    return ConflictError(
        DUPLICATE_SHOT_NUMBER,
        f"Shot number {shot_number} already exists for this hole",
        field="shot_number",
    )
