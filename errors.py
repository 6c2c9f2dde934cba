# errors.py
# Judging error kinds; each carries a stable code, an HTTP status and a retryable flag


class JudgingError(Exception):
    """Base class for all judging errors."""

    status_code = 400
    code = "JUDGING_ERROR"
    default_message = "Judging operation failed"
    retryable = False

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self):
        payload = {
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
        }
        if self.details:
            payload["details"] = self.details
        return payload

class NotFoundError(JudgingError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Entity not found"

class ConflictError(JudgingError):
    status_code = 409
    code = "CONFLICT"
    default_message = "Conflicting state"

class AlreadyAssigned(ConflictError):
    code = "ALREADY_ASSIGNED"
    default_message = "Judge already assigned to this competition"

class AlreadyScored(ConflictError):
    code = "ALREADY_SCORED"
    default_message = "You have already scored this criterion for this submission"

class HasRecordedScores(ConflictError):
    code = "HAS_RECORDED_SCORES"
    default_message = "Cannot remove a judge who has already scored submissions"

class ValidationError(JudgingError):
    status_code = 400
    code = "VALIDATION_FAILED"
    default_message = "Invalid request"

class OutOfRange(ValidationError):
    code = "OUT_OF_RANGE"
    default_message = "Score is outside the allowed range for this criterion"

class UnknownCriterion(ValidationError):
    code = "UNKNOWN_CRITERION"
    default_message = "Criterion does not belong to this competition"

class NotFinalized(ValidationError):
    code = "NOT_FINALIZED"
    default_message = "Can only score finalized submissions"

class CompetitionClosed(ValidationError):
    code = "COMPETITION_CLOSED"
    default_message = "Scoring is closed for this competition"

class InvalidPayload(ValidationError):
    code = "INVALID_PAYLOAD"
    default_message = "Malformed request payload"

class ForbiddenError(JudgingError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Operation not permitted"

class ConflictOfInterest(ForbiddenError):
    code = "CONFLICT_OF_INTEREST"
    default_message = "Cannot score your own team's submission"

class NotScoreOwner(ForbiddenError):
    code = "NOT_SCORE_OWNER"
    default_message = "You can only change your own scores"

class InvalidRole(ForbiddenError):
    code = "INVALID_ROLE"
    default_message = "User must hold a judge-capable role"

class NotAJudge(ForbiddenError):
    code = "NOT_A_JUDGE"
    default_message = "You are not assigned as a judge for this competition"

class OrganizerRequired(ForbiddenError):
    code = "ORGANIZER_REQUIRED"
    default_message = "Only organizers can perform this operation"

class AuthenticationRequired(JudgingError):
    status_code = 401
    code = "AUTHENTICATION_REQUIRED"
    default_message = "Sign in to access this resource"

class StoreUnavailable(JudgingError):
    status_code = 503
    code = "STORE_UNAVAILABLE"
    default_message = "Data store is temporarily unavailable, retry the request"
    retryable = True
