"""
Domain errors.

Every error carries the HTTP status the API layer answers with, so routes
can let them propagate and the exception handler in main.py renders them.
"""


class TalentosError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TalentosError):
    """Malformed field (e.g. email without '@' and '.')."""
    status_code = 422


class DuplicateConflict(TalentosError):
    """Email or document number already belongs to another employee."""
    status_code = 409


class NotFoundError(TalentosError):
    status_code = 404


class PersistenceError(TalentosError):
    """Unexpected failure while creating/updating, wrapped with context."""
    status_code = 400


class ExternalServiceError(TalentosError):
    """Email / PDF collaborator failure."""
    status_code = 502


class ImportRowError(TalentosError):
    """Failure of a single import row. Always recorded, never propagated."""
