from core.results import ErrorKind


class CaseError(Exception):
    """Base for expected case-rule failures; carries the error kind for the API."""
    kind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str, *, details=None):
        super().__init__(message)
        self.message = message
        self.details = details


class CaseValidationError(CaseError):
    kind = ErrorKind.VALIDATION_ERROR


class CaseNotFound(CaseError):
    kind = ErrorKind.NOT_FOUND


class InvalidState(CaseError):
    kind = ErrorKind.INVALID_STATE

    def __init__(self, message: str, *, allowed_transitions=None, details=None):
        super().__init__(message, details=details)
        self.allowed_transitions = allowed_transitions


class SafetyViolation(CaseError):
    kind = ErrorKind.SAFETY_VIOLATION

    def __init__(self, message: str, *, violations=None):
        super().__init__(message, details=list(violations or []))
        self.violations = list(violations or [])


class ConcurrentModification(InvalidState):
    """Another writer saved the case between our read and our write."""
