"""
Custom exception classes
"""


class CaseFlowError(Exception):
    """Base exception"""
    pass


class NotFoundError(CaseFlowError):
    """Raised when a case, assignment or other record cannot be resolved"""
    def __init__(self, resource: str, resource_id: str = None):
        self.resource = resource
        self.resource_id = resource_id
        if resource_id:
            super().__init__(f"{resource} not found: {resource_id}")
        else:
            super().__init__(f"{resource} not found")


class InvalidStateError(CaseFlowError):
    """Raised when a transition is not legal from the current status"""
    def __init__(self, message: str, current_status: str = None):
        self.current_status = current_status
        super().__init__(f"Invalid state: {message}")


class ConflictError(CaseFlowError):
    """Raised for duplicates (scheduling requests, assignments, hearing slots)"""
    def __init__(self, message: str):
        super().__init__(f"Conflict: {message}")


class AccessDeniedError(CaseFlowError):
    """Raised when the caller is not allowed to act on the case"""
    def __init__(self, message: str = "You do not have access to this case"):
        super().__init__(f"Access denied: {message}")


class ValidationFailedError(CaseFlowError):
    """Raised when required case fields are missing or malformed"""
    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(f"Validation failed: {message}")


class DatabaseError(CaseFlowError):
    """Raised on storage failures"""
    def __init__(self, message: str):
        super().__init__(f"Database error: {message}")
