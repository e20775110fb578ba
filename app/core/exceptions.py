"""
Domain errors raised by the employee service.

Both kinds are request rejections, not system faults; the API layer maps them
to HTTP status codes (see ``app.main``).
"""

from typing import Optional


class EmployeeServiceError(Exception):
    """Base class for expected, caller-visible employee failures."""

    error_code = "EmployeeServiceError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateEmailError(EmployeeServiceError):
    """Raised when an email is already used by another employee."""

    error_code = "DuplicateEmail"

    def __init__(self, email: str):
        super().__init__(f"Email already taken: {email}")
        self.email = email


class EmployeeNotFoundError(EmployeeServiceError):
    """Raised by update/delete when the target employee does not exist."""

    error_code = "NotFound"

    def __init__(self, employee_id: Optional[int]):
        super().__init__(f"Employee not found: {employee_id}")
        self.employee_id = employee_id
