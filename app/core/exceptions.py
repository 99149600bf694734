"""
Custom Application Exceptions
"""


class ERPException(Exception):
    """Base exception for the ERP application"""

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotFoundError(ERPException):
    """Raised when a resource does not exist or belongs to another company"""

    status_code = 404


class ConflictError(ERPException):
    """Raised when a unique business key is already taken"""

    status_code = 409


class InsufficientPermissionsError(ERPException):
    """Raised when user lacks required permissions"""

    status_code = 403


class ValidationError(ERPException):
    """Raised when data validation fails"""

    status_code = 400


class BusinessLogicError(ERPException):
    """Raised when business rules are violated"""

    status_code = 400


class InsufficientStockError(BusinessLogicError):
    """Raised when an outbound movement exceeds the available quantity"""

    def __init__(self, available: int, requested: int):
        super().__init__(
            f"Insufficient stock. Available: {available}, Requested: {requested}"
        )
        self.available = available
        self.requested = requested
