from rest_framework import status


class BusinessRuleError(Exception):
    """Raised by domain services when a request violates a business rule"""

    def __init__(self, message, status_code=status.HTTP_400_BAD_REQUEST):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
