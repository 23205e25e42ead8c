"""
Error taxonomy.

Every failure that reaches a client is one of these. Routes and services raise
them; the handlers registered in main.py render them as {"message": ...}.
Upstream errors keep a generic message for the client - the real cause is
logged where it happens.
"""


class CareerCatalystError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CareerCatalystError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(CareerCatalystError):
    status_code = 401
    default_message = "Invalid or expired token"


class PermissionDeniedError(CareerCatalystError):
    status_code = 403
    default_message = "Not allowed for this account type"


class NotFoundError(CareerCatalystError):
    status_code = 404
    default_message = "Not found"


class DuplicateError(CareerCatalystError):
    status_code = 400
    default_message = "Already exists"


class UpstreamGenerationError(CareerCatalystError):
    default_message = "Error generating career guidance. Please try again."


class UpstreamSearchError(CareerCatalystError):
    default_message = "Error fetching LinkedIn profiles"


class RenderError(CareerCatalystError):
    default_message = "Error generating roadmap PDF"


class InternalError(CareerCatalystError):
    pass
