"""
Error taxonomy shared by the service and HTTP layers.

Services raise these; ``insightpro.main`` registers a single handler that
renders any ``InsightProError`` as ``{"message": ...}`` with the class's
``status_code``.
"""


class InsightProError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(InsightProError):
    status_code = 400
    default_message = "Please fill in all fields."


class Conflict(InsightProError):
    status_code = 400
    default_message = "E-mail already registered."


class Unauthenticated(InsightProError):
    status_code = 401
    default_message = "Token not provided."


class Unauthorized(InsightProError):
    status_code = 401
    default_message = "Invalid credentials."


class Forbidden(InsightProError):
    status_code = 403
    default_message = "Invalid token."


class NotFound(InsightProError):
    status_code = 404
    default_message = "Resource not found."


class AccountNotFound(NotFound):
    # Login reports an unknown e-mail as a bad request, not a missing resource.
    status_code = 400
    default_message = "User not found."


class InternalError(InsightProError):
    pass
