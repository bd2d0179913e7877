"""Typed errors raised by the services and mapped to HTTP statuses at the boundary."""


class PortalError(Exception):
    """Base class for every expected failure of the portal core."""

    status_code = 500
    kind = "unknown"
    translation_key = "unknownError"
    default_message = "An unknown error occurred."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidFormDataError(PortalError):
    status_code = 400
    kind = "invalid_form_data"
    translation_key = "invalidFormDataError"
    default_message = "The provided form data is invalid."


class NotFoundError(InvalidFormDataError):
    """Zero rows matched an id owned by the caller; reported as invalid input."""

    kind = "not_found"
    translation_key = "notFoundError"
    default_message = "The requested item does not exist."


class InvalidStatusTransitionError(InvalidFormDataError):
    kind = "invalid_status_transition"
    translation_key = "invalidStatusTransitionError"
    default_message = "The requested status transition is not allowed."


class InvalidCredentialsError(PortalError):
    status_code = 401
    kind = "invalid_credentials"
    translation_key = "invalidCredentialsError"
    default_message = "The provided credentials are invalid."


class InvalidSessionError(PortalError):
    status_code = 401
    kind = "invalid_session"
    translation_key = "invalidSessionError"
    default_message = "The session is invalid or has expired."


class ForbiddenError(PortalError):
    status_code = 403
    kind = "forbidden"
    translation_key = "forbiddenError"
    default_message = "You are not allowed to perform this action."


class InvalidResetTokenError(PortalError):
    status_code = 404
    kind = "invalid_reset_token"
    translation_key = "invalidResetTokenError"
    default_message = "Token is not available or out of time."


class ConflictingSignupDataError(PortalError):
    status_code = 409
    kind = "conflicting_signup_data"
    translation_key = "conflictingSignupDataError"
    default_message = "A user with the provided details already exists."


class ConflictingApplicationError(PortalError):
    status_code = 409
    kind = "conflicting_application"
    translation_key = "conflictingApplicationError"
    default_message = "The user already has an unhandled application."


class StatusConflictError(PortalError):
    """The stored status no longer matches the status the caller expected."""

    status_code = 409
    kind = "status_conflict"
    translation_key = "statusConflictError"
    default_message = "Status has changed."


class SessionConfigurationError(PortalError):
    kind = "configuration"
    default_message = "Missing SESSION_SECRET environment variable."
