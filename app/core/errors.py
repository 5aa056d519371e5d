"""Error taxonomy shared by authorization, services and routes.

Each error carries a short user-visible message and the HTTP status class it
maps to; the application turns them into ``{"detail": message}`` responses.
"""


class CRMError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnauthorizedError(CRMError):
    """No valid session."""

    status_code = 401

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class ForbiddenError(CRMError):
    """Valid session but insufficient role or project visibility."""

    status_code = 403

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class AuthorizationError(ForbiddenError):
    """Raised by assert_role when the session role is not in the allowed set."""

    def __init__(self, message: str = "Not authorized for this action") -> None:
        super().__init__(message)


class NotFoundError(CRMError):
    status_code = 404


class InvalidInputError(CRMError):
    """Input that parsed but is semantically invalid (unknown owner, bad dates...)."""

    status_code = 400


class ConflictError(CRMError):
    """Domain conflict, including translated storage uniqueness violations."""

    status_code = 409


class CaseAlreadyConvertedError(ConflictError):
    def __init__(self, message: str = "Case has already been converted to a project") -> None:
        super().__init__(message)
