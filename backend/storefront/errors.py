"""Error taxonomy for the auth flow.

Every ``StorefrontError`` carries the HTTP status it maps to; the app renders
them as ``{"detail": ...}`` the same way ``HTTPException`` is rendered.
"""


class StorefrontError(Exception):
    status_code = 500
    detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class MissingField(StorefrontError):
    status_code = 400
    detail = "Username and password are required"


class Unauthorized(StorefrontError):
    status_code = 401
    detail = "Unauthorized"


class InvalidCredentials(StorefrontError):
    status_code = 401
    detail = "Invalid credentials"


class MissingToken(StorefrontError):
    status_code = 403
    detail = "Token is required"


class Forbidden(StorefrontError):
    status_code = 403
    detail = "Admin required"


class NotFound(StorefrontError):
    status_code = 404
    detail = "User not found"


class DuplicateUsername(StorefrontError):
    status_code = 409
    detail = "Username already exists"


# --- Token verification failures, translated to Unauthorized by the gate ---


class TokenError(Exception):
    pass


class InvalidSignature(TokenError):
    pass


class MalformedToken(TokenError):
    pass


class ExpiredToken(TokenError):
    pass
