"""Typed errors for key handling, token issuance, and token validation."""

HTTP_UNAUTHORIZED = 401
HTTP_SERVER_ERROR = 500


class PulseAuthError(Exception):
    """Base class for every error raised by the signing core."""

    code = "auth_error"
    status_code = HTTP_SERVER_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(PulseAuthError):
    """Key material or key id absent or unusable as configured."""

    code = "configuration_error"


class MissingPrivateKeyError(ConfigurationError):
    """No private key is configured."""

    code = "missing_private_key"


class KeyFormatError(PulseAuthError):
    """PEM data could not be parsed."""

    code = "invalid_key_format"


class UnsupportedKeyTypeError(PulseAuthError):
    code = "unsupported_key_type"


class KeySizeError(PulseAuthError):
    """RSA modulus shorter than 2048 bits."""

    code = "invalid_key_size"


class SigningError(PulseAuthError):
    code = "signing_error"


class TokenValidationError(PulseAuthError):
    """Base class for validation-path failures."""

    code = "invalid_token"
    status_code = HTTP_UNAUTHORIZED


class VerificationError(TokenValidationError):
    code = "verification_failed"


class ExpiredTokenError(TokenValidationError):
    code = "token_expired"


class TokenNotYetValidError(TokenValidationError):
    code = "token_not_yet_valid"


class MalformedTokenError(TokenValidationError):
    code = "malformed_token"
