from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""

    code = "DOMAIN_ERROR"


class ConfigurationError(RuntimeError):
    """Required configuration is missing or inconsistent."""


class ValidationError(DomainError):
    """Malformed or missing input."""

    code = "VALIDATION_ERROR"


class InvalidEmailError(ValidationError):
    code = "INVALID_EMAIL"


class WeakPasswordError(ValidationError):
    """Password violates one or more policy rules."""

    code = "WEAK_PASSWORD"

    def __init__(self, message: str, details: list[str]):
        super().__init__(message)
        self.details = details


class EmptyPasswordError(ValidationError):
    """Password is empty or whitespace only."""


class EmailAlreadyExistsError(DomainError):
    code = "USER_EXISTS"


class EmailTakenError(DomainError):
    """Email belongs to another account."""

    code = "EMAIL_TAKEN"


class InvalidCredentialsError(DomainError):
    code = "INVALID_CREDENTIALS"


class EmailNotVerifiedError(DomainError):
    code = "EMAIL_NOT_VERIFIED"


class InvalidVerificationTokenError(DomainError):
    code = "INVALID_TOKEN"


class AlreadyVerifiedError(DomainError):
    code = "ALREADY_VERIFIED"


class RefreshSessionInvalidError(DomainError):
    code = "UNAUTHORIZED"


class GoogleTokenValidationError(DomainError):
    code = "UNAUTHORIZED"


class InvalidCurrentPasswordError(DomainError):
    code = "INVALID_CURRENT_PASSWORD"


class SamePasswordError(DomainError):
    code = "SAME_PASSWORD"


class UserNotFoundError(DomainError):
    code = "USER_NOT_FOUND"


class PremiumRequiredError(DomainError):
    code = "PREMIUM_REQUIRED"


class TokenError(DomainError):
    """Base for signed token failures."""

    code = "INVALID_TOKEN"


class TokenExpiredError(TokenError):
    pass


class TokenInvalidError(TokenError):
    pass


class WrongTokenTypeError(TokenError):
    pass


class EmailDeliveryError(RuntimeError):
    """Outbound email could not be delivered."""
