"""
Exception hierarchy for the Voyager client.

Everything raised by this package derives from LinkedInError.  Decoding
failures carry enough structured context (entity, field, raw value) to be
diagnosed without fetching the payload again.
"""

from typing import Any, Optional, Tuple


class LinkedInError(Exception):
    """Base exception for all LinkedIn operations."""


# ── decoding: field level ────────────────────────────────────────

class ParseError(LinkedInError, ValueError):
    """A raw value could not be turned into its typed form.

    Recoverable for optional fields (the field is dropped and reported as a
    Diagnostic), fatal for required ones.
    """

    code = "ParseError"

    def __init__(
        self,
        message: str,
        *,
        raw: Any = None,
        entity: Optional[str] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.raw = raw
        self.entity = entity
        self.field = field

    def locate(self, entity: str, field: str) -> "ParseError":
        """Attach the entity/field the error was raised for (first one wins)."""
        if self.entity is None:
            self.entity = entity
            self.field = field
        return self

    def __str__(self) -> str:
        if self.entity:
            return f"{self.entity}.{self.field}: {self.message}"
        return self.message


class UnrecognizedIdentifierError(ParseError):
    """String is neither a URN nor a public handle."""

    code = "UnrecognizedIdentifierFormat"

    def __init__(self, raw: Any):
        super().__init__(f"Unrecognized identifier format: {raw!r}", raw=raw)


class KindMismatchError(ParseError):
    """URN entity type does not match the kind expected at this position."""

    code = "KindMismatch"

    def __init__(self, expected: Any, actual: str, raw: Any = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected a {expected} reference, got {actual!r}", raw=raw,
        )


class UnsupportedIdentifierError(ParseError):
    """Identifier form cannot address this endpoint (e.g. a handle where only a URN works)."""

    code = "UnsupportedIdentifier"

    def __init__(self, identifier: Any, endpoint: Any):
        self.endpoint = endpoint
        super().__init__(
            f"{endpoint} cannot be looked up by {identifier!r}", raw=str(identifier),
        )


class TemporalRangeError(ParseError):
    """Year/month/day outside its range, or a day given without a month."""

    code = "TemporalRange"


class InvalidFormatError(ParseError):
    """Scalar failed the grammar of its kind (email, phone, url, locale...)."""

    code = "InvalidFormat"

    def __init__(self, kind: str, raw: Any, reason: str = ""):
        self.kind = kind
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Invalid {kind}: {raw!r}{detail}", raw=raw)


class MissingFieldError(ParseError):
    """Required field absent under every accepted key."""

    code = "MissingField"

    def __init__(self, entity: str, field: str, aliases: Tuple[str, ...]):
        self.aliases = aliases
        super().__init__(
            f"Required field missing (looked for {', '.join(aliases)})",
            entity=entity,
            field=field,
        )


# ── decoding: structural ─────────────────────────────────────────

class SchemaError(LinkedInError):
    """Payload structure cannot be decoded without guessing."""

    code = "SchemaError"

    def __init__(self, message: str, *, entity: Optional[str] = None, raw: Any = None):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.raw = raw


class UnknownDiscriminantError(SchemaError):
    """Heterogeneous array element with an unrecognized type marker."""

    code = "UnknownDiscriminant"

    def __init__(self, entity: str, discriminant: Any, raw: Any = None):
        self.discriminant = discriminant
        super().__init__(
            f"{entity}: unrecognized element type {discriminant!r}",
            entity=entity,
            raw=raw,
        )


class ConflictingFieldError(SchemaError):
    """Two fragments contributed the same aggregate field."""

    code = "ConflictingField"

    def __init__(self, entity: str, field: str, first: str, second: str):
        self.field = field
        self.sources = (first, second)
        super().__init__(
            f"{entity}.{field} provided by both {first!r} and {second!r} fragments",
            entity=entity,
        )


# ── transport (HTTP / Voyager) ───────────────────────────────────

class LinkedInRequestError(LinkedInError):
    """LinkedIn API request returned a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"Request failed ({status_code}): {message}")


class ChallengeError(LinkedInError):
    """LinkedIn presented a challenge (CAPTCHA, email verify, etc.)."""


class UnauthorizedError(LinkedInError):
    """Session cookies were rejected."""


class RateLimitError(LinkedInRequestError):
    """HTTP 429 from Voyager."""

    def __init__(self, message: str = "Too many requests", suggested_wait_time: int = 300):
        super().__init__(429, message)
        self.suggested_wait_time = suggested_wait_time


class EntityNotFoundError(LinkedInError):
    """Lookup succeeded but returned no entity (404 or an empty result list)."""


class NetworkError(LinkedInError):
    """Connection-level failure before any HTTP status was received."""
