"""
Validated scalar types: email addresses, phone numbers, URLs and locales.

Each type wraps a raw string that passed its grammar at construction time;
there is no other way to obtain an instance.  Failures raise
InvalidFormatError carrying the kind and the offending raw value.
"""

import logging
import string
from typing import Any, ClassVar, Mapping, Optional

import phonenumbers
import pycountry
from pydantic import AnyUrl, TypeAdapter, ValidationError
from pydantic_core import core_schema

from .exceptions import InvalidFormatError

logger = logging.getLogger(__name__)

_WHITESPACE = frozenset(string.whitespace)
_URL_ADAPTER = TypeAdapter(AnyUrl)


class ValidatedScalar:
    """Base for string values checked against a kind-specific grammar."""

    kind: ClassVar[str] = "scalar"

    __slots__ = ("value", "raw")

    def __init__(self, raw: Any):
        if isinstance(raw, ValidatedScalar):
            raw = raw.raw
        if not isinstance(raw, str):
            raise InvalidFormatError(self.kind, raw, "not a string")
        object.__setattr__(self, "value", self._validate(raw))
        object.__setattr__(self, "raw", raw)

    @classmethod
    def parse(cls, raw: Any):
        return cls(raw)

    def _validate(self, raw: str) -> str:
        """Return the canonical value or raise InvalidFormatError."""
        raise NotImplementedError

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        return (type(self), (self.raw,))

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash((type(self), self.value))

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        from_str = core_schema.chain_schema([
            core_schema.str_schema(),
            core_schema.no_info_plain_validator_function(cls),
        ])
        return core_schema.json_or_python_schema(
            json_schema=from_str,
            python_schema=core_schema.union_schema([
                core_schema.is_instance_schema(cls),
                from_str,
            ]),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


class EmailAddress(ValidatedScalar):
    """``local@domain.tld``: one ``@``, both sides non-empty, dotted domain."""

    kind = "email address"

    def _validate(self, raw: str) -> str:
        if any(ch in _WHITESPACE for ch in raw):
            raise InvalidFormatError(self.kind, raw, "contains whitespace")
        if raw.count("@") != 1:
            raise InvalidFormatError(self.kind, raw, "expected exactly one '@'")
        local, domain = raw.split("@")
        if not local or not domain:
            raise InvalidFormatError(self.kind, raw, "empty local part or domain")
        labels = domain.split(".")
        if len(labels) < 2 or not all(labels):
            raise InvalidFormatError(self.kind, raw, "domain needs a dot-separated name")
        return raw

    @property
    def domain(self) -> str:
        return self.value.split("@")[1]


class PhoneNumber(ValidatedScalar):
    """Phone number normalized to E.164 (``+16502530000``).

    Numbers without a leading ``+`` need a region hint; without one they
    cannot be placed in the international numbering plan and are rejected.
    """

    kind = "phone number"

    __slots__ = ("region",)

    def __init__(self, raw: Any, region: Optional[str] = None):
        object.__setattr__(self, "region", region)
        super().__init__(raw)

    def _validate(self, raw: str) -> str:
        try:
            number = phonenumbers.parse(raw, self.region)
        except phonenumbers.NumberParseException as e:
            raise InvalidFormatError(self.kind, raw, str(e)) from e
        if not phonenumbers.is_valid_number(number):
            raise InvalidFormatError(self.kind, raw, "not a valid number")
        return phonenumbers.format_number(number, phonenumbers.PhoneNumberFormat.E164)

    def __reduce__(self):
        return (type(self), (self.raw, self.region))

    @property
    def country_code(self) -> int:
        return phonenumbers.parse(self.value).country_code


class Url(ValidatedScalar):
    """Absolute http(s) URL with a host; the raw text is kept as the value."""

    kind = "url"
    schemes: ClassVar[frozenset] = frozenset({"http", "https"})

    def _validate(self, raw: str) -> str:
        if raw != raw.strip():
            raise InvalidFormatError(self.kind, raw, "surrounding whitespace")
        try:
            parsed = _URL_ADAPTER.validate_python(raw)
        except ValidationError as e:
            raise InvalidFormatError(self.kind, raw, e.errors()[0]["msg"]) from e
        if parsed.scheme not in self.schemes:
            raise InvalidFormatError(self.kind, raw, f"unsupported scheme {parsed.scheme!r}")
        if not parsed.host:
            raise InvalidFormatError(self.kind, raw, "missing host")
        return raw

    @property
    def host(self) -> str:
        return _URL_ADAPTER.validate_python(self.value).host


class Locale(ValidatedScalar):
    """Language with an optional country: ``en``, ``en_US`` or ``en-US``.

    The language must be an ISO 639-1 code and the country an ISO 3166
    alpha-2 code.  The canonical value is ``ll`` or ``ll_CC``.  Voyager's
    object form ``{"language": "en", "country": "US"}`` is accepted too.
    """

    kind = "locale"

    __slots__ = ("language", "country")

    def __init__(self, raw: Any):
        if isinstance(raw, Mapping):
            language = raw.get("language")
            country = raw.get("country")
            if not isinstance(language, str) or (
                country is not None and not isinstance(country, str)
            ):
                raise InvalidFormatError(self.kind, raw, "language/country must be strings")
            raw = f"{language}_{country}" if country else language
        super().__init__(raw)

    def _validate(self, raw: str) -> str:
        language, sep, country = raw.replace("-", "_").partition("_")
        if len(language) != 2 or pycountry.languages.get(alpha_2=language.lower()) is None:
            raise InvalidFormatError(self.kind, raw, f"unknown language {language!r}")
        language = language.lower()
        if not sep:
            object.__setattr__(self, "language", language)
            object.__setattr__(self, "country", None)
            return language
        if len(country) != 2 or pycountry.countries.get(alpha_2=country.upper()) is None:
            raise InvalidFormatError(self.kind, raw, f"unknown country {country!r}")
        country = country.upper()
        object.__setattr__(self, "language", language)
        object.__setattr__(self, "country", country)
        return f"{language}_{country}"

    def to_fragment(self) -> dict:
        out = {"language": self.language}
        if self.country:
            out["country"] = self.country
        return out
