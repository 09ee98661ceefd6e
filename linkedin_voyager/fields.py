"""
Raw field mapping: how Voyager JSON keys map onto typed model fields.

Every decodable model field is annotated with a ``Raw`` marker::

    title: Annotated[Optional[str], Raw("title")] = None
    time_period: Annotated[Optional[TimePeriod], Raw("timePeriod", "dateRange", codec=PERIOD)] = None

``Raw`` lists the keys the field may arrive under, preferred first, and the
codec that turns the raw value into the typed one (and back).  A key may be
a ``/``-separated path into nested objects, or ``SELF`` for codecs that read
several keys of the enclosing object.

Decoding rules:

- a key that is absent or ``null`` means "not provided";
- a required field that is not provided raises MissingFieldError;
- a value that fails its codec aborts a required field, but only drops an
  optional one: the failure is recorded as a Diagnostic and decoding goes on;
- list elements are dropped individually the same way;
- an entity whose own ``entity_urn`` names another kind of entity is not
  that entity: the KindMismatchError is never downgraded to a Diagnostic;
- SchemaError (unknown array element type) is never recovered.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict

from .dates import PartialDate, TimePeriod
from .exceptions import (
    InvalidFormatError,
    KindMismatchError,
    MissingFieldError,
    ParseError,
    UnknownDiscriminantError,
)
from .scalars import PhoneNumber, ValidatedScalar
from .urn import EntityKind, Urn

logger = logging.getLogger(__name__)

SELF = "."
_MISSING = object()


# ── diagnostics side channel ─────────────────────────────────────

class Diagnostic(BaseModel):
    """A malformed optional value that was dropped during decoding."""

    model_config = ConfigDict(frozen=True)

    entity: str
    field: str
    raw: Any = None
    reason: str
    message: str = ""


class Decoded(NamedTuple):
    value: Any
    diagnostics: Tuple[Diagnostic, ...] = ()


class DecodeContext:
    """Per-decode state: collected diagnostics and the current position."""

    def __init__(self, *, phone_region: Optional[str] = None):
        self.phone_region = phone_region
        self.diagnostics: List[Diagnostic] = []
        self._stack: List[Tuple[str, str]] = []

    @contextmanager
    def at(self, entity: str, field: str):
        self._stack.append((entity, field))
        try:
            yield
        finally:
            self._stack.pop()

    @property
    def location(self) -> Tuple[str, str]:
        return self._stack[-1] if self._stack else ("", "")

    def report(self, raw: Any, reason: str, message: str = "") -> None:
        entity, field = self.location
        logger.debug("Dropped %s.%s (%s): %s", entity, field, reason, message)
        self.diagnostics.append(
            Diagnostic(entity=entity, field=field, raw=raw, reason=reason, message=message)
        )

    def report_error(self, raw: Any, exc: ParseError) -> None:
        self.report(raw, exc.code, str(exc))


# ── codecs ───────────────────────────────────────────────────────

class Codec:
    """Converts one raw JSON value to its typed form and back."""

    def decode(self, raw: Any, ctx: DecodeContext) -> Any:
        return raw

    def encode(self, value: Any) -> Any:
        return value


class Text(Codec):
    def decode(self, raw, ctx):
        if not isinstance(raw, str):
            raise InvalidFormatError("text", raw, "expected a string")
        return raw


class LocalizedText(Text):
    """Plain string, ``{"text": ...}`` or a ``{"en_US": ...}`` locale map."""

    preferred = "en_US"

    def decode(self, raw, ctx):
        if isinstance(raw, Mapping):
            if "text" in raw:
                return super().decode(raw["text"], ctx)
            if self.preferred in raw:
                return super().decode(raw[self.preferred], ctx)
            if raw:
                return super().decode(raw[sorted(raw)[0]], ctx)
        return super().decode(raw, ctx)


class Integer(Codec):
    def decode(self, raw, ctx):
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise InvalidFormatError("integer", raw, "expected an integer")
        return raw


class Boolean(Codec):
    def decode(self, raw, ctx):
        if not isinstance(raw, bool):
            raise InvalidFormatError("boolean", raw, "expected true/false")
        return raw


class Enumeration(Codec):
    def __init__(self, enum: Type[Enum]):
        self.enum = enum

    def decode(self, raw, ctx):
        try:
            return self.enum(raw)
        except ValueError as e:
            raise InvalidFormatError(self.enum.__name__, raw, "unknown value") from e

    def encode(self, value):
        return value.value


class Reference(Codec):
    """URN of one of ``kinds``; resolved objects are read through their ``entityUrn``."""

    def __init__(self, *kinds: EntityKind):
        self.kinds = kinds

    def decode(self, raw, ctx):
        if isinstance(raw, Mapping) and "entityUrn" in raw:
            raw = raw["entityUrn"]
        urn = Urn.parse(raw)
        if urn.kind not in self.kinds:
            expected = " or ".join(str(k) for k in self.kinds)
            raise KindMismatchError(expected, urn.entity_type, raw=str(urn))
        return urn

    def encode(self, value):
        return str(value)


class Scalar(Codec):
    def __init__(self, scalar: Type[ValidatedScalar]):
        self.scalar = scalar

    def decode(self, raw, ctx):
        if self.scalar is PhoneNumber:
            return PhoneNumber(raw, ctx.phone_region)
        return self.scalar(raw)

    def encode(self, value):
        return str(value)


class Date(Codec):
    def decode(self, raw, ctx):
        return PartialDate.from_fragment(raw)

    def encode(self, value):
        return value.to_fragment()


class Period(Codec):
    """TimePeriod; an end before the start is kept but reported."""

    def decode(self, raw, ctx):
        period = TimePeriod.from_raw(raw)
        if period.is_inverted:
            ctx.report(
                raw, "InvertedTimePeriod",
                f"period ends ({period.end}) before it starts ({period.start})",
            )
        return period

    def encode(self, value):
        return value.to_fragment()


class Nested(Codec):
    """Embedded object decoded with another model.

    With ``shorthand`` set, a bare string stands for an object holding just
    that field (a URN reference in place of a snapshot, a phone number
    without its type...).
    """

    def __init__(self, model: Type[BaseModel], shorthand: Optional[str] = None):
        self.model = model
        self.shorthand = shorthand

    def decode(self, raw, ctx):
        if isinstance(raw, str) and self.shorthand:
            raw = {raw_field(self.model, self.shorthand).aliases[0]: raw}
        return decode_entity(self.model, raw, ctx)

    def encode(self, value):
        return encode(value)


class Many(Codec):
    """Array of values; malformed elements are dropped one by one.

    Accepts a bare list, a collection view (``{"elements": [...], "paging":
    ...}``), or a single value standing for a one-element list.
    """

    def __init__(self, item: Codec):
        self.item = item

    @staticmethod
    def elements(raw: Any) -> List[Any]:
        if isinstance(raw, list):
            return raw
        if isinstance(raw, Mapping) and (
            "elements" in raw or "*elements" in raw or "paging" in raw
        ):
            items = raw.get("elements")
            if items is None:
                items = raw.get("*elements")
            return items if isinstance(items, list) else []
        return [raw]

    def decode(self, raw, ctx):
        out = []
        for item in self.elements(raw):
            if item is None:
                continue
            try:
                out.append(self.item.decode(item, ctx))
            except ParseError as e:
                ctx.report_error(item, e)
        return tuple(out)

    def encode(self, value):
        return [self.item.encode(v) for v in value]


class Variant(Codec):
    """Heterogeneous array element, dispatched on a discriminant.

    ``$type`` (or ``_type``) is matched against each model's ``type_marker``
    by its last dotted segment.  Without a type marker ``sniff`` picks the
    model from the keys present.  Anything unrecognized is a SchemaError.
    ``shorthand`` works as for Nested, the string becoming the object's
    ``shorthand`` key before dispatch.
    """

    def __init__(self, name: str, *models: Type[BaseModel],
                 sniff: Callable[[Mapping], Optional[Type[BaseModel]]],
                 shorthand: Optional[str] = None):
        self.name = name
        self.models = models
        self.sniff = sniff
        self.shorthand = shorthand

    @staticmethod
    def _short(marker: str) -> str:
        return marker.rsplit(".", 1)[-1]

    def expand(self, raw: Any) -> Any:
        if isinstance(raw, str) and self.shorthand:
            return {self.shorthand: raw}
        return raw

    def choose(self, raw: Any) -> Type[BaseModel]:
        if not isinstance(raw, Mapping):
            raise InvalidFormatError(self.name, raw, "expected an object")
        marker = raw.get("$type") or raw.get("_type")
        if marker:
            for model in self.models:
                if self._short(model.type_marker) == self._short(str(marker)):
                    return model
            raise UnknownDiscriminantError(self.name, marker, raw)
        model = self.sniff(raw)
        if model is None:
            raise UnknownDiscriminantError(self.name, None, raw)
        return model

    def decode(self, raw, ctx):
        raw = self.expand(raw)
        return decode_entity(self.choose(raw), raw, ctx)

    def encode(self, value):
        return {"$type": type(value).type_marker, **encode(value)}


class Custom(Codec):
    def __init__(self, decode: Callable[[Any], Any], encode: Callable[[Any], Any] = str):
        self._decode = decode
        self._encode = encode

    def decode(self, raw, ctx):
        return self._decode(raw)

    def encode(self, value):
        return self._encode(value)


TEXT = Text()
LOCALIZED_TEXT = LocalizedText()
INTEGER = Integer()
BOOLEAN = Boolean()
DATE = Date()
PERIOD = Period()


def ref(*kinds: EntityKind) -> Reference:
    return Reference(*kinds)


def nested(model: Type[BaseModel], shorthand: Optional[str] = None) -> Nested:
    return Nested(model, shorthand)


def many(item: Codec) -> Many:
    return Many(item)


# ── field table ──────────────────────────────────────────────────

class Raw:
    """Raw keys (preferred first) and codec for one model field."""

    __slots__ = ("aliases", "codec")

    def __init__(self, *aliases: str, codec: Codec = TEXT):
        if not aliases:
            raise ValueError("Raw() needs at least one key")
        self.aliases = aliases
        self.codec = codec

    def lookup(self, raw: Mapping) -> Tuple[Optional[str], Any]:
        """First alias with a non-null value, as ``(alias, value)``."""
        for alias in self.aliases:
            value = _walk(raw, alias)
            if value is not _MISSING and value is not None:
                return alias, value
        return None, _MISSING

    def __repr__(self) -> str:
        return f"Raw({', '.join(map(repr, self.aliases))})"


def _walk(raw: Mapping, alias: str) -> Any:
    if alias == SELF:
        return raw
    node: Any = raw
    for part in alias.split("/"):
        if not isinstance(node, Mapping) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _put(out: Dict[str, Any], alias: str, value: Any) -> None:
    if alias == SELF:
        out.update(value)
        return
    *parents, leaf = alias.split("/")
    node = out
    for part in parents:
        node = node.setdefault(part, {})
    node[leaf] = value


class _Entry(NamedTuple):
    name: str
    raw: Raw
    required: bool


@lru_cache(maxsize=None)
def field_table(model: Type[BaseModel]) -> Tuple[_Entry, ...]:
    """The model's Raw-annotated fields, in declaration order."""
    table = []
    for name, info in model.model_fields.items():
        marker = next((m for m in info.metadata if isinstance(m, Raw)), None)
        if marker is not None:
            table.append(_Entry(name, marker, info.is_required()))
    return tuple(table)


def raw_field(model: Type[BaseModel], name: str) -> Raw:
    for entry in field_table(model):
        if entry.name == name:
            return entry.raw
    raise KeyError(f"{model.__name__}.{name} has no raw mapping")


# ── decode / encode ──────────────────────────────────────────────

IDENTITY_FIELD = "entity_urn"


def _is_foreign_identity(name: str, error: ParseError) -> bool:
    return name == IDENTITY_FIELD and isinstance(error, KindMismatchError)


def _prepare(model: Type[BaseModel], raw: Any) -> Mapping:
    prepare = getattr(model, "prepare_raw", None)
    if prepare is not None:
        raw = prepare(raw)
    if not isinstance(raw, Mapping):
        raise InvalidFormatError(model.__name__, raw, "expected an object")
    return raw


def decode_fields(
    model: Type[BaseModel],
    raw: Any,
    ctx: DecodeContext,
    names: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Decode the provided fields of ``model`` (or just ``names``) from ``raw``."""
    raw = _prepare(model, raw)
    wanted = set(names) if names is not None else None
    entity = model.__name__
    values: Dict[str, Any] = {}
    for entry in field_table(model):
        if wanted is not None and entry.name not in wanted:
            continue
        alias, value = entry.raw.lookup(raw)
        if alias is None:
            if entry.required:
                raise MissingFieldError(entity, entry.name, entry.raw.aliases)
            continue
        with ctx.at(entity, alias):
            try:
                values[entry.name] = entry.raw.codec.decode(value, ctx)
            except ParseError as e:
                if entry.required or _is_foreign_identity(entry.name, e):
                    raise e.locate(entity, alias)
                ctx.report_error(value, e)
    return values


def decode_entity(model: Type[BaseModel], raw: Any, ctx: DecodeContext) -> BaseModel:
    return model(**decode_fields(model, raw, ctx))


def decode(model: Type[BaseModel], raw: Any, *, phone_region: Optional[str] = None) -> Decoded:
    """Decode one entity; returns the value alongside dropped-field diagnostics."""
    ctx = DecodeContext(phone_region=phone_region)
    value = decode_entity(model, raw, ctx)
    return Decoded(value, tuple(ctx.diagnostics))


def decode_list(model: Type[BaseModel], raw: Any, *, phone_region: Optional[str] = None) -> Decoded:
    """Decode a list or collection view of ``model`` elements."""
    ctx = DecodeContext(phone_region=phone_region)
    with ctx.at(model.__name__, "elements"):
        values = Many(Nested(model)).decode(raw, ctx)
    return Decoded(values, tuple(ctx.diagnostics))


def encode(entity: BaseModel) -> Dict[str, Any]:
    """Raw-key dict for ``entity``, using each field's preferred key."""
    out: Dict[str, Any] = {}
    for entry in field_table(type(entity)):
        value = getattr(entity, entry.name)
        if value is None:
            continue
        _put(out, entry.raw.aliases[0], entry.raw.codec.encode(value))
    return out
