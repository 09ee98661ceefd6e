"""
Profile aggregation: merging separately fetched fragments into one Profile.

A full profile takes up to three Voyager calls: the profile view, contact
info and network info.  Each response is denormalized (``included``
entities substituted for their URN references), decoded against the slice
of the Profile schema that fragment is responsible for, and handed to a
ProfileBuilder.  Fragments must contribute disjoint fields: the same field
from two fragments is a ConflictingFieldError, never a silent overwrite.

Fragments that were not fetched are passed as ``None``.  That is different
from a fetched but empty fragment: ``contact_fragment={}`` yields an empty
ContactInfo, ``contact_fragment=None`` leaves ``contact_info`` unset.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Set

from .dispatch import MEMBER_TAG
from .exceptions import ConflictingFieldError
from .fields import DecodeContext, Decoded, decode_entity, decode_fields, field_table
from .models import ContactInfo, NetworkInfo, Profile
from .urn import EntityKind, Identifier, PublicHandle, Urn, expect_kind, parse_identifier

logger = logging.getLogger(__name__)

PROFILE_SOURCE = "profile"
CONTACT_SOURCE = "contact"
NETWORK_SOURCE = "network"
IDENTITY_SOURCE = "identity"

# profile fields the contact-info endpoint also carries
CONTACT_PROFILE_FIELDS = ("birth_date", "address")
PROFILE_FIELDS = tuple(entry.name for entry in field_table(Profile))


# ── denormalization ──────────────────────────────────────────────

def denormalize(raw: Any) -> Any:
    """Unwrap ``data`` and substitute ``included`` entities for ``*key`` references.

    A ``*key`` holding a URN (or a list of them) is replaced by the included
    entity, and ``key`` is set to the same value when the object lacks it.
    References without a matching included entity are left as URNs.
    """
    if not isinstance(raw, Mapping):
        return raw
    data = raw.get("data", raw)
    included = raw.get("included") or []
    if not included:
        return data
    lookup = {
        item["entityUrn"]: item
        for item in included
        if isinstance(item, Mapping) and "entityUrn" in item
    }
    return _resolve(data, lookup, False, frozenset())


def _resolve(obj: Any, lookup: Dict[str, Any], is_ref: bool, seen: frozenset) -> Any:
    if isinstance(obj, str):
        if is_ref and obj in lookup and obj not in seen:
            return _resolve(lookup[obj], lookup, False, seen | {obj})
        return obj
    if isinstance(obj, Mapping):
        out = {}
        for k, v in obj.items():
            kr = k.startswith("*")
            rv = _resolve(v, lookup, kr, seen)
            out[k] = rv
            if kr:
                bare = k[1:]
                if bare not in obj:
                    out[bare] = rv
        return out
    if isinstance(obj, list):
        return [_resolve(i, lookup, is_ref, seen) for i in obj]
    return obj


# ── builder ──────────────────────────────────────────────────────

class ProfileBuilder:
    """Collects Profile fields from fragments, rejecting duplicates."""

    def __init__(self):
        self._values: Dict[str, Any] = {}
        self._sources: Dict[str, str] = {}

    def contribute(self, source: str, values: Mapping[str, Any]) -> None:
        for name, value in values.items():
            if name in self._values:
                raise ConflictingFieldError("Profile", name, self._sources[name], source)
            self._values[name] = value
            self._sources[name] = source

    def value_of(self, name: str) -> Any:
        return self._values.get(name)

    def setdefault(self, source: str, name: str, value: Any) -> None:
        """Fill ``name`` only when no fragment provided it."""
        if name not in self._values:
            self._values[name] = value
            self._sources[name] = source

    def source_of(self, name: str) -> Optional[str]:
        return self._sources.get(name)

    @property
    def fields(self) -> Set[str]:
        return set(self._values)

    def build(self) -> Profile:
        return Profile(**self._values)


def assemble(
    profile_fragment: Any,
    contact_fragment: Any = None,
    network_fragment: Any = None,
    *,
    identity: Optional[Any] = None,
    phone_region: Optional[str] = None,
) -> Decoded:
    """Build a Profile from its fragments.

    ``identity`` is the handle or URN the profile was requested by.  A URN
    of another entity kind is rejected before anything is decoded; a
    matching one fills ``entity_urn`` / ``public_id`` when the fragments
    leave them out.  A profile fragment that names another entity (a
    foreign kind, or another member's id) is rejected too.

    Returns ``Decoded(profile, diagnostics)``.  The result depends only on
    the fragments passed, not on the order they were fetched in.
    """
    ident: Optional[Identifier] = None
    if identity is not None:
        ident = expect_kind(parse_identifier(identity), EntityKind.PROFILE)

    ctx = DecodeContext(phone_region=phone_region)
    builder = ProfileBuilder()

    builder.contribute(
        PROFILE_SOURCE,
        decode_fields(Profile, denormalize(profile_fragment), ctx, PROFILE_FIELDS),
    )

    if contact_fragment is not None:
        contact = denormalize(contact_fragment)
        builder.contribute(
            CONTACT_SOURCE,
            decode_fields(Profile, contact, ctx, CONTACT_PROFILE_FIELDS),
        )
        builder.contribute(CONTACT_SOURCE, {"contact_info": decode_entity(ContactInfo, contact, ctx)})

    if network_fragment is not None:
        network = denormalize(network_fragment)
        builder.contribute(NETWORK_SOURCE, {"network_info": decode_entity(NetworkInfo, network, ctx)})

    if isinstance(ident, Urn):
        claimed = builder.value_of("entity_urn")
        # fs_profile and fsd_profile URNs of one member share the id;
        # urn:li:member ids are numeric and cannot be compared
        if (claimed is not None and MEMBER_TAG not in (claimed.entity_type, ident.entity_type)
                and claimed.id != ident.id):
            raise ConflictingFieldError(
                "Profile", "entity_urn", builder.source_of("entity_urn"), IDENTITY_SOURCE,
            )
        builder.setdefault(IDENTITY_SOURCE, "entity_urn", ident)
    elif isinstance(ident, PublicHandle):
        builder.setdefault(IDENTITY_SOURCE, "public_id", ident.value)

    profile = builder.build()
    if ctx.diagnostics:
        logger.debug("Profile %s: %d field(s) dropped", profile.full_name, len(ctx.diagnostics))
    return Decoded(profile, tuple(ctx.diagnostics))

