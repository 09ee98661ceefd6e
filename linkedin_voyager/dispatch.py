"""
Resolution dispatcher: identifier + endpoint -> request plan.

Voyager addresses the same entity differently depending on what the caller
holds.  A public handle goes through the legacy ``/identity/profiles/<handle>``
paths or a ``universalName`` query; a URN goes straight to its entity.  The
plan is a plain value: no request is made here, and the same input always
yields the same plan.
"""

from enum import Enum
from typing import Any, Optional, Tuple
from urllib.parse import quote, urlencode

from pydantic import BaseModel, ConfigDict

from .exceptions import UnsupportedIdentifierError
from .urn import EntityKind, Identifier, PublicHandle, Urn, parse_identifier

PROFILE_DECORATION = "com.linkedin.voyager.dash.deco.identity.profile.FullProfileWithEntities-93"
COMPANY_DECORATION = "com.linkedin.voyager.deco.organization.web.WebFullCompanyMain-12"

MESSAGING_KEY_VERSION = "LEGACY_INBOX"
SKILLS_PAGE_SIZE = 100
INVITATIONS_PAGE_SIZE = 100


class Endpoint(str, Enum):
    PROFILE = "profile"
    CONTACT_INFO = "contact_info"
    NETWORK_INFO = "network_info"
    SKILLS = "skills"
    MEMBER_BADGES = "member_badges"
    COMPANY = "company"
    SCHOOL = "school"
    CONVERSATIONS = "conversations"
    CONVERSATION_DETAILS = "conversation_details"
    CONVERSATION = "conversation"
    INVITATIONS = "invitations"
    USER_PROFILE = "user_profile"

    def __str__(self) -> str:
        return self.value


# entity kind a URN must have for each identifier-addressed endpoint
ENDPOINT_KINDS = {
    Endpoint.PROFILE: EntityKind.PROFILE,
    Endpoint.CONTACT_INFO: EntityKind.PROFILE,
    Endpoint.NETWORK_INFO: EntityKind.PROFILE,
    Endpoint.SKILLS: EntityKind.PROFILE,
    Endpoint.MEMBER_BADGES: EntityKind.PROFILE,
    Endpoint.COMPANY: EntityKind.COMPANY,
    Endpoint.SCHOOL: EntityKind.SCHOOL,
    Endpoint.CONVERSATION_DETAILS: EntityKind.PROFILE,
    Endpoint.CONVERSATION: EntityKind.CONVERSATION,
}

DASH_PROFILE_TAG = "fsd_profile"
# numeric member ids: no profile endpoint is addressed by them
MEMBER_TAG = "member"

# /identity/profiles/<id>/<suffix>
_PROFILE_SUFFIXES = {
    Endpoint.PROFILE: "profileView",
    Endpoint.CONTACT_INFO: "profileContactInfo",
    Endpoint.NETWORK_INFO: "networkinfo",
    Endpoint.SKILLS: "skills",
    Endpoint.MEMBER_BADGES: "memberBadges",
}


class RequestPlan(BaseModel):
    """Where and how to fetch one raw fragment."""

    model_config = ConfigDict(frozen=True)

    endpoint: Endpoint
    path: str
    params: Tuple[Tuple[str, str], ...] = ()
    identifier: Optional[Any] = None
    unwrap_first: bool = False

    @property
    def query_string(self) -> str:
        # restli list syntax List(...) and URNs must stay readable
        return urlencode(self.params, safe="(),:")

    @property
    def uri(self) -> str:
        if not self.params:
            return self.path
        return f"{self.path}?{self.query_string}"


def _handle_path(handle: PublicHandle) -> str:
    return quote(handle.value, safe="")


def _dash_profile_urn(urn: Urn) -> Urn:
    """fs_profile / fs_miniProfile URNs share the member id with the dash one."""
    if urn.entity_type == DASH_PROFILE_TAG:
        return urn
    return Urn.build(DASH_PROFILE_TAG, urn.id)


def resolve(identifier: Any, endpoint: Endpoint) -> RequestPlan:
    """Plan the request for ``endpoint`` addressed by ``identifier``.

    Raises UnrecognizedIdentifierError for malformed identifiers,
    KindMismatchError when a URN names another kind of entity, and
    UnsupportedIdentifierError when the identifier form cannot address the
    endpoint at all.
    """
    endpoint = Endpoint(endpoint)
    if endpoint not in ENDPOINT_KINDS:
        raise UnsupportedIdentifierError(identifier, endpoint)
    ident: Identifier = parse_identifier(identifier)
    if isinstance(ident, Urn):
        ident.expect(ENDPOINT_KINDS[endpoint])
        if ident.entity_type == MEMBER_TAG:
            raise UnsupportedIdentifierError(ident, endpoint)

    if endpoint is Endpoint.PROFILE and isinstance(ident, Urn):
        dash_urn = _dash_profile_urn(ident)
        return RequestPlan(
            endpoint=endpoint,
            path=f"/identity/dash/profiles/{quote(str(dash_urn), safe='')}",
            params=(("decorationId", PROFILE_DECORATION),),
            identifier=ident,
        )

    if endpoint in _PROFILE_SUFFIXES:
        key = _handle_path(ident) if isinstance(ident, PublicHandle) else ident.id
        params: Tuple[Tuple[str, str], ...] = ()
        if endpoint is Endpoint.SKILLS:
            params = (("count", str(SKILLS_PAGE_SIZE)), ("start", "0"))
        return RequestPlan(
            endpoint=endpoint,
            path=f"/identity/profiles/{key}/{_PROFILE_SUFFIXES[endpoint]}",
            params=params,
            identifier=ident,
        )

    if endpoint in (Endpoint.COMPANY, Endpoint.SCHOOL):
        if isinstance(ident, PublicHandle):
            return RequestPlan(
                endpoint=endpoint,
                path="/organization/companies",
                params=(
                    ("decorationId", COMPANY_DECORATION),
                    ("q", "universalName"),
                    ("universalName", ident.value),
                ),
                identifier=ident,
                unwrap_first=True,
            )
        collection = "companies" if endpoint is Endpoint.COMPANY else "schools"
        return RequestPlan(
            endpoint=endpoint,
            path=f"/organization/{collection}/{quote(ident.id, safe='')}",
            params=(("decorationId", COMPANY_DECORATION),) if endpoint is Endpoint.COMPANY else (),
            identifier=ident,
        )

    if not isinstance(ident, Urn):
        raise UnsupportedIdentifierError(ident, endpoint)

    if endpoint is Endpoint.CONVERSATION:
        return RequestPlan(
            endpoint=endpoint,
            path=f"/messaging/conversations/{quote(ident.id, safe='')}/events",
            identifier=ident,
        )

    # Endpoint.CONVERSATION_DETAILS: the thread is found by participant URN
    return RequestPlan(
        endpoint=endpoint,
        path="/messaging/conversations",
        params=(
            ("keyVersion", MESSAGING_KEY_VERSION),
            ("q", "participants"),
            ("recipients", f"List({ident.id})"),
        ),
        identifier=ident,
        unwrap_first=True,
    )


def conversations_plan() -> RequestPlan:
    return RequestPlan(
        endpoint=Endpoint.CONVERSATIONS,
        path="/messaging/conversations",
        params=(("keyVersion", MESSAGING_KEY_VERSION),),
    )


def user_profile_plan() -> RequestPlan:
    """The signed-in member's own mini profile."""
    return RequestPlan(endpoint=Endpoint.USER_PROFILE, path="/me")


def invitations_plan(start: int = 0, limit: int = 3) -> RequestPlan:
    """Received connection invitations, ``limit`` per page from ``start``."""
    return RequestPlan(
        endpoint=Endpoint.INVITATIONS,
        path="/relationships/invitationViews",
        params=(
            ("start", str(start)),
            ("count", str(min(limit, INVITATIONS_PAGE_SIZE))),
            ("includeInsights", "true"),
            ("q", "receivedInvitation"),
        ),
    )
