"""
Main LinkedIn API class.

Typed read access to Voyager using session-cookie authentication.

Usage with cookies copied from a logged-in browser:

    from linkedin_voyager import Linkedin
    api = Linkedin(li_at="AQED...", jsessionid='"ajax:123..."')
    profile = api.get_profile("ada-lovelace")
    company = api.get_company("analytical-engines")

or with ``LINKEDIN_LI_AT`` / ``LINKEDIN_JSESSIONID`` in the environment:

    api = Linkedin.from_env()

Any identifier argument accepts a public handle, a URN string, or an
already parsed ``PublicHandle`` / ``Urn``.  Malformed optional fields in a
response are dropped; pass ``diagnostics=[]`` to collect what was dropped.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Tuple

from . import config
from .assembly import CONTACT_SOURCE, NETWORK_SOURCE, assemble, denormalize
from .client import Client, Transport
from .dispatch import (
    Endpoint,
    RequestPlan,
    conversations_plan,
    invitations_plan,
    resolve,
    user_profile_plan,
)
from .exceptions import (
    ChallengeError,
    EntityNotFoundError,
    LinkedInError,
    UnauthorizedError,
)
from .fields import Decoded, Diagnostic, decode, decode_list
from .models import (
    Company,
    ContactInfo,
    Conversation,
    ConversationDetails,
    Invitation,
    MemberBadges,
    MessageEvent,
    NetworkInfo,
    Profile,
    School,
    Skill,
    UserProfile,
)
from .urn import EntityKind, expect_kind, parse_identifier

logger = logging.getLogger(__name__)

_OPTIONAL_FRAGMENTS = {
    CONTACT_SOURCE: ("contact_info", Endpoint.CONTACT_INFO),
    NETWORK_SOURCE: ("network_info", Endpoint.NETWORK_INFO),
}


def _first_element(raw: Any, plan: RequestPlan) -> Dict[str, Any]:
    elements = raw.get("elements") if isinstance(raw, dict) else None
    if not elements:
        raise EntityNotFoundError(f"No {plan.endpoint} found for {plan.identifier}")
    return elements[0]


class Linkedin:
    """High-level interface to the LinkedIn Voyager API."""

    _MAX_WORKERS = 3

    def __init__(
        self,
        li_at: str = "",
        jsessionid: str = "",
        *,
        cookies=None,
        transport: Optional[Transport] = None,
        debug: bool = False,
        proxies: Optional[dict] = None,
        phone_region: Optional[str] = config.DEFAULT_PHONE_REGION,
    ):
        """
        Create a Linkedin API instance.

        Cookie values:
            Linkedin(li_at="...", jsessionid="...")

        A pre-built cookie jar:
            Linkedin(cookies=jar)

        Any other transport (tests, caching layers):
            Linkedin(transport=my_transport)
        """
        if transport is None:
            client = Client(debug=debug, proxies=proxies)
            if cookies is not None:
                client.set_cookies(cookies)
            elif li_at and jsessionid:
                client.set_session_tokens(li_at, jsessionid)
            else:
                raise UnauthorizedError("Session cookies (li_at and JSESSIONID) are required")
            transport = client
        self.transport = transport
        self.phone_region = phone_region

    @classmethod
    def from_env(cls, **kwargs) -> "Linkedin":
        return cls(config.LINKEDIN_LI_AT, config.LINKEDIN_JSESSIONID, **kwargs)

    # ── helpers ──────────────────────────────────────────────────

    def _fetch(self, plan: RequestPlan) -> Any:
        """Fetch, denormalize and (for list lookups) take the first element."""
        raw = denormalize(self.transport.fetch_raw(plan))
        if plan.unwrap_first:
            raw = _first_element(raw, plan)
        return raw

    def _fetch_optional(self, source: str, plan: RequestPlan) -> Tuple[Any, Optional[Diagnostic]]:
        """A fragment whose failure degrades the result instead of failing it."""
        try:
            return self.transport.fetch_raw(plan), None
        except (UnauthorizedError, ChallengeError):
            raise
        except LinkedInError as e:
            logger.warning("Fetching %s for %s failed: %s", plan.endpoint, plan.identifier, e)
            field = _OPTIONAL_FRAGMENTS[source][0]
            return None, Diagnostic(
                entity="Profile", field=field, raw=str(plan.identifier),
                reason="FetchFailed", message=str(e),
            )

    @staticmethod
    def _unpack(what: str, decoded: Decoded, diagnostics: Optional[List[Diagnostic]]) -> Any:
        if decoded.diagnostics:
            fields = sorted({f"{d.entity}.{d.field}" for d in decoded.diagnostics})
            logger.warning(
                "%s: dropped %d malformed value(s) in %s",
                what, len(decoded.diagnostics), ", ".join(fields),
            )
            if diagnostics is not None:
                diagnostics.extend(decoded.diagnostics)
        return decoded.value

    # ── profiles ─────────────────────────────────────────────────

    def get_profile(
        self,
        identifier: Any,
        *,
        contact_info: bool = True,
        network_info: bool = True,
        diagnostics: Optional[List[Diagnostic]] = None,
    ) -> Profile:
        """Full profile, with contact and network info fetched alongside.

        The optional fragments are fetched concurrently with the profile
        view.  If one of them fails for any reason other than
        authentication, the profile is still returned with that part left
        as ``None`` and a ``FetchFailed`` diagnostic.
        """
        ident = expect_kind(parse_identifier(identifier), EntityKind.PROFILE)
        optional = {}
        if contact_info:
            optional[CONTACT_SOURCE] = resolve(ident, Endpoint.CONTACT_INFO)
        if network_info:
            optional[NETWORK_SOURCE] = resolve(ident, Endpoint.NETWORK_INFO)
        profile_plan = resolve(ident, Endpoint.PROFILE)

        with ThreadPoolExecutor(max_workers=self._MAX_WORKERS) as pool:
            profile_future = pool.submit(self.transport.fetch_raw, profile_plan)
            futures = {
                source: pool.submit(self._fetch_optional, source, plan)
                for source, plan in optional.items()
            }
            profile_raw = profile_future.result()
            results = {source: future.result() for source, future in futures.items()}

        failures = tuple(diag for _, diag in results.values() if diag is not None)
        fragments = {source: raw for source, (raw, _) in results.items()}
        decoded = assemble(
            profile_raw,
            fragments.get(CONTACT_SOURCE),
            fragments.get(NETWORK_SOURCE),
            identity=ident,
            phone_region=self.phone_region,
        )
        decoded = Decoded(decoded.value, failures + decoded.diagnostics)
        return self._unpack(f"Profile {ident}", decoded, diagnostics)

    def get_profile_contact_info(
        self, identifier: Any, *, diagnostics: Optional[List[Diagnostic]] = None,
    ) -> ContactInfo:
        plan = resolve(identifier, Endpoint.CONTACT_INFO)
        decoded = decode(ContactInfo, self._fetch(plan), phone_region=self.phone_region)
        return self._unpack(f"Contact info {plan.identifier}", decoded, diagnostics)

    def get_profile_network_info(
        self, identifier: Any, *, diagnostics: Optional[List[Diagnostic]] = None,
    ) -> NetworkInfo:
        plan = resolve(identifier, Endpoint.NETWORK_INFO)
        decoded = decode(NetworkInfo, self._fetch(plan))
        return self._unpack(f"Network info {plan.identifier}", decoded, diagnostics)

    def get_profile_skills(
        self, identifier: Any, *, diagnostics: Optional[List[Diagnostic]] = None,
    ) -> Tuple[Skill, ...]:
        plan = resolve(identifier, Endpoint.SKILLS)
        decoded = decode_list(Skill, self._fetch(plan))
        return self._unpack(f"Skills {plan.identifier}", decoded, diagnostics)

    def get_profile_member_badges(
        self, identifier: Any, *, diagnostics: Optional[List[Diagnostic]] = None,
    ) -> MemberBadges:
        plan = resolve(identifier, Endpoint.MEMBER_BADGES)
        decoded = decode(MemberBadges, self._fetch(plan))
        return self._unpack(f"Member badges {plan.identifier}", decoded, diagnostics)

    # ── organizations ────────────────────────────────────────────

    def get_company(
        self, identifier: Any, *, diagnostics: Optional[List[Diagnostic]] = None,
    ) -> Company:
        """Company by universal name (``/company/<name>``) or company URN."""
        plan = resolve(identifier, Endpoint.COMPANY)
        decoded = decode(Company, self._fetch(plan))
        return self._unpack(f"Company {plan.identifier}", decoded, diagnostics)

    def get_school(
        self, identifier: Any, *, diagnostics: Optional[List[Diagnostic]] = None,
    ) -> School:
        """School by universal name (``/school/<name>``) or school URN."""
        plan = resolve(identifier, Endpoint.SCHOOL)
        decoded = decode(School, self._fetch(plan))
        return self._unpack(f"School {plan.identifier}", decoded, diagnostics)

    # ── messaging / invitations ──────────────────────────────────

    def get_conversations(
        self, *, diagnostics: Optional[List[Diagnostic]] = None,
    ) -> Tuple[Conversation, ...]:
        """Conversations in the inbox, most recent first as Voyager returns them."""
        decoded = decode_list(Conversation, self._fetch(conversations_plan()))
        return self._unpack("Conversations", decoded, diagnostics)

    def get_conversation_details(
        self, identifier: Any, *, diagnostics: Optional[List[Diagnostic]] = None,
    ) -> ConversationDetails:
        """The conversation held with the member identified by a profile URN."""
        plan = resolve(identifier, Endpoint.CONVERSATION_DETAILS)
        decoded = decode(ConversationDetails, self._fetch(plan))
        return self._unpack(f"Conversation with {plan.identifier}", decoded, diagnostics)

    def get_conversation(
        self, conversation_urn: Any, *, diagnostics: Optional[List[Diagnostic]] = None,
    ) -> Tuple[MessageEvent, ...]:
        """Message events of one conversation, addressed by its URN."""
        plan = resolve(conversation_urn, Endpoint.CONVERSATION)
        decoded = decode_list(MessageEvent, self._fetch(plan))
        return self._unpack(f"Conversation {plan.identifier}", decoded, diagnostics)

    def get_invitations(
        self, start: int = 0, limit: int = 3, *, diagnostics: Optional[List[Diagnostic]] = None,
    ) -> Tuple[Invitation, ...]:
        """Pending connection invitations received."""
        decoded = decode_list(Invitation, self._fetch(invitations_plan(start, limit)))
        return self._unpack("Invitations", decoded, diagnostics)

    def get_user_profile(self, *, diagnostics: Optional[List[Diagnostic]] = None) -> UserProfile:
        """The member whose session cookies this client holds."""
        decoded = decode(UserProfile, self._fetch(user_profile_plan()))
        return self._unpack("User profile", decoded, diagnostics)
