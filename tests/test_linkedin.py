"""Tests for the Linkedin facade, driven through an in-memory transport."""

import pytest

from linkedin_voyager import Linkedin
from linkedin_voyager.dispatch import Endpoint
from linkedin_voyager.exceptions import (
    ChallengeError,
    EntityNotFoundError,
    KindMismatchError,
    LinkedInRequestError,
    UnauthorizedError,
    UnsupportedIdentifierError,
)
from linkedin_voyager.urn import Urn

from conftest import PROFILE_ID, PROFILE_URN


class TestConstruction:
    def test_cookies_required(self):
        with pytest.raises(UnauthorizedError):
            Linkedin()

    def test_from_tokens(self):
        api = Linkedin("AQEDAT-test", '"ajax:42"')
        assert api.transport.session.headers["csrf-token"] == "ajax:42"


class TestGetProfile:
    def test_full_profile(self, api, transport, legacy_profile_view, contact_fragment, network_fragment):
        transport.responses.update({
            Endpoint.PROFILE: legacy_profile_view,
            Endpoint.CONTACT_INFO: contact_fragment,
            Endpoint.NETWORK_INFO: network_fragment,
        })
        diagnostics = []
        profile = api.get_profile("ada-lovelace", diagnostics=diagnostics)
        assert diagnostics == []
        assert profile.full_name == "Ada Lovelace"
        assert profile.birth_date.year == 1815
        assert profile.contact_info.twitter_handles[0].name == "countess_ada"
        assert profile.network_info.connections_count == 500
        assert transport.endpoints == {Endpoint.PROFILE, Endpoint.CONTACT_INFO, Endpoint.NETWORK_INFO}

    def test_by_urn_uses_dash_endpoint(self, api, transport, dash_profile):
        transport.responses[Endpoint.PROFILE] = dash_profile
        profile = api.get_profile(PROFILE_URN, contact_info=False, network_info=False)
        assert profile.profile_id == PROFILE_ID
        assert profile.positions[0].title == "Lead Analyst"
        (plan,) = transport.plans
        assert plan.path.startswith("/identity/dash/profiles/")

    def test_failed_optional_fragment(self, api, transport, legacy_profile_view, network_fragment):
        transport.responses.update({
            Endpoint.PROFILE: legacy_profile_view,
            Endpoint.CONTACT_INFO: LinkedInRequestError(500, "Internal Server Error"),
            Endpoint.NETWORK_INFO: network_fragment,
        })
        diagnostics = []
        profile = api.get_profile("ada-lovelace", diagnostics=diagnostics)
        assert profile.contact_info is None
        assert profile.network_info is not None
        assert [(d.field, d.reason) for d in diagnostics] == [("contact_info", "FetchFailed")]

    @pytest.mark.parametrize("error", [UnauthorizedError("expired"), ChallengeError("checkpoint")])
    def test_auth_failures_propagate(self, api, transport, legacy_profile_view, error):
        transport.responses.update({
            Endpoint.PROFILE: legacy_profile_view,
            Endpoint.CONTACT_INFO: error,
        })
        with pytest.raises(type(error)):
            api.get_profile("ada-lovelace", network_info=False)

    def test_profile_failure_propagates(self, api, transport):
        transport.responses[Endpoint.PROFILE] = LinkedInRequestError(404, "Not Found")
        with pytest.raises(LinkedInRequestError):
            api.get_profile("ada-lovelace", contact_info=False, network_info=False)

    def test_wrong_kind_fetches_nothing(self, api, transport):
        with pytest.raises(KindMismatchError):
            api.get_profile("urn:li:fsd_company:1035")
        assert transport.plans == []

    def test_decode_diagnostics_reported(self, api, transport):
        transport.responses[Endpoint.PROFILE] = {"firstName": "Ada", "industryUrn": "urn:li:fsd_geo:1"}
        transport.responses[Endpoint.CONTACT_INFO] = {"emailAddress": "not-an-email"}
        diagnostics = []
        profile = api.get_profile("ada-lovelace", network_info=False, diagnostics=diagnostics)
        assert profile.industry_urn is None
        assert profile.public_id == "ada-lovelace"
        assert [d.reason for d in diagnostics] == ["KindMismatch", "InvalidFormat"]


class TestProfileSubResources:
    def test_skills(self, api, transport):
        transport.responses[Endpoint.SKILLS] = {
            "data": {"*elements": ["urn:li:fs_skill:(ACoAAB1234567,1)"], "paging": {"total": 2}},
            "included": [
                {"entityUrn": "urn:li:fs_skill:(ACoAAB1234567,1)", "name": "Mathematics"},
                {"entityUrn": "urn:li:fs_skill:(ACoAAB1234567,2)"},
            ],
        }
        skills = api.get_profile_skills("ada-lovelace")
        assert [s.name for s in skills] == ["Mathematics"]

    def test_skills_drop_malformed(self, api, transport):
        transport.responses[Endpoint.SKILLS] = {"elements": [{"name": "Mathematics"}, {"name": 7}]}
        diagnostics = []
        skills = api.get_profile_skills("ada-lovelace", diagnostics=diagnostics)
        assert len(skills) == 1
        assert diagnostics[0].reason == "InvalidFormat"

    def test_contact_info(self, api, transport, contact_fragment):
        transport.responses[Endpoint.CONTACT_INFO] = {"data": contact_fragment}
        info = api.get_profile_contact_info(PROFILE_URN)
        assert len(info.websites) == 2
        assert transport.plans[0].path == f"/identity/profiles/{PROFILE_ID}/profileContactInfo"

    def test_network_info(self, api, transport, network_fragment):
        transport.responses[Endpoint.NETWORK_INFO] = network_fragment
        assert api.get_profile_network_info("ada-lovelace").followers_count == 1200

    def test_member_badges(self, api, transport):
        transport.responses[Endpoint.MEMBER_BADGES] = {
            "data": {"entityUrn": f"urn:li:fs_memberBadges:{PROFILE_ID}", "premium": True},
        }
        badges = api.get_profile_member_badges("ada-lovelace")
        assert badges.premium is True
        assert badges.influencer is False


class TestOrganizations:
    def test_company_by_handle(self, api, transport, company_payload):
        transport.responses[Endpoint.COMPANY] = company_payload
        company = api.get_company("analytical-engines")
        assert company.name == "Analytical Engines"
        assert company.logo_url == "https://media.example.com/logo/400.png"

    def test_company_not_found(self, api, transport):
        transport.responses[Endpoint.COMPANY] = {"elements": [], "paging": {"total": 0}}
        with pytest.raises(EntityNotFoundError):
            api.get_company("no-such-company")

    def test_company_with_profile_urn(self, api, transport):
        with pytest.raises(KindMismatchError):
            api.get_company(PROFILE_URN)
        assert transport.plans == []

    def test_school(self, api, transport):
        transport.responses[Endpoint.SCHOOL] = {
            "elements": [{
                "entityUrn": "urn:li:fs_normalized_company:2001",
                "name": "University of London",
                "universalName": "university-of-london",
            }],
        }
        school = api.get_school("university-of-london")
        assert school.entity_urn == Urn.parse("urn:li:fs_normalized_company:2001")


class TestMessaging:
    def test_conversations(self, api, transport):
        transport.responses[Endpoint.CONVERSATIONS] = {
            "elements": [
                {"entityUrn": "urn:li:fs_conversation:2-abc", "unreadCount": 1},
                {"unreadCount": 3},
            ],
        }
        diagnostics = []
        conversations = api.get_conversations(diagnostics=diagnostics)
        assert [c.conversation_id for c in conversations] == ["2-abc"]
        assert [d.reason for d in diagnostics] == ["MissingField"]

    def test_conversation_details(self, api, transport):
        transport.responses[Endpoint.CONVERSATION_DETAILS] = {
            "elements": [{"entityUrn": "urn:li:fs_conversation:2-abc", "read": True}],
        }
        details = api.get_conversation_details(PROFILE_URN)
        assert details.read is True
        assert details.latest_event is None

    def test_conversation_details_by_handle(self, api):
        with pytest.raises(UnsupportedIdentifierError):
            api.get_conversation_details("ada-lovelace")

    def test_invitations(self, api, transport):
        transport.responses[Endpoint.INVITATIONS] = {
            "elements": [{
                "invitation": {
                    "entityUrn": "urn:li:fs_relInvitation:6789",
                    "sharedSecret": "s3cret",
                    "invitationType": "CONNECTION",
                },
            }],
        }
        (invitation,) = api.get_invitations(limit=10)
        assert invitation.invitation_type == "CONNECTION"
        assert ("count", "10") in transport.plans[0].params

    def test_conversation_events(self, api, transport):
        transport.responses[Endpoint.CONVERSATION] = {
            "elements": [
                {
                    "entityUrn": "urn:li:fs_event:(2-abc,5)",
                    "createdAt": 1700000000000,
                    "subtype": "MEMBER_TO_MEMBER",
                    "eventContent": {
                        "com.linkedin.voyager.messaging.event.MessageEvent": {
                            "attributedBody": {"text": "Dear Mr Babbage"},
                        },
                    },
                },
                {"entityUrn": "urn:li:fs_event:(2-abc,6)", "createdAt": "yesterday"},
            ],
        }
        diagnostics = []
        first, second = api.get_conversation("urn:li:fs_conversation:2-abc", diagnostics=diagnostics)
        assert first.body == "Dear Mr Babbage"
        assert second.created_at is None
        assert [d.reason for d in diagnostics] == ["InvalidFormat"]
        assert transport.plans[0].path == "/messaging/conversations/2-abc/events"

    def test_conversation_needs_conversation_urn(self, api, transport):
        with pytest.raises(KindMismatchError):
            api.get_conversation(PROFILE_URN)
        assert transport.plans == []


class TestUserProfile:
    def test_me(self, api, transport):
        transport.responses[Endpoint.USER_PROFILE] = {
            "data": {"plainId": 424242, "premiumSubscriber": False, "*miniProfile": f"urn:li:fs_miniProfile:{PROFILE_ID}"},
            "included": [{
                "entityUrn": f"urn:li:fs_miniProfile:{PROFILE_ID}",
                "publicIdentifier": "ada-lovelace",
                "firstName": "Ada",
                "lastName": "Lovelace",
            }],
        }
        me = api.get_user_profile()
        assert me.plain_id == 424242
        assert me.premium_subscriber is False
        assert me.mini_profile.full_name == "Ada Lovelace"
        assert me.mini_profile.entity_urn.id == PROFILE_ID
        assert transport.plans[0].uri == "/me"

    def test_profile_by_member_urn_fetches_nothing(self, api, transport):
        with pytest.raises(UnsupportedIdentifierError):
            api.get_profile("urn:li:member:424242")
        assert transport.plans == []
