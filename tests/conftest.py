"""Shared fixtures: raw Voyager payloads and an in-memory transport."""

import threading

import pytest

from linkedin_voyager import Linkedin
from linkedin_voyager.exceptions import LinkedInRequestError

PROFILE_ID = "ACoAAB1234567"
PROFILE_URN = f"urn:li:fsd_profile:{PROFILE_ID}"
STANDARD_WEBSITE = "com.linkedin.voyager.identity.profile.StandardWebsite"
CUSTOM_WEBSITE = "com.linkedin.voyager.identity.profile.CustomWebsite"


class FakeTransport:
    """Serves canned payloads per endpoint and records every plan it saw."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.plans = []
        self._lock = threading.Lock()

    def fetch_raw(self, plan):
        with self._lock:
            self.plans.append(plan)
        if plan.endpoint not in self.responses:
            raise LinkedInRequestError(404, f"no canned response for {plan.endpoint}")
        value = self.responses[plan.endpoint]
        if isinstance(value, Exception):
            raise value
        return value

    @property
    def endpoints(self):
        return {p.endpoint for p in self.plans}


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def api(transport):
    return Linkedin(transport=transport, phone_region=None)


@pytest.fixture
def legacy_profile_view():
    """``/identity/profiles/<handle>/profileView`` without normalization."""
    return {
        "entityUrn": f"urn:li:fs_profileView:{PROFILE_ID}",
        "profile": {
            "entityUrn": f"urn:li:fs_profile:{PROFILE_ID}",
            "firstName": "Ada",
            "lastName": "Lovelace",
            "headline": "Analyst of engines",
            "summary": "Wrote the first published algorithm.",
            "industryName": "Computer Software",
            "industryUrn": "urn:li:fs_industry:4",
            "locationName": "London",
            "geoCountryName": "United Kingdom",
            "geoLocationName": "London, England",
            "geoLocation": {"geoUrn": "urn:li:fs_geo:102257491", "postalCode": "W1"},
            "location": {"basicLocation": {"countryCode": "gb"}},
            "miniProfile": {
                "entityUrn": f"urn:li:fs_miniProfile:{PROFILE_ID}",
                "publicIdentifier": "ada-lovelace",
            },
            "defaultLocale": {"language": "en", "country": "GB"},
            "supportedLocales": [{"language": "en", "country": "GB"}],
            "student": False,
        },
        "positionGroupView": {
            "elements": [
                {
                    "entityUrn": f"urn:li:fs_positionGroup:({PROFILE_ID},1)",
                    "name": "Analytical Engines",
                    "miniCompany": {
                        "entityUrn": "urn:li:fs_miniCompany:1035",
                        "name": "Analytical Engines",
                        "universalName": "analytical-engines",
                    },
                    "timePeriod": {"startDate": {"year": 1842, "month": 9}},
                    "positions": [
                        {
                            "entityUrn": f"urn:li:fs_position:({PROFILE_ID},11)",
                            "title": "Lead Analyst",
                            "companyName": "Analytical Engines",
                            "companyUrn": "urn:li:fs_miniCompany:1035",
                            "timePeriod": {"startDate": {"year": 1843, "month": 7}},
                        },
                        {
                            "entityUrn": f"urn:li:fs_position:({PROFILE_ID},10)",
                            "title": "Translator",
                            "companyName": "Analytical Engines",
                            "companyUrn": "urn:li:fs_miniCompany:1035",
                            "timePeriod": {
                                "startDate": {"year": 1842, "month": 9},
                                "endDate": {"year": 1843, "month": 7},
                            },
                        },
                    ],
                },
                {
                    "entityUrn": f"urn:li:fs_position:({PROFILE_ID},9)",
                    "title": "Correspondent",
                    "companyName": "Royal Society",
                    "company": {
                        "miniCompany": {"entityUrn": "urn:li:fs_miniCompany:77", "name": "Royal Society"},
                        "employeeCountRange": {"start": 11, "end": 50},
                        "industries": ["Research"],
                    },
                    "timePeriod": {"startDate": {"year": 1833}, "endDate": {"year": 1842}},
                },
            ],
            "paging": {"start": 0, "count": 10, "total": 2},
        },
        "positionView": {
            "elements": [{"title": "Flat duplicate, ignored when groups are present"}],
        },
        "educationView": {
            "elements": [
                {
                    "entityUrn": f"urn:li:fs_education:({PROFILE_ID},5)",
                    "schoolName": "Home tutoring",
                    "school": {"entityUrn": "urn:li:fs_miniSchool:42", "schoolName": "Home tutoring", "active": True},
                    "degreeName": "Mathematics",
                    "activities": "Poetry, Flying machines",
                    "timePeriod": {"startDate": {"year": 1829}, "endDate": {"year": 1833}},
                },
            ],
        },
        "skillView": {"elements": [{"name": "Mathematics"}, {"name": "Translation"}]},
        "languageView": {"elements": [{"name": "French", "proficiency": "FULL_PROFESSIONAL"}]},
        "honorView": {"elements": [{"title": "Countess", "issueDate": {"year": 1838}}]},
        "certificationView": {"elements": [], "paging": {"start": 0, "count": 10, "total": 0}},
    }


@pytest.fixture
def dash_profile():
    """Normalized dash profile: references under ``*keys``, entities in ``included``."""
    return {
        "data": {
            "$type": "com.linkedin.voyager.dash.identity.profile.Profile",
            "entityUrn": PROFILE_URN,
            "publicIdentifier": "ada-lovelace",
            "firstName": "Ada",
            "lastName": "Lovelace",
            "multiLocaleHeadline": {"en_US": "Analyst"},
            "*industry": "urn:li:fsd_industry:4",
            "*profilePositionGroups": "urn:li:collectionResponse:groups",
        },
        "included": [
            {
                "entityUrn": "urn:li:collectionResponse:groups",
                "*elements": [f"urn:li:fsd_profilePositionGroup:({PROFILE_ID},1)"],
                "paging": {"start": 0, "count": 10, "total": 1},
            },
            {
                "$type": "com.linkedin.voyager.dash.identity.profile.PositionGroup",
                "entityUrn": f"urn:li:fsd_profilePositionGroup:({PROFILE_ID},1)",
                "companyName": "Analytical Engines",
                "*company": "urn:li:fsd_company:1035",
                "dateRange": {"start": {"year": 1842, "month": 9}},
                "*profilePositionInPositionGroup": "urn:li:collectionResponse:positions",
            },
            {
                "entityUrn": "urn:li:collectionResponse:positions",
                "*elements": [f"urn:li:fsd_profilePosition:({PROFILE_ID},11)"],
            },
            {
                "$type": "com.linkedin.voyager.dash.identity.profile.Position",
                "entityUrn": f"urn:li:fsd_profilePosition:({PROFILE_ID},11)",
                "title": "Lead Analyst",
                "companyName": "Analytical Engines",
                "companyUrn": "urn:li:fsd_company:1035",
                "employmentType": {"name": "Full-time"},
                "dateRange": {"start": {"year": 1843, "month": 7}},
            },
            {
                "entityUrn": "urn:li:fsd_company:1035",
                "name": "Analytical Engines",
                "universalName": "analytical-engines",
            },
            {"entityUrn": "urn:li:fsd_industry:4", "name": "Computer Software"},
        ],
    }


@pytest.fixture
def contact_fragment():
    return {
        "emailAddress": "ada@analytical.example",
        "phoneNumbers": [{"number": "+1 650-253-0000", "type": "MOBILE"}],
        "websites": [
            {"url": "https://ada.example.org", "type": {STANDARD_WEBSITE: {"category": "PERSONAL"}}},
            {"url": "https://notes.ada.example.org", "type": {CUSTOM_WEBSITE: {"label": "Notes"}}},
        ],
        "twitterHandles": [{"name": "countess_ada", "credentialId": "urn:li:member:1"}],
        "birthDateOn": {"year": 1815, "month": 12, "day": 10},
        "address": "12 St James's Square, London, England",
    }


@pytest.fixture
def network_fragment():
    return {
        "data": {
            "entityUrn": f"urn:li:fs_profileNetworkInfo:{PROFILE_ID}",
            "followersCount": 1200,
            "connectionsCount": 500,
            "distance": {"value": "DISTANCE_2"},
            "following": False,
            "followable": True,
        },
    }


@pytest.fixture
def company_payload():
    """``/organization/companies?q=universalName`` result."""
    return {
        "elements": [
            {
                "entityUrn": "urn:li:fs_normalized_company:1035",
                "name": "Analytical Engines",
                "universalName": "analytical-engines",
                "description": "Engines that weave algebraic patterns.",
                "url": "https://www.linkedin.com/company/analytical-engines",
                "companyPageUrl": "https://engines.example.com",
                "staffCount": 12,
                "staffCountRange": {"start": 11, "end": 50},
                "companyIndustries": [{"localizedName": "Computer Hardware"}],
                "followingInfo": {"followerCount": 3400},
                "headquarter": {"city": "London", "country": "GB", "line1": "1 Dorset Street"},
                "foundedOn": {"year": 1834},
                "logo": {
                    "image": {
                        "com.linkedin.common.VectorImage": {
                            "rootUrl": "https://media.example.com/logo/",
                            "artifacts": [
                                {"width": 100, "height": 100, "fileIdentifyingUrlPathSegment": "100.png"},
                                {"width": 400, "height": 400, "fileIdentifyingUrlPathSegment": "400.png"},
                            ],
                        },
                    },
                },
            },
        ],
        "paging": {"start": 0, "count": 1, "total": 1},
    }
