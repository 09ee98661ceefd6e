"""
Pydantic models for Voyager entities.

Every model is frozen.  Fields carry a ``Raw`` marker naming the JSON keys
they are read from (see ``fields``); ``Model.decode(raw)`` returns the
entity together with diagnostics for anything malformed that was dropped.

Snapshots and full fetches share one schema: a Company embedded in a
position carries a handful of fields, a Company fetched by universal name
carries many more, and both are ``Company``.
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from .dates import PartialDate, TimePeriod
from .exceptions import InvalidFormatError, ParseError, UnknownDiscriminantError
from .fields import (
    BOOLEAN,
    DATE,
    INTEGER,
    LOCALIZED_TEXT,
    PERIOD,
    SELF,
    TEXT,
    Custom,
    Decoded,
    Enumeration,
    Raw,
    Scalar,
    Variant,
    decode,
    encode,
    many,
    nested,
    ref,
)
from .scalars import EmailAddress, Locale, PhoneNumber, Url
from .urn import EntityKind, Urn

VECTOR_IMAGE = "com.linkedin.common.VectorImage"
STANDARD_WEBSITE = "com.linkedin.voyager.identity.profile.StandardWebsite"
CUSTOM_WEBSITE = "com.linkedin.voyager.identity.profile.CustomWebsite"
MESSAGING_MEMBER = "com.linkedin.voyager.messaging.MessagingMember"
MESSAGE_EVENT = "com.linkedin.voyager.messaging.event.MessageEvent"


class VoyagerModel(BaseModel):
    """Base for decoded entities."""

    model_config = ConfigDict(frozen=True)

    type_marker: ClassVar[Optional[str]] = None

    @classmethod
    def prepare_raw(cls, raw: Any) -> Any:
        """Reshape a raw object before its fields are read."""
        return raw

    @classmethod
    def decode(cls, raw: Any, *, phone_region: Optional[str] = None) -> Decoded:
        return decode(cls, raw, phone_region=phone_region)

    def encode(self) -> dict:
        return encode(self)


# ── shared building blocks ───────────────────────────────────────

class ImageArtifact(VoyagerModel):
    width: Annotated[Optional[int], Raw("width", codec=INTEGER)] = None
    height: Annotated[Optional[int], Raw("height", codec=INTEGER)] = None
    expires_at: Annotated[Optional[int], Raw("expiresAt", codec=INTEGER)] = None
    path_segment: Annotated[Optional[str], Raw("fileIdentifyingUrlPathSegment")] = None


class VectorImage(VoyagerModel):
    """Image served as a root URL plus one path segment per resolution."""

    root_url: Annotated[Optional[str], Raw("rootUrl")] = None
    artifacts: Annotated[Tuple[ImageArtifact, ...], Raw("artifacts", codec=many(nested(ImageArtifact)))] = ()

    def url(self) -> Optional[str]:
        """URL of the widest artifact."""
        if not self.root_url or not self.artifacts:
            return None
        best = max(self.artifacts, key=lambda a: a.width or 0)
        if not best.path_segment:
            return None
        return f"{self.root_url}{best.path_segment}"


LOGO_KEYS = (
    f"logo/image/{VECTOR_IMAGE}",
    f"logo/{VECTOR_IMAGE}",
    "logo/vectorImage",
    "logoResolutionResult/vectorImage",
)


class Address(VoyagerModel):
    """Postal address.

    Profiles carry it as free text which is split on commas into street,
    city and region; company headquarters come as structured objects.
    """

    line1: Annotated[Optional[str], Raw("line1")] = None
    line2: Annotated[Optional[str], Raw("line2")] = None
    city: Annotated[Optional[str], Raw("city")] = None
    geographic_area: Annotated[Optional[str], Raw("geographicArea")] = None
    postal_code: Annotated[Optional[str], Raw("postalCode")] = None
    country: Annotated[Optional[str], Raw("country")] = None

    @classmethod
    def prepare_raw(cls, raw):
        if not isinstance(raw, str):
            return raw
        parts = [p.strip() for p in raw.split(",") if p.strip()]
        if not parts:
            raise InvalidFormatError("address", raw, "empty")
        out = {"line1": parts[0]}
        if len(parts) > 1:
            out["city"] = parts[1]
        if len(parts) > 2:
            out["geographicArea"] = ", ".join(parts[2:])
        return out

    def __str__(self) -> str:
        parts = (
            self.line1, self.line2, self.city,
            self.geographic_area, self.postal_code, self.country,
        )
        return ", ".join(p for p in parts if p)


class GeoLocation(VoyagerModel):
    geo_urn: Annotated[Optional[Urn], Raw("geoUrn", "*geo", codec=ref(EntityKind.GEO))] = None
    postal_code: Annotated[Optional[str], Raw("postalCode")] = None


class BasicLocation(VoyagerModel):
    country_code: Annotated[Optional[str], Raw("basicLocation/countryCode", "countryCode")] = None
    postal_code: Annotated[Optional[str], Raw("basicLocation/postalCode", "postalCode")] = None


class EmployeeCountRange(VoyagerModel):
    start: Annotated[Optional[int], Raw("start", codec=INTEGER)] = None
    end: Annotated[Optional[int], Raw("end", codec=INTEGER)] = None

    def __str__(self) -> str:
        if self.start is not None and self.end is not None:
            return f"{self.start}-{self.end}"
        if self.start is not None:
            return f"{self.start}+"
        return ""


def _industry_name(raw: Any) -> str:
    if isinstance(raw, Mapping):
        raw = raw.get("localizedName", raw.get("name"))
    if not isinstance(raw, str):
        raise InvalidFormatError("industry", raw, "expected a name")
    return raw


# ── organizations ────────────────────────────────────────────────

class Company(VoyagerModel):
    """Company page, either a snapshot embedded elsewhere or a full fetch."""

    entity_urn: Annotated[Optional[Urn], Raw(
        "entityUrn", "objectUrn", "dashCompanyUrn", codec=ref(EntityKind.COMPANY),
    )] = None
    name: Annotated[Optional[str], Raw("name", "companyName")] = None
    universal_name: Annotated[Optional[str], Raw("universalName")] = None
    tagline: Annotated[Optional[str], Raw("tagline")] = None
    description: Annotated[Optional[str], Raw("description")] = None
    url: Annotated[Optional[Url], Raw("url", codec=Scalar(Url))] = None
    website: Annotated[Optional[Url], Raw("companyPageUrl", "websiteUrl", codec=Scalar(Url))] = None
    industries: Annotated[Tuple[str, ...], Raw(
        "industries", "companyIndustries", codec=many(Custom(_industry_name)),
    )] = ()
    company_type: Annotated[Optional[str], Raw("companyType/localizedName", "companyType")] = None
    specialities: Annotated[Tuple[str, ...], Raw("specialities", codec=many(TEXT))] = ()
    employee_count_range: Annotated[Optional[EmployeeCountRange], Raw(
        "employeeCountRange", "staffCountRange", codec=nested(EmployeeCountRange),
    )] = None
    staff_count: Annotated[Optional[int], Raw("staffCount", codec=INTEGER)] = None
    follower_count: Annotated[Optional[int], Raw(
        "followingInfo/followerCount", "followerCount", codec=INTEGER,
    )] = None
    founded_on: Annotated[Optional[PartialDate], Raw("foundedOn", codec=DATE)] = None
    headquarter: Annotated[Optional[Address], Raw("headquarter", "headquarters", codec=nested(Address))] = None
    logo: Annotated[Optional[VectorImage], Raw(*LOGO_KEYS, codec=nested(VectorImage))] = None
    active: Annotated[Optional[bool], Raw("active", codec=BOOLEAN)] = None
    showcase: Annotated[Optional[bool], Raw("showcase", codec=BOOLEAN)] = None

    @classmethod
    def prepare_raw(cls, raw):
        # positions embed {"miniCompany": {...}, "employeeCountRange": ...}
        if isinstance(raw, Mapping) and isinstance(raw.get("miniCompany"), Mapping):
            merged = dict(raw["miniCompany"])
            merged.update((k, v) for k, v in raw.items() if k != "miniCompany")
            return merged
        return raw

    @property
    def company_id(self) -> Optional[str]:
        return self.entity_urn.id if self.entity_urn else None

    @property
    def logo_url(self) -> Optional[str]:
        return self.logo.url() if self.logo else None


class School(VoyagerModel):
    """School page; full fetches come back as organization (company) URNs."""

    entity_urn: Annotated[Optional[Urn], Raw(
        "entityUrn", "objectUrn", codec=ref(EntityKind.SCHOOL, EntityKind.COMPANY),
    )] = None
    name: Annotated[Optional[str], Raw("name", "schoolName")] = None
    universal_name: Annotated[Optional[str], Raw("universalName")] = None
    description: Annotated[Optional[str], Raw("description")] = None
    url: Annotated[Optional[Url], Raw("url", codec=Scalar(Url))] = None
    website: Annotated[Optional[Url], Raw("companyPageUrl", "websiteUrl", codec=Scalar(Url))] = None
    staff_count: Annotated[Optional[int], Raw("staffCount", codec=INTEGER)] = None
    follower_count: Annotated[Optional[int], Raw(
        "followingInfo/followerCount", "followerCount", codec=INTEGER,
    )] = None
    headquarter: Annotated[Optional[Address], Raw("headquarter", codec=nested(Address))] = None
    logo: Annotated[Optional[VectorImage], Raw(*LOGO_KEYS, codec=nested(VectorImage))] = None
    active: Annotated[Optional[bool], Raw("active", codec=BOOLEAN)] = None

    @classmethod
    def prepare_raw(cls, raw):
        if isinstance(raw, Mapping) and isinstance(raw.get("miniSchool"), Mapping):
            merged = dict(raw["miniSchool"])
            merged.update((k, v) for k, v in raw.items() if k != "miniSchool")
            return merged
        return raw

    @property
    def logo_url(self) -> Optional[str]:
        return self.logo.url() if self.logo else None


# ── experience ───────────────────────────────────────────────────

class Experience(VoyagerModel):
    """A single position."""

    type_marker = "com.linkedin.voyager.dash.identity.profile.Position"

    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.POSITION))] = None
    title: Annotated[Optional[str], Raw("title", "multiLocaleTitle", codec=LOCALIZED_TEXT)] = None
    company_name: Annotated[Optional[str], Raw(
        "companyName", "multiLocaleCompanyName", codec=LOCALIZED_TEXT,
    )] = None
    company_urn: Annotated[Optional[Urn], Raw("companyUrn", "*company", codec=ref(EntityKind.COMPANY))] = None
    company: Annotated[Optional[Company], Raw(
        "company", codec=nested(Company, shorthand="entity_urn"),
    )] = None
    description: Annotated[Optional[str], Raw(
        "description", "multiLocaleDescription", codec=LOCALIZED_TEXT,
    )] = None
    time_period: Annotated[Optional[TimePeriod], Raw("timePeriod", "dateRange", codec=PERIOD)] = None
    location_name: Annotated[Optional[str], Raw("locationName", "multiLocaleLocationName", codec=LOCALIZED_TEXT)] = None
    geo_location_name: Annotated[Optional[str], Raw("geoLocationName")] = None
    geo_urn: Annotated[Optional[Urn], Raw("geoUrn", "*geo", codec=ref(EntityKind.GEO))] = None
    region: Annotated[Optional[str], Raw("region")] = None
    employment_type: Annotated[Optional[str], Raw("employmentType/name", "employmentType")] = None

    @property
    def is_current(self) -> bool:
        return self.time_period is not None and self.time_period.is_ongoing

    @property
    def company_logo_url(self) -> Optional[str]:
        return self.company.logo_url if self.company else None


class PositionGroup(VoyagerModel):
    """Consecutive positions held at one company."""

    type_marker = "com.linkedin.voyager.dash.identity.profile.PositionGroup"

    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.POSITION_GROUP))] = None
    name: Annotated[Optional[str], Raw("name", "companyName", "multiLocaleName", codec=LOCALIZED_TEXT)] = None
    company_urn: Annotated[Optional[Urn], Raw("companyUrn", "*company", codec=ref(EntityKind.COMPANY))] = None
    company: Annotated[Optional[Company], Raw(
        "company", "miniCompany", codec=nested(Company, shorthand="entity_urn"),
    )] = None
    time_period: Annotated[Optional[TimePeriod], Raw("timePeriod", "dateRange", codec=PERIOD)] = None
    positions: Annotated[Tuple[Experience, ...], Raw(
        "positions", "profilePositionInPositionGroup", codec=many(nested(Experience)),
    )] = ()

    @property
    def is_current(self) -> bool:
        return any(p.is_current for p in self.positions)


_GROUP_KEYS = ("positions", "profilePositionInPositionGroup", "*profilePositionInPositionGroup")
_POSITION_KEYS = ("title", "companyName", "timePeriod", "dateRange", "companyUrn", "company")


def _sniff_experience(raw: Mapping):
    """Pick Experience or PositionGroup from an untyped element."""
    if any(k in raw for k in _GROUP_KEYS):
        return PositionGroup
    urn = raw.get("entityUrn")
    if isinstance(urn, str):
        try:
            kind = Urn.parse(urn).kind
        except ParseError:
            kind = None
        if kind is EntityKind.POSITION_GROUP:
            return PositionGroup
        if kind is EntityKind.POSITION:
            return Experience
    if any(k in raw for k in _POSITION_KEYS):
        return Experience
    return None


EXPERIENCE_ENTRY = Variant("Experience", Experience, PositionGroup, sniff=_sniff_experience)


# ── profile sections ─────────────────────────────────────────────

class Education(VoyagerModel):
    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.EDUCATION))] = None
    school_name: Annotated[Optional[str], Raw("schoolName", "multiLocaleSchoolName", codec=LOCALIZED_TEXT)] = None
    school_urn: Annotated[Optional[Urn], Raw(
        "schoolUrn", "*school", codec=ref(EntityKind.SCHOOL, EntityKind.COMPANY),
    )] = None
    school: Annotated[Optional[School], Raw("school", codec=nested(School, shorthand="entity_urn"))] = None
    degree_name: Annotated[Optional[str], Raw("degreeName", "multiLocaleDegreeName", codec=LOCALIZED_TEXT)] = None
    degree_urn: Annotated[Optional[Urn], Raw("degreeUrn", codec=ref(EntityKind.DEGREE))] = None
    field_of_study: Annotated[Optional[str], Raw(
        "fieldOfStudy", "multiLocaleFieldOfStudy", codec=LOCALIZED_TEXT,
    )] = None
    field_of_study_urn: Annotated[Optional[Urn], Raw(
        "fieldOfStudyUrn", codec=ref(EntityKind.FIELD_OF_STUDY),
    )] = None
    grade: Annotated[Optional[str], Raw("grade")] = None
    activities: Annotated[Optional[str], Raw("activities")] = None
    description: Annotated[Optional[str], Raw("description", "multiLocaleDescription", codec=LOCALIZED_TEXT)] = None
    time_period: Annotated[Optional[TimePeriod], Raw("timePeriod", "dateRange", codec=PERIOD)] = None
    honors: Annotated[Tuple[str, ...], Raw("honors", codec=many(TEXT))] = ()
    test_scores: Annotated[Tuple[str, ...], Raw("testScores", codec=many(TEXT))] = ()

    @property
    def activities_list(self) -> Tuple[str, ...]:
        """Activities text split on commas."""
        if not self.activities:
            return ()
        return tuple(a.strip() for a in self.activities.split(",") if a.strip())


class Skill(VoyagerModel):
    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.SKILL))] = None
    name: Annotated[str, Raw("name", "multiLocaleName", codec=LOCALIZED_TEXT)]


class Certification(VoyagerModel):
    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.CERTIFICATION))] = None
    name: Annotated[str, Raw("name", "multiLocaleName", codec=LOCALIZED_TEXT)]
    authority: Annotated[Optional[str], Raw("authority", "multiLocaleAuthority", codec=LOCALIZED_TEXT)] = None
    license_number: Annotated[Optional[str], Raw("licenseNumber", "multiLocaleLicenseNumber", codec=LOCALIZED_TEXT)] = None
    url: Annotated[Optional[Url], Raw("url", codec=Scalar(Url))] = None
    time_period: Annotated[Optional[TimePeriod], Raw("timePeriod", "dateRange", codec=PERIOD)] = None
    company_urn: Annotated[Optional[Urn], Raw("companyUrn", "*company", codec=ref(EntityKind.COMPANY))] = None
    company: Annotated[Optional[Company], Raw("company", codec=nested(Company, shorthand="entity_urn"))] = None


class Course(VoyagerModel):
    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.COURSE))] = None
    name: Annotated[str, Raw("name", "multiLocaleName", codec=LOCALIZED_TEXT)]
    number: Annotated[Optional[str], Raw("number")] = None
    occupation: Annotated[Optional[str], Raw("occupation")] = None


class Honor(VoyagerModel):
    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.HONOR))] = None
    title: Annotated[str, Raw("title", "multiLocaleTitle", codec=LOCALIZED_TEXT)]
    issuer: Annotated[Optional[str], Raw("issuer", "multiLocaleIssuer", codec=LOCALIZED_TEXT)] = None
    issue_date: Annotated[Optional[PartialDate], Raw("issueDate", "issuedOn", codec=DATE)] = None
    description: Annotated[Optional[str], Raw("description", "multiLocaleDescription", codec=LOCALIZED_TEXT)] = None
    occupation: Annotated[Optional[str], Raw("occupation")] = None


class LanguageProficiency(str, Enum):
    ELEMENTARY = "ELEMENTARY"
    LIMITED_WORKING = "LIMITED_WORKING"
    PROFESSIONAL_WORKING = "PROFESSIONAL_WORKING"
    FULL_PROFESSIONAL = "FULL_PROFESSIONAL"
    NATIVE_OR_BILINGUAL = "NATIVE_OR_BILINGUAL"


class Language(VoyagerModel):
    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.LANGUAGE))] = None
    name: Annotated[str, Raw("name", "multiLocaleName", codec=LOCALIZED_TEXT)]
    proficiency: Annotated[Optional[LanguageProficiency], Raw(
        "proficiency", codec=Enumeration(LanguageProficiency),
    )] = None


class TestScore(VoyagerModel):
    __test__ = False  # not a pytest class

    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.TEST_SCORE))] = None
    name: Annotated[str, Raw("name", "multiLocaleName", codec=LOCALIZED_TEXT)]
    score: Annotated[Optional[str], Raw("score")] = None
    date: Annotated[Optional[PartialDate], Raw("date", "dateOn", codec=DATE)] = None
    description: Annotated[Optional[str], Raw("description", "multiLocaleDescription", codec=LOCALIZED_TEXT)] = None
    occupation: Annotated[Optional[str], Raw("occupation")] = None


class VolunteerCause(VoyagerModel):
    cause_name: Annotated[Optional[str], Raw("causeName")] = None
    cause_type: Annotated[Optional[str], Raw("causeType")] = None


class VolunteerExperience(VoyagerModel):
    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.VOLUNTEER_EXPERIENCE))] = None
    role: Annotated[str, Raw("role", "multiLocaleRole", codec=LOCALIZED_TEXT)]
    company_name: Annotated[Optional[str], Raw(
        "companyName", "multiLocaleCompanyName", codec=LOCALIZED_TEXT,
    )] = None
    company_urn: Annotated[Optional[Urn], Raw("companyUrn", "*company", codec=ref(EntityKind.COMPANY))] = None
    company: Annotated[Optional[Company], Raw("company", codec=nested(Company, shorthand="entity_urn"))] = None
    cause: Annotated[Optional[str], Raw("cause")] = None
    description: Annotated[Optional[str], Raw("description", "multiLocaleDescription", codec=LOCALIZED_TEXT)] = None
    time_period: Annotated[Optional[TimePeriod], Raw("timePeriod", "dateRange", codec=PERIOD)] = None


class Project(VoyagerModel):
    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.PROJECT))] = None
    title: Annotated[str, Raw("title", "multiLocaleTitle", codec=LOCALIZED_TEXT)]
    description: Annotated[Optional[str], Raw("description", "multiLocaleDescription", codec=LOCALIZED_TEXT)] = None
    url: Annotated[Optional[Url], Raw("url", codec=Scalar(Url))] = None
    time_period: Annotated[Optional[TimePeriod], Raw("timePeriod", "dateRange", codec=PERIOD)] = None


class Publication(VoyagerModel):
    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.PUBLICATION))] = None
    name: Annotated[str, Raw("name", "multiLocaleName", codec=LOCALIZED_TEXT)]
    publisher: Annotated[Optional[str], Raw("publisher", "multiLocalePublisher", codec=LOCALIZED_TEXT)] = None
    date: Annotated[Optional[PartialDate], Raw("date", "publishedOn", codec=DATE)] = None
    url: Annotated[Optional[Url], Raw("url", codec=Scalar(Url))] = None
    description: Annotated[Optional[str], Raw("description", "multiLocaleDescription", codec=LOCALIZED_TEXT)] = None


# ── contact / network ────────────────────────────────────────────

class Website(VoyagerModel):
    url: Annotated[Url, Raw("url", codec=Scalar(Url))]


class StandardWebsite(Website):
    """One of LinkedIn's predefined website categories (PERSONAL, BLOG...)."""

    type_marker = STANDARD_WEBSITE

    category: Annotated[Optional[str], Raw(f"type/{STANDARD_WEBSITE}/category", "category")] = None


class CustomWebsite(Website):
    """A website the member labelled themselves."""

    type_marker = CUSTOM_WEBSITE

    label: Annotated[Optional[str], Raw(f"type/{CUSTOM_WEBSITE}/label", "label")] = None


def _sniff_website(raw: Mapping):
    """Website kind from the single key under ``type``, or from the flat keys."""
    kind = raw.get("type")
    if kind is None:
        return CustomWebsite if "label" in raw else StandardWebsite
    if not isinstance(kind, Mapping) or len(kind) != 1:
        return None
    (marker,) = kind
    for model in (StandardWebsite, CustomWebsite):
        if marker == model.type_marker:
            return model
    raise UnknownDiscriminantError("Website", marker, raw)


WEBSITE_ENTRY = Variant("Website", StandardWebsite, CustomWebsite, sniff=_sniff_website, shorthand="url")


class Phone(VoyagerModel):
    number: Annotated[PhoneNumber, Raw("number", codec=Scalar(PhoneNumber))]
    type: Annotated[Optional[str], Raw("type")] = None


class TwitterHandle(VoyagerModel):
    name: Annotated[str, Raw("name")]
    credential_id: Annotated[Optional[str], Raw("credentialId")] = None


class InstantMessenger(VoyagerModel):
    provider: Annotated[Optional[str], Raw("provider")] = None
    handle: Annotated[str, Raw("id", "handle")]


class ContactInfo(VoyagerModel):
    """Contact details; malformed entries are dropped individually."""

    emails: Annotated[Tuple[EmailAddress, ...], Raw(
        "emailAddresses", "emailAddress", codec=many(Scalar(EmailAddress)),
    )] = ()
    phones: Annotated[Tuple[Phone, ...], Raw(
        "phoneNumbers", codec=many(nested(Phone, shorthand="number")),
    )] = ()
    websites: Annotated[Tuple[Website, ...], Raw(
        "websites", codec=many(WEBSITE_ENTRY),
    )] = ()
    twitter_handles: Annotated[Tuple[TwitterHandle, ...], Raw(
        "twitterHandles", codec=many(nested(TwitterHandle, shorthand="name")),
    )] = ()
    ims: Annotated[Tuple[InstantMessenger, ...], Raw("ims", codec=many(nested(InstantMessenger)))] = ()
    connected_at: Annotated[Optional[int], Raw("connectedAt", codec=INTEGER)] = None

    @property
    def is_empty(self) -> bool:
        return not (self.emails or self.phones or self.websites or self.twitter_handles or self.ims)


class NetworkInfo(VoyagerModel):
    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.NETWORK_INFO))] = None
    followers_count: Annotated[Optional[int], Raw("followersCount", codec=INTEGER)] = None
    connections_count: Annotated[Optional[int], Raw("connectionsCount", codec=INTEGER)] = None
    distance: Annotated[Optional[str], Raw("distance/value", "distance")] = None
    following: Annotated[Optional[bool], Raw("following", "followingInfo/following", codec=BOOLEAN)] = None
    followable: Annotated[Optional[bool], Raw("followable", codec=BOOLEAN)] = None


class MemberBadges(VoyagerModel):
    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.MEMBER_BADGES))] = None
    premium: Annotated[bool, Raw("premium", codec=BOOLEAN)] = False
    open_link: Annotated[bool, Raw("openLink", codec=BOOLEAN)] = False
    influencer: Annotated[bool, Raw("influencer", codec=BOOLEAN)] = False
    job_seeker: Annotated[bool, Raw("jobSeeker", codec=BOOLEAN)] = False


# ── people ───────────────────────────────────────────────────────

class PersonName(VoyagerModel):
    first: Annotated[str, Raw("firstName", "multiLocaleFirstName", codec=LOCALIZED_TEXT)]
    last: Annotated[Optional[str], Raw("lastName", "multiLocaleLastName", codec=LOCALIZED_TEXT)] = None
    maiden: Annotated[Optional[str], Raw("maidenName", "multiLocaleMaidenName", codec=LOCALIZED_TEXT)] = None

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first, self.last) if p)


class MiniProfile(VoyagerModel):
    """Member snapshot as it appears in messaging and invitations."""

    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", "objectUrn", codec=ref(EntityKind.PROFILE))] = None
    public_id: Annotated[Optional[str], Raw("publicIdentifier")] = None
    first_name: Annotated[Optional[str], Raw("firstName")] = None
    last_name: Annotated[Optional[str], Raw("lastName")] = None
    occupation: Annotated[Optional[str], Raw("occupation", "headline")] = None
    picture: Annotated[Optional[VectorImage], Raw(
        f"picture/{VECTOR_IMAGE}", "profilePicture/displayImageReference/vectorImage",
        codec=nested(VectorImage),
    )] = None

    @classmethod
    def prepare_raw(cls, raw):
        if isinstance(raw, Mapping):
            if isinstance(raw.get(MESSAGING_MEMBER), Mapping):
                raw = raw[MESSAGING_MEMBER]
            if isinstance(raw.get("miniProfile"), Mapping):
                raw = raw["miniProfile"]
        return raw

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


# ── messaging / invitations ──────────────────────────────────────

class MessageEvent(VoyagerModel):
    entity_urn: Annotated[Optional[Urn], Raw("entityUrn", codec=ref(EntityKind.MESSAGE_EVENT))] = None
    created_at: Annotated[Optional[int], Raw("createdAt", codec=INTEGER)] = None
    subtype: Annotated[Optional[str], Raw("subtype")] = None
    body: Annotated[Optional[str], Raw(
        f"eventContent/{MESSAGE_EVENT}/attributedBody/text",
        f"eventContent/{MESSAGE_EVENT}/body",
    )] = None
    sender: Annotated[Optional[MiniProfile], Raw("from", codec=nested(MiniProfile))] = None


class Conversation(VoyagerModel):
    entity_urn: Annotated[Urn, Raw("entityUrn", codec=ref(EntityKind.CONVERSATION))]
    participants: Annotated[Tuple[MiniProfile, ...], Raw(
        "participants", codec=many(nested(MiniProfile)),
    )] = ()
    read: Annotated[Optional[bool], Raw("read", codec=BOOLEAN)] = None
    unread_count: Annotated[Optional[int], Raw("unreadCount", codec=INTEGER)] = None
    total_event_count: Annotated[Optional[int], Raw("totalEventCount", codec=INTEGER)] = None
    last_activity_at: Annotated[Optional[int], Raw("lastActivityAt", codec=INTEGER)] = None
    events: Annotated[Tuple[MessageEvent, ...], Raw("events", codec=many(nested(MessageEvent)))] = ()

    @property
    def conversation_id(self) -> str:
        return self.entity_urn.id


class UserProfile(VoyagerModel):
    """The signed-in member as ``/me`` describes them."""

    plain_id: Annotated[Optional[int], Raw("plainId", codec=INTEGER)] = None
    mini_profile: Annotated[Optional[MiniProfile], Raw("miniProfile", codec=nested(MiniProfile))] = None
    premium_subscriber: Annotated[Optional[bool], Raw("premiumSubscriber", codec=BOOLEAN)] = None


class ConversationDetails(Conversation):
    """The conversation held with one particular member."""

    @property
    def latest_event(self) -> Optional[MessageEvent]:
        if not self.events:
            return None
        return max(self.events, key=lambda e: e.created_at or 0)


class Invitation(VoyagerModel):
    """Pending connection invitation; accepting it needs the shared secret."""

    entity_urn: Annotated[Urn, Raw("entityUrn", codec=ref(EntityKind.INVITATION))]
    shared_secret: Annotated[str, Raw("sharedSecret")]
    invitation_type: Annotated[Optional[str], Raw("invitationType")] = None
    sent_time: Annotated[Optional[int], Raw("sentTime", codec=INTEGER)] = None
    message: Annotated[Optional[str], Raw("message", "customMessage")] = None
    inviter: Annotated[Optional[MiniProfile], Raw("fromMember", codec=nested(MiniProfile))] = None

    @classmethod
    def prepare_raw(cls, raw):
        # invitationViews wrap each invitation with insights
        if isinstance(raw, Mapping) and isinstance(raw.get("invitation"), Mapping):
            return raw["invitation"]
        return raw

    @property
    def invitation_id(self) -> str:
        return self.entity_urn.id


# ── profile ──────────────────────────────────────────────────────

ExperienceEntry = Union[Experience, PositionGroup]


class Profile(VoyagerModel):
    """Member profile assembled from the profile, contact and network fragments.

    ``contact_info`` and ``network_info`` have no raw keys of their own:
    they are filled from separate fragments by ``assembly.assemble``.
    """

    entity_urn: Annotated[Optional[Urn], Raw(
        "entityUrn", "objectUrn", "miniProfile/entityUrn", codec=ref(EntityKind.PROFILE),
    )] = None
    public_id: Annotated[Optional[str], Raw("publicIdentifier", "miniProfile/publicIdentifier")] = None
    person_name: Annotated[PersonName, Raw(SELF, codec=nested(PersonName))]
    headline: Annotated[Optional[str], Raw("headline", "multiLocaleHeadline", codec=LOCALIZED_TEXT)] = None
    summary: Annotated[Optional[str], Raw("summary", "multiLocaleSummary", codec=LOCALIZED_TEXT)] = None
    industry_name: Annotated[Optional[str], Raw("industryName", "industry/name")] = None
    industry_urn: Annotated[Optional[Urn], Raw(
        "industryUrn", "*industry", "industry", codec=ref(EntityKind.INDUSTRY),
    )] = None
    location_name: Annotated[Optional[str], Raw("locationName")] = None
    geo_location_name: Annotated[Optional[str], Raw("geoLocationName")] = None
    geo_country_name: Annotated[Optional[str], Raw("geoCountryName")] = None
    geo_country_urn: Annotated[Optional[Urn], Raw("geoCountryUrn", codec=ref(EntityKind.GEO))] = None
    geo_location: Annotated[Optional[GeoLocation], Raw("geoLocation", codec=nested(GeoLocation))] = None
    location: Annotated[Optional[BasicLocation], Raw("location", codec=nested(BasicLocation))] = None
    address: Annotated[Optional[Address], Raw("address", codec=nested(Address))] = None
    birth_date: Annotated[Optional[PartialDate], Raw("birthDateOn", "birthDate", codec=DATE)] = None
    primary_locale: Annotated[Optional[Locale], Raw("primaryLocale", "defaultLocale", codec=Scalar(Locale))] = None
    supported_locales: Annotated[Tuple[Locale, ...], Raw(
        "supportedLocales", codec=many(Scalar(Locale)),
    )] = ()
    picture: Annotated[Optional[VectorImage], Raw(
        "profilePicture/displayImageReference/vectorImage",
        f"profilePictureOriginalImage/{VECTOR_IMAGE}",
        f"miniProfile/picture/{VECTOR_IMAGE}",
        codec=nested(VectorImage),
    )] = None
    student: Annotated[Optional[bool], Raw("student", codec=BOOLEAN)] = None
    version_tag: Annotated[Optional[str], Raw("versionTag")] = None

    experience: Annotated[Tuple[ExperienceEntry, ...], Raw(
        "positionGroupView", "profilePositionGroups", "positionView", "profilePositions",
        codec=many(EXPERIENCE_ENTRY),
    )] = ()
    education: Annotated[Tuple[Education, ...], Raw(
        "educationView", "profileEducations", codec=many(nested(Education)),
    )] = ()
    skills: Annotated[Tuple[Skill, ...], Raw("skillView", "profileSkills", codec=many(nested(Skill)))] = ()
    certifications: Annotated[Tuple[Certification, ...], Raw(
        "certificationView", "profileCertifications", codec=many(nested(Certification)),
    )] = ()
    courses: Annotated[Tuple[Course, ...], Raw("courseView", "profileCourses", codec=many(nested(Course)))] = ()
    honors: Annotated[Tuple[Honor, ...], Raw("honorView", "profileHonors", codec=many(nested(Honor)))] = ()
    languages: Annotated[Tuple[Language, ...], Raw(
        "languageView", "profileLanguages", codec=many(nested(Language)),
    )] = ()
    test_scores: Annotated[Tuple[TestScore, ...], Raw(
        "testScoreView", "profileTestScores", codec=many(nested(TestScore)),
    )] = ()
    volunteer_experience: Annotated[Tuple[VolunteerExperience, ...], Raw(
        "volunteerExperienceView", "profileVolunteerExperiences",
        codec=many(nested(VolunteerExperience)),
    )] = ()
    volunteer_causes: Annotated[Tuple[VolunteerCause, ...], Raw(
        "volunteerCauseView", codec=many(nested(VolunteerCause)),
    )] = ()
    projects: Annotated[Tuple[Project, ...], Raw(
        "projectView", "profileProjects", codec=many(nested(Project)),
    )] = ()
    publications: Annotated[Tuple[Publication, ...], Raw(
        "publicationView", "profilePublications", codec=many(nested(Publication)),
    )] = ()

    contact_info: Optional[ContactInfo] = None
    network_info: Optional[NetworkInfo] = None

    @classmethod
    def prepare_raw(cls, raw):
        # legacy profileView: {"profile": {...}, "positionView": {...}, ...}
        if isinstance(raw, Mapping) and isinstance(raw.get("profile"), Mapping):
            merged = {k: v for k, v in raw.items() if k not in ("profile", "entityUrn")}
            merged.update(raw["profile"])
            return merged
        return raw

    @property
    def profile_id(self) -> Optional[str]:
        return self.entity_urn.id if self.entity_urn else None

    @property
    def full_name(self) -> str:
        return self.person_name.full_name

    @property
    def picture_url(self) -> Optional[str]:
        return self.picture.url() if self.picture else None

    @property
    def positions(self) -> Tuple[Experience, ...]:
        """Every position, with groups expanded in order."""
        out = []
        for entry in self.experience:
            if isinstance(entry, PositionGroup):
                out.extend(entry.positions)
            else:
                out.append(entry)
        return tuple(out)

    @property
    def current_positions(self) -> Tuple[Experience, ...]:
        return tuple(p for p in self.positions if p.is_current)
