"""
linkedin_voyager — typed client for LinkedIn's Voyager API.

Provides:
    Linkedin          — facade: profiles, companies, schools, messaging, invitations
    Client            — requests-based transport (cookies, CSRF, pacing)
    assemble          — merge profile / contact / network fragments into a Profile
    resolve           — identifier + endpoint -> RequestPlan, no I/O
    parse_identifier  — URN or public handle
    PartialDate, TimePeriod, EmailAddress, PhoneNumber, Url, Locale

Typical usage:

    from linkedin_voyager import Linkedin
    api = Linkedin.from_env()                     # LINKEDIN_LI_AT / LINKEDIN_JSESSIONID
    diagnostics = []
    profile = api.get_profile("ada-lovelace", diagnostics=diagnostics)
    for position in profile.current_positions:
        print(position.title, position.company_name)

Decoding works without any network access too:

    from linkedin_voyager import Profile, assemble
    profile, diagnostics = assemble(profile_json, contact_json)
"""

from .linkedin import Linkedin
from .client import Client, Transport
from .assembly import ProfileBuilder, assemble, denormalize
from .dispatch import Endpoint, RequestPlan, resolve
from .fields import Decoded, Diagnostic, Raw, decode, decode_list, encode
from .dates import PartialDate, TimePeriod
from .scalars import EmailAddress, Locale, PhoneNumber, Url, ValidatedScalar
from .urn import EntityKind, Identifier, PublicHandle, Urn, expect_kind, parse_identifier
from .models import (
    Address,
    Certification,
    Company,
    ContactInfo,
    Conversation,
    ConversationDetails,
    Course,
    CustomWebsite,
    Education,
    Experience,
    Honor,
    Invitation,
    Language,
    LanguageProficiency,
    MemberBadges,
    MessageEvent,
    MiniProfile,
    NetworkInfo,
    PersonName,
    Phone,
    PositionGroup,
    Profile,
    Project,
    Publication,
    School,
    Skill,
    StandardWebsite,
    TestScore,
    UserProfile,
    VolunteerExperience,
    Website,
)
from .exceptions import (
    ChallengeError,
    ConflictingFieldError,
    EntityNotFoundError,
    InvalidFormatError,
    KindMismatchError,
    LinkedInError,
    LinkedInRequestError,
    MissingFieldError,
    NetworkError,
    ParseError,
    RateLimitError,
    SchemaError,
    TemporalRangeError,
    UnauthorizedError,
    UnknownDiscriminantError,
    UnrecognizedIdentifierError,
    UnsupportedIdentifierError,
)

__all__ = [
    # Core
    "Linkedin",
    "Client",
    "Transport",
    "assemble",
    "denormalize",
    "ProfileBuilder",
    "resolve",
    "Endpoint",
    "RequestPlan",
    # Decoding
    "decode",
    "decode_list",
    "encode",
    "Decoded",
    "Diagnostic",
    "Raw",
    # Identifiers, dates, scalars
    "Urn",
    "PublicHandle",
    "Identifier",
    "EntityKind",
    "parse_identifier",
    "expect_kind",
    "PartialDate",
    "TimePeriod",
    "ValidatedScalar",
    "EmailAddress",
    "PhoneNumber",
    "Url",
    "Locale",
    # Models
    "Profile",
    "PersonName",
    "Address",
    "Experience",
    "PositionGroup",
    "Education",
    "Skill",
    "Certification",
    "Course",
    "Honor",
    "Language",
    "LanguageProficiency",
    "TestScore",
    "VolunteerExperience",
    "Project",
    "Publication",
    "ContactInfo",
    "Phone",
    "Website",
    "StandardWebsite",
    "CustomWebsite",
    "NetworkInfo",
    "MemberBadges",
    "Company",
    "School",
    "MiniProfile",
    "UserProfile",
    "MessageEvent",
    "Conversation",
    "ConversationDetails",
    "Invitation",
    # Exceptions
    "LinkedInError",
    "ParseError",
    "UnrecognizedIdentifierError",
    "KindMismatchError",
    "UnsupportedIdentifierError",
    "TemporalRangeError",
    "InvalidFormatError",
    "MissingFieldError",
    "SchemaError",
    "UnknownDiscriminantError",
    "ConflictingFieldError",
    "LinkedInRequestError",
    "ChallengeError",
    "UnauthorizedError",
    "RateLimitError",
    "EntityNotFoundError",
    "NetworkError",
]
