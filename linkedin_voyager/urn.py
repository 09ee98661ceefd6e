"""
Entity identifiers: URNs and public handles.

Voyager refers to entities with URNs such as ``urn:li:fsd_profile:ACoAAB...``
or composite ones like ``urn:li:fs_position:(ACoAAB...,1234567)``.  Members,
companies and schools can also be looked up by their public handle (the
vanity slug in ``linkedin.com/in/<handle>``).

Both forms parse into immutable values that compare by content and print
back to exactly the text they were parsed from, since the API wants
identifiers echoed verbatim in follow-up requests.
"""

import string
from enum import Enum
from typing import Any, Tuple, Union

from pydantic_core import core_schema

from .exceptions import KindMismatchError, UnrecognizedIdentifierError

URN_PREFIX = "urn:"
# vanity URLs are ASCII letters, digits and hyphens
HANDLE_CHARS = frozenset(string.ascii_letters + string.digits + "-")


class EntityKind(Enum):
    """Entity kinds and the URN type tags Voyager uses for each."""

    PROFILE = ("fsd_profile", "fs_profile", "fs_miniProfile", "member")
    COMPANY = (
        "fsd_company", "fs_miniCompany", "fs_normalized_company",
        "company", "organization",
    )
    SCHOOL = ("fsd_school", "fs_miniSchool", "fs_normalized_school", "school")
    POSITION = ("fsd_profilePosition", "fs_position")
    POSITION_GROUP = ("fsd_profilePositionGroup", "fs_positionGroup")
    EDUCATION = ("fsd_profileEducation", "fs_education")
    SKILL = ("fsd_skill", "fs_skill")
    CERTIFICATION = ("fsd_profileCertification", "fs_certification")
    COURSE = ("fsd_profileCourse", "fs_course")
    HONOR = ("fsd_profileHonor", "fs_honor")
    LANGUAGE = ("fsd_profileLanguage", "fs_language")
    TEST_SCORE = ("fsd_profileTestScore", "fs_testScore")
    VOLUNTEER_EXPERIENCE = ("fsd_profileVolunteerExperience", "fs_volunteerExperience")
    PROJECT = ("fsd_profileProject", "fs_project")
    PUBLICATION = ("fsd_profilePublication", "fs_publication")
    GEO = ("fsd_geo", "fs_geo", "geo")
    INDUSTRY = ("fsd_industry", "fs_industry", "industry")
    DEGREE = ("fsd_degree", "fs_degree", "degree")
    FIELD_OF_STUDY = ("fsd_fieldOfStudy", "fs_fieldOfStudy", "fieldOfStudy")
    CONVERSATION = ("fs_conversation", "msg_conversation", "messagingThread")
    MESSAGE_EVENT = ("fs_event", "msg_message", "messagingMessage")
    INVITATION = ("fs_relInvitation", "invitation")
    NETWORK_INFO = ("fs_profileNetworkInfo", "fsd_profileNetworkInfo")
    MEMBER_BADGES = ("fs_memberBadges",)

    @property
    def tags(self) -> Tuple[str, ...]:
        return self.value

    def __str__(self) -> str:
        return self.name.lower()


def _pydantic_schema(cls):
    """Core schema accepting an instance or its raw string; dumps as the raw string."""
    from_str = core_schema.chain_schema([
        core_schema.str_schema(),
        core_schema.no_info_plain_validator_function(cls.parse),
    ])
    return core_schema.json_or_python_schema(
        json_schema=from_str,
        python_schema=core_schema.union_schema([
            core_schema.is_instance_schema(cls),
            from_str,
        ]),
        serialization=core_schema.plain_serializer_function_ser_schema(str),
    )


class Urn:
    """Fully-qualified reference ``urn:<namespace>:<entity_type>:<id>``."""

    __slots__ = ("namespace", "entity_type", "id")

    def __init__(self, namespace: str, entity_type: str, id: str):
        if not namespace or not entity_type or not id:
            raise UnrecognizedIdentifierError(f"urn:{namespace}:{entity_type}:{id}")
        object.__setattr__(self, "namespace", namespace)
        object.__setattr__(self, "entity_type", entity_type)
        object.__setattr__(self, "id", id)

    @classmethod
    def parse(cls, raw: Any) -> "Urn":
        if not isinstance(raw, str) or not raw.startswith(URN_PREFIX):
            raise UnrecognizedIdentifierError(raw)
        parts = raw.split(":", 3)
        if len(parts) != 4 or any(ch.isspace() for ch in raw):
            raise UnrecognizedIdentifierError(raw)
        _, namespace, entity_type, id_ = parts
        if not namespace or not entity_type or not id_:
            raise UnrecognizedIdentifierError(raw)
        return cls(namespace, entity_type, id_)

    @classmethod
    def build(cls, entity_type: str, id: str, namespace: str = "li") -> "Urn":
        return cls(namespace, entity_type, id)

    @property
    def kind(self) -> Union[EntityKind, None]:
        for kind in EntityKind:
            if self.entity_type in kind.tags:
                return kind
        return None

    @property
    def parts(self) -> Tuple[str, ...]:
        """Components of a composite id ``(a,b,...)``; a plain id is one part.

        Commas nested inside inner parentheses (composite URNs embedded in the
        id) do not split.
        """
        if not (self.id.startswith("(") and self.id.endswith(")")):
            return (self.id,)
        parts, depth, current = [], 0, []
        for ch in self.id[1:-1]:
            if ch == "," and depth == 0:
                parts.append("".join(current))
                current = []
                continue
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
            current.append(ch)
        parts.append("".join(current))
        return tuple(parts)

    def expect(self, kind: EntityKind) -> "Urn":
        if self.entity_type not in kind.tags:
            raise KindMismatchError(kind, self.entity_type, raw=str(self))
        return self

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        return (Urn.parse, (str(self),))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Urn):
            return NotImplemented
        return (self.namespace, self.entity_type, self.id) == (
            other.namespace, other.entity_type, other.id,
        )

    def __hash__(self) -> int:
        return hash((Urn, self.namespace, self.entity_type, self.id))

    def __str__(self) -> str:
        return f"{URN_PREFIX}{self.namespace}:{self.entity_type}:{self.id}"

    def __repr__(self) -> str:
        return f"Urn({str(self)!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        return _pydantic_schema(cls)


class PublicHandle:
    """Short public identifier (vanity name / universal name)."""

    __slots__ = ("value",)

    def __init__(self, value: str):
        if not self.is_valid(value):
            raise UnrecognizedIdentifierError(value)
        object.__setattr__(self, "value", value)

    @staticmethod
    def is_valid(value: Any) -> bool:
        return (
            isinstance(value, str)
            and bool(value)
            and all(ch in HANDLE_CHARS for ch in value)
        )

    @classmethod
    def parse(cls, raw: Any) -> "PublicHandle":
        return cls(raw)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        return (PublicHandle, (self.value,))

    def __eq__(self, other) -> bool:
        if not isinstance(other, PublicHandle):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash((PublicHandle, self.value))

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"PublicHandle({self.value!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler):
        return _pydantic_schema(cls)


Identifier = Union[Urn, PublicHandle]


def parse_identifier(raw: Any) -> Identifier:
    """Parse a URN or a public handle; anything else is rejected."""
    if isinstance(raw, (Urn, PublicHandle)):
        return raw
    if isinstance(raw, str) and raw.startswith(URN_PREFIX):
        return Urn.parse(raw)
    if PublicHandle.is_valid(raw):
        return PublicHandle(raw)
    raise UnrecognizedIdentifierError(raw)


def expect_kind(identifier: Identifier, kind: EntityKind) -> Identifier:
    """Check a URN's type tag against ``kind``; handles carry no tag and pass."""
    if isinstance(identifier, Urn):
        identifier.expect(kind)
    return identifier


def get_id_from_urn(urn: str) -> str:
    """Id part of a URN string, or ``""`` when it is not one."""
    try:
        return Urn.parse(urn).id
    except UnrecognizedIdentifierError:
        return ""
