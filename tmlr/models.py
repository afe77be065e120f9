from dataclasses import dataclass, fields
from functools import lru_cache
from typing import Annotated, Any, Optional

from pydantic import ConfigDict, Field, StrictBool, StrictInt, StrictStr, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel
from pydantic.dataclasses import dataclass as wire_dataclass

from tmlr.exceptions import DecodeError

# camelCase on the wire, snake_case in Python; either name is accepted on input
WIRE = ConfigDict(alias_generator=to_camel, populate_by_name=True)


@lru_cache(maxsize=None)
def _adapter(kind) -> TypeAdapter:
    return TypeAdapter(kind)


def decode(kind, payload: Any):
    """Validate a decoded JSON payload into ``kind``."""
    try:
        return _adapter(kind).validate_python(payload)
    except ValidationError as exc:
        raise DecodeError(f"unexpected response shape: {exc}") from exc


def encode(body) -> dict:
    return _adapter(type(body)).dump_python(body, by_alias=True)


def unwrap(envelope, payload: Any):
    """Decode a one-field envelope and return the payload nested under it."""
    decoded = decode(envelope, payload)
    (field,) = fields(decoded)
    return getattr(decoded, field.name)


@dataclass(frozen=True)
class Credentials:
    key: str
    secret: str


@wire_dataclass(frozen=True, config=WIRE)
class SignInRequest:
    api_key: str
    api_secret: str

    def to_dict(self) -> dict:
        return encode(self)


@wire_dataclass(frozen=True, config=WIRE)
class TrackingRequest:
    started_at: str

    def to_dict(self) -> dict:
        return encode(self)


@wire_dataclass(frozen=True, config=WIRE)
class StopTrackingRequest:
    stopped_at: str

    def to_dict(self) -> dict:
        return encode(self)


@wire_dataclass(frozen=True, config=WIRE)
class Account:
    user_id: StrictStr
    name: StrictStr
    email: StrictStr
    default_space_id: StrictStr


@wire_dataclass(frozen=True, config=WIRE)
class Member:
    id: StrictStr
    name: StrictStr
    email: StrictStr
    role: StrictStr


@wire_dataclass(frozen=True, config=WIRE)
class RetiredMember:
    id: StrictStr
    name: StrictStr


@wire_dataclass(frozen=True, config=WIRE)
class Workspace:
    id: StrictStr
    name: StrictStr
    default: StrictBool
    members: list[Member]
    retired_members: list[RetiredMember]


@wire_dataclass(frozen=True, config=WIRE)
class Activity:
    id: StrictStr
    name: StrictStr
    color: StrictStr
    integration: StrictStr
    space_id: StrictStr
    device_side: Optional[StrictInt] = None


@wire_dataclass(frozen=True, config=WIRE)
class Activities:
    active: Annotated[list[Activity], Field(alias="activities")]
    inactive: Annotated[list[Activity], Field(alias="inactiveActivities")]
    archived: Annotated[list[Activity], Field(alias="archivedActivities")]

    def __iter__(self):
        return iter((self.active, self.inactive, self.archived))


@wire_dataclass(frozen=True, config=WIRE)
class TagOrMention:
    id: StrictInt
    key: StrictStr
    label: StrictStr
    scope: StrictStr
    space_id: StrictStr


@wire_dataclass(frozen=True, config=WIRE)
class Note:
    tags: list[TagOrMention]
    mentions: list[TagOrMention]
    text: Optional[StrictStr] = None


@wire_dataclass(frozen=True, config=WIRE)
class Duration:
    started_at: StrictStr
    stopped_at: StrictStr


@wire_dataclass(frozen=True, config=WIRE)
class TrackingSession:
    id: StrictStr
    activity_id: StrictStr
    started_at: StrictStr
    note: Note


@wire_dataclass(frozen=True, config=WIRE)
class TimeEntry:
    id: StrictStr
    activity_id: StrictStr
    duration: Duration
    note: Note


@wire_dataclass(frozen=True, config=WIRE)
class AccountEnvelope:
    data: Account


@wire_dataclass(frozen=True, config=WIRE)
class SpacesEnvelope:
    data: list[Workspace]


@wire_dataclass(frozen=True, config=WIRE)
class TrackingEnvelope:
    current_tracking: TrackingSession


@wire_dataclass(frozen=True, config=WIRE)
class TimeEntryEnvelope:
    created_time_entry: TimeEntry
