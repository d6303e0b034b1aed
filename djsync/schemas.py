"""Request body schemas.

Every route validates its JSON body through ``validate_payload`` which returns a
``ValidationResult`` instead of raising, so handlers can branch on ``result.ok``.
"""
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    ValidationError,
    field_validator,
)

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Identifier = Annotated[int, Field(gt=0)]

PHONE_RE = re.compile(r"^\d{10}$")
URI_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://\S+$")
YOUTUBE_RE = re.compile(r"^(https?://)?(www\.)?(youtube\.com|youtu\.?be)/.+$")


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _Schema(BaseModel):
    model_config = ConfigDict(extra="ignore")


class _ProfileFields(_Schema):
    phone_number: Optional[str] = None
    gender: Optional[Literal["male", "female", "other"]] = None

    @field_validator("phone_number", "gender", mode="before")
    @classmethod
    def blank_is_missing(cls, value):
        return _blank_to_none(value)

    @field_validator("phone_number")
    @classmethod
    def phone_is_ten_digits(cls, value):
        if value is not None and not PHONE_RE.match(value):
            raise ValueError(f"{value} is not a valid phone number format")
        return value


class RegisterSchema(_ProfileFields):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
    email: EmailStr


class LoginSchema(_Schema):
    email: EmailStr


class ProfileUpdateSchema(_ProfileFields):
    pass


class _MediaLinkFields(_Schema):
    media_link: Optional[str] = None

    @field_validator("media_link", mode="before")
    @classmethod
    def blank_is_missing(cls, value):
        return _blank_to_none(value)

    @field_validator("media_link")
    @classmethod
    def must_be_uri(cls, value):
        if value is not None and not URI_RE.match(value):
            raise ValueError("media_link must be a valid URI")
        return value


class GenreUpdateSchema(_MediaLinkFields):
    user_id: Identifier
    genre_choice: NonEmptyStr


class GenreSelectSchema(_MediaLinkFields):
    genre_choice: NonEmptyStr


class UserGenreSchema(_Schema):
    genre: NonEmptyStr
    media_link: Optional[str] = None

    @field_validator("media_link", mode="before")
    @classmethod
    def blank_is_missing(cls, value):
        return _blank_to_none(value)

    @field_validator("media_link")
    @classmethod
    def must_be_youtube(cls, value):
        if value is not None and not YOUTUBE_RE.match(value):
            raise ValueError("Invalid YouTube URL provided")
        return value


class AssignUserSchema(_Schema):
    event_id: Identifier
    user_id: Identifier
    dj_id: Optional[Identifier] = None


class SerialSchema(_Schema):
    serial: NonEmptyStr


class ScanQrSchema(_Schema):
    qr_code_identifier: Identifier


def _check_iso_datetime(value):
    if value is None or isinstance(value, datetime):
        return value
    try:
        datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise ValueError("event_date must be an ISO-8601 date/time")
    return value


class EventCreateSchema(_Schema):
    event_name: NonEmptyStr
    event_date: str
    event_location: Optional[str] = None
    dj_name: Optional[str] = None

    @field_validator("event_date")
    @classmethod
    def iso_date(cls, value):
        return _check_iso_datetime(value)


class EventUpdateSchema(_Schema):
    event_name: Optional[NonEmptyStr] = None
    event_date: Optional[str] = None
    event_location: Optional[str] = None
    dj_name: Optional[str] = None

    @field_validator("event_date")
    @classmethod
    def iso_date(cls, value):
        return _check_iso_datetime(value)


@dataclass
class ValidationResult:
    ok: bool
    value: Optional[BaseModel] = None
    errors: list = field(default_factory=list)


def validate_payload(schema: type[BaseModel], data) -> ValidationResult:
    if not isinstance(data, dict):
        return ValidationResult(ok=False, errors=["Request body must be a JSON object"])
    try:
        return ValidationResult(ok=True, value=schema.model_validate(data))
    except ValidationError as e:
        errors = []
        for err in e.errors():
            location = ".".join(str(part) for part in err["loc"])
            errors.append(f"{location}: {err['msg']}" if location else err["msg"])
        return ValidationResult(ok=False, errors=errors)
