"""
Pydantic models for API payloads and responses.
"""

from typing import Annotated, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    field_validator,
)

Number = Union[int, float]
NonNegative = Union[
    Annotated[StrictInt, Field(ge=0)],
    Annotated[StrictFloat, Field(ge=0, allow_inf_nan=False)],
]
NonEmpty = Annotated[str, Field(min_length=1)]


class JobCreate(BaseModel):
    """Payload for a new job posting. Every field is required."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: NonEmpty
    company: NonEmpty
    location: NonEmpty
    type: NonEmpty
    salary: NonNegative
    experience: NonNegative


class JobUpdate(BaseModel):
    """Partial payload for an existing job posting."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[NonEmpty] = None
    company: Optional[NonEmpty] = None
    location: Optional[NonEmpty] = None
    type: Optional[NonEmpty] = None
    salary: Optional[NonNegative] = None
    experience: Optional[NonNegative] = None

    def changes(self) -> dict:
        """Fields the caller actually supplied."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class Job(BaseModel):
    """
    Stored job posting as returned by the API.

    Records written before validation existed may lack fields, so
    everything except the identifier is optional here.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    title: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    type: Optional[str] = None
    salary: Optional[Number] = None
    experience: Optional[Number] = None


class Credentials(BaseModel):
    """Username/password pair used for signup and login."""

    username: NonEmpty
    password: NonEmpty

    @field_validator("username")
    @classmethod
    def _strip_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("username must not be blank")
        return value


class SessionInfo(BaseModel):
    """An issued login session."""

    username: str
    token: str


class Message(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    fields: List[str] | None = None
