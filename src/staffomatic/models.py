"""Canonical Pydantic models shared across all staffomatic modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory
and used to construct a :class:`~staffomatic.client.Client`:
    :class:`RequestConfig` and :class:`ClientConfig`.

**Option models** -- the explicit field sets accepted by the Users API,
replacing free-form keyword dictionaries:
    :class:`Credentials`, :class:`ListUsersOptions`, and :class:`UserUpdate`.

Option models reject unknown fields so that a typo such as ``compnay=`` fails
loudly instead of being sent to the API and silently ignored.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from staffomatic import __version__

DEFAULT_API_ENDPOINT = "https://api.staffomaticapp.com/v3/"
DEFAULT_WEB_ENDPOINT = "https://staffomaticapp.com/"
DEFAULT_USER_AGENT = f"staffomatic.py/{__version__}"


# --- Configuration ---


class RequestConfig(BaseModel):
    """Default HTTP transport settings applied to every API call."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class ClientConfig(BaseModel):
    """Everything a :class:`~staffomatic.client.Client` needs to talk to the API.

    Persisted at ``~/.config/staffomatic/config.json`` and overridden by
    ``STAFFOMATIC_*`` environment variables; see
    :func:`~staffomatic.config.resolve_config`.

    Both endpoints are normalised to end with ``/`` so that relative paths
    (``users/42``) and the OAuth path (``login/oauth/access_token``) can be
    appended directly. The client treats ``email`` as the login when
    ``login`` is unset.

    Example::

        ClientConfig(email="jane@example.com", password="s3cret")
    """

    api_endpoint: str = Field(default=DEFAULT_API_ENDPOINT)
    web_endpoint: str = Field(default=DEFAULT_WEB_ENDPOINT)
    login: Optional[str] = Field(
        default=None, description="Identity of the authenticated user"
    )
    email: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    access_token: Optional[str] = Field(default=None, repr=False)
    client_id: Optional[str] = None
    client_secret: Optional[str] = Field(default=None, repr=False)
    per_page: Optional[int] = Field(
        default=None, ge=1, description="Default page size for paginated requests"
    )
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    request: RequestConfig = Field(default_factory=RequestConfig)

    @field_validator("api_endpoint", "web_endpoint")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        return value if value.endswith("/") else f"{value}/"


# --- Users API options ---


class Credentials(BaseModel):
    """An email / password pair checked by ``validate_credentials``."""

    model_config = ConfigDict(extra="forbid")

    email: str
    password: str = Field(repr=False)


class ListUsersOptions(BaseModel):
    """Query options for ``all_users``."""

    model_config = ConfigDict(extra="forbid")

    since: Optional[int] = Field(
        default=None, description="The integer ID of the last user seen"
    )
    per_page: Optional[int] = Field(default=None, ge=1)

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class UserUpdate(BaseModel):
    """Fields accepted when updating the authenticated user.

    Only the fields the caller actually set are sent, so ``UserUpdate(bio=None)``
    clears the bio while ``UserUpdate(name="A")`` leaves it alone.
    """

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    email: Optional[str] = Field(
        default=None, description="Publicly visible email address"
    )
    blog: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    hireable: Optional[bool] = None
    bio: Optional[str] = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
