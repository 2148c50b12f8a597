"""Canonical Pydantic models shared across all mineskin modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory
and passed to :class:`~mineskin.client.MineSkinClient`:
    :class:`CacheConfig` and :class:`ClientOptions`.

**API models** -- parsed from MineSkin API responses or sent as request
parameters:
    :class:`SkinVariant`, :class:`SkinVisibility`, :class:`GenerateType`,
    :class:`SkinTexture`, :class:`SkinData`, :class:`Skin`,
    :class:`GeneratedSkin`, :class:`User`, and :class:`GenerateOptions`.

API models accept camelCase field names from the wire (``idStr``,
``nextRequest``) as well as their snake_case attribute names, and keep any
fields the API adds in ``model_extra``.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class CacheConfig(BaseModel):
    """Expiry settings for the client's lookup caches, in seconds."""

    skin_expire_after_access: float = Field(
        default=120, description="Evict skins not read for this long"
    )
    skin_expire_after_write: float = Field(
        default=300, description="Evict skins this long after they were stored"
    )
    user_expire_after_write: float = Field(
        default=300, description="Evict users this long after they were stored"
    )
    expiration_interval: float = Field(
        default=30, description="Seconds between expiry sweeps"
    )


class ClientOptions(BaseModel):
    """Options accepted by :class:`~mineskin.client.MineSkinClient`.

    Loaded from ``config.json`` by :func:`~mineskin.config.load_options`
    and overridden by environment variables and CLI flags in
    :func:`~mineskin.config.resolve_options`.

    Example::

        ClientOptions(user_agent="MyApp/1.0", api_key="s3cret", max_tries=2)
    """

    user_agent: str = Field(
        default="MineSkinClient/Python", description="User-Agent header value"
    )
    api_key: Optional[str] = Field(
        default=None, description="API key sent as a Bearer token"
    )
    api_base: str = Field(
        default="https://api.mineskin.org", description="Base URL of the API"
    )
    max_tries: int = Field(
        default=4, ge=0, description="Retries for generate requests on transient errors"
    )
    generate_timeout: float = Field(
        default=30, gt=0, description="Timeout of generate requests in seconds"
    )
    get_timeout: float = Field(
        default=10, gt=0, description="Timeout of lookup requests in seconds"
    )
    generate_interval: float = Field(
        default=15, ge=0, description="Minimum seconds between generate requests"
    )
    get_interval: float = Field(
        default=1, ge=0, description="Minimum seconds between lookup requests"
    )
    cache: CacheConfig = Field(default_factory=CacheConfig)


# --- API objects ---


class SkinVariant(str, enum.Enum):
    """Skin model variant, forced by the user or detected from the texture."""

    CLASSIC = "classic"
    SLIM = "slim"


class SkinVisibility(enum.IntEnum):
    """Whether a generated skin appears in the public listing."""

    PUBLIC = 0
    PRIVATE = 1


class GenerateType(str, enum.Enum):
    """The source a skin is generated from."""

    UPLOAD = "upload"
    URL = "url"
    USER = "user"


class _ApiModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class SkinTexture(_ApiModel):
    """Signed texture property of a skin."""

    value: str
    signature: str
    url: Optional[str] = None
    urls: dict[str, str] = Field(default_factory=dict)


class SkinData(_ApiModel):
    """Texture data of a skin.

    ``uuid`` is semi-random and may be a player uuid for user requests.
    """

    uuid: Optional[str] = None
    texture: SkinTexture


class Skin(_ApiModel):
    """A skin stored by MineSkin."""

    uuid: str
    id: Optional[int] = None
    id_str: Optional[str] = Field(default=None, alias="idStr")
    name: str = ""
    variant: Optional[SkinVariant] = None
    data: Optional[SkinData] = None
    timestamp: Optional[int] = Field(
        default=None, description="Unix timestamp (seconds) of generation"
    )
    duration: Optional[int] = Field(
        default=None, description="Generation time in milliseconds"
    )
    private: bool = False
    views: int = 0


class GeneratedSkin(Skin):
    """A skin returned by one of the generate endpoints."""

    duplicate: bool = False
    next_request: float = Field(
        default=0,
        alias="nextRequest",
        description="Seconds to wait before the next generate request",
    )


class User(_ApiModel):
    """Result of validating a Minecraft user by uuid or by name."""

    uuid: Optional[str] = None
    name: Optional[str] = None
    valid: bool = False


class GenerateOptions(BaseModel):
    """Optional parameters shared by all generate requests."""

    name: Optional[str] = Field(default=None, description="Custom skin name")
    variant: Optional[SkinVariant] = None
    visibility: Optional[SkinVisibility] = None

    def to_params(self) -> dict[str, Any]:
        """Return the options as request parameters, leaving out unset ones."""
        return self.model_dump(mode="json", exclude_none=True)
