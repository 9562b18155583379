"""
NASA Explorer Backend — Pydantic Schemas
=========================================

What:  Models for the two NASA payloads we proxy (APOD, Image and Video
       Library search), the response envelopes of our own endpoints, and the
       health check.
How:   Upstream models use `extra="allow"` so fields we don't display are
       passed through untouched. Only the fields the UI relies on are declared.
"""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# APOD (Astronomy Picture of the Day)
# ══════════════════════════════════════════════════════════════════════════


class ApodRecord(BaseModel):
    """
    One APOD entry.

    date/title/url/media_type are required and must be non-empty; an upstream
    record lacking any of them is treated as malformed.
    """
    date: str = Field(min_length=1, description="Publication date (YYYY-MM-DD)")
    title: str = Field(min_length=1)
    url: str = Field(min_length=1, description="Main image or video URL")
    media_type: str = Field(min_length=1, description="'image' or 'video'")
    explanation: str = Field(default="")
    hdurl: Optional[str] = Field(default=None, description="HD image URL, images only")
    copyright: Optional[str] = None
    service_version: Optional[str] = None

    model_config = {"extra": "allow"}


ApodResult = Union[ApodRecord, List[ApodRecord]]


class ApodEnvelope(BaseModel):
    """Success body of GET /api/apod."""
    ok: bool = True
    data: ApodResult


# ══════════════════════════════════════════════════════════════════════════
# NASA Image and Video Library
# ══════════════════════════════════════════════════════════════════════════


class NasaImageData(BaseModel):
    """
    Metadata for a single library record.

    nasa_id and title are optional here: the library occasionally omits
    them, and the client falls back to a derived key / "Untitled image".
    """
    nasa_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    date_created: Optional[str] = None

    model_config = {"extra": "allow"}


class NasaImageLink(BaseModel):
    # Preview links occasionally arrive without an href
    href: Optional[str] = None
    rel: Optional[str] = None
    render: Optional[str] = None

    model_config = {"extra": "allow"}


class NasaImageItem(BaseModel):
    data: List[NasaImageData] = Field(default_factory=list)
    links: Optional[List[NasaImageLink]] = None

    model_config = {"extra": "allow"}


class NasaImageMetadata(BaseModel):
    # Any: the client decides whether the value is usable as a number
    total_hits: Optional[Any] = None

    model_config = {"extra": "allow"}


class NasaImageCollection(BaseModel):
    items: List[NasaImageItem] = Field(default_factory=list)
    metadata: Optional[NasaImageMetadata] = None

    model_config = {"extra": "allow"}


class NasaImageSearchResult(BaseModel):
    """Full search response: `{collection: {items, metadata?, links?}}`."""
    collection: NasaImageCollection

    model_config = {"extra": "allow"}


# ══════════════════════════════════════════════════════════════════════════
# Errors & Health
# ══════════════════════════════════════════════════════════════════════════


class ErrorEnvelope(BaseModel):
    """
    Error body shared by every endpoint.

    Example:
        {
            "ok": false,
            "error": "Invalid 'count' parameter: must be a number.",
            "code": "validation_error",
            "request_id": "a1b2c3d4"
        }
    """
    ok: bool = False
    error: str = Field(description="Human-readable error description")
    code: str = Field(description="Machine-readable error code")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    nasa_api_key: str = Field(description="Credential state: configured, missing")
    uptime_seconds: float = Field(description="Seconds since service started")
