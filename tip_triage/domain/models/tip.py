"""Tip domain models.

This module defines the immutable submission that enters the engine:
- GeoPoint: WGS84 coordinate pair
- TipLocation: optional coordinates plus free-text description
- PhotoEvidence: reference to a submitted photo and its upstream analysis
- TipsterIdentity: email / phone / anonymous id the tip was submitted under
- Tip: the submission itself

A Tip is created once by the external intake collaborator and is never
mutated afterwards. Everything the engine learns about a tip lives in its
TipVerification and QueueItem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

MAX_CONTENT_LENGTH: int = 20_000
"""Upper bound on tip content accepted by the engine."""


class TipSource(str, Enum):
    """Channel a tip arrived through."""

    WEB = "web"
    PHONE = "phone"
    EMAIL = "email"
    SOCIAL_MEDIA = "social_media"
    PARTNER_API = "partner_api"


class IdentityKind(str, Enum):
    """Kind of identity a tipster submitted under."""

    EMAIL = "email"
    PHONE = "phone"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees.

    Raises:
        ValueError: If either coordinate is out of range.
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude must be within [-90, 90], got {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(
                f"longitude must be within [-180, 180], got {self.longitude}"
            )


@dataclass(frozen=True)
class TipLocation:
    """Where the tipster claims the sighting happened.

    Attributes:
        point: Coordinates, if the tipster supplied them.
        description: Free-text location ("corner of 5th and Main").
    """

    point: GeoPoint | None = None
    description: str | None = None

    @property
    def has_coordinates(self) -> bool:
        return self.point is not None

    @property
    def is_empty(self) -> bool:
        return self.point is None and not self.description


@dataclass(frozen=True)
class PhotoEvidence:
    """A photo reference attached to a tip.

    The engine never stores or inspects image bytes. Upstream media
    analysis (EXIF extraction, reverse image search, manipulation checks)
    is reported through these fields.

    Attributes:
        reference: Opaque storage reference or URL.
        has_exif: Whether EXIF metadata was present.
        gps: GPS point embedded in the photo, if any.
        taken_at: Capture timestamp from metadata, if any.
        device: Capture device string, if any.
        is_stock_photo: Reverse search matched a stock image.
        is_ai_generated: Detector flagged the image as synthetic.
        is_manipulated: Detector flagged edits.
        manipulation_confidence: Confidence of the manipulation flag (0-1).
        matches_missing_person: Face match against the missing person.
    """

    reference: str
    has_exif: bool = False
    gps: GeoPoint | None = None
    taken_at: datetime | None = None
    device: str | None = None
    is_stock_photo: bool = False
    is_ai_generated: bool = False
    is_manipulated: bool = False
    manipulation_confidence: float = 0.0
    matches_missing_person: bool = False

    def __post_init__(self) -> None:
        if not self.reference:
            raise ValueError("photo reference must not be empty")
        if not 0.0 <= self.manipulation_confidence <= 1.0:
            raise ValueError(
                "manipulation_confidence must be within [0, 1], "
                f"got {self.manipulation_confidence}"
            )
        if self.taken_at is not None and self.taken_at.tzinfo is None:
            raise ValueError("taken_at must be timezone-aware (UTC)")


@dataclass(frozen=True)
class TipsterIdentity:
    """The identity a tip was submitted under.

    Attributes:
        kind: email, phone or anonymous.
        value: The address, number or anonymous token.
    """

    kind: IdentityKind
    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("tipster identity value must not be empty")

    @property
    def key(self) -> str:
        """Stable lookup key, normalized for case-insensitive kinds."""
        value = self.value.strip()
        if self.kind == IdentityKind.EMAIL:
            value = value.lower()
        return f"{self.kind.value}:{value}"


@dataclass(frozen=True, eq=True)
class Tip:
    """An immutable crowd-submitted tip about a missing-person case.

    Attributes:
        tip_id: Identifier assigned by the intake collaborator.
        case_id: Case the tip refers to.
        content: Free-text description of the sighting.
        tipster: Identity the tip was submitted under.
        submitted_at: When intake durably stored the tip (UTC).
        location: Claimed sighting location, if any.
        sighted_at: Claimed sighting time (UTC), if any.
        photos: Attached photo references.
        is_anonymous: Whether the tipster asked to stay anonymous.
        source: Intake channel.
    """

    tip_id: UUID
    case_id: UUID
    content: str
    tipster: TipsterIdentity
    submitted_at: datetime
    location: TipLocation | None = field(default=None)
    sighted_at: datetime | None = field(default=None)
    photos: tuple[PhotoEvidence, ...] = field(default_factory=tuple)
    is_anonymous: bool = field(default=False)
    source: TipSource = field(default=TipSource.WEB)

    def __post_init__(self) -> None:
        """Validate tip fields after initialization.

        Raises:
            ValueError: If any field validation fails.
        """
        if not self.content or not self.content.strip():
            raise ValueError("content must not be empty")
        if len(self.content) > MAX_CONTENT_LENGTH:
            raise ValueError(
                f"content exceeds {MAX_CONTENT_LENGTH} characters "
                f"({len(self.content)})"
            )
        if self.submitted_at.tzinfo is None:
            raise ValueError("submitted_at must be timezone-aware (UTC)")
        if self.sighted_at is not None and self.sighted_at.tzinfo is None:
            raise ValueError("sighted_at must be timezone-aware (UTC)")

    @property
    def point(self) -> GeoPoint | None:
        """Claimed sighting coordinates, if supplied."""
        if self.location is None:
            return None
        return self.location.point

    @property
    def location_text(self) -> str | None:
        if self.location is None:
            return None
        return self.location.description

    @property
    def has_photos(self) -> bool:
        return len(self.photos) > 0
