"""Value objects shared by the Vision entity views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, TypedDict


class RawVertex(TypedDict, total=False):
    x: float
    y: float


class RawLatLng(TypedDict, total=False):
    latitude: float
    longitude: float


class RawBoundingPoly(TypedDict, total=False):
    vertices: List[RawVertex]


class RawLocationInfo(TypedDict, total=False):
    latLng: RawLatLng


class RawProperty(TypedDict, total=False):
    name: str
    value: Any


class RawEntity(TypedDict, total=False):
    """Decoded ``EntityAnnotation`` as returned by the Vision REST API."""

    mid: str
    locale: str
    description: str
    score: float
    confidence: float
    topicality: float
    boundingPoly: RawBoundingPoly
    locations: List[RawLocationInfo]
    properties: List[RawProperty]


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    return {}


@dataclass(frozen=True, slots=True)
class Vertex:
    """A 2D point of a bounding polygon, in image pixels."""

    x: Optional[float] = None
    y: Optional[float] = None

    @classmethod
    def from_raw(cls, raw: Optional[RawVertex]) -> "Vertex":
        data = _as_mapping(raw)
        return cls(x=data.get("x"), y=data.get("y"))

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True, slots=True)
class Location:
    """Latitude/longitude pair attached to a detected entity."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def from_raw(cls, raw: Optional[RawLatLng]) -> "Location":
        data = _as_mapping(raw)
        return cls(latitude=data.get("latitude"), longitude=data.get("longitude"))

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {"latitude": self.latitude, "longitude": self.longitude}
