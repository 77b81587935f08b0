"""Read-only view over a Vision ``EntityAnnotation``.

An entity describes something detected in an image: a label, a landmark or
a logo. It may carry a Knowledge Graph id (``mid``). The view wraps the
decoded response as-is and never validates it; missing or malformed fields
come back as ``None`` or as empty collections.

Example::

    landmark = Entity.from_raw(response["landmarkAnnotations"][0])
    landmark.description   # "Mount Rushmore"
    landmark.mid           # "/m/019dvv"
    landmark.locations[0]  # Location(latitude=43.879, longitude=-103.459)
"""

from __future__ import annotations

from functools import cached_property
from typing import Any, Dict, Iterable, List, Mapping, Optional

from gcloud_lite.models import Location, RawEntity, Vertex


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


class Entity:
    """Characteristics of an entity detected in an image."""

    def __init__(self, raw: Optional[RawEntity] = None) -> None:
        self._raw: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    @classmethod
    def from_raw(cls, raw: Optional[RawEntity]) -> "Entity":
        return cls(raw)

    @property
    def raw(self) -> Mapping[str, Any]:
        return self._raw

    @property
    def mid(self) -> Optional[str]:
        """Opaque entity id, sometimes resolvable in the Knowledge Graph."""
        return self._raw.get("mid")

    @property
    def id(self) -> Optional[str]:
        return self.mid

    @property
    def locale(self) -> Optional[str]:
        """ISO 639-1 language code of ``description``."""
        return self._raw.get("locale")

    @property
    def description(self) -> Optional[str]:
        return self._raw.get("description")

    @property
    def score(self) -> Optional[float]:
        """Overall score of the result, in [0, 1]."""
        return self._raw.get("score")

    @property
    def confidence(self) -> Optional[float]:
        """Accuracy of the detection itself, in [0, 1].

        For an image of the Eiffel Tower this is the confidence that there is
        a tower in the image.
        """
        return self._raw.get("confidence")

    @property
    def topicality(self) -> Optional[float]:
        """Relevancy of the label to the image, in [0, 1]."""
        return self._raw.get("topicality")

    @cached_property
    def bounds(self) -> List[Vertex]:
        """Image region of the entity. Not filled for label detection."""
        if "boundingPoly" not in self._raw:
            return []
        poly = self._raw["boundingPoly"]
        if not isinstance(poly, Mapping):
            return []
        return [Vertex.from_raw(vertex) for vertex in _as_list(poly.get("vertices"))]

    @cached_property
    def locations(self) -> List[Location]:
        """Coordinates for the entity, usually present for landmarks.

        There may be several: one for the scene in the image and another for
        where the picture was taken.
        """
        locations: List[Location] = []
        for info in _as_list(self._raw.get("locations")):
            lat_lng = info.get("latLng") if isinstance(info, Mapping) else None
            locations.append(Location.from_raw(lat_lng))
        return locations

    @cached_property
    def properties(self) -> Dict[str, Any]:
        return dict(self._property_pairs(self._raw.get("properties")))

    @staticmethod
    def _property_pairs(items: Any) -> Iterable[tuple]:
        for item in _as_list(items):
            if not isinstance(item, Mapping):
                continue
            name = item.get("name")
            try:
                hash(name)
            except TypeError:
                continue
            yield name, item.get("value")

    def to_dict(self) -> Dict[str, Any]:
        """Deep conversion to plain dicts and lists."""
        return {
            "id": self.mid,
            "locale": self.locale,
            "description": self.description,
            "score": self.score,
            "confidence": self.confidence,
            "topicality": self.topicality,
            "bounds": [vertex.to_dict() for vertex in self.bounds],
            "locations": [location.to_dict() for location in self.locations],
            "properties": dict(self.properties),
        }

    def __str__(self) -> str:
        return (
            f"id: {self.mid!r}, locale: {self.locale!r}, description: {self.description!r}, "
            f"score: {self.score!r}, confidence: {self.confidence!r}, topicality: {self.topicality!r}, "
            f"bounds: {len(self.bounds)}, locations: {len(self.locations)}, properties: {self.properties!r}"
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self}>"
