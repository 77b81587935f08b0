"""Utilities for turning annotate-image responses into entity views."""

import logging
from typing import Any, Dict, List, Mapping

from gcloud_lite.vision.entity import Entity

logger = logging.getLogger(__name__)

ENTITY_FEATURES = {
    "labels": "labelAnnotations",
    "landmarks": "landmarkAnnotations",
    "logos": "logoAnnotations",
}


def _warn_on_error(response: Mapping[str, Any]) -> None:
    error = response.get("error")
    if error:
        logger.warning("Annotate response carries an error: %s", error)


def _collect_entities(response: Mapping[str, Any], key: str) -> List[Entity]:
    items = response.get(key)
    if not isinstance(items, list):
        return []

    entities: List[Entity] = []
    for item in items:
        if not isinstance(item, Mapping):
            logger.debug("Skipping non-mapping %s item: %r", key, item)
            continue
        entities.append(Entity.from_raw(item))
    return entities


def entities_from_response(response: Mapping[str, Any], feature: str) -> List[Entity]:
    """Return the entities detected for ``feature`` (labels, landmarks or logos)."""
    if feature not in ENTITY_FEATURES:
        raise ValueError(f"Unknown entity feature {feature!r}; expected one of {sorted(ENTITY_FEATURES)}")
    if not isinstance(response, Mapping):
        return []
    _warn_on_error(response)
    return _collect_entities(response, ENTITY_FEATURES[feature])


def summarize_response(response: Mapping[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    if not isinstance(response, Mapping):
        response = {}
    _warn_on_error(response)
    return {
        feature: [entity.to_dict() for entity in _collect_entities(response, key)]
        for feature, key in ENTITY_FEATURES.items()
    }
