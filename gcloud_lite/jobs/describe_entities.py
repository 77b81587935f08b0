"""CLI job that describes the entities found in a saved annotate-image response."""

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from gcloud_lite.core.config import ConfigError
from gcloud_lite.etl.annotations import ENTITY_FEATURES, entities_from_response, summarize_response
from gcloud_lite.vendors.pubsub import pubsub

logger = logging.getLogger(__name__)


def load_response(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)
    # batch responses wrap single-image results in "responses"
    if isinstance(payload, dict) and isinstance(payload.get("responses"), list) and payload["responses"]:
        payload = payload["responses"][0]
    if not isinstance(payload, dict):
        raise ValueError(f"{path} does not contain a JSON object")
    return payload


def describe(response: Dict[str, Any], feature: Optional[str] = None) -> List[str]:
    features = [feature] if feature else list(ENTITY_FEATURES)
    lines: List[str] = []
    for name in features:
        for entity in entities_from_response(response, name):
            lines.append(f"{name}: {entity}")
    return lines


def run_describe(path: Path, *, feature: Optional[str], as_json: bool, topic: Optional[str]) -> str:
    response = load_response(path)
    logger.info("Loaded annotate response from %s", path)

    if as_json:
        summary = summarize_response(response)
        if feature:
            summary = {feature: summary[feature]}
        output = json.dumps(summary, ensure_ascii=False, indent=2)
    else:
        output = "\n".join(describe(response, feature))

    if topic:
        message_ids = pubsub().publish(topic, output, source=path.name)
        logger.info("Published summary of %s to %s: ids=%s", path.name, topic, message_ids)

    return output


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Describe entities in a Vision annotate-image response")
    parser.add_argument("response", type=Path, help="Path to a JSON annotate-image response")
    parser.add_argument("--feature", choices=sorted(ENTITY_FEATURES), help="Only show one feature")
    parser.add_argument("--json", dest="as_json", action="store_true", help="Print entities as JSON")
    parser.add_argument("--publish-topic", dest="topic", help="Also publish the output to this Pub/Sub topic")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    try:
        output = run_describe(args.response, feature=args.feature, as_json=args.as_json, topic=args.topic)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except Exception as exc:  # noqa: BLE001
        logger.error("describe_entities failed: %s", exc, exc_info=True)
        raise SystemExit(1) from exc

    print(output)


if __name__ == "__main__":
    main()
