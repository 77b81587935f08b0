"""Client factory and thin REST wrapper for the Pub/Sub service."""

import base64
import logging
from typing import Any, Dict, List, Optional, Union

import requests

from gcloud_lite.core.config import PubsubSettings, get_pubsub_settings

logger = logging.getLogger(__name__)

DEFAULT_SCOPE = "https://www.googleapis.com/auth/pubsub"
_BASE_URL = "https://pubsub.googleapis.com/v1"
_DEFAULT_TIMEOUT = 10


class PubsubError(RuntimeError):
    """Raised when the Pub/Sub API returns a non-successful response."""


class PubsubClient:
    def __init__(self, settings: PubsubSettings, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()
        token = (settings.client_config or {}).get("access_token")
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @property
    def project_id(self) -> Optional[str]:
        return self.settings.project_id

    @property
    def scope(self) -> Union[str, List[str]]:
        return self.settings.scope or DEFAULT_SCOPE

    @property
    def timeout(self) -> int:
        return self.settings.timeout or _DEFAULT_TIMEOUT

    @property
    def base_url(self) -> str:
        if self.settings.emulator_host:
            return f"http://{self.settings.emulator_host}/v1"
        return _BASE_URL

    def topic_path(self, topic: str) -> str:
        if not topic:
            raise ValueError("Topic name must be provided.")
        if topic.startswith("projects/"):
            return topic
        if not self.project_id:
            raise PubsubError("A project id is required to address Pub/Sub topics.")
        return f"projects/{self.project_id}/topics/{topic}"

    def publish(self, topic: str, data: Union[str, bytes], **attributes: str) -> List[str]:
        """Publish one message and return the server-assigned message ids."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        if not data and not attributes:
            raise ValueError("A message needs data or at least one attribute.")

        message: Dict[str, Any] = {"data": base64.b64encode(data).decode("ascii")}
        if attributes:
            message["attributes"] = {key: str(value) for key, value in attributes.items()}

        url = f"{self.base_url}/{self.topic_path(topic)}:publish"
        try:
            response = self.session.post(url, json={"messages": [message]}, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("publish failed: topic=%s, error=%s", topic, exc)
            raise PubsubError(str(exc)) from exc

        payload = _json_or_empty(response)
        if not (200 <= response.status_code < 300):
            error = payload.get("error") or {}
            message_text = error.get("message") if isinstance(error, dict) else None
            logger.error("publish failed: status=%s, error_message=%s", response.status_code, message_text)
            raise PubsubError(message_text or f"HTTP {response.status_code}")

        message_ids = payload.get("messageIds", [])
        logger.info("Published %d message(s) to %s", len(message_ids), topic)
        return message_ids


def _json_or_empty(response: Any) -> Dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def pubsub(
    project_id: Optional[str] = None,
    credentials: Optional[Union[str, Dict[str, Any]]] = None,
    *,
    scope: Optional[Union[str, List[str]]] = None,
    timeout: Optional[int] = None,
    client_config: Optional[Dict[str, Any]] = None,
) -> PubsubClient:
    """Create a new Pub/Sub client. Each call creates a new connection.

    Arguments left as ``None`` fall back to the configured defaults (see
    :func:`gcloud_lite.core.config.get_pubsub_settings`).
    """
    settings = get_pubsub_settings().replace(
        project_id=project_id,
        credentials=credentials,
        scope=scope,
        timeout=timeout,
        client_config=client_config,
    )
    return PubsubClient(settings)
