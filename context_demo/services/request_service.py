"""Low-level requests against a Context API endpoint"""
import json
import logging
import re
from typing import Any, Dict, Optional

import httpx

from context_demo import __version__
from context_demo.core.errors import (
    ContentTypeError,
    MalformedResponseError,
    ResponseStatusError,
    TransportError,
)
from context_demo.services.json_fields import scalar_to_string

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

_CONTENT_TYPE_SPLIT = re.compile(r"[; ]")


def dump_json(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def build_user_agent(product: str, version: str, vcs_id: str, build_time: str) -> str:
    return f"{product}/{version} (build {vcs_id}/{build_time})"


DEFAULT_USER_AGENT = build_user_agent("context-demo", __version__, "unknown", "unknown")


def _error_hint(body: str) -> str:
    try:
        data = json.loads(body)
        if not isinstance(data, dict):
            return ""
        if "errorCode" in data:
            return dump_json(data)
        if "errorMessage" in data:
            return scalar_to_string(data["errorMessage"])
    except (ValueError, TypeError):
        # Only the status line is left to report.
        pass
    return ""


def parse_response(
    status_code: int,
    reason_phrase: str,
    content_type: Optional[str],
    body: str,
) -> Dict[str, Any]:
    """
    Turn a raw API response into its JSON object.

    The API never answers with partial results, so anything but 200 is an
    error. For those, the JSON error document the API sends is mined for a
    descriptive hint.

    Raises:
        ResponseStatusError: status is not 200
        ContentTypeError: 200, but not sent as application/json
        MalformedResponseError: 200 JSON response that is not a JSON object
    """
    if status_code != 200:
        message = f"{status_code} {reason_phrase}"
        hint = _error_hint(body)
        if hint:
            message += f". ({hint})"
        raise ResponseStatusError(f"Server responded with {message}", status_code)

    raw_content_type = content_type or ""
    parameterless = _CONTENT_TYPE_SPLIT.split(raw_content_type.strip(), maxsplit=1)[0]
    if parameterless != JSON_CONTENT_TYPE:
        raise ContentTypeError(
            f"Received content type '{raw_content_type}' instead of '{JSON_CONTENT_TYPE}'"
        )

    try:
        data = json.loads(body)
    except ValueError as e:
        raise MalformedResponseError(f"Response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Response is a JSON {type(data).__name__} instead of a JSON object"
        )
    return data


class RequestService:
    """POSTs form-encoded JSON payloads to a Context API server."""

    def __init__(
        self,
        api_server_url: str,
        timeout_s: float = 30.0,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_server_url = api_server_url.rstrip("/")
        self.timeout_s = timeout_s
        self.user_agent = user_agent if user_agent is not None else DEFAULT_USER_AGENT
        self._transport = transport

    def post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.api_server_url}{path}"
        payload_string = dump_json(payload)
        headers = {
            "Accept": JSON_CONTENT_TYPE,
            "User-Agent": self.user_agent,
        }

        logger.debug(f"POSTing request to {url} with payload json={payload_string}")
        try:
            # One connection per request, closed right after.
            with httpx.Client(timeout=self.timeout_s, transport=self._transport) as client:
                resp = client.post(url, data={"json": payload_string}, headers=headers)
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {url} failed: {type(e).__name__}: {e}") from e

        return parse_response(
            resp.status_code,
            resp.reason_phrase,
            resp.headers.get("content-type"),
            resp.text,
        )
