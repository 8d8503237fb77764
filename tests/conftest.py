"""Pytest fixtures"""
import json
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import parse_qs

import httpx
import pytest

from context_demo.services.query_service import QueryService
from context_demo.services.request_service import RequestService

API_BASE = "https://context-api.test"


class FakeContextApi:
    """Answers Context API paths with canned JSON and records the posted payloads."""

    def __init__(self):
        self.routes: Dict[str, Callable[[Dict[str, Any]], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []
        self.payloads: List[Dict[str, Any]] = []

    def on(self, path: str, body: Any = None, status_code: int = 200, handler=None) -> None:
        if handler is None:
            def handler(payload, _body=body, _status=status_code):
                return httpx.Response(_status, json=_body)
        self.routes[path] = handler

    def payloads_for(self, path: str) -> List[Dict[str, Any]]:
        return [p for r, p in zip(self.requests, self.payloads) if r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        form = parse_qs(request.content.decode("utf-8"))
        payload = json.loads(form["json"][0])
        self.requests.append(request)
        self.payloads.append(payload)
        handler = self.routes.get(request.url.path)
        if handler is None:
            return httpx.Response(404, json={"errorMessage": f"no route {request.url.path}"})
        return handler(payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class FakeQueryService:
    """Stands in for QueryService, returning queued results per call."""

    def __init__(self, entities: Optional[Dict[str, Any]] = None, recommendations=None):
        self.entities = entities or {}
        self.recommendations = list(recommendations or [])
        self.entity_calls = []
        self.recommendation_calls = []

    def query_entities(self, query, query_type, max_results):
        self.entity_calls.append((query, query_type, max_results))
        result = self.entities.get(query, [])
        if isinstance(result, Exception):
            raise result
        return result

    def query_recommendations(self, query_type, query_mode, num_items, contribution_mode, entity_ids):
        self.recommendation_calls.append(
            (query_type, query_mode, num_items, contribution_mode, list(entity_ids))
        )
        if not self.recommendations:
            return []
        result = self.recommendations.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_api() -> FakeContextApi:
    return FakeContextApi()


@pytest.fixture
def request_service(fake_api) -> RequestService:
    return RequestService(API_BASE, timeout_s=1.0, user_agent="context-demo/test", transport=fake_api.transport)


@pytest.fixture
def query_service(request_service) -> QueryService:
    return QueryService("test-key", "test-session", request_service)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


def make_recommendation(suffix: str = "Foo", **overrides) -> Dict[str, Any]:
    rec = {
        "contentID": f"id{suffix}",
        "headline": f"headline{suffix}",
        "contentType": f"type{suffix}",
        "source": f"source{suffix}",
        "timestamp": f"timestamp{suffix}",
        "score": 0.5,
        "summary": f"summary{suffix}",
        "linkURL": f"link{suffix}",
        "relatedContent": [],
    }
    rec.update(overrides)
    return rec
