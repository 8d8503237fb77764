"""Context API queries"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List

from context_demo.core.errors import MalformedResponseError
from context_demo.services.request_service import RequestService

PATH_SOURCES = "/v2/sources"
PATH_QUERY = "/v2/query"
PATH_DDS = "/v2/dds/"


class QueryType(str, Enum):
    FEED = "FEED"  # keep on top of latest breaking news
    RECOMMENDATION = "RECOMMENDATION"  # get up to speed quickly
    SURVEY = "SURVEY"
    SEARCH = "SEARCH"
    DISCOVERY = "DISCOVERY"


class QueryMode(str, Enum):
    INITIAL = "INITIAL"
    UPDATE = "UPDATE"


class ContributionMode(str, Enum):
    NONE = "NONE"
    DIRECT = "DIRECT"
    ALL = "ALL"


class EntityQueryType(str, Enum):
    EXACT_MATCH = "EXACT_MATCH"
    PARTIAL_MATCH = "PARTIAL_MATCH"
    ENTITY_ID = "ENTITY_ID"


def format_timestamp(moment: datetime) -> str:
    """ISO timestamp in UTC at millisecond precision, as the API expects."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}"


def _extract_array(response: Dict[str, Any], field: str) -> List[Any]:
    value = response.get(field)
    if not isinstance(value, list):
        raise MalformedResponseError(f"Response has no proper '{field}' array")
    return value


class QueryService:
    """Builds Context API queries for one api key and session."""

    def __init__(self, api_key: str, session_id: str, request_service: RequestService):
        self.api_key = api_key
        self.session_id = session_id
        self.request_service = request_service

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def _build_query_stub(self) -> Dict[str, Any]:
        return {
            "apiKey": self.api_key,
            "sessionID": self.session_id,
            "requestSent": format_timestamp(self._now()),
        }

    def query_entitled_sources(self) -> List[Any]:
        """Sources the api key is entitled to."""
        response = self.request_service.post(PATH_SOURCES, self._build_query_stub())
        return _extract_array(response, "sources")

    def query_recommendations(
        self,
        query_type: QueryType,
        query_mode: QueryMode,
        num_items: int,
        contribution_mode: ContributionMode,
        entity_ids: Iterable[str],
    ) -> List[Dict[str, Any]]:
        """
        Query for recommended content items.

        Args:
            query_type: FEED, RECOMMENDATION, ...
            query_mode: INITIAL for the first query of a session, UPDATE afterwards
            num_items: maximum number of items to return
            contribution_mode: NONE, DIRECT or ALL score contribution details
            entity_ids: entities to restrict the content to. Empty for no filtering.

        Returns:
            The recommended content items as returned by the API.
        """
        parameters = {
            "queryType": QueryType(query_type).value,
            "queryMode": QueryMode(query_mode).value,
            "numItems": int(num_items),
            "contributionMode": ContributionMode(contribution_mode).value,
        }

        entities = [{"entityID": entity_id, "weight": 1.0} for entity_id in entity_ids]
        interests: Dict[str, Any] = {}
        if entities:
            interests["entities"] = entities

        query = self._build_query_stub()
        query["parameters"] = parameters
        query["interests"] = interests

        response = self.request_service.post(PATH_QUERY, query)
        return _extract_array(response, "recommendations")

    def query_entities(
        self,
        query: str,
        query_type: EntityQueryType,
        max_results: int,
    ) -> List[Dict[str, Any]]:
        """Resolve a free-text query or an entity id through DDS."""
        if max_results < 0:
            raise ValueError("max_results must not be negative")

        query_obj = self._build_query_stub()
        query_obj["query"] = query
        query_obj["queryType"] = EntityQueryType(query_type).value
        query_obj["maxResults"] = int(max_results)

        response = self.request_service.post(PATH_DDS, query_obj)
        return _extract_array(response, "result")
