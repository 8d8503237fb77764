"""Polling the Context API for new content items"""
import logging
import time
from collections import deque
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from context_demo.services.json_fields import scalar_to_string
from context_demo.services.print_service import PrintService
from context_demo.services.query_service import (
    ContributionMode,
    EntityQueryType,
    QueryMode,
    QueryService,
    QueryType,
)

logger = logging.getLogger(__name__)


class PollState(Enum):
    RESOLVING = "resolving"
    INITIAL_QUERY = "initial_query"
    UPDATE_QUERY = "update_query"


class SeenContentLedger:
    """Most recently seen content ids first, holding at most ``capacity`` of them."""

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._ids: deque = deque()

    def __contains__(self, content_id: object) -> bool:
        return content_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def add(self, content_id: str) -> None:
        self._ids.appendleft(content_id)
        while len(self._ids) > self.capacity:
            self._ids.pop()


class ContentPoller:
    """
    Resolves a query to entities once, then keeps asking for recommendations.

    The first recommendation query is an INITIAL one, all following ones are
    UPDATEs. Only content items that have not been printed recently get
    printed. Errors are not retried; they end the loop.
    """

    def __init__(
        self,
        query_service: QueryService,
        printer: PrintService,
        query_type: QueryType = QueryType.FEED,
        contribution_mode: ContributionMode = ContributionMode.NONE,
        batch_size: int = 10,
        pause_secs: float = 30,
        max_entities: int = 20,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.query_service = query_service
        self.printer = printer
        self.query_type = query_type
        self.contribution_mode = contribution_mode
        self.batch_size = batch_size
        self.pause_secs = pause_secs
        self.max_entities = max_entities
        self._sleep = sleep
        self.state = PollState.RESOLVING
        self.seen = SeenContentLedger(2 * batch_size)

    def resolve_entity_ids(self, query: str, exact: bool = False) -> List[str]:
        if not query:
            # No filter, so the broadest set of recommendations.
            self.state = PollState.INITIAL_QUERY
            return []

        entity_query_type = EntityQueryType.EXACT_MATCH if exact else EntityQueryType.PARTIAL_MATCH
        results = self.query_service.query_entities(query, entity_query_type, self.max_entities)

        self.printer.println(f"Query for '{query}' will look for those entities:")
        entity_ids = []
        for result in results:
            entity_id = result.get("entityID") if isinstance(result, dict) else None
            if entity_id is None or isinstance(entity_id, (dict, list)):
                logger.debug("Skipping entity without proper entityID")
                continue
            self.printer.print_entity(result)
            entity_ids.append(scalar_to_string(entity_id))

        self.state = PollState.INITIAL_QUERY
        return entity_ids

    def process_recommendations(self, recommendations: List[Dict[str, Any]]) -> int:
        self.printer.println(
            f"Received {len(recommendations)} recommendations. (Printing only new ones.)"
        )
        printed = 0
        for recommendation in recommendations:
            content_id = recommendation.get("contentID") if isinstance(recommendation, dict) else None
            if content_id is None or isinstance(content_id, (dict, list)):
                logger.debug("Skipping recommendation without proper contentID")
                continue
            content_id = scalar_to_string(content_id)
            if content_id in self.seen:
                continue
            self.printer.print_recommendation(recommendation)
            self.seen.add(content_id)
            printed += 1
        return printed

    @property
    def query_mode(self) -> QueryMode:
        return QueryMode.UPDATE if self.state == PollState.UPDATE_QUERY else QueryMode.INITIAL

    def poll_once(self, entity_ids: Iterable[str]) -> int:
        if self.state == PollState.RESOLVING:
            raise RuntimeError("Entity ids have not been resolved yet")

        recommendations = self.query_service.query_recommendations(
            self.query_type,
            self.query_mode,
            self.batch_size,
            self.contribution_mode,
            entity_ids,
        )
        # From now on, all queries are updates.
        self.state = PollState.UPDATE_QUERY
        return self.process_recommendations(recommendations)

    def pause_before_update(self) -> None:
        self.printer.println(
            f"Sleeping for {self.pause_secs} seconds before asking for updated content items"
        )
        self._sleep(self.pause_secs)

    def run(self, query: str = "", exact: bool = False, max_iterations: Optional[int] = None) -> None:
        entity_ids = self.resolve_entity_ids(query, exact)
        iterations = 0
        while max_iterations is None or iterations < max_iterations:
            self.poll_once(entity_ids)
            iterations += 1
            if max_iterations is not None and iterations >= max_iterations:
                break
            self.pause_before_update()
