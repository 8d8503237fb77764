"""Human readable output of query results"""
import logging
import sys
from typing import Any, Dict, Iterable, Optional, TextIO, Union

from context_demo.services.entity_cache import EntityDetailCache
from context_demo.services.json_fields import empty_marker, get_as_float, get_as_list, get_as_string

logger = logging.getLogger(__name__)

RELEVANCE_ENTITY = "RELEVANCE_ENTITY"


class PrintService:
    """Formats sources, entities and recommendations onto a text stream."""

    def __init__(self, entity_cache: Optional[EntityDetailCache], out: Optional[TextIO] = None):
        self.entity_cache = entity_cache
        self.out = out if out is not None else sys.stdout

    def print(self, text: str) -> None:
        self.out.write(text)

    def println(self, text: str = "") -> None:
        self.out.write(text + "\n")

    def print_entitled_sources(self, sources: Iterable[Any]) -> None:
        sources = list(sources)
        if not sources:
            self.println("API key is not entitled for any source.")
            return
        self.println("API key is entitled for the following sources:")
        for source in sources:
            self.println(f"* {source}")

    def print_entity(self, entity: Dict[str, Any]) -> None:
        entity_id = get_as_string(entity, "entityID")
        name = get_as_string(entity, "displayName")
        entity_type = get_as_string(entity, "entityType")
        description = get_as_string(entity, "description")
        self.println(f"* {entity_id} -> {name} ({entity_type}, {description})")

    def print_entity_details(self, entity: Union[str, Dict[str, Any]]) -> None:
        """
        Print the details of an entity, given either as entity id or as details object.

        Ids get resolved through the entity cache. The details are only
        decoration, so a failed lookup is reported inline and otherwise ignored.
        """
        if isinstance(entity, dict):
            details = entity
        else:
            try:
                if self.entity_cache is None:
                    raise LookupError("no entity cache configured")
                details = self.entity_cache.get(entity)
            except Exception as e:
                logger.warning(f"Loading details for entity {entity} failed: {e}")
                self.println(" (failed to load details)")
                return

        self.println(
            f" (i.e.: {get_as_string(details, 'entityType')}"
            f", {get_as_string(details, 'displayName')}"
            f", {get_as_string(details, 'description')})"
        )

    def print_contribution(self, contribution: Dict[str, Any]) -> None:
        value = get_as_float(contribution, "value")
        value_str = f"{value:.3f}" if value is not None else empty_marker("value")
        contributor_type = get_as_string(contribution, "contributorType")
        contributor = get_as_string(contribution, "contributor")

        self.print(f"  score-contribution: {value_str} {contributor_type:<18} {contributor}")
        if contributor_type == RELEVANCE_ENTITY:
            self.print_entity_details(contributor)
        else:
            self.println()

    def print_recommendation(self, recommendation: Dict[str, Any]) -> None:
        self.println()
        self.println(f"* {get_as_string(recommendation, 'headline')}")
        self.println()
        for field in ("contentID", "contentType", "source", "timestamp", "score"):
            self.println(f"  {field}: {get_as_string(recommendation, field)}")

        for contribution in get_as_list(recommendation, "contributions"):
            if isinstance(contribution, dict):
                self.print_contribution(contribution)

        self.println(f"  summary: {get_as_string(recommendation, 'summary')}")
        self.println(f"  socialInfo->author: {get_as_string(recommendation, 'socialInfo', 'author')}")
        self.println(f"  linkURL: {get_as_string(recommendation, 'linkURL')}")

        for related in get_as_list(recommendation, "relatedContent"):
            line = "  related content:"
            line += f" {get_as_string(related, 'relationship')}"
            line += f" {get_as_string(related, 'contentItem', 'contentType')}"
            line += f" {get_as_string(related, 'contentItem', 'linkURL')}"
            self.println(line)
