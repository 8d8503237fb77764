"""Command line demo of the Context API"""
import argparse
import logging
import sys
from typing import List, Optional

import httpx
from pydantic import ValidationError

from context_demo import __version__
from context_demo.core.config import Settings, get_settings
from context_demo.core.errors import ConfigurationError
from context_demo.core.ids import AUTOMATIC_SESSION_ID, normalize_session_id
from context_demo.core.startup_checks import (
    normalize_api_server_url,
    normalize_contribution_mode,
    normalize_query_type,
    require_api_key,
    validate_poll_settings,
)
from context_demo.services.entity_cache import EntityDetailCache
from context_demo.services.poll_service import ContentPoller
from context_demo.services.print_service import PrintService
from context_demo.services.query_service import QueryService
from context_demo.services.request_service import RequestService, build_user_agent

logger = logging.getLogger(__name__)

QUERY_TYPE_HELP = (
    "The type of query to make. One of "
    "FEED (keep on top of latest breaking news), "
    "RECOMMENDATION (get 'up to speed' quickly), "
    "SURVEY, SEARCH, DISCOVERY"
)

CONTRIBUTIONS_HELP = (
    "Expose which factors contributed to the score of a found content item. One of "
    "NONE (no contributions), DIRECT (direct contributions), ALL (all contributions)"
)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="context-demo",
        description="Demo client for the Context API",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-help", "--help", "-h", "-?", action="help", help="Prints this help page")
    parser.add_argument(
        "-apiserver", dest="api_server", metavar="URL", default=settings.API_SERVER_URL,
        help="The Context API server to connect to",
    )
    parser.add_argument(
        "-apikey", dest="api_key", metavar="API_KEY", default=settings.API_KEY,
        help="The key used for the API connections",
    )
    parser.add_argument(
        "-sessionid", dest="session_id", metavar="SESSION_ID", default=AUTOMATIC_SESSION_ID,
        help="The session id to use for requests",
    )
    parser.add_argument(
        "-sources", dest="sources", action="store_true",
        help="Output the entitled sources. In this mode, no query for content is made.",
    )
    parser.add_argument(
        "-query", dest="query", metavar="QUERY", default="",
        help="Query only for content items of the given entity (E.g.: AAPL, Google)",
    )
    parser.add_argument(
        "-exact", dest="exact", action="store_true",
        help="When matching entities, consider only exact matches, instead of also partial matches",
    )
    parser.add_argument(
        "-querytype", dest="query_type", metavar="TYPE", default="FEED", help=QUERY_TYPE_HELP,
    )
    parser.add_argument(
        "-contributions", dest="contributions", metavar="MODE", default="NONE", help=CONTRIBUTIONS_HELP,
    )
    parser.add_argument(
        "-v", "-verbose", dest="verbose", action="count", default=0,
        help="Increase log verbosity (repeat for more)",
    )
    parser.add_argument(
        "-pausesecs", dest="pause_secs", type=int, default=settings.PAUSE_SECS, help=argparse.SUPPRESS,
    )
    return parser


def setup_logging(verbose: int, base_level: str = "WARNING") -> None:
    level = getattr(logging, (base_level or "WARNING").upper(), logging.WARNING)
    if verbose >= 2:
        level = min(level, logging.DEBUG)
    elif verbose == 1:
        level = min(level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def main(
    argv: Optional[List[str]] = None,
    settings: Optional[Settings] = None,
    transport: Optional[httpx.BaseTransport] = None,
    sleep=None,
    max_iterations: Optional[int] = None,
) -> int:
    if settings is None:
        try:
            settings = get_settings()
        except ValidationError as e:
            print(f"Invalid configuration: {e}", file=sys.stderr)
            return 1
    args = build_parser(settings).parse_args(argv)
    setup_logging(args.verbose, settings.LOG_LEVEL)

    try:
        api_key = require_api_key(args.api_key, settings.SUPPORT_EMAIL_ADDRESS)
        api_server_url = normalize_api_server_url(args.api_server)
        validate_poll_settings(args.pause_secs, settings.BATCH_SIZE, settings.MAX_ENTITIES)
    except ConfigurationError as e:
        print(str(e), file=sys.stderr)
        return 1

    session_id = normalize_session_id(args.session_id)
    query_type = normalize_query_type(args.query_type)
    contribution_mode = normalize_contribution_mode(args.contributions)

    print(f"Using Context API server at {api_server_url}")
    logger.info(f"Session id: {session_id}")

    request_service = RequestService(
        api_server_url,
        timeout_s=settings.REQUEST_TIMEOUT_S,
        user_agent=build_user_agent(
            settings.APP_NAME, __version__, settings.BUILD_VCS_ID, settings.BUILD_TIME
        ),
        transport=transport,
    )
    query_service = QueryService(api_key, session_id, request_service)
    entity_cache = EntityDetailCache(
        query_service,
        ttl_seconds=settings.ENTITY_CACHE_TTL_S,
        max_size=settings.ENTITY_CACHE_MAX_SIZE,
    )
    printer = PrintService(entity_cache)

    try:
        if args.sources:
            printer.print_entitled_sources(query_service.query_entitled_sources())
        else:
            poller_kwargs = {}
            if sleep is not None:
                poller_kwargs["sleep"] = sleep
            poller = ContentPoller(
                query_service,
                printer,
                query_type=query_type,
                contribution_mode=contribution_mode,
                batch_size=settings.BATCH_SIZE,
                pause_secs=args.pause_secs,
                max_entities=settings.MAX_ENTITIES,
                **poller_kwargs,
            )
            poller.run(args.query, exact=args.exact, max_iterations=max_iterations)
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130
    except Exception as e:
        logger.exception(f"Querying the Context API failed: {type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
