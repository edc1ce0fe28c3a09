import argparse
import asyncio
import json
import logging
import sys
from typing import Sequence

from athenabridge.config import settings
from athenabridge.errors import AthenaBridgeError
from athenabridge.logging import setup_logging
from athenabridge.models import QueryRequest
from athenabridge.service import AthenaQueryService


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="athenabridge", description="Run a query and print its results as JSON.")
    parser.add_argument("sql", nargs="?", help="SQL statement to execute.")
    parser.add_argument("--execution-id", help="Fetch results of an existing execution instead of submitting.")
    parser.add_argument("--database")
    parser.add_argument("--workgroup")
    parser.add_argument("--catalog")
    parser.add_argument("--output-location")
    parser.add_argument("--parameter", action="append", default=[], dest="parameters")
    parser.add_argument("--poll-interval-ms", type=int)
    parser.add_argument("--page-size", type=int)
    parser.add_argument("--next-token")
    parser.add_argument("--raw", action="store_true", help="Return untyped rows.")
    parser.add_argument("--metadata", action="store_true", help="Include column metadata.")
    parser.add_argument("--stats", action="store_true", help="Include execution statistics.")
    parser.add_argument("--no-wait", action="store_true", help="Return as soon as the query is submitted.")
    args = parser.parse_args(argv)
    if not args.sql and not args.execution_id:
        parser.error("either a SQL statement or --execution-id is required")
    return args


def _build_request(args: argparse.Namespace) -> QueryRequest:
    return QueryRequest(
        sql=args.sql,
        query_execution_id=args.execution_id,
        database=args.database,
        workgroup=args.workgroup,
        catalog=args.catalog,
        output_location=args.output_location,
        parameters=args.parameters,
        poll_interval_ms=args.poll_interval_ms,
        page_size=args.page_size,
        next_token=args.next_token,
        format_json=False if args.raw else None,
        include_metadata=True if args.metadata else None,
        get_stats=True if args.stats else None,
        wait_for_results=not args.no_wait,
    )


async def run_query(args: argparse.Namespace, service: AthenaQueryService) -> dict:
    result = await service.query(_build_request(args))
    return result.model_dump(mode="json", exclude_none=True)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging(level=settings.LOG_LEVEL)
    logger = logging.getLogger("athenabridge.cli")

    service = AthenaQueryService.from_settings(settings)
    try:
        payload = asyncio.run(run_query(args, service))
    except AthenaBridgeError as exc:
        logger.error("Query failed: %s", exc)
        return 1
    json.dump(payload, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
