#!/usr/bin/env python3
"""Geocode active companies that are missing coordinates, one request at a time."""

import argparse
import logging
import sys

from bouncehouse.config import settings
from bouncehouse.data.companies_repository import get_company_repository
from bouncehouse.main import configure_logging
from bouncehouse.models.domain import CoordinateUpdateStatus
from bouncehouse.services.location import GeocodingConfig, LocationService
from bouncehouse.services.location.distance import has_coordinates


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--delay",
        type=float,
        default=settings.coordinate_batch_delay_seconds,
        help="Seconds to wait between geocoding requests (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    configure_logging()
    logger = logging.getLogger("backfill_coordinates")

    repository = get_company_repository()
    service = LocationService(GeocodingConfig.from_settings(settings), repository)
    pending = [company for company in repository.list_active() if not has_coordinates(company)]
    if not pending:
        logger.info("All active companies already have coordinates")
        return 0

    results = service.batch_update_company_coordinates(pending, delay_seconds=args.delay)
    failed = [result for result in results if result.status is CoordinateUpdateStatus.FAILED]
    for result in results:
        if not result.succeeded:
            logger.warning(f"{result.company_id}: {result.status.value} ({result.reason})")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
