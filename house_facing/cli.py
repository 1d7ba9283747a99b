#!/usr/bin/env python3
"""
Command-line interface for the facing direction engine.

Usage:
    python -m house_facing --address "360 Plantation St, Worcester, MA"
    python -m house_facing --address "360 Plantation St" --json
    python -m house_facing --address "360 Plantation St" --verbose --log-file facing.log
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from house_facing.core import settings
from house_facing.geocoding.base import AddressNotFoundError
from house_facing.inference.base import DirectionIndeterminate
from house_facing.inference.orchestrator import FacingDirectionEngine


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


async def find_facing_direction(address: str, as_json: bool = False) -> int:
    """Run one search and print the result. Returns the process exit code."""
    async with FacingDirectionEngine() as engine:
        try:
            result = await engine.search(address)
        except (AddressNotFoundError, DirectionIndeterminate) as e:
            if as_json:
                print(json.dumps({"address": address, "error": e.message}))
            else:
                print(f"✗ {e.message}")
            return 1

        if result is None:
            return 1

        report = engine.last_report
        if as_json:
            print(json.dumps(report.as_dict, indent=2))
        else:
            print(f"\nAddress: {address}")
            print("-" * 50)
            print(f"✓ Found:     {report.label}")
            print(f"  Facing:    {result.direction}")
            print(f"  Bearing:   {result.bearing}°")
            print(f"  Method:    {report.provenance.value}")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Find which compass direction the building at an address faces"
    )

    parser.add_argument(
        "--address", "-a",
        type=str,
        required=True,
        help="Street address to look up"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose (debug) logging"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write logs to this file"
    )

    args = parser.parse_args(argv)

    if not args.address.strip():
        parser.error("address must not be empty")

    configure_logging(args.verbose, args.log_file)
    return asyncio.run(find_facing_direction(args.address, as_json=args.json))


if __name__ == "__main__":
    sys.exit(main())
