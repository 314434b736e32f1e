#!/usr/bin/env python3
"""CLI script to query the Bangumi API and print the result as JSON."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from bangumi.utils.get_logger import set_level
from bangumi.wrappers import bangumi_wrapper


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Query the Bangumi API.",
        usage="%(prog)s {calendar,subject,episodes,user,search} [target] [options]",
    )
    parser.add_argument("command", choices=["calendar", "subject", "episodes", "user", "search"])
    parser.add_argument("target", nargs="?", help="Subject id, username or search keywords.")
    parser.add_argument(
        "--group", default="small", choices=["small", "medium", "large"], help="Response group."
    )
    parser.add_argument("--type", type=int, default=None, help="Search subject type (2 = anime).")
    parser.add_argument("--start", type=int, default=0, help="Search paging offset.")
    parser.add_argument("--max-results", type=int, default=20, help="Search page size (max 20).")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2).")
    parser.add_argument("--debug", action="store_true", help="Log outgoing requests.")
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> Any:
    if args.command == "calendar":
        return await bangumi_wrapper.get_calendar()
    if not args.target:
        raise SystemExit(f"{args.command} needs a target")
    if args.command == "subject":
        return await bangumi_wrapper.get_subject(int(args.target), response_group=args.group)
    if args.command == "episodes":
        return await bangumi_wrapper.get_episodes(int(args.target))
    if args.command == "user":
        return await bangumi_wrapper.get_user(args.target)
    return await bangumi_wrapper.search_subjects(
        args.target,
        subject_type=args.type,
        start=args.start,
        max_results=args.max_results,
        response_group=args.group,
    )


def main() -> None:
    args = _parse_args()
    if args.debug:
        set_level(logging.DEBUG)

    response = asyncio.run(_run(args))
    print(json.dumps(response.model_dump(mode="json"), indent=args.indent, ensure_ascii=False))
    if response.error:
        sys.exit(1)


if __name__ == "__main__":
    main()
