#!/usr/bin/env python3
"""Send events to the survey service with a live API key.

Credential sourcing:
- ``--api-key`` (fallback: ITERATE_API_KEY)

Default behavior:
1) identify with any ``--trait key=value`` pairs,
2) queue the given events and flush them with ``init()``,
3) print each embed response and the resulting client state.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyiterate import IterateClient, IterateConfig, IterateError  # noqa: E402
from pyiterate._redact import redact_for_log  # noqa: E402


def _parse_traits(pairs: list[str]) -> dict[str, Any]:
    traits: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise SystemExit(f"Invalid trait {pair!r}; expected key=value")
        try:
            traits[key] = json.loads(value)
        except json.JSONDecodeError:
            traits[key] = value
    return traits


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("events", nargs="+", help="Event names to send, in order")
    parser.add_argument("--api-key", help="Company API key (default: ITERATE_API_KEY)")
    parser.add_argument("--trait", action="append", default=[], help="User trait as key=value (repeatable)")
    parser.add_argument("--storage", help="JSON file used to persist traits/token between runs")
    parser.add_argument("--wait", type=float, default=0.0, help="Seconds to wait for delayed surveys before exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    return parser


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.api_key:
        overrides["api_key"] = args.api_key
    if args.storage:
        overrides["storage_path"] = args.storage
    config = IterateConfig.from_env(**overrides)
    if not config.api_key:
        print("No API key: pass --api-key or set ITERATE_API_KEY", file=sys.stderr)
        return 2

    async with IterateClient(config) as client:
        client.restore_persisted_state()
        if args.trait:
            client.identify(_parse_traits(args.trait))
        client.init()

        for event_name in args.events:
            task = client.send_event(event_name)
            if task is None:
                continue
            try:
                response = await task
            except IterateError as exc:
                print(f"{event_name}: FAILED {exc}")
                continue
            print(f"{event_name}: {json.dumps(redact_for_log(response.raw), indent=2, default=str)}")

        if args.wait > 0 and client.pending_display_count:
            await asyncio.sleep(args.wait)

        state = client.store.get_state()
        print("display:", state.display.kind, state.display.survey.id if state.display.survey else None)
        print("last_updated:", state.last_updated)
    return 0


def main() -> int:
    args = _build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
