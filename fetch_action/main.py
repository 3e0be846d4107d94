"""
Command line entry point for fetch_action.

Runs one fetch thunk against a Store and prints the resulting state:

    python -m fetch_action https://httpbin.org/json
    python -m fetch_action https://httpbin.org/post --method POST \\
        --header "Content-Type: application/json" --data '{"a": 1}'

Exit code is 0 when the request was received, 1 on error or abort.
"""

import argparse
import asyncio
import json
import logging
import signal
import sys
from typing import Dict, List, Optional

from fetch_action.abort import AbortController
from fetch_action.actions import create_lifecycle_actions
from fetch_action.config import load_config
from fetch_action.fetch_action_creator import fetch_action_from
from fetch_action.store import Store, request_reducer
from fetch_action.utils.logging_config import get_logger, setup_logging

logger = get_logger("main")


def parse_headers(values: Optional[List[str]]) -> Dict[str, str]:
    """Parse repeated ``Name: value`` arguments into a dict."""
    headers: Dict[str, str] = {}
    for value in values or []:
        name, sep, header_value = value.partition(":")
        if not sep or not name.strip():
            raise ValueError(f"Invalid header (expected 'Name: value'): {value!r}")
        headers[name.strip()] = header_value.strip()
    return headers


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch a URL and report lifecycle actions")
    parser.add_argument("url", help="URL to fetch")
    parser.add_argument(
        "--method",
        default="GET",
        help="HTTP method (default GET)"
    )
    parser.add_argument(
        "--header",
        action="append",
        default=None,
        help="Request header as 'Name: value' (repeatable)"
    )
    parser.add_argument(
        "--data",
        default=None,
        help="Request body"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.json (default: bundled config)"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (overrides config)"
    )
    parser.add_argument(
        "--prefix",
        default="FETCH",
        help="Action type prefix (default FETCH)"
    )
    return parser


async def run(args: argparse.Namespace) -> dict:
    """Dispatch one fetch thunk and return the final store state."""
    prefix = args.prefix
    store = Store(request_reducer(prefix))
    store.subscribe(lambda: logger.debug(f"State: loading={store.get_state()['loading']}"))

    actions = create_lifecycle_actions(prefix)
    controllers: List[AbortController] = []

    def make_controller() -> AbortController:
        controller = AbortController()
        controllers.append(controller)
        return controller

    def logged_dispatch(action):
        result = store.dispatch(action)
        logger.info(f"Dispatched {getattr(action, 'type', action)}")
        return result

    init = {
        "method": args.method,
        "headers": parse_headers(args.header),
        "body": args.data,
    }
    thunk = fetch_action_from(
        args.url,
        init,
        actions,
        abort_controller_factory=make_controller,
    )

    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, lambda: [c.abort() for c in controllers])
    except (NotImplementedError, RuntimeError):
        # Signal handlers are unavailable on some platforms.
        pass

    logger.info(f"{args.method.upper()} {args.url}")
    await thunk(logged_dispatch, store.get_state)

    return store.get_state()


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    level_name = (args.log_level or config.logging.level).upper()
    setup_logging(
        level=getattr(logging, level_name, logging.INFO),
        log_dir=config.logging.log_dir,
        console=config.logging.console,
        file=config.logging.file,
    )

    try:
        state = asyncio.run(run(args))
    except ValueError as e:
        parser.error(str(e))

    output = {k: v for k, v in state.items() if k != "abort_controller"}
    print(json.dumps(output, indent=2, default=str))

    if state["error"] is not None or state["aborted"]:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
