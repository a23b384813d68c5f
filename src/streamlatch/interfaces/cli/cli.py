from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from streamlatch.infrastructure.config import AppConfig, load_config
from streamlatch.infrastructure.logging.setup import configure_logging
from streamlatch.interfaces.composition import install_on_page, open_runtime

log = structlog.get_logger(__name__)


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="streamlatch")

    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )
    parser.add_argument(
        "--max-depth",
        default=None,
        type=int,
        help="Override max nested-manifest depth.",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    resolve = commands.add_parser(
        "resolve", help="Resolve media URLs through redirects and HLS manifests."
    )
    resolve.add_argument("urls", nargs="+", metavar="URL")

    attach = commands.add_parser(
        "attach",
        help="Open a player page and resolve/attach HLS on every track change.",
    )
    attach.add_argument("page_url", metavar="PAGE_URL")
    attach.add_argument(
        "--headless",
        default=None,
        action=argparse.BooleanOptionalAction,
        help="Run Chromium headless (default from config).",
    )

    return parser.parse_args(list(argv) if argv is not None else None)


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format
    if args.max_depth is not None:
        cli_overrides["resolver_max_depth"] = args.max_depth
    if getattr(args, "headless", None) is not None:
        cli_overrides["playwright_headless"] = args.headless
    return cli_overrides


async def _run_resolve(config: AppConfig, urls: list[str]) -> int:
    async with open_runtime(config) as runtime:
        for url in urls:
            result = await runtime.resolver.resolve_detailed(url)
            line = f"{url} -> {result.url}"
            if result.fallback is not None:
                line += f"  [{result.fallback.value}]"
            print(line)
    return 0


async def _run_attach(config: AppConfig, page_url: str) -> int:
    play_function = config.playback.play_function
    async with open_runtime(config) as runtime:
        page = await runtime.browser.new_page()
        await page.goto(page_url, wait_until="domcontentloaded")
        try:
            await page.wait_for_function(
                "(name) => typeof window[name] === 'function'", arg=play_function
            )
        except PlaywrightTimeoutError:
            log.error("play_function_missing", page=page_url, function=play_function)
            return 1

        attacher = await install_on_page(page, config, runtime.resolver)
        if attacher is None:
            log.error("play_function_missing", page=page_url, function=play_function)
            return 1

        closed = asyncio.Event()
        page.on("close", lambda _: closed.set())
        log.info("attached_to_page", page=page_url)
        try:
            await closed.wait()
        finally:
            await attacher.aclose()
    return 0


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, configures logging, then runs the command.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    config = load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=_cli_overrides(args),
    )
    configure_logging(config)

    if args.command == "resolve":
        return asyncio.run(_run_resolve(config, args.urls))
    return asyncio.run(_run_attach(config, args.page_url))


if __name__ == "__main__":
    raise SystemExit(start())
