#!/usr/bin/env python3
"""
Hero Town - entry point and configuration.

Settings come from policy defaults, overlaid by environment variables, overlaid
by CLI flags. The default action launches the Gradio UI; --list prints the
derived view to stdout instead.
"""

import logging
import os
import sys
from dataclasses import asdict, dataclass, replace
from typing import Optional

# Support both package and script execution modes
try:
    from .directory_client import HeroDirectoryClient, HeroDirectoryError
    from .heroes import ALL_POWERS, filter_and_sort
    from .render import format_table
except ImportError:
    from directory_client import HeroDirectoryClient, HeroDirectoryError  # type: ignore
    from heroes import ALL_POWERS, filter_and_sort  # type: ignore
    from render import format_table  # type: ignore

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

DEFAULT_BASE_URL: str = "https://superhero-backend-nu.vercel.app"
DEFAULT_TIMEOUT: float = 10.0


@dataclass(frozen=True)
class AppSettings:
    """Runtime configuration shared by the UI and the CLI."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    host: Optional[str] = None
    port: Optional[int] = None
    share: bool = False


def get_default_settings() -> AppSettings:
    """
    Policy defaults overlaid with HERO_TOWN_BASE_URL / HERO_TOWN_TIMEOUT.

    An unparseable timeout falls back to the default with a warning rather
    than refusing to start.
    """
    base_url = os.getenv("HERO_TOWN_BASE_URL", "").strip() or DEFAULT_BASE_URL
    raw_timeout = os.getenv("HERO_TOWN_TIMEOUT", "").strip()
    timeout = DEFAULT_TIMEOUT
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            logger.warning(
                f"Ignoring invalid HERO_TOWN_TIMEOUT={raw_timeout!r}; using {DEFAULT_TIMEOUT}"
            )
    return AppSettings(base_url=base_url, timeout=timeout)


def _build_cli_parser():
    import argparse

    parser = argparse.ArgumentParser(
        prog="hero-town",
        description="Register and browse superheroes (Gradio UI over the hero directory service).",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Hero directory service root (default: HERO_TOWN_BASE_URL or the hosted service).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default: HERO_TOWN_TIMEOUT or 10).",
    )
    parser.add_argument("--host", default=None, help="Server host for the UI.")
    parser.add_argument("--port", type=int, default=None, help="Server port for the UI.")
    parser.add_argument(
        "--share", action="store_true", help="Create a public Gradio share link."
    )
    parser.add_argument(
        "--print-defaults",
        action="store_true",
        help="Print effective settings and exit.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the hero list as a table instead of launching the UI.",
    )
    parser.add_argument(
        "--power",
        default=ALL_POWERS,
        help="With --list: only heroes with this superpower (case-insensitive).",
    )
    parser.add_argument(
        "--ascending",
        action="store_true",
        help="With --list: sort by humility score ascending (default descending).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show full tracebacks for debugging (also HERO_TOWN_DEBUG=1).",
    )
    return parser


def _args_to_settings(args, defaults: AppSettings) -> AppSettings:
    settings = defaults
    if args.base_url:
        settings = replace(settings, base_url=args.base_url)
    if args.timeout is not None:
        settings = replace(settings, timeout=args.timeout)
    return replace(settings, host=args.host, port=args.port, share=bool(args.share))


def list_heroes(settings: AppSettings, power: str = ALL_POWERS, ascending: bool = False) -> str:
    """Fetch the collection once and return the derived view as a text table."""
    with HeroDirectoryClient(settings.base_url, timeout=settings.timeout) as client:
        heroes = client.list_heroes()
    return format_table(filter_and_sort(heroes, power.lower(), ascending))


def launch_ui(settings: AppSettings) -> None:
    try:
        from .gradio_ui import _build_ui
    except ImportError:
        from gradio_ui import _build_ui  # type: ignore

    demo = _build_ui(settings)
    logger.info(f"Launching Hero Town UI against {settings.base_url}")
    demo.launch(
        server_name=settings.host, server_port=settings.port, share=settings.share
    )


def main(argv=None) -> None:
    """CLI entry point."""
    parser = _build_cli_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    debug_mode = bool(args.debug or os.getenv("HERO_TOWN_DEBUG", "") == "1")
    if debug_mode:
        logging.getLogger().setLevel(logging.DEBUG)

    settings = _args_to_settings(args, get_default_settings())

    if args.print_defaults:
        import json

        print(json.dumps(asdict(settings), indent=2))
        return

    try:
        if args.list:
            print(list_heroes(settings, args.power, args.ascending))
            return
        launch_ui(settings)
    except HeroDirectoryError as e:
        # Expected service failures: concise message, non-zero exit.
        logger.info("User-facing error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:
        logger.exception("Unhandled exception during execution")
        if debug_mode:
            import traceback

            traceback.print_exc()
        else:
            print(f"Unexpected error: {e}", file=sys.stderr)
            print(
                "Run with --debug or set HERO_TOWN_DEBUG=1 to see the full traceback.",
                file=sys.stderr,
            )
        sys.exit(1)


if __name__ == "__main__":
    main()
