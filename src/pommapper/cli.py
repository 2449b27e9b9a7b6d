"""CLI entry point: ``pommapper update-cache`` and ``pommapper validate``."""

from __future__ import annotations

from pommapper.logging_config import setup_logging

setup_logging()

import argparse  # noqa: E402
import asyncio  # noqa: E402
import logging  # noqa: E402
import sys  # noqa: E402

import httpx  # noqa: E402

from pommapper import __version__  # noqa: E402
from pommapper.config import Settings, load_mapper_settings  # noqa: E402
from pommapper.constants import API_KEY_HEADER, API_ROOT  # noqa: E402
from pommapper.errors import ConfigError  # noqa: E402
from pommapper.services.facade import PomMapperFacade  # noqa: E402
from pommapper.services.validation import print_block  # noqa: E402
from pommapper.storage.filesystem import FileSystemStorage  # noqa: E402

logger = logging.getLogger(__name__)


def main() -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.version:
        print(f"pommapper {__version__}")
        return

    if args.command == "update-cache":
        _run_update_cache()
    elif args.command == "validate":
        _run_validate()
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pommapper",
        description=(
            "Index Maven artifact versions and the values "
            "extracted from their POMs."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")
    sub.add_parser(
        "update-cache",
        help=(
            "Asks the running service (SERVER_URL) to rebuild the cache "
            "for all configured artifacts."
        ),
    )
    sub.add_parser(
        "validate",
        help="Validates the configured artifacts against storage.",
    )
    return parser


def _load_settings() -> Settings:
    settings = Settings()
    setup_logging(settings.log_level, debug=settings.debug_mode)
    return settings


def _run_update_cache(transport: httpx.BaseTransport | None = None) -> None:
    """Trigger a full rebuild in the running service.

    Failures are printed and logged, never raised: the command always
    exits 0.
    """
    settings = _load_settings()
    url = f"{settings.server_url.rstrip('/')}{API_ROOT}/cache/update"
    headers = {API_KEY_HEADER: settings.api_key} if settings.api_key else {}

    try:
        with httpx.Client(
            transport=transport, timeout=settings.server_timeout
        ) as client:
            resp = client.post(url, headers=headers)
            resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        logger.warning(
            "event=cache_update_rejected url=%s status=%d",
            url,
            exc.response.status_code,
        )
        print(f"  [FAILED] {url} answered {exc.response.status_code}")
        return
    except httpx.RequestError as exc:
        logger.warning(
            "event=cache_update_unreachable url=%s error=%s", url, exc
        )
        print(f"  [FAILED] cannot reach {url}: {exc}")
        return

    summary = resp.json().get("data") or {}
    rebuilt: dict[str, int] = summary.get("rebuilt", {})
    failed: list[str] = summary.get("failed", [])
    for artifact_id, count in rebuilt.items():
        print(f"  [ok] {artifact_id} ({count} versions)")
    for artifact_id in failed:
        print(f"  [FAILED] {artifact_id}")
    print(
        f"\nDone! {len(rebuilt)} artifacts cached, {len(failed)} failed"
    )


def _run_validate() -> None:
    """Validate the settings file against local storage."""
    settings = _load_settings()
    try:
        mapper_settings = load_mapper_settings(
            settings.mapper_settings_file
        )
    except ConfigError as exc:
        logger.warning("event=settings_load_failed error=%s", exc)
        print(f"  [FAILED] {exc}", file=sys.stderr)
        return

    facade = PomMapperFacade(
        FileSystemStorage(settings.repositories_dir), mapper_settings
    )
    results = asyncio.run(facade.validate())

    def _warn(message: str) -> None:
        print(message, file=sys.stderr)

    print_block(results, _warn, print, mapper_settings.validation_log_level)


if __name__ == "__main__":
    main()
