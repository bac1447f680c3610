"""docklean command line entry point.

Safely find and clean unused Docker resources.
"""

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence

from dotenv import load_dotenv

from . import __version__
from .core.docker_cli import DockerCLI, build_cache_preview_args, build_prune_args
from .core.exceptions import (
    ConfigurationError,
    DockerUnavailableError,
    InvalidArgumentError,
)
from .core.logging_config import get_logger, resolve_log_level, setup_logging
from .core.settings import DockleanSettings, load_settings
from .models.enums import ALL_KINDS, DANGLING_KINDS, ExitCode, ResourceKind
from .models.params import CleanOptions, ScanOptions
from .models.resources import CleanResult, ResourceSummary, ScanResult
from .services.cleanup import CleanupService
from .services.scan import ScanService, summarize_scan
from .utils import filter_until_timestamp, format_bytes, parse_duration, parse_size_limit


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises InvalidArgumentError instead of exiting."""

    def error(self, message: str):
        raise InvalidArgumentError(message)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="docklean", description="Safely find and clean unused Docker resources"
    )
    parser.add_argument("--containers", action="store_true", help="Clean stopped/exited containers")
    parser.add_argument("--images", action="store_true", help="Clean dangling/unused images")
    parser.add_argument("--volumes", action="store_true", help="Clean unused volumes")
    parser.add_argument("--networks", action="store_true", help="Clean unused networks")
    parser.add_argument("--cache", action="store_true", help="Clean builder cache")
    parser.add_argument(
        "--dangling",
        action="store_true",
        help="Clean dangling images, stopped containers, unused volumes",
    )
    parser.add_argument("--all", action="store_true", help="Clean all unused resources")
    parser.add_argument(
        "--older-than", metavar="DURATION", help="Only clean resources older than m/h/d/w"
    )
    parser.add_argument("--top", type=int, metavar="N", help="Only clean the N largest items")
    parser.add_argument(
        "--limit-space",
        metavar="SIZE",
        help="Clean the largest items until SIZE is reclaimed (e.g. 5GB)",
    )
    parser.add_argument("-f", "--force", action="store_true", help="Skip confirmation")
    parser.add_argument("-y", "--yes", action="store_true", help="Alias for --force")
    parser.add_argument("--dry-run", action="store_true", help="Print what would be removed")
    parser.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--quiet", action="store_true", help="Minimal output")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse and validate command line arguments.

    Adds ``older_than`` (timedelta or None), ``limit_bytes`` (int or None)
    and ``kinds`` (list of ResourceKind) to the namespace.

    Raises:
        InvalidArgumentError: on conflicting or malformed options
    """
    args = build_parser().parse_args(argv)

    if args.quiet and args.verbose:
        raise InvalidArgumentError("Use either --quiet or --verbose, not both.")
    if args.top is not None and args.limit_space is not None:
        raise InvalidArgumentError("Use either --top or --limit-space, not both.")
    if args.top is not None and args.top <= 0:
        raise InvalidArgumentError("--top must be a positive integer")

    args.force = args.force or args.yes
    args.older_than = parse_duration(args.older_than) if args.older_than is not None else None
    args.limit_bytes = (
        parse_size_limit(args.limit_space) if args.limit_space is not None else None
    )
    args.kinds = resolve_kinds(args)
    return args


def resolve_kinds(args: argparse.Namespace) -> list[ResourceKind]:
    """Resource kinds selected by flags; everything when none are given."""
    if args.all:
        return list(ALL_KINDS)
    if args.dangling:
        return list(DANGLING_KINDS)
    selected = [kind for kind in ALL_KINDS if getattr(args, kind.value)]
    return selected or list(ALL_KINDS)


def _print(message: str = "", *, file=None) -> None:
    print(message, file=file or sys.stdout)


def render_summary(summaries: list[ResourceSummary]) -> str:
    """Plain-text summary table (rich rendering is out of scope)."""
    lines = [f"{'Type':<22} {'Count':>6}  Estimated Size"]
    for summary in summaries:
        size = format_bytes(summary.reclaimable_bytes) if summary.reclaimable_bytes else "-"
        lines.append(f"{summary.label:<22} {summary.count:>6}  {size}")
    return "\n".join(lines)


def render_details(summary: ResourceSummary) -> str:
    lines = [f"{summary.label}:"]
    for item in summary.items:
        lines.append(
            f"  {item.id[:12] or '-':<12}  {item.name or '-':<32}  {item.size or '-':>10}  "
            f"{item.created_at or '-'}"
        )
    return "\n".join(lines)


def planned_commands(
    args: argparse.Namespace, settings: DockleanSettings
) -> list[list[str]]:
    """Commands listed by --dry-run, one per requested kind."""
    filter_until = filter_until_timestamp(args.older_than)
    commands = []
    for kind in args.kinds:
        if kind == ResourceKind.CACHE:
            # Cache is shown as its non-destructive preview command
            cmd = build_cache_preview_args(filter_until)
        else:
            cmd = build_prune_args(kind, filter_until, args.all and kind == ResourceKind.IMAGES)
        commands.append([settings.docker_bin, *cmd])
    return commands


def build_clean_options(args: argparse.Namespace, scan_result: ScanResult) -> CleanOptions:
    size_selection = args.top is not None or args.limit_bytes is not None
    return CleanOptions(
        kinds=args.kinds,
        older_than=args.older_than,
        dry_run=args.dry_run,
        include_all_images=args.all,
        expected_counts=scan_result.expected_counts(),
        selected_ids=scan_result.selected_ids() if size_selection else None,
        estimated_bytes=scan_result.estimated_bytes() if size_selection else None,
    )


def report_clean_result(args: argparse.Namespace, result: CleanResult) -> bool:
    """Print the per-kind outcome; returns True when any kind failed."""
    has_failures = False
    for kind in args.kinds:
        failures = result.failures[kind]
        if failures:
            has_failures = True
            _print(f"Failed to clean {kind.value}: {'; '.join(failures)}", file=sys.stderr)
            continue
        removed = result.removed[kind]
        _print(f"Cleaned {removed} {kind.value}" if removed else f"Cleaned {kind.value}")
    if not args.quiet:
        _print(f"Freed {format_bytes(result.reclaimed_bytes)}")
    return has_failures


async def run(args: argparse.Namespace, settings: DockleanSettings) -> int:
    """Check docker, scan, then clean unless this is a preview."""
    logger = get_logger()
    docker = DockerCLI(settings)

    try:
        await docker.check()
    except DockerUnavailableError as e:
        _print(str(e), file=sys.stderr)
        return e.exit_code

    scan_options = ScanOptions(
        kinds=args.kinds,
        older_than=args.older_than,
        include_all_images=args.all,
        top=args.top,
        limit_bytes=args.limit_bytes,
    )
    scan_result = await ScanService(docker).scan(scan_options)
    total_items = scan_result.total_items

    if args.json:
        _print(json.dumps(scan_result.to_payload(), indent=2))
        return ExitCode.NOTHING_TO_CLEAN if total_items == 0 else ExitCode.SUCCESS

    if not args.quiet:
        _print(render_summary(scan_result.summaries))
        for summary in scan_result.summaries:
            if summary.items:
                _print(render_details(summary))
        _print(summarize_scan(scan_result))
        _print(f"Found {total_items} items")

    if total_items == 0 and scan_result.total_reclaimable_bytes == 0:
        _print("Nothing to clean.")
        return ExitCode.NOTHING_TO_CLEAN

    if args.dry_run:
        _print("Dry run mode: no resources will be removed.")
        for cmd in planned_commands(args, settings):
            _print(f"Would run: {' '.join(cmd)}")
        _print(f"Would free {format_bytes(scan_result.total_reclaimable_bytes)}")
        return ExitCode.SUCCESS

    if not args.force:
        _print("No changes made. Re-run with --force to remove these resources.")
        return ExitCode.NOTHING_TO_CLEAN

    clean_result = await CleanupService(docker).clean(build_clean_options(args, scan_result))
    has_failures = report_clean_result(args, clean_result)
    logger.info(
        "docklean finished",
        reclaimed_bytes=clean_result.reclaimed_bytes,
        has_failures=has_failures,
    )
    return ExitCode.FAILURE if has_failures else ExitCode.SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    load_dotenv()

    try:
        args = parse_args(argv)
        settings = load_settings()
    except InvalidArgumentError as e:
        _print(str(e), file=sys.stderr)
        return ExitCode.INVALID_ARGUMENTS
    except ConfigurationError as e:
        _print(str(e), file=sys.stderr)
        return ExitCode.FAILURE

    setup_logging(
        log_level=resolve_log_level(settings.log_level, args.verbose, args.quiet),
        log_dir=settings.log_dir,
        max_file_size_mb=settings.log_file_size_mb,
        colors=not args.no_color,
    )

    try:
        return int(asyncio.run(run(args, settings)))
    except KeyboardInterrupt:
        get_logger().info("Interrupted")
        return ExitCode.FAILURE
    except Exception as e:
        get_logger().error("docklean failed", error=str(e))
        _print(str(e), file=sys.stderr)
        return ExitCode.FAILURE


if __name__ == "__main__":
    sys.exit(main())
