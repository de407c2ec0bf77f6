"""Command-line front door for gitglance.

Resolves the owning repository of a path and prints its working-tree status,
either once or continuously through the background scheduler.
"""

from __future__ import annotations

import argparse
import os
import sys
import threading
from collections.abc import Mapping, Sequence
from dataclasses import replace
from pathlib import Path

from .config import EngineConfig, load_engine_config
from .errors import GitStatusError
from .log import init_logging
from .render import describe_change, format_status_badges
from .runtime import IndexWatcher, StatusScheduler, find_owning_repository, is_within
from .status import (
    ChangedFile,
    exclude_deleted,
    exclude_directory_entries,
    include_ancestor_directories,
    status_for_repo,
)


def _positive_float(value: str) -> float:
    """argparse type for positive float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitglance",
        description="Show which files differ from the git index, without running git.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Path inside a repository. Defaults to current directory.")
    parser.add_argument("--no-color", action="store_true", help="Disable colored badges.")
    parser.add_argument("--directories", action="store_true", help="Also list directories containing changes.")
    parser.add_argument("--exclude-deleted", action="store_true", help="Hide files deleted from the working tree.")
    parser.add_argument("--no-ignore", action="store_true", help="Report untracked files even when gitignored.")
    parser.add_argument("--verbose", action="store_true", help="Show change flags next to each path.")
    parser.add_argument(
        "--watch",
        type=_positive_float,
        metavar="SECONDS",
        default=None,
        help="Keep running, refreshing at most every SECONDS.",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from config).")
    return parser


def shape_changes(
    changed_files: Mapping[str, ChangedFile],
    *,
    directories: bool,
    deleted: bool,
) -> dict[str, ChangedFile]:
    """Apply the listing options to a raw or ancestor-expanded result map."""
    shaped = include_ancestor_directories(changed_files) if directories else exclude_directory_entries(changed_files)
    return shaped if deleted else exclude_deleted(shaped)


def format_status_lines(
    changed_files: Mapping[str, ChangedFile],
    repo_root: str,
    scope: str,
    *,
    colorize: bool,
    verbose: bool = False,
) -> list[str]:
    """Render sorted ``<badges> <path>`` lines for paths under ``scope``."""
    lines: list[str] = []
    for rel_path in sorted(changed_files):
        if not is_within(os.path.join(repo_root, rel_path), scope):
            continue
        changed = changed_files[rel_path]
        badges = format_status_badges(changed, colorize=colorize).strip()
        line = f"{badges} {rel_path}"
        if verbose:
            line += f" ({describe_change(changed)})"
        lines.append(line)
    return lines


def _run_once(args: argparse.Namespace, config: EngineConfig, target: str, repo_root: str) -> None:
    try:
        changed_files = status_for_repo(repo_root, respect_gitignore=config.respect_gitignore)
    except (GitStatusError, OSError) as exc:
        raise SystemExit(f"Unable to compute status for {repo_root}: {exc}") from exc

    shaped = shape_changes(changed_files, directories=args.directories, deleted=not args.exclude_deleted)
    for line in format_status_lines(shaped, repo_root, target, colorize=not args.no_color, verbose=args.verbose):
        sys.stdout.write(line + "\n")


def _run_watch(args: argparse.Namespace, config: EngineConfig, target: str, repo_root: str) -> None:
    redraw_requested = threading.Event()
    last_lines: list[str] | None = None

    with StatusScheduler(redraw=redraw_requested.set, config=config) as scheduler:
        watcher = IndexWatcher(scheduler, poll_seconds=config.index_watch_poll_seconds)
        watcher.watch(repo_root)
        scheduler.submit(target)
        try:
            while True:
                if not redraw_requested.wait(timeout=args.watch):
                    watcher.maybe_refresh()
                    scheduler.submit(target)
                    continue
                redraw_requested.clear()

                snapshot = scheduler.snapshot(repo_root)
                if snapshot is None:
                    continue
                # Cached snapshots already carry ancestor directories.
                shaped = shape_changes(
                    snapshot.changed_files,
                    directories=args.directories,
                    deleted=not args.exclude_deleted,
                )
                lines = format_status_lines(
                    shaped,
                    repo_root,
                    target,
                    colorize=not args.no_color,
                    verbose=args.verbose,
                )
                if lines == last_lines:
                    continue
                last_lines = lines
                sys.stdout.write("\n".join(lines) + ("\n" if lines else ""))
                sys.stdout.write("--\n")
                sys.stdout.flush()
        except KeyboardInterrupt:
            return


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and print status for the repository owning PATH."""
    args = _build_parser().parse_args(argv)
    config = load_engine_config()
    if args.no_ignore:
        config = replace(config, respect_gitignore=False)

    try:
        init_logging(args.log_level or config.log_level)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc

    path = Path(args.path) if args.path is not None else Path.cwd()
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    target = os.path.normpath(str(path.absolute()))
    if config.canonicalize_paths:
        target = os.path.realpath(target)

    repo_root = find_owning_repository(target)
    if not repo_root:
        raise SystemExit(f"Not inside a Git repository: {target}")

    if args.watch is not None:
        _run_watch(args, config, target, repo_root)
    else:
        _run_once(args, config, target, repo_root)


if __name__ == "__main__":
    main()
