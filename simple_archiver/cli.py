"""
Module: cli
Purpose: Command-line interface entry point.
"""

import argparse
import os
import sys
from typing import List, Optional, Sequence, Tuple

from . import config, reporting
from .archiver import Archiver
from .exceptions import ArchiverError, InvalidArchiveFolderError
from .gateway import LocalVaultGateway
from .models.decisions import ConflictChoice
from .models.results import ArchiveResult, BatchResult
from .models.vault_item import VaultItem
from .paths import is_archived, normalize_path
from .prompts import ConflictPrompt, FixedPrompt, TerminalPrompt
from .utils import COLOR_CYAN, COLOR_GREEN, COLOR_RED, COLOR_YELLOW, color_text, log_info

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

CONFLICT_POLICIES = ["ask"] + [choice.value for choice in ConflictChoice]


def _use_color(args: argparse.Namespace) -> bool:
    if args.no_color or os.getenv("NO_COLOR"):
        return False
    return sys.stdout.isatty()


def _build_prompt(args: argparse.Namespace, use_color: bool) -> ConflictPrompt:
    if args.on_conflict == "ask":
        return TerminalPrompt(use_color=use_color)
    return FixedPrompt(ConflictChoice(args.on_conflict))


def _to_vault_path(raw: str, vault_root: str) -> Optional[str]:
    """
    Accept either a vault-relative path or a filesystem path inside the vault.
    Returns None when a filesystem path lies outside the vault.
    """
    if os.path.isabs(raw):
        relative = os.path.relpath(os.path.abspath(raw), vault_root)
        if relative == os.pardir or relative.startswith(os.pardir + os.sep):
            return None
        raw = relative.replace(os.sep, "/")
    return normalize_path(raw)


def _resolve_items(
    gateway: LocalVaultGateway, raw_paths: Sequence[str]
) -> Tuple[List[VaultItem], List[str]]:
    items: List[VaultItem] = []
    missing: List[str] = []
    for raw in raw_paths:
        vault_path = _to_vault_path(raw, gateway.root)
        item = gateway.get_item(vault_path) if vault_path else None
        if item is None or vault_path == "/":
            missing.append(raw)
        else:
            items.append(item)
    return items, missing


def _print_result(result: ArchiveResult, use_color: bool) -> None:
    color = COLOR_GREEN if result.success else COLOR_RED
    print(color_text(result.message, color, use_color))


def _print_batch(batch: BatchResult, args: argparse.Namespace, use_color: bool) -> None:
    if args.verbose:
        for path, result in batch.results:
            marker = "OK " if result.success else "ERR"
            color = COLOR_GREEN if result.success else COLOR_RED
            print(color_text(f"  {marker} {path}: {result.message}", color, use_color))
    if args.report:
        reporting.write_batch_report(batch, args.report, args.archive_folder_effective)


def _run_move(args: argparse.Namespace, archive: bool) -> int:
    use_color = _use_color(args)
    gateway = LocalVaultGateway(args.vault_root)
    items, missing = _resolve_items(gateway, args.paths)
    if missing:
        for raw in missing:
            print(color_text(f"[ERROR] Not found in vault: {raw}", COLOR_RED, use_color), file=sys.stderr)
        return EXIT_USAGE

    archiver = Archiver(
        args.archive_folder_effective,
        gateway,
        _build_prompt(args, use_color),
        notify=lambda message: print(color_text(message, COLOR_CYAN, use_color)),
    )

    if len(items) == 1:
        item = items[0]
        result = archiver.archive_one(item) if archive else archiver.unarchive_one(item)
        _print_result(result, use_color)
        return EXIT_OK if result.success else EXIT_FAILED

    eligible = archiver.can_archive(items) if archive else archiver.can_unarchive(items)
    if not eligible:
        blocked = [
            item.path for item in items if archiver.is_archived(item) == archive
        ]
        action = "Move all to archive" if archive else "Move all out of archive"
        state = "already archived" if archive else "not archived"
        print(
            color_text(
                f"[ERROR] {action} is unavailable; {state}: {', '.join(blocked)}",
                COLOR_RED,
                use_color,
            ),
            file=sys.stderr,
        )
        return EXIT_USAGE

    batch = archiver.archive_many(items) if archive else archiver.unarchive_many(items)
    _print_batch(batch, args, use_color)
    return EXIT_OK if batch.failed == 0 else EXIT_FAILED


def _run_status(args: argparse.Namespace) -> int:
    use_color = _use_color(args)
    gateway = LocalVaultGateway(args.vault_root)
    archive_folder = args.archive_folder_effective
    exit_code = EXIT_OK
    for raw in args.paths:
        vault_path = _to_vault_path(raw, gateway.root)
        item = gateway.get_item(vault_path) if vault_path else None
        if item is None:
            print(color_text(f"{raw}: not found", COLOR_RED, use_color))
            exit_code = EXIT_FAILED
            continue
        archived = is_archived(item.path, archive_folder)
        label = "archived" if archived else "not archived"
        print(f"{item.path}: {color_text(label, COLOR_YELLOW if archived else COLOR_GREEN, use_color)}")
    return exit_code


def _run_config(args: argparse.Namespace) -> int:
    use_color = _use_color(args)
    path = config.settings_path(args.vault_root)
    settings = config.load_settings(path)

    if args.config_command == "show":
        folder, source = config.resolve_archive_folder(settings, args.archive_folder)
        print(f"Archive folder: {folder} (source: {source})")
        print(f"Settings file:  {path}")
        return EXIT_OK

    previous = settings.archive_folder
    try:
        config.update_archive_folder(settings, args.value)
    except InvalidArchiveFolderError as exc:
        print(color_text(f"[ERROR] {exc} {config.ARCHIVE_FOLDER_RULES}", COLOR_RED, use_color), file=sys.stderr)
        print(f"Archive folder: {previous}")
        return EXIT_USAGE
    config.save_settings(settings, path)
    print(color_text(f"Archive folder: {settings.archive_folder}", COLOR_GREEN, use_color))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simple-archiver",
        description="Move notes and folders into the vault's archive folder and back out again.",
    )
    parser.add_argument(
        "--vault",
        default=None,
        help=f"Vault root directory (default: ${config.VAULT_ENV} or the current directory).",
    )
    parser.add_argument(
        "--archive-folder",
        default=None,
        help=(
            "Override the archive folder for this run. "
            f"Also configurable via ${config.ARCHIVE_FOLDER_ENV}."
        ),
    )
    parser.add_argument(
        "--on-conflict",
        choices=CONFLICT_POLICIES,
        default="ask",
        help="How to settle collisions: ask (default) or always answer the given choice.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colors regardless of terminal support.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print the outcome of every item in batch operations.",
    )
    parser.add_argument(
        "--report",
        default=None,
        help="Write batch outcomes to this JSON file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    archive_parser = subparsers.add_parser("archive", help="Move to archive")
    archive_parser.add_argument("paths", nargs="+", help="Vault paths of the items to archive")

    unarchive_parser = subparsers.add_parser("unarchive", help="Move out of archive")
    unarchive_parser.add_argument("paths", nargs="+", help="Vault paths of archived items")

    status_parser = subparsers.add_parser("status", help="Show whether items are archived")
    status_parser.add_argument("paths", nargs="+", help="Vault paths to inspect")

    config_parser = subparsers.add_parser("config", help="Show or change the archive folder")
    config_sub = config_parser.add_subparsers(dest="config_command", required=True)
    config_sub.add_parser("show", help="Print the effective archive folder")
    set_parser = config_sub.add_parser(
        "set-folder",
        help="Change the archive folder",
        description=(
            "The folder to use as the Archive. If the folder doesn't exist, it will be "
            "created when archiving a note. " + config.ARCHIVE_FOLDER_RULES
        ),
    )
    set_parser.add_argument("value", help="New archive folder name")
    return parser


def main(argv: Optional[Sequence[str]] = None):
    """
    Argument parser entry point.

    Args:
        argv: Arguments to parse; defaults to sys.argv.

    Returns:
        None

    Raises:
        SystemExit: Always, carrying the command's exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    reporting.ensure_log_initialized()

    try:
        args.vault_root = config.resolve_vault_root(args.vault)
        log_info(f"Command '{args.command}' in vault {args.vault_root}")
        if args.command == "config":
            sys.exit(_run_config(args))

        settings = config.load_settings(config.settings_path(args.vault_root))
        args.archive_folder_effective, source = config.resolve_archive_folder(
            settings, args.archive_folder
        )
        log_info(f"Archive folder: {args.archive_folder_effective} (source={source})")

        if args.command == "status":
            sys.exit(_run_status(args))
        sys.exit(_run_move(args, archive=args.command == "archive"))
    except KeyboardInterrupt:
        reporting.write_log(["[WARNING] Operation aborted via Ctrl+C"])
        print("Interrupted by user (Ctrl+C).", file=sys.stderr)
        sys.exit(EXIT_FAILED)
    except ArchiverError as exc:
        reporting.write_log([f"[ERROR] {exc}"])
        print(f"[ERROR] {exc}", file=sys.stderr)
        sys.exit(EXIT_USAGE if isinstance(exc, InvalidArchiveFolderError) else EXIT_FAILED)


if __name__ == "__main__":
    main()
