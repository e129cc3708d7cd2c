"""
Module: merge_engine
Purpose: Reconcile a folder's contents into an existing folder of the same name.
"""

from dataclasses import dataclass
from typing import List

from .exceptions import ArchiverError, VaultIOError
from .gateway import FilesystemGateway
from .models.results import ArchiveResult, ErrorKind, MergeStats
from .models.vault_item import VaultItem
from .paths import join_path, normalize_path
from .utils import log_error, log_info, log_warning, pluralize

# Errors a third-party gateway may leak in addition to VaultIOError.
_ITEM_ERRORS = (ArchiverError, OSError)


@dataclass
class _Frame:
    folder: VaultItem
    destination_path: str
    walked: bool = False


def merge_folder(
    source_folder: VaultItem,
    destination_folder_path: str,
    gateway: FilesystemGateway,
) -> MergeStats:
    """
    Move the contents of source_folder into an existing destination folder.

    Files new to the destination are moved in. Files whose bytes match the
    destination copy are deleted from the source. Files that differ replace
    the destination copy, which goes to the trash. Subfolders are created
    when missing and walked in turn; once walked, an emptied subfolder is
    deleted. The source folder itself is left for the caller.

    Each folder's children are snapshotted when the folder is first visited.
    A failure on one item is recorded by name and the walk continues with
    its siblings; the failed item stays where it was.

    Args:
        source_folder: Folder whose contents are merged.
        destination_folder_path: Existing folder receiving the contents.
        gateway: Filesystem gateway performing reads and mutations.

    Returns:
        MergeStats describing what happened.
    """
    stats = MergeStats()
    stack: List[_Frame] = [_Frame(source_folder, normalize_path(destination_folder_path))]
    while stack:
        frame = stack[-1]
        if frame.walked:
            stack.pop()
            if frame.folder != source_folder:
                _remove_if_empty(frame.folder, gateway)
            continue
        frame.walked = True

        try:
            children = gateway.list_children(frame.folder)
        except _ITEM_ERRORS as exc:
            _record_failure(stats, frame.folder, exc)
            continue

        subfolders: List[_Frame] = []
        for child in children:
            child_destination = join_path(frame.destination_path, child.name)
            if gateway.is_folder(child):
                if _prepare_folder(child, child_destination, gateway, stats):
                    subfolders.append(_Frame(child, child_destination))
            else:
                _merge_file(child, child_destination, gateway, stats)
        # Reversed so subfolders are walked in listing order.
        stack.extend(reversed(subfolders))
    return stats


def _prepare_folder(
    child: VaultItem,
    child_destination: str,
    gateway: FilesystemGateway,
    stats: MergeStats,
) -> bool:
    try:
        existing = gateway.get_item(child_destination)
        if existing is None:
            gateway.create_folder(child_destination)
            stats.folders_created += 1
        elif not gateway.is_folder(existing):
            raise VaultIOError(f"A file already occupies '{child_destination}'")
    except _ITEM_ERRORS as exc:
        _record_failure(stats, child, exc)
        return False
    return True


def _merge_file(
    child: VaultItem,
    child_destination: str,
    gateway: FilesystemGateway,
    stats: MergeStats,
) -> None:
    try:
        existing = gateway.get_item(child_destination)
        if existing is None:
            gateway.move(child, child_destination)
            stats.files_added += 1
            return
        if gateway.is_folder(existing):
            raise VaultIOError(f"A folder already occupies '{child_destination}'")
        if gateway.read_contents(child) == gateway.read_contents(existing):
            gateway.delete(child)
            stats.files_skipped += 1
            log_info(f"Skipped identical file {child.path}")
        else:
            gateway.trash(existing)
            gateway.move(child, child_destination)
            stats.files_replaced += 1
    except _ITEM_ERRORS as exc:
        _record_failure(stats, child, exc)


def _record_failure(stats: MergeStats, item: VaultItem, exc: Exception) -> None:
    stats.failed_items.append(item.name)
    log_error(f"Failed to process {item.path}: {exc}")


def _remove_if_empty(folder: VaultItem, gateway: FilesystemGateway) -> bool:
    """
    Delete folder when nothing is left in it. Returns True when deleted.
    """
    try:
        if gateway.list_children(folder):
            return False
        gateway.delete(folder)
    except _ITEM_ERRORS as exc:
        log_warning(f"Keeping folder {folder.path}: {exc}")
        return False
    return True


def summarize_merge(folder_name: str, stats: MergeStats, source_deleted: bool) -> str:
    """
    Compose the user-facing merge message.

    Example: "Merged Projects: 2 files (1 replaced, 1 skipped)".
    """
    message = f"Merged {folder_name}: {pluralize(stats.files_processed, 'file')}"

    details: List[str] = []
    if stats.files_replaced > 0:
        details.append(f"{stats.files_replaced} replaced")
    if stats.files_skipped > 0:
        details.append(f"{stats.files_skipped} skipped")
    if stats.failed_items:
        details.append(f"{len(stats.failed_items)} failed")
    if details:
        message += f" ({', '.join(details)})"

    if stats.failed_items:
        message += f". Failed: {', '.join(stats.failed_items)}"

    if not source_deleted:
        message += ". Source folder not deleted (contains remaining files)"
    return message


def merge_into_existing(
    source_folder: VaultItem,
    destination_folder_path: str,
    gateway: FilesystemGateway,
) -> ArchiveResult:
    """
    Merge source_folder into destination_folder_path and report the outcome.

    The source folder is deleted only when the merge consumed every item
    in it. The result is unsuccessful when any item failed.
    """
    try:
        stats = merge_folder(source_folder, destination_folder_path, gateway)
        source_deleted = _remove_if_empty(source_folder, gateway)
    except _ITEM_ERRORS as exc:
        log_error(f"Unable to merge {source_folder.path}: {exc}")
        return ArchiveResult.failed(
            f"Unable to merge {source_folder.name}: {exc}", ErrorKind.IO_FAILURE
        )

    message = summarize_merge(source_folder.name, stats, source_deleted)
    log_info(
        f"Merge of {source_folder.path} into {destination_folder_path}: "
        f"added={stats.files_added} replaced={stats.files_replaced} "
        f"skipped={stats.files_skipped} folders_created={stats.folders_created} "
        f"failed={len(stats.failed_items)}"
    )
    if stats.has_failures:
        return ArchiveResult.failed(message, ErrorKind.PARTIAL_MERGE_FAILURE)
    return ArchiveResult.ok(message)
