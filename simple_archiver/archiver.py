"""
Module: archiver
Purpose: Archive and unarchive vault items, resolving collisions on the way.
"""

from typing import Callable, Iterable, Optional, Sequence, Tuple

from .exceptions import (
    AlreadyArchivedError,
    ArchiverError,
    NotArchivedError,
    OperationCancelledError,
    VaultIOError,
)
from .gateway import FilesystemGateway
from .merge_engine import merge_into_existing
from .models.decisions import ConflictChoice, ConflictPromptRequest
from .models.results import ArchiveResult, BatchResult, ErrorKind
from .models.vault_item import ROOT_PATH, VaultItem
from .paths import (
    from_archive_path,
    is_archived,
    join_path,
    normalize_path,
    parent_path,
    to_archive_parent_path,
    to_archive_path,
    unique_renamed_path,
)
from .prompts import ConflictPrompt
from .utils import log_error, log_info, log_warning

MERGE_CHOICES = (ConflictChoice.MERGE, ConflictChoice.CANCEL)
ARCHIVE_REPLACE_CHOICES = (ConflictChoice.REPLACE, ConflictChoice.RENAME, ConflictChoice.CANCEL)
UNARCHIVE_REPLACE_CHOICES = (ConflictChoice.REPLACE, ConflictChoice.CANCEL)


class Archiver:
    """
    Moves vault items into the archive folder and back out again.

    Every public operation returns an ArchiveResult (or a BatchResult for
    the *_many variants) and never raises. Collisions are settled through
    the conflict prompt before anything on disk changes.

    Args:
        archive_folder: Root of the archive subtree, already validated.
        gateway: Filesystem gateway for the vault.
        prompt: Asked to pick a strategy when a destination is occupied.
        notify: Receives the aggregate message of batch operations.
    """

    def __init__(
        self,
        archive_folder: str,
        gateway: FilesystemGateway,
        prompt: ConflictPrompt,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.archive_folder = normalize_path(archive_folder)
        self.gateway = gateway
        self.prompt = prompt
        self.notify = notify

    def is_archived(self, item: VaultItem) -> bool:
        return is_archived(item.path, self.archive_folder)

    def can_archive(self, items: Sequence[VaultItem]) -> bool:
        """Archive actions are offered only when no selected item is archived."""
        return bool(items) and not any(self.is_archived(item) for item in items)

    def can_unarchive(self, items: Sequence[VaultItem]) -> bool:
        """Unarchive actions are offered only when every selected item is archived."""
        return bool(items) and all(self.is_archived(item) for item in items)

    # Single items

    def archive_one(self, item: VaultItem) -> ArchiveResult:
        return self._guard("archive", item, self._archive)

    def unarchive_one(self, item: VaultItem) -> ArchiveResult:
        return self._guard("unarchive", item, self._unarchive)

    # Batches

    def archive_many(self, items: Iterable[VaultItem]) -> BatchResult:
        return self._run_batch("archived", items, self.archive_one)

    def unarchive_many(self, items: Iterable[VaultItem]) -> BatchResult:
        return self._run_batch("unarchived", items, self.unarchive_one)

    # Plain moves

    def move_to_archive(self, item: VaultItem) -> ArchiveResult:
        """
        Move an item to its mirrored location under the archive folder.
        """
        destination_folder = to_archive_parent_path(item.parent_path, self.archive_folder)
        return self._relocate(
            item,
            destination_folder,
            join_path(destination_folder, item.name),
            success=f"{item.name} archived successfully",
            failure=f"Unable to archive {item.name}",
        )

    def move_out_of_archive(self, item: VaultItem) -> ArchiveResult:
        """
        Move an archived item back to the location it was archived from.
        """
        original_path = from_archive_path(item.path, self.archive_folder)
        return self._relocate(
            item,
            parent_path(original_path),
            original_path,
            success=f"{item.name} unarchived successfully",
            failure=f"Unable to unarchive {item.name}",
        )

    # Internals

    def _archive(self, item: VaultItem) -> ArchiveResult:
        if self.is_archived(item):
            raise AlreadyArchivedError("Item is already archived")
        if item.is_folder and self.archive_folder.startswith(f"{item.path}/"):
            raise VaultIOError(
                f"{item.name} cannot be archived because it contains the archive folder"
            )

        destination = to_archive_path(item.path, self.archive_folder)
        existing = self.gateway.get_item(destination)
        if existing is None:
            return self.move_to_archive(item)

        if self.gateway.is_folder(item) and self.gateway.is_folder(existing):
            self._ask(
                "Merge folders?",
                f'A folder called "{item.name}" already exists in the archive. '
                "Merge the contents?",
                MERGE_CHOICES,
                cancelled="Archive operation cancelled",
            )
            return merge_into_existing(item, destination, self.gateway)

        choice = self._ask(
            "Replace archived item?",
            f'An item called "{item.name}" already exists in the destination folder '
            "in the archive. Would you like to replace it, or archive this one under "
            "a new name?",
            ARCHIVE_REPLACE_CHOICES,
            cancelled="Archive operation cancelled",
        )
        if choice is ConflictChoice.REPLACE:
            self.gateway.trash(existing)
            return self.move_to_archive(item)

        destination_folder = to_archive_parent_path(item.parent_path, self.archive_folder)
        renamed = unique_renamed_path(item.name, destination_folder, self._exists)
        new_name = renamed.rsplit("/", 1)[-1]
        return self._relocate(
            item,
            destination_folder,
            renamed,
            success=f"{item.name} archived as {new_name}",
            failure=f"Unable to archive {item.name}",
        )

    def _unarchive(self, item: VaultItem) -> ArchiveResult:
        if not self.is_archived(item):
            raise NotArchivedError("Item is not archived")
        if item.path == self.archive_folder:
            raise NotArchivedError("The archive folder itself cannot be moved out of the archive")

        original_path = from_archive_path(item.path, self.archive_folder)
        self._ensure_folder(parent_path(original_path))

        existing = self.gateway.get_item(original_path)
        if existing is None:
            return self.move_out_of_archive(item)

        self._ask(
            "Replace existing item?",
            f'An item called "{item.name}" already exists in the original location. '
            "Would you like to replace it?",
            UNARCHIVE_REPLACE_CHOICES,
            cancelled="Unarchive operation cancelled",
        )
        self.gateway.trash(existing)
        return self.move_out_of_archive(item)

    def _ask(
        self,
        title: str,
        message: str,
        choices: Tuple[ConflictChoice, ...],
        cancelled: str,
    ) -> ConflictChoice:
        """
        Put a collision to the prompt and return the committed choice.

        Raises:
            OperationCancelledError: When the user cancels.
        """
        request = ConflictPromptRequest(title=title, message=message, choices=choices)
        choice = self.prompt.choose(request)
        if choice not in choices:
            log_warning(f"Prompt answered {choice!r}, which was not offered; cancelling")
            choice = ConflictChoice.CANCEL
        if choice is ConflictChoice.CANCEL:
            raise OperationCancelledError(cancelled)
        return choice

    def _exists(self, path: str) -> bool:
        return self.gateway.get_item(path) is not None

    def _ensure_folder(self, path: str) -> None:
        if path == ROOT_PATH:
            return
        existing = self.gateway.get_item(path)
        if existing is None:
            self.gateway.create_folder(path)
        elif not self.gateway.is_folder(existing):
            raise VaultIOError(f"'{path}' is a file, not a folder")

    def _relocate(
        self,
        item: VaultItem,
        destination_folder: str,
        destination: str,
        *,
        success: str,
        failure: str,
    ) -> ArchiveResult:
        try:
            self._ensure_folder(destination_folder)
            self.gateway.move(item, destination)
        except (ArchiverError, OSError) as exc:
            log_error(f"{failure}: {exc}")
            return ArchiveResult.failed(f"{failure}: {exc}", ErrorKind.IO_FAILURE)
        log_info(success)
        return ArchiveResult.ok(success)

    def _guard(
        self,
        action: str,
        item: VaultItem,
        operation: Callable[[VaultItem], ArchiveResult],
    ) -> ArchiveResult:
        label = action.capitalize()
        try:
            return operation(item)
        except VaultIOError as exc:
            log_error(f"{label} of {item.path} failed: {exc}")
            return ArchiveResult.failed(f"{label} operation failed: {exc}", exc.kind)
        except ArchiverError as exc:
            log_info(f"{label} of {item.path} stopped: {exc}")
            return ArchiveResult.failed(str(exc), exc.kind)
        except Exception as exc:  # gateway implementations outside our hierarchy
            log_error(f"{label} of {item.path} failed unexpectedly: {exc}")
            return ArchiveResult.failed(f"{label} operation failed: {exc}", ErrorKind.IO_FAILURE)

    def _run_batch(
        self,
        action: str,
        items: Iterable[VaultItem],
        operation: Callable[[VaultItem], ArchiveResult],
    ) -> BatchResult:
        batch = BatchResult(action=action)
        for item in items:
            batch.results.append((item.path, operation(item)))
        log_info(f"Batch {action}: {batch.succeeded} of {len(batch.results)} succeeded")
        if self.notify is not None:
            self.notify(batch.message)
        return batch
