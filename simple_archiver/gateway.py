"""
Module: gateway
Purpose: Filesystem gateway contract and its directory-backed implementation.
"""

import os
from typing import List, Optional, Protocol

from .exceptions import VaultIOError
from .models.vault_item import ROOT_PATH, VaultItem
from .paths import join_path, normalize_path, unique_renamed_path
from .utils import log_error, log_info

DEFAULT_TRASH_FOLDER = ".trash"


class FilesystemGateway(Protocol):
    """
    Operations the archiver needs from the vault's filesystem.

    Every method raises VaultIOError when the underlying operation fails.
    """

    def get_item(self, path: str) -> Optional[VaultItem]:
        ...

    def is_folder(self, item: VaultItem) -> bool:
        ...

    def list_children(self, folder: VaultItem) -> List[VaultItem]:
        ...

    def create_folder(self, path: str) -> None:
        ...

    def move(self, item: VaultItem, new_path: str) -> None:
        ...

    def trash(self, item: VaultItem) -> None:
        ...

    def delete(self, item: VaultItem) -> None:
        ...

    def read_contents(self, item: VaultItem) -> bytes:
        ...


def _describe(exc: OSError) -> str:
    return exc.strerror or str(exc)


class LocalVaultGateway:
    """
    Gateway over a plain directory acting as the vault root.

    Entries whose name starts with "." are outside the vault namespace, the
    same way the host application hides its configuration and trash folders.
    """

    def __init__(self, root: str, trash_folder: str = DEFAULT_TRASH_FOLDER):
        normalized = os.path.abspath(root)
        if not os.path.isdir(normalized):
            raise VaultIOError(f"Vault root is not a directory: {normalized}")
        self.root = normalized
        self.trash_folder = trash_folder

    def absolute_path(self, path: str) -> str:
        """
        Map a vault path onto the local filesystem.

        Raises:
            VaultIOError: If the path would escape the vault root.
        """
        normalized = normalize_path(path)
        if normalized == ROOT_PATH:
            return self.root
        segments = normalized.split("/")
        if any(segment in (".", "..") for segment in segments):
            raise VaultIOError(f"Path '{path}' escapes the vault root")
        return os.path.join(self.root, *segments)

    def get_item(self, path: str) -> Optional[VaultItem]:
        normalized = normalize_path(path)
        if normalized == ROOT_PATH:
            return VaultItem(path=ROOT_PATH, is_folder=True)
        if any(segment.startswith(".") for segment in normalized.split("/")):
            return None
        target = self.absolute_path(normalized)
        if not os.path.lexists(target):
            return None
        return VaultItem(path=normalized, is_folder=os.path.isdir(target))

    def is_folder(self, item: VaultItem) -> bool:
        return item.is_folder

    def list_children(self, folder: VaultItem) -> List[VaultItem]:
        target = self.absolute_path(folder.path)
        try:
            names = sorted(os.listdir(target))
        except OSError as exc:
            log_error(f"Failed to list folder {folder.path}: {exc}")
            raise VaultIOError(f"Failed to list '{folder.path}': {_describe(exc)}") from exc
        return [
            VaultItem(
                path=join_path(folder.path, name),
                is_folder=os.path.isdir(os.path.join(target, name)),
            )
            for name in names
            if not name.startswith(".")
        ]

    def create_folder(self, path: str) -> None:
        target = self.absolute_path(path)
        try:
            os.makedirs(target, exist_ok=True)
        except OSError as exc:
            log_error(f"Failed to create folder {path}: {exc}")
            raise VaultIOError(f"Unable to create folder '{path}': {_describe(exc)}") from exc
        log_info(f"Created folder {normalize_path(path)}")

    def move(self, item: VaultItem, new_path: str) -> None:
        """
        Rename an item in a single step.

        The destination must be free and its parent folder must exist;
        a failed move leaves the item where it was.
        """
        source = self.absolute_path(item.path)
        destination = self.absolute_path(new_path)
        if os.path.lexists(destination):
            raise VaultIOError("Destination file already exists!")
        if not os.path.isdir(os.path.dirname(destination)):
            raise VaultIOError(f"Destination folder for '{new_path}' does not exist")
        try:
            os.rename(source, destination)
        except OSError as exc:
            log_error(f"Failed to move {item.path} to {new_path}: {exc}")
            raise VaultIOError(
                f"Failed to move '{item.path}' to '{new_path}': {_describe(exc)}"
            ) from exc
        log_info(f"Moved {item.path} -> {normalize_path(new_path)}")

    def trash(self, item: VaultItem) -> None:
        """
        Soft-delete an item into the vault's trash folder.
        """
        source = self.absolute_path(item.path)
        trash_root = os.path.join(self.root, self.trash_folder)
        try:
            os.makedirs(trash_root, exist_ok=True)
            target = os.path.join(trash_root, item.name)
            if os.path.lexists(target):
                renamed = unique_renamed_path(
                    item.name,
                    ROOT_PATH,
                    lambda candidate: os.path.lexists(os.path.join(trash_root, candidate)),
                )
                target = os.path.join(trash_root, renamed)
            os.rename(source, target)
        except OSError as exc:
            log_error(f"Failed to trash {item.path}: {exc}")
            raise VaultIOError(f"Unable to trash '{item.path}': {_describe(exc)}") from exc
        log_info(f"Trashed {item.path} -> {os.path.relpath(target, self.root)}")

    def delete(self, item: VaultItem) -> None:
        """
        Permanently delete a file or an empty folder.
        """
        target = self.absolute_path(item.path)
        try:
            if item.is_folder:
                os.rmdir(target)
            else:
                os.remove(target)
        except OSError as exc:
            reason = _describe(exc)
            hidden = self._hidden_entries(target) if item.is_folder else []
            if hidden:
                reason = f"folder still holds hidden entries ({', '.join(hidden)})"
            log_error(f"Failed to delete {item.path}: {reason}")
            raise VaultIOError(f"Unable to delete '{item.path}': {reason}") from exc
        log_info(f"Deleted {item.path}")

    @staticmethod
    def _hidden_entries(target: str) -> List[str]:
        try:
            names = os.listdir(target)
        except OSError:
            return []
        return sorted(name for name in names if name.startswith("."))

    def read_contents(self, item: VaultItem) -> bytes:
        target = self.absolute_path(item.path)
        try:
            with open(target, "rb") as handle:
                return handle.read()
        except OSError as exc:
            log_error(f"Failed to read {item.path}: {exc}")
            raise VaultIOError(f"Unable to read '{item.path}': {_describe(exc)}") from exc
