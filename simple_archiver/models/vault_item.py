"""
Module: vault_item
Purpose: Dataclass representing a file or folder inside the vault.
"""

from dataclasses import dataclass

ROOT_PATH = "/"


@dataclass(frozen=True)
class VaultItem:
    """
    A file or folder identified by its vault-relative path.

    Only the filesystem gateway creates VaultItems; the archiver reads them
    and hands them back to the gateway for moves and deletes.
    """

    path: str
    is_folder: bool = False

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def parent_path(self) -> str:
        if "/" not in self.path:
            return ROOT_PATH
        return self.path.rsplit("/", 1)[0]
