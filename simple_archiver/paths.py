"""
Module: paths
Purpose: Translate vault paths to and from the archive subtree.
"""

import re
import unicodedata
from datetime import datetime
from typing import Callable, Optional, Tuple

from .models.vault_item import ROOT_PATH

RENAME_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"

_SEPARATOR_RUN = re.compile(r"[\\/]+")
_EDGE_SEPARATORS = re.compile(r"^/+|/+$")
_NON_BREAKING_SPACES = re.compile("[\u00a0\u202f]")


def normalize_path(path: str) -> str:
    """
    Normalize a vault-relative path.

    Backslashes become forward slashes, separator runs collapse to one and
    leading/trailing separators are dropped. ".." segments are left alone.
    An empty result denotes the vault root ("/").
    """
    normalized = _SEPARATOR_RUN.sub("/", path)
    normalized = _EDGE_SEPARATORS.sub("", normalized)
    if not normalized:
        return ROOT_PATH
    normalized = _NON_BREAKING_SPACES.sub(" ", normalized)
    return unicodedata.normalize("NFC", normalized)


def join_path(folder: str, name: str) -> str:
    if not folder or folder == ROOT_PATH:
        return normalize_path(name)
    return normalize_path(f"{folder}/{name}")


def parent_path(path: str) -> str:
    normalized = normalize_path(path)
    if "/" not in normalized:
        return ROOT_PATH
    return normalized.rsplit("/", 1)[0]


def split_name(name: str) -> Tuple[str, str]:
    """
    Split a file name into (base, extension) at the last dot.

    Dotfiles such as ".env" keep their whole name as the base.
    """
    index = name.rfind(".")
    if index <= 0:
        return name, ""
    return name[:index], name[index:]


def is_archived(item_path: str, archive_folder: str) -> bool:
    """
    True for the archive folder itself and anything below it.

    Matching is per segment: "Archive2/x.md" sits outside "Archive", since
    stripping the prefix from it would not give a vault path.
    """
    folder = normalize_path(archive_folder)
    return item_path == folder or item_path.startswith(f"{folder}/")


def to_archive_path(item_path: str, archive_folder: str) -> str:
    """
    Return the path an item will occupy once archived.
    """
    return normalize_path(f"{archive_folder}/{item_path}")


def to_archive_parent_path(item_parent_path: str, archive_folder: str) -> str:
    """
    Return the archive folder that mirrors an item's parent folder.

    Items in the vault root land directly inside the archive folder.
    """
    if not item_parent_path or item_parent_path == ROOT_PATH:
        return normalize_path(archive_folder)
    return normalize_path(f"{archive_folder}/{item_parent_path}")


def from_archive_path(item_path: str, archive_folder: str) -> str:
    """
    Return the original location of an archived item.

    Raises:
        ValueError: If item_path does not live below archive_folder.
    """
    prefix = f"{normalize_path(archive_folder)}/"
    if not item_path.startswith(prefix):
        raise ValueError(f"'{item_path}' is not inside the archive folder '{archive_folder}'")
    return item_path[len(prefix):]


def unique_renamed_path(
    original_name: str,
    destination_folder_path: str,
    exists: Callable[[str], bool],
    now: Optional[Callable[[], datetime]] = None,
) -> str:
    """
    Build a collision-free path for original_name inside a folder.

    The candidate is "<base>-YYYYMMDD-HHMMSS<ext>" using the current time in
    whole seconds. When that is taken, "-1", "-2", ... are appended to the
    timestamp and the first free candidate wins.

    Args:
        original_name: Name of the item being renamed.
        destination_folder_path: Folder the renamed item will live in.
        exists: Returns True when a vault item already occupies a path.
        now: Clock used for the timestamp; defaults to datetime.now.

    Returns:
        Vault path that no existing item occupies.
    """
    base, ext = split_name(original_name)
    stamp = (now or datetime.now)().strftime(RENAME_TIMESTAMP_FORMAT)
    candidate = join_path(destination_folder_path, f"{base}-{stamp}{ext}")
    suffix = 0
    while exists(candidate):
        suffix += 1
        candidate = join_path(destination_folder_path, f"{base}-{stamp}-{suffix}{ext}")
    return candidate
