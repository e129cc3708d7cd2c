"""
Module: config
Purpose: Load, validate and persist the archive folder setting.
"""

import json
import os
from typing import Optional, Tuple

from .exceptions import InvalidArchiveFolderError, SettingsError
from .models.settings import DEFAULT_ARCHIVE_FOLDER, ArchiverSettings
from .models.vault_item import ROOT_PATH
from .paths import normalize_path
from .utils import log_info, log_warning

PLUGIN_ID = "simple-archiver"
SETTINGS_FILE_NAME = "data.json"
ARCHIVE_FOLDER_ENV = "SIMPLE_ARCHIVER_FOLDER"
VAULT_ENV = "SIMPLE_ARCHIVER_VAULT"

ARCHIVE_FOLDER_RULES = (
    'Folder names must not contain "\\", "/" or ":" and must not start with ".".'
)


def settings_path(vault_root: str) -> str:
    """
    Location of the settings file inside a vault, next to other plugin data.
    """
    return os.path.join(
        os.path.abspath(vault_root), ".obsidian", "plugins", PLUGIN_ID, SETTINGS_FILE_NAME
    )


def validate_archive_folder(value: str) -> str:
    """
    Validate an archive folder name and return its normalized form.

    Nested folders ("Old/Archive") are allowed; "/" and "\\" only act as
    separators between folder names.

    Raises:
        InvalidArchiveFolderError: When the value breaks a naming rule.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidArchiveFolderError("Archive folder must not be empty.")
    if value.startswith("."):
        raise InvalidArchiveFolderError('Archive folder must not start with ".".')
    if ":" in value:
        raise InvalidArchiveFolderError('Archive folder must not contain ":".')
    normalized = normalize_path(value)
    if normalized == ROOT_PATH:
        raise InvalidArchiveFolderError("Archive folder must not be the vault root.")
    for segment in normalized.split("/"):
        if segment.startswith("."):
            raise InvalidArchiveFolderError(
                f'Folder name "{segment}" must not start with ".".'
            )
    return normalized


def load_settings(path: str) -> ArchiverSettings:
    """
    Load settings from JSON, merged over the defaults.

    A missing file gives the defaults. Unreadable JSON or an invalid stored
    archive folder is logged and the default is kept.
    """
    settings = ArchiverSettings()
    normalized = os.path.abspath(path)
    if not os.path.exists(normalized):
        return settings
    try:
        with open(normalized, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        log_warning(f"Ignoring unreadable settings file {normalized}: {exc}")
        return settings
    if not isinstance(payload, dict):
        log_warning(f"Ignoring malformed settings file {normalized}: expected an object")
        return settings

    settings.extra = {key: value for key, value in payload.items() if key != "archiveFolder"}
    stored = payload.get("archiveFolder")
    if stored is not None:
        try:
            settings.archive_folder = validate_archive_folder(stored)
        except InvalidArchiveFolderError as exc:
            log_warning(
                f"Ignoring stored archive folder {stored!r} ({exc}); "
                f"using '{DEFAULT_ARCHIVE_FOLDER}'."
            )
    return settings


def save_settings(settings: ArchiverSettings, path: str) -> None:
    """
    Persist settings as JSON.

    Raises:
        SettingsError: If the file cannot be written.
    """
    normalized = os.path.abspath(path)
    try:
        os.makedirs(os.path.dirname(normalized), exist_ok=True)
        with open(normalized, "w", encoding="utf-8") as handle:
            json.dump(settings.to_dict(), handle, indent=2)
    except OSError as exc:
        raise SettingsError(f"Unable to save settings to {normalized}: {exc}") from exc
    log_info(f"Settings saved to {normalized}")


def update_archive_folder(settings: ArchiverSettings, value: str) -> ArchiverSettings:
    """
    Apply a validated edit of the archive folder.

    Raises:
        InvalidArchiveFolderError: When the value is rejected; settings are
        left unchanged.
    """
    normalized = validate_archive_folder(value)
    previous = settings.archive_folder
    settings.archive_folder = normalized
    log_info(f"Archive folder changed from '{previous}' to '{normalized}'")
    return settings


def resolve_archive_folder(
    settings: ArchiverSettings, cli_override: Optional[str] = None
) -> Tuple[str, str]:
    """
    Determine the effective archive folder.
    Preference order: CLI override > environment variable > settings file.
    Returns tuple of (folder, source).

    Raises:
        InvalidArchiveFolderError: When the CLI override is invalid.
    """
    if cli_override is not None:
        return validate_archive_folder(cli_override), "cli"

    env_value = os.getenv(ARCHIVE_FOLDER_ENV)
    if env_value:
        try:
            return validate_archive_folder(env_value), "env"
        except InvalidArchiveFolderError as exc:
            log_warning(f"Ignoring invalid {ARCHIVE_FOLDER_ENV} value '{env_value}': {exc}")

    return settings.archive_folder, "settings"


def resolve_vault_root(cli_override: Optional[str] = None) -> str:
    """
    Determine the vault root: CLI override > environment variable > cwd.
    """
    if cli_override:
        return os.path.abspath(cli_override)
    env_value = os.getenv(VAULT_ENV)
    if env_value:
        return os.path.abspath(env_value)
    return os.getcwd()
