"""
Module: settings
Purpose: Persisted archiver settings.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

DEFAULT_ARCHIVE_FOLDER = "Archive"


@dataclass
class ArchiverSettings:
    """
    Settings persisted between runs. Stored as JSON using the host
    application's camelCase key; unknown keys are carried through untouched.
    """

    archive_folder: str = DEFAULT_ARCHIVE_FOLDER
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        payload = dict(self.extra)
        payload["archiveFolder"] = self.archive_folder
        return payload
