"""Backup and bulk import domain service."""

import json
import logging
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from dmxmoney.database.base import Database
from dmxmoney.domain.entities import AppData
from dmxmoney.domain.errors import ValidationError
from dmxmoney.domain.payload import (
    app_data_from_payload,
    app_data_to_payload,
    ensure_storable_text,
    settings_to_payload,
)
from dmxmoney.domain.settings import SettingsService

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1

# Settings fields restored from a backup; everything else stays local
GROUPING_FIELDS = {
    "accountGroups": "account_groups",
    "customGroups": "custom_groups",
    "customGroupsOrder": "custom_groups_order",
    "accountsOrder": "accounts_order",
}


class BackupService:
    """Service for replacing and exporting the whole dataset."""

    def __init__(self, db: Database):
        """Initialize backup service.

        Args:
            db: Database instance
        """
        self.db = db
        self.settings_service = SettingsService(db)

    def import_data(self, snapshot: AppData) -> None:
        """Replace every account, transaction, category and scheduled transaction.

        All-or-nothing: on any failure the previous data is kept untouched.
        Settings are not part of the snapshot and are never modified.

        Args:
            snapshot: The complete new dataset
        """
        self.db.import_data(snapshot)

    def export_data(self) -> AppData:
        """Return the four entity tables as one snapshot."""
        return self.db.export_data()

    def export_backup(self) -> dict[str, Any]:
        """Build a backup document of the dataset and the settings.

        Returns:
            Dict with ``version``, ``timestamp`` and ``data`` keys, ready to be
            written as JSON
        """
        data = app_data_to_payload(self.db.export_data())
        settings = self.settings_service.get_settings()
        data["settings"] = settings_to_payload(settings) if settings is not None else None
        return {
            "version": BACKUP_VERSION,
            "timestamp": datetime.now(UTC).isoformat(),
            "data": data,
        }

    def restore_backup(self, document: Any) -> None:
        """Restore a backup document produced by ``export_backup``.

        The dataset is replaced through ``import_data``. When the backup
        carries settings, only the account grouping and ordering fields are
        restored, and only where the backup has a value.

        Args:
            document: Parsed backup document

        Raises:
            ValidationError: If the document has no ``data`` object
        """
        if not isinstance(document, dict) or not isinstance(document.get("data"), dict):
            raise ValidationError("Invalid backup data format")

        data = document["data"]
        self.import_data(app_data_from_payload(data))

        backup_settings = data.get("settings")
        if not isinstance(backup_settings, dict):
            return

        current = self.settings_service.get_settings_or_default()
        changes = {
            field_name: ensure_storable_text(
                _as_json_text(backup_settings[key]), "settings", key
            )
            for key, field_name in GROUPING_FIELDS.items()
            if backup_settings.get(key)
        }
        if changes:
            logger.info("Restoring settings fields: %s", ", ".join(sorted(changes)))
            self.settings_service.save_settings(replace(current, **changes))

    def write_backup(self, path: Path) -> None:
        """Write a backup document to ``path`` as JSON."""
        path.write_text(json.dumps(self.export_backup(), indent=2), encoding="utf-8")

    def read_backup(self, path: Path) -> None:
        """Restore the backup document stored at ``path``.

        Raises:
            ValidationError: If the file is not valid JSON or not a backup
        """
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValidationError(f"Backup file is not valid JSON: {e}") from e
        self.restore_backup(document)


def _as_json_text(value: Any) -> str:
    # Front-end exports hold the decoded objects rather than JSON strings
    return value if isinstance(value, str) else json.dumps(value)
