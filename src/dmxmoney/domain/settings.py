"""Settings domain service."""

from typing import Optional

from dmxmoney.database.base import Database
from dmxmoney.domain.entities import Settings


class SettingsService:
    """Service for reading and saving the application settings."""

    def __init__(self, db: Database):
        """Initialize settings service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_settings(self) -> Optional[Settings]:
        """Get the saved settings.

        Returns:
            Settings, or None if they have never been saved
        """
        return self.db.get_settings()

    def get_settings_or_default(self) -> Settings:
        """Get the saved settings, falling back to the defaults."""
        settings = self.db.get_settings()
        return settings if settings is not None else Settings()

    def save_settings(self, settings: Settings) -> None:
        """Save the settings, creating the row on first use."""
        self.db.save_settings(settings)
