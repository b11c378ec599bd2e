"""
Profile Store - One CareerData record per user.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from .base import JsonFileStore, safe_name
from job_coverage.core.models import CareerData


class ProfileStore(JsonFileStore):
    """Stores each user's career data as a JSON file."""

    def __init__(self, storage_path: str = "./coverage_data/profiles"):
        """
        Initialize the profile store.

        Args:
            storage_path: Directory for profile files
        """
        super().__init__(storage_path)

    def get(self, user_id: str) -> Optional[CareerData]:
        """Return the user's career data, or None if there is none."""
        data = self._read(self._path(user_id))
        if data is None:
            return None

        career_data = data.get("careerData")
        if not isinstance(career_data, dict):
            return None

        return CareerData.from_dict(career_data)

    def upsert(self, user_id: str, career_data: CareerData) -> None:
        """Replace the user's career data as a whole."""
        self._write(
            self._path(user_id),
            {
                "userId": user_id,
                "updatedAt": datetime.now().isoformat(),
                "careerData": career_data.to_dict(),
            },
        )
        self.logger.info(f"Saved profile for {user_id}")

    def exists(self, user_id: str) -> bool:
        return self._path(user_id).exists()

    def _path(self, user_id: str) -> Path:
        return self.storage_path / f"{safe_name(user_id)}.json"
