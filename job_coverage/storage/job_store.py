"""
Job Store - Parsed job descriptions saved per user.

Jobs are persisted once, right after parsing, and reconstructed verbatim
from the stored fields afterwards; nothing here re-runs the parser.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional
import uuid

from .base import JsonFileStore, safe_name
from job_coverage.core.models import ParsedJobDescription


@dataclass
class StoredJob:
    """A saved job with its bookkeeping fields."""
    id: str
    job: ParsedJobDescription
    raw_description: str = ""
    created_at: Optional[str] = None


class JobStore(JsonFileStore):
    """Stores parsed jobs as JSON files, one directory per user."""

    def __init__(self, storage_path: str = "./coverage_data/jobs"):
        """
        Initialize the job store.

        Args:
            storage_path: Directory for job files
        """
        super().__init__(storage_path)

    def save(
        self,
        user_id: str,
        job: ParsedJobDescription,
        raw_description: str = "",
        job_id: Optional[str] = None,
    ) -> str:
        """
        Save a parsed job.

        Args:
            user_id: Owner of the job
            job: Parsed job description
            raw_description: Original posting text
            job_id: Existing id to overwrite (default: a new id)

        Returns:
            Job ID
        """
        job_id = job_id or str(uuid.uuid4())
        self._write(
            self._path(user_id, job_id),
            {
                "id": job_id,
                "userId": user_id,
                "createdAt": datetime.now().isoformat(),
                "rawDescription": raw_description,
                "job": job.to_dict(),
            },
        )
        self.logger.info(f"Saved job {job_id}: {job.title or 'Untitled'} at {job.company or 'Unknown'}")
        return job_id

    def get(self, user_id: str, job_id: str) -> Optional[ParsedJobDescription]:
        """Return the stored job, or None if the user has no such job."""
        stored = self.get_record(user_id, job_id)
        return stored.job if stored else None

    def get_record(self, user_id: str, job_id: str) -> Optional[StoredJob]:
        return self._load(self._path(user_id, job_id))

    def list_jobs(self, user_id: str) -> list[StoredJob]:
        """All readable jobs for a user, oldest first."""
        user_dir = self.storage_path / safe_name(user_id)
        if not user_dir.is_dir():
            return []

        jobs = []
        for filepath in sorted(user_dir.glob("*.json")):
            stored = self._load(filepath)
            if stored:
                jobs.append(stored)

        jobs.sort(key=lambda s: s.created_at or "")
        return jobs

    def remove(self, user_id: str, job_id: str) -> bool:
        """Delete a job. Returns False if it did not exist."""
        filepath = self._path(user_id, job_id)
        if not filepath.exists():
            return False

        filepath.unlink()
        self.logger.info(f"Removed job {job_id}")
        return True

    def _load(self, filepath: Path) -> Optional[StoredJob]:
        data = self._read(filepath)
        if data is None:
            return None

        job_data = data.get("job")
        if not isinstance(job_data, dict):
            self.logger.error(f"Error loading {filepath}: missing job fields")
            return None

        return StoredJob(
            id=data.get("id") or filepath.stem,
            job=ParsedJobDescription.from_dict(job_data),
            raw_description=data.get("rawDescription") or "",
            created_at=data.get("createdAt"),
        )

    def _path(self, user_id: str, job_id: str) -> Path:
        return self.storage_path / safe_name(user_id) / f"{safe_name(job_id)}.json"
