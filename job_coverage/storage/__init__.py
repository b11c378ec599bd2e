"""JSON-file record stores for career data and parsed jobs."""

from .profile_store import ProfileStore
from .job_store import JobStore, StoredJob

__all__ = ["ProfileStore", "JobStore", "StoredJob"]
