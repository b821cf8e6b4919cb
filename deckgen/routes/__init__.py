"""HTTP routers."""

from . import adapted, candidates, health, job_ads

__all__ = ["adapted", "candidates", "health", "job_ads"]
