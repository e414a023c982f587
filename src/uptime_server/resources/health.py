"""Health resource — protocol-agnostic health check logic."""

from __future__ import annotations

from uptime_server.jobs.scheduler import JobRunner


class HealthResource:
    """Health check operations, including background job outcomes."""

    def __init__(self, job_runner: JobRunner | None = None) -> None:
        self._runner = job_runner

    def check(self) -> dict[str, object]:
        """Return server health and the latest outcome of each job.

        Status is ``degraded`` when any job's most recent run failed.
        """
        jobs = self._runner.describe() if self._runner is not None else {}
        failing = any(job["healthy"] is False for job in jobs.values())
        return {"status": "degraded" if failing else "ok", "jobs": jobs}
