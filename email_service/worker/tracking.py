import logging
from datetime import datetime, timezone

from django.conf import settings

from .exceptions import TrackingError
from .models import Job

logger = logging.getLogger(__name__)

SENT_PREFIX = "email_sent:"
FAILED_PREFIX = "email_failed:"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class ResultTracker:
    """Write-once audit records for processed jobs.

    Recording never raises: a failed cache write is logged and dropped so it
    cannot change the outcome reported for the job.
    """

    def __init__(self, cache, ttl: int = None, clock=utc_timestamp):
        self.cache = cache
        self.ttl = ttl if ttl is not None else settings.TRACKING_TTL
        self.clock = clock

    def record_success(self, job: Job, message_id: str, email: str) -> None:
        self._record(f"{SENT_PREFIX}{job.request_id}", {
            "request_id": job.request_id,
            "user_id": job.user_id,
            "email": email,
            "message_id": message_id,
            "sent_at": self.clock(),
        })

    def record_failure(self, job: Job, error: str) -> None:
        self._record(f"{FAILED_PREFIX}{job.request_id}", {
            "request_id": job.request_id,
            "user_id": job.user_id,
            "error": error,
            "retry_count": job.retry_count,
            "failed_at": self.clock(),
        })

    def _record(self, key: str, record: dict) -> None:
        try:
            self._write(key, record)
        except TrackingError as e:
            logger.error(f"Failed to record job result: {e}")

    def _write(self, key: str, record: dict) -> None:
        try:
            self.cache.set(key, record, self.ttl)
        except Exception as e:
            raise TrackingError(f"Could not write {key}: {e}") from e


def get_tracking_record(cache, request_id: str):
    # Out-of-band audit lookup; the pipeline itself never reads these back
    sent = cache.get(f"{SENT_PREFIX}{request_id}")
    if sent:
        return "sent", sent
    failed = cache.get(f"{FAILED_PREFIX}{request_id}")
    if failed:
        return "failed", failed
    return None, None
