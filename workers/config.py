# =============================================================================
# workers/config.py - Celery Worker Configuration
# =============================================================================
# Settings specific to Celery workers, built from the application Settings.
# =============================================================================

from typing import Any

from app.config import Settings

EMAIL_QUEUE = "email"


def build_celery_config(settings: Settings) -> dict[str, Any]:
    """
    Celery configuration for the given settings.

    Applied to the Celery app via app.conf.update().
    """
    return {
        # ---------------------------------------------------------------------
        # Broker Settings (Redis)
        # ---------------------------------------------------------------------
        "broker_url": settings.REDIS_URL,
        "result_backend": settings.REDIS_URL,

        # ---------------------------------------------------------------------
        # Task Settings
        # ---------------------------------------------------------------------
        # Acknowledge after completion so a crashed worker doesn't lose mail
        "task_acks_late": True,
        "worker_prefetch_multiplier": 1,
        "result_expires": 3600,
        "task_time_limit": 120,
        "task_soft_time_limit": 90,

        # ---------------------------------------------------------------------
        # Serialization
        # ---------------------------------------------------------------------
        "task_serializer": "json",
        "result_serializer": "json",
        "accept_content": ["json"],

        # ---------------------------------------------------------------------
        # Task Routing
        # ---------------------------------------------------------------------
        "task_queues": {
            "default": {"exchange": "default", "routing_key": "default"},
            EMAIL_QUEUE: {"exchange": EMAIL_QUEUE, "routing_key": EMAIL_QUEUE},
        },
        "task_routes": {
            "workers.tasks.send_email": {"queue": EMAIL_QUEUE},
        },
        "task_default_queue": "default",

        # ---------------------------------------------------------------------
        # Monitoring
        # ---------------------------------------------------------------------
        "worker_send_task_events": True,
        "task_send_sent_event": True,

        # ---------------------------------------------------------------------
        # Timezone
        # ---------------------------------------------------------------------
        "timezone": "UTC",
        "enable_utc": True,
    }
