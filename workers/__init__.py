# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# background email delivery.
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions (send_email)
# - config.py: Worker-specific settings
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker -Q default,email --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import send_email
#   send_email.delay("welcome", "user@example.com", {"username": "alice"})
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
