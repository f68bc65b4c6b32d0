# =============================================================================
# workers/celery_app.py - Celery Application
# =============================================================================
# Builds the worker application from the same Settings the API uses. The
# API never imports this module directly: NotificationService enqueues
# workers.tasks.send_email by name.
#
# Start a worker:
#   celery -A workers.celery_app worker -Q default,email --loglevel=info
# =============================================================================

import logging
from urllib.parse import urlsplit

from celery import Celery
from celery.signals import task_failure, task_retry, task_success
from dotenv import load_dotenv

from app.config import Settings, get_settings
from workers.config import build_celery_config

load_dotenv()

logger = logging.getLogger(__name__)


def _broker_label(url: str) -> str:
    """host:port/db of the broker, without credentials."""
    parts = urlsplit(url)
    return f"{parts.hostname}:{parts.port or 6379}{parts.path}"


def create_celery_app(settings: Settings) -> Celery:
    """Create the worker app, configured and with the email tasks registered."""
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    app = Celery("modelhub_worker", include=["workers.tasks"])
    app.conf.update(build_celery_config(settings))

    logger.info(f"Celery broker: {_broker_label(settings.REDIS_URL)}")
    return app


celery_app = create_celery_app(get_settings())


# =============================================================================
# Delivery logging
# =============================================================================

@task_success.connect
def log_task_success(sender=None, result=None, **extra):
    logger.info(f"{sender.name} [{sender.request.id}] finished: {result}")


@task_retry.connect
def log_task_retry(sender=None, request=None, reason=None, **extra):
    logger.warning(f"{sender.name} [{request.id}] retry {request.retries + 1}: {reason}")


@task_failure.connect
def log_task_failure(sender=None, task_id=None, exception=None, **extra):
    logger.error(f"{sender.name} [{task_id}] gave up: {exception}")
