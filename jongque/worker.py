"""
Celery worker entry point

Runs waitlist promotion after cancellations:
    celery -A jongque.worker worker --loglevel=info
"""
import logging
from celery.signals import task_failure, worker_ready, worker_shutdown

from jongque.config.celery_config import celery_app
from jongque.config.settings import get_settings
from jongque.utils.my_logging import setup_logging

setup_logging(verbose=get_settings().DEBUG)
logger = logging.getLogger(__name__)


@worker_ready.connect
def worker_ready_handler(sender=None, **kwargs):
    booking_tasks = sorted(name for name in celery_app.tasks.keys() if name.startswith("jongque."))
    logger.info(f"Celery worker ready, tasks: {booking_tasks}")


@task_failure.connect
def task_failure_handler(sender=None, task_id=None, exception=None, args=None, **kwargs):
    """Retries are exhausted at this point; the waitlist head stays waiting until the next cancellation"""
    logger.error(f"Task {getattr(sender, 'name', sender)} [{task_id}] failed for {args}: {exception}")


@worker_shutdown.connect
def worker_shutdown_handler(sender=None, **kwargs):
    logger.info("Celery worker shutting down...")


if __name__ == "__main__":
    celery_app.start([
        "worker",
        "--loglevel=info",
        "--concurrency=2",
        "--max-tasks-per-child=1000"
    ])
