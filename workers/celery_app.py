# =============================================================================
# workers/celery_app.py - Celery Application
# =============================================================================
# The Celery app that runs the scheduling jobs in workers/tasks.py:
# mirroring a week into the task list and generating a week with the LLM.
#
# Broker and result backend are both REDIS_URL; the rest of the worker
# settings live in workers/config.py.
#
# Usage:
#   celery -A workers.celery_app worker --loglevel=info
# =============================================================================

import logging
import os
import sys
from typing import Any

# Project root on the path so `celery -A` works from any directory
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from celery import Celery
from celery.signals import task_prerun, task_postrun, task_failure
from dotenv import load_dotenv

load_dotenv()

from app.config import settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Job kwargs worth repeating in every lifecycle log line
JOB_LOG_FIELDS = ("business_plan_id", "week_number", "year")


def redact_url(url: str) -> str:
    """Strip the credentials part of a redis:// URL."""
    return url.split("@")[-1] if "@" in url else url


def describe_job(task_name: str, kwargs: dict[str, Any] | None) -> str:
    """
    Short label for a scheduling job, e.g. "sync_week_to_tasks plan=ab12 week=11".

    Unknown kwargs are left out so goals and plan items never reach the logs.
    """
    short_name = task_name.rsplit(".", 1)[-1]
    parts = [short_name]
    for field in JOB_LOG_FIELDS:
        if kwargs and kwargs.get(field) is not None:
            label = "plan" if field == "business_plan_id" else field.replace("_number", "")
            parts.append(f"{label}={kwargs[field]}")
    return " ".join(parts)


def create_celery_app() -> Celery:
    """Build the scheduling worker app from settings."""
    app = Celery(
        "bizplanner_worker",
        broker=settings.REDIS_URL,
        backend=settings.REDIS_URL,
        include=["workers.tasks"],
    )
    app.config_from_object("workers.config:CeleryConfig")

    logger.info(f"Celery app created with broker: {redact_url(settings.REDIS_URL)}")
    return app


celery_app = create_celery_app()


# =============================================================================
# Job Lifecycle Logging
# =============================================================================

@task_prerun.connect
def task_prerun_handler(sender=None, task_id=None, task=None, args=None, kwargs=None, **extra):
    logger.info(f"Job started: {describe_job(task.name, kwargs)} [{task_id}]")


@task_postrun.connect
def task_postrun_handler(sender=None, task_id=None, task=None, args=None, kwargs=None, retval=None, state=None, **extra):
    # Jobs report partial failure in their result instead of raising
    if isinstance(retval, dict) and retval.get("success") is False:
        logger.warning(f"Job finished with failures: {describe_job(task.name, kwargs)} [{task_id}] - {retval.get('error') or retval.get('failed')}")
    else:
        logger.info(f"Job finished: {describe_job(task.name, kwargs)} [{task_id}] - State: {state}")


@task_failure.connect
def task_failure_handler(sender=None, task_id=None, exception=None, kwargs=None, **extra):
    logger.error(f"Job crashed: {describe_job(sender.name, kwargs)} [{task_id}] - Error: {exception}")
