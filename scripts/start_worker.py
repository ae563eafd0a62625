#!/usr/bin/env python3
# =============================================================================
# scripts/start_worker.py - Scheduling Worker Entry Point
# =============================================================================
# Runs the Celery worker that executes week sync and week generation jobs
# queued by the API (POST .../weeks/{n}/sync and .../generate?background).
#
# Usage:
#   python scripts/start_worker.py
#   python scripts/start_worker.py --concurrency 4 --loglevel debug
#
# Needs REDIS_URL, SUPABASE_* and OPENAI_API_KEY (see .env).
# =============================================================================

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from workers.celery_app import celery_app, redact_url
from app.config import settings


def build_worker_argv(concurrency: int, loglevel: str) -> list[str]:
    """Arguments for celery_app.worker_main()."""
    return [
        "worker",
        f"--loglevel={loglevel}",
        f"--concurrency={concurrency}",
    ]


def main():
    parser = argparse.ArgumentParser(description="Run the BizPlanner scheduling worker")
    parser.add_argument(
        "--concurrency",
        type=int,
        default=2,
        help="Worker processes; generation jobs hold one for the length of an LLM call",
    )
    parser.add_argument("--loglevel", default="info")
    args = parser.parse_args()

    print(f"BizPlanner worker: broker {redact_url(settings.REDIS_URL)}, concurrency {args.concurrency}")
    celery_app.worker_main(build_worker_argv(args.concurrency, args.loglevel))


if __name__ == "__main__":
    main()
