#!/usr/bin/env python3
# =============================================================================
# scripts/sync_week.py - Re-sync a Week From the Command Line
# =============================================================================
# Mirrors every weekly task of one week of a business plan into the task
# list, without going through the API or a worker. Useful after a failed
# background sync.
#
# Usage:
#   python scripts/sync_week.py <business_plan_id> <week_number> [--user <user_id>]
#
# Without --user the plan's project owner is used.
# =============================================================================

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from core.services.task_sync_service import TaskSyncService
from core.services.project_service import ProjectService
from lib.supabase_client import SupabaseClient


def main() -> int:
    parser = argparse.ArgumentParser(description="Sync one week of weekly tasks into the task list")
    parser.add_argument("business_plan_id")
    parser.add_argument("week_number", type=int)
    parser.add_argument("--user", dest="user_id", default=None)
    args = parser.parse_args()

    user_id = args.user_id
    if not user_id:
        plan = SupabaseClient.fetch_business_plan(args.business_plan_id)
        project = SupabaseClient.fetch_project(plan["project_id"]) if plan else None
        if not project:
            print(f"Business plan not found: {args.business_plan_id}")
            return 1
        user_id = project["owner_id"]

    context = ProjectService.get_owned_business_plan(args.business_plan_id, user_id)

    print("=" * 60)
    print(f"Syncing week {args.week_number} of plan {context.business_plan_id} ({context.year})")
    print("=" * 60)

    results = TaskSyncService().sync_week(
        business_plan_id=context.business_plan_id,
        week_number=args.week_number,
        year=context.year,
        project_id=context.project_id,
        user_id=context.user_id,
    )

    for weekly_id, task_id in results.items():
        print(f"  {weekly_id} -> {task_id or 'FAILED'}")

    failed = [weekly_id for weekly_id, task_id in results.items() if not task_id]
    print()
    print(f"{len(results) - len(failed)} synced, {len(failed)} failed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
