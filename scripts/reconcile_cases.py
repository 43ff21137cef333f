"""
Case / assignment reconciliation script

Runs a bulk sweep and prints the counters. Exits with status 1 when any case
stays inconsistent or failed.
"""
import sys
import os

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from caseflow.db.connection import db_manager
from caseflow.services.reconciler import AssignmentReconciler
from caseflow.utils.logger import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)


def main():
    import argparse
    parser = argparse.ArgumentParser(description="Reconcile case lawyers with their assignments")
    parser.add_argument(
        "--user-id",
        default=None,
        help="only reconcile cases owned by this user"
    )
    parser.add_argument(
        "--case-id",
        default=None,
        help="reconcile a single case"
    )
    args = parser.parse_args()

    try:
        with db_manager.get_db_session() as db:
            if args.case_id:
                result = AssignmentReconciler.reconcile(db, args.case_id)
                print(
                    f"{result['case_number']}: fixed={result['fixed']} rule={result['rule']} "
                    f"lawyer={result['lawyer_id']} status={result['status']}"
                )
                return 0

            result = AssignmentReconciler.reconcile_all(db, args.user_id)
    finally:
        db_manager.close()

    print(
        f"checked={result['total_checked']} fixed={result['fixed_count']} "
        f"unfixed={result['unfixed_count']} failed={result['failed_count']}"
    )
    return 1 if result["unfixed_count"] or result["failed_count"] else 0


if __name__ == "__main__":
    sys.exit(main())
