"""
Database initialisation script (creates tables from the models)
"""
import sys
import os

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from caseflow.db.connection import db_manager
from caseflow.utils.logger import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)


def init_database(drop: bool = False):
    """
    Create every table

    Args:
        drop: drop existing tables first
    """
    try:
        if drop:
            logger.warning("Dropping existing tables")
            db_manager.drop_tables()
        db_manager.create_tables()
        logger.info("Database initialisation complete")
    except Exception as e:
        logger.error(f"Database initialisation failed: {str(e)}")
        raise
    finally:
        db_manager.close()


def main():
    import argparse
    parser = argparse.ArgumentParser(description="Create the case lifecycle tables")
    parser.add_argument(
        "--drop",
        action="store_true",
        help="drop existing tables before creating them"
    )
    args = parser.parse_args()
    init_database(drop=args.drop)


if __name__ == "__main__":
    main()
