"""Main entry point for the scheduled sensables sync process."""
import sys
import time

from sensable.app import create_scheduler_app
from sensable.config import get_config
from sensable.log.logger import setup_logger
from sensable.scheduler import ScheduleRegistry
from sensable.storage import StoreUnavailableError, create_row_store, get_database_adapter

# How often the process checks whether newly scheduled sensables need the trigger.
WATCH_INTERVAL_SECONDS = 60


def main():
    """Main application entry point."""
    try:
        config = get_config()
    except ValueError as e:
        print(f"Configuration error: {e}")
        print("\nOptional variables:")
        print("  DATABASE_URL - SQLAlchemy database URL (default: sqlite file at DATABASE_PATH)")
        print("  DATABASE_PATH - SQLite database file (default: data/sensable.db)")
        print("  DB_SCHEMA - PostgreSQL schema (default: server search_path)")
        print("  SENSABLE_API_URL - Sensable API base URL (default: https://sensable.io)")
        print("  HTTP_TIMEOUT_SECONDS - API request timeout (default: 30)")
        print("  LOG_DIR - Log directory (default: logs)")
        print("  LOG_LEVEL - Log level (default: INFO)")
        print("  LOG_MAX_BYTES - Log file size before rotation (default: 10485760)")
        print("  LOG_BACKUP_COUNT - Rotated log files to keep (default: 10)")
        return 1

    logger = setup_logger(config)

    logger.info("=" * 60)
    logger.info("Scheduled Sensables Sync Starting")
    logger.info("=" * 60)

    store = create_row_store()
    app = create_scheduler_app(store, logger)
    # The watch loop runs on this thread while the trigger fires on the
    # scheduler's thread; each gets its own connection.
    watch_store = create_row_store()
    watch_registry = ScheduleRegistry(watch_store)
    adapter = get_database_adapter()
    logger.info("Database initialized: %s (schema: %s)", adapter.dialect, adapter.schema or "default")

    # Flags left set by a previous process would otherwise stay stuck.
    app.pending_manager.reconcile_stale_pending()

    app.facility.start()
    try:
        while True:
            try:
                if watch_registry.count_all() > 0:
                    app.controller.start()
            except StoreUnavailableError as e:
                logger.error("Cannot read scheduled sensables: %s", e)
            time.sleep(WATCH_INTERVAL_SECONDS)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        app.facility.shutdown()
        watch_store.close()
        store.close()

    logger.info("Scheduled Sensables Sync Stopped")
    return 0


if __name__ == '__main__':
    sys.exit(main())
