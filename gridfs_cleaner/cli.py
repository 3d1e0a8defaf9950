"""
GridFS Cleaner Command Line

Reads settings from the environment (and an optional YAML file), connects
to MongoDB and runs the orphaned chunk cleanup.

Exit status:
  0  completed, or cancelled cleanly
  1  configuration error
  2  run aborted by a store error, or some files failed to reconcile
"""

import argparse
from typing import Optional, Sequence

from dotenv import load_dotenv

from gridfs_cleaner.cancellation import CancellationToken, cancel_on_signals
from gridfs_cleaner.configs import (
    EXAMPLE_CONFIG_YAML,
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_RUN_FAILED,
    get_logger,
    load_settings,
    setup_logging,
)
from gridfs_cleaner.exceptions import ConfigurationError, StorageError
from gridfs_cleaner.maintenance import run_cleanup
from gridfs_cleaner.storage import connect, get_gridfs_stores

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridfs-cleaner",
        description="Find and remove orphaned GridFS chunks. "
        "Set MongoConnectionString and DryRun=false in the environment to delete.",
    )
    parser.add_argument(
        "--config",
        help="Optional YAML config file (defaults to GRIDFS_CLEANER_CONFIG)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--example-config",
        action="store_true",
        help="Print an example config.yaml and exit",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    if args.example_config:
        print(EXAMPLE_CONFIG_YAML, end="")
        return EXIT_OK

    # Existing environment variables win over .env entries
    load_dotenv()

    # Console logging only until the configured log file is known
    setup_logging(debug=args.debug or None, log_file="")

    try:
        settings = load_settings(config_path=args.config)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_CONFIG_ERROR

    setup_logging(debug=args.debug or settings.debug, log_file=settings.log_file)

    logger.info(
        f"Starting.. dry_run: {settings.dry_run}. "
        f"Connection: {settings.redacted_connection_string} "
        f"(database={settings.database}, bucket={settings.bucket})"
    )

    try:
        client = connect(settings)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_CONFIG_ERROR
    except StorageError as e:
        logger.error(f"{e}")
        return EXIT_RUN_FAILED

    try:
        chunk_store, file_store = get_gridfs_stores(client, settings)
        with cancel_on_signals(CancellationToken()) as token:
            result = run_cleanup(
                chunk_store,
                file_store,
                dry_run=settings.dry_run,
                cancel_token=token,
                classify_workers=settings.classify_workers,
                progress_interval=settings.progress_interval,
            )
    except Exception as e:
        logger.exception(f"Something went wrong: {e}")
        return EXIT_RUN_FAILED
    finally:
        client.close()

    return result.exit_code
