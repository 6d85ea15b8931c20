"""
Command-line interface for lastfm-archiver.

Usage:
    lastfm-archiver API_KEY USER DATABASE
    lastfm-archiver --log-dir ./logs API_KEY USER plays.db
    lastfm-archiver --config archiver.yaml --no-progress API_KEY USER plays.db

Exit Codes:
    0   Every page was fetched and stored
    1   Configuration error or unexpected error
    2   Storage error (SQLite)
    3   Network error
    4   API error (status="failed" or unknown status)
    5   Parse error (malformed or incomplete response)
    130 Interrupted by user

The error message is always written to stderr.
"""

import sys
from pathlib import Path

import rich_click as click

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.MAX_WIDTH = 100

from lastfm_archiver import __version__
from lastfm_archiver.archiver import ArchiveResult, archive_history
from lastfm_archiver.core import (
    APIError,
    ArchiverError,
    ArchiveProgressBar,
    Config,
    ConfigError,
    Database,
    NetworkError,
    ParseError,
    ProgressObserver,
    StorageError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from lastfm_archiver.lastfm import LastfmClient

logger = get_logger(__name__)


EXIT_CODES = {
    ConfigError: 1,
    StorageError: 2,
    NetworkError: 3,
    APIError: 4,
    ParseError: 5,
}


@click.command()
@click.argument("api_key", metavar="API_KEY")
@click.argument("user", metavar="USER")
@click.argument(
    "database",
    metavar="DATABASE",
    type=click.Path(dir_okay=False, path_type=Path)
)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml if present)"
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="<directory>",
    help="Write log files into this directory"
)
@click.option(
    "--no-progress",
    is_flag=True,
    help="Disable the progress bar"
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Show debug messages on the console"
)
@click.version_option(__version__, prog_name="lastfm-archiver")
def cli(
    api_key: str,
    user: str,
    database: Path,
    config_path: Path | None,
    log_dir: Path | None,
    no_progress: bool,
    verbose: bool
) -> None:
    """
    Archive a Last.fm listening history into a SQLite database.

    Fetches every page of USER's recent tracks with API_KEY and stores each
    completed play as one row of the [bold]play[/bold] table in DATABASE.
    The table is created if needed; running twice stores plays twice.
    """
    exit_code = _run_archive(
        api_key=api_key,
        user=user,
        database_path=database,
        config_path=config_path,
        log_dir=log_dir,
        show_progress=not no_progress,
        verbose=verbose
    )
    sys.exit(exit_code)


def _run_archive(
    api_key: str,
    user: str,
    database_path: Path,
    config_path: Path | None,
    log_dir: Path | None,
    show_progress: bool,
    verbose: bool
) -> int:
    """
    Execute one archive run and map its outcome to an exit code.

    Behavior:
        1. Load configuration
        2. Set up logging (CLI flags override the config file)
        3. Open the database and the HTTP client
        4. Run archive_history()
        5. Report results, or print the error to stderr

    Returns:
        Process exit code (see module docstring).
    """
    database: Database | None = None
    client: LastfmClient | None = None

    try:
        config = load_config(config_path)

        console_level = "DEBUG" if verbose else config.logging.level
        setup_logging(log_dir or config.logging.directory, console_level)
        logger.info(f"lastfm-archiver {__version__} starting for user {user}")

        database = Database(database_path)
        client = _initialize_client(config, api_key)

        progress = ArchiveProgressBar() if show_progress else ProgressObserver()
        with progress:
            result = archive_history(client, database, user, progress)

        _print_final_stats(database, result)
        logger.info("lastfm-archiver completed successfully")
        return 0

    except ArchiverError as e:
        click.echo(e.message, err=True)
        logger.debug(f"{type(e).__name__}: {e.message}", exc_info=True)
        return EXIT_CODES.get(type(e), 1)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        return 130

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        return 1

    finally:
        if client is not None:
            client.close()
        if database is not None:
            database.close()
        shutdown_logging()


def _initialize_client(config: Config, api_key: str) -> LastfmClient:
    """Create the HTTP client from the api section of the config."""
    return LastfmClient(
        api_key,
        base_url=config.api.base_url,
        timeout=config.api.timeout
    )


def _print_final_stats(database: Database, result: ArchiveResult) -> None:
    """Log a summary of the run and of the database contents."""
    latest = database.latest_play_time()

    logger.info("=" * 60)
    logger.info("ARCHIVE SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Pages fetched:     {result.pages}")
    logger.info(f"Plays archived:    {result.tracks}")
    if result.total_records is not None:
        logger.info(f"Reported total:    {result.total_records}")
    logger.info(f"Plays in database: {database.count_plays()}")
    if latest is not None:
        logger.info(f"Most recent play:  {latest:%Y-%m-%d %H:%M:%S} UTC")
    logger.info("=" * 60)


def main() -> None:
    """
    Entry point for the CLI.

    Called when running `lastfm-archiver` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
