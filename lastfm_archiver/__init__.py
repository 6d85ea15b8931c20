"""
lastfm-archiver: Archive a Last.fm listening history into SQLite.

The archive run walks every page of user.getrecenttracks, most recent
first, and stores each completed play as one row of the `play` table.

Architecture:
    lastfm/models.py   - Artist, Album, Track and Page dataclasses
    lastfm/parser.py   - XML response -> Page, or ParseError/APIError
    lastfm/client.py   - One HTTP GET per page (requests)
    lastfm/pager.py    - Lazy page-by-page generator
    core/database.py   - SQLite schema setup and inserts
    core/progress.py   - Progress bar and month milestones
    archiver.py        - The fetch -> parse -> paginate -> persist loop
    cli.py             - Command-line interface

Usage:
    Command Line:
        lastfm-archiver API_KEY USER plays.db

    Python API:
        from pathlib import Path
        from lastfm_archiver import Database, LastfmClient, archive_history

        with LastfmClient(api_key) as client, Database(Path("plays.db")) as db:
            result = archive_history(client, db, "rj")

Dependencies:
    - requests: HTTP client
    - click / rich-click: CLI framework and colors
    - rich: Progress bar
    - tqdm: Progress-bar-safe console logging
    - pyyaml: Configuration file parsing
"""

__version__ = "0.3.0"
__author__ = "lastfm-archiver"
__license__ = "MIT"

# Convenience imports for common usage
from lastfm_archiver.core import (
    APIError,
    ArchiverError,
    Config,
    ConfigError,
    Database,
    NetworkError,
    ParseError,
    StorageError,
    get_logger,
    load_config,
    setup_logging,
)
from lastfm_archiver.lastfm import LastfmClient, Page, Track, iter_pages, parse_page
from lastfm_archiver.archiver import ArchiveResult, archive_history

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "Database",
    "setup_logging",
    "get_logger",
    # Exceptions
    "ArchiverError",
    "ConfigError",
    "NetworkError",
    "ParseError",
    "APIError",
    "StorageError",
    # Last.fm
    "LastfmClient",
    "Page",
    "Track",
    "iter_pages",
    "parse_page",
    # Archive run
    "archive_history",
    "ArchiveResult",
]
