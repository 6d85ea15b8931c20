"""
Core module for lastfm-archiver.

Foundational components used throughout the application:
    - exceptions: Error taxonomy
    - config: Configuration loading and validation
    - database: SQLite storage for archived plays
    - logger: Logging system with console and file outputs
    - progress: Progress observers and month tracking

Usage:
    from lastfm_archiver.core import (
        Config, load_config,
        Database,
        setup_logging, get_logger,
        ArchiverError, NetworkError, StorageError
    )
"""

from lastfm_archiver.core.config import (
    ApiConfig,
    Config,
    LoggingConfig,
    load_config,
)
from lastfm_archiver.core.database import Database
from lastfm_archiver.core.exceptions import (
    APIError,
    ArchiverError,
    ConfigError,
    NetworkError,
    ParseError,
    StorageError,
)
from lastfm_archiver.core.logger import (
    get_logger,
    setup_logging,
    shutdown_logging,
)
from lastfm_archiver.core.progress import (
    ArchiveProgressBar,
    MonthTracker,
    ProgressObserver,
)

__all__ = [
    # Config
    "Config",
    "ApiConfig",
    "LoggingConfig",
    "load_config",
    # Database
    "Database",
    # Exceptions
    "ArchiverError",
    "ConfigError",
    "NetworkError",
    "ParseError",
    "APIError",
    "StorageError",
    # Logger
    "setup_logging",
    "get_logger",
    "shutdown_logging",
    # Progress
    "ProgressObserver",
    "ArchiveProgressBar",
    "MonthTracker",
]
