"""
Exception classes for lastfm-archiver.

Every failure aborts the whole run: nothing is retried, skipped or recovered
locally. Errors propagate to the CLI, which prints a single message and
exits with a non-zero code chosen by the exception type.

Exception Hierarchy:
    ArchiverError (base)
        ConfigError - Configuration file issues
        NetworkError - Transport failures talking to the API
        ParseError - Malformed or structurally incomplete responses
        APIError - Well-formed responses reporting a failure
        StorageError - SQLite schema setup or insert failures
"""


class ArchiverError(Exception):
    """
    Base exception for all lastfm-archiver errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., page, field).

    Example:
        try:
            archive_history(client, database, user)
        except ArchiverError as e:
            logger.error(f"Archive failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'page': Page number being processed
                     - 'field': Missing or invalid response field
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(ArchiverError):
    """
    Raised when there's an issue with the configuration file.

    Common causes:
        - Explicit --config path does not exist
        - config.yaml has invalid YAML syntax
        - A section is not a dictionary or a value has the wrong type
    """
    pass


class NetworkError(ArchiverError):
    """
    Raised when a request to the API fails at the transport level.

    Common causes:
        - Connection refused or DNS failure
        - TLS handshake error
        - Timeout (only when a timeout is configured)
        - Response body could not be read or decoded

    Example:
        raise NetworkError(
            "Failed to fetch page 3: connection refused",
            details={'page': 3, 'original_error': '...'}
        )
    """
    pass


class ParseError(ArchiverError):
    """
    Raised when a response body is malformed or misses a required element.

    The missing or invalid field, when there is one, is stored in
    details['field'].

    Example:
        raise ParseError("missing date", details={'field': 'date'})
    """
    pass


class APIError(ArchiverError):
    """
    Raised when the API answers with status="failed" or an unknown status.

    Attributes:
        code: Numeric Last.fm error code from the <error> element, if any.
              Example: 6 ("User not found"), 10 ("Invalid API key").
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        code: int | None = None
    ) -> None:
        super().__init__(message, details)
        self.code = code


class StorageError(ArchiverError):
    """
    Raised when the SQLite database cannot be opened, set up or written.

    Common causes:
        - Parent directory of the database does not exist
        - File is not a database or is locked
        - Disk full or permission denied
    """
    pass
