"""
Custom exception hierarchy for ConnectGraph.

All exceptions inherit from ConnectGraphError for easy catching.
"""


class ConnectGraphError(Exception):
    """
    Base exception for all ConnectGraph errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize ConnectGraph error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class StoreError(ConnectGraphError):
    """
    Base exception for store operations.
    Used for errors related to record persistence.
    """

    pass


class RecordSourceError(StoreError):
    """
    Record source operation errors.
    Raised when the backing record database fails.
    """

    pass


class ValidationError(ConnectGraphError):
    """
    Validation errors.
    Raised when input at the graph boundary is invalid (e.g. self-loops).
    """

    pass


class ConfigurationError(ConnectGraphError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass


class LayoutError(ConnectGraphError):
    """
    Layout engine errors.
    Raised when the simulation is driven in an invalid way.
    """

    pass
