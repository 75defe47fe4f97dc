"""
Custom exception hierarchy for BranchGraph.

Provides structured error types for the connection graph engine.
All exceptions inherit from BranchGraphError for easy catching.
"""


class BranchGraphError(Exception):
    """
    Base exception for all BranchGraph errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize BranchGraph error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class StoreError(BranchGraphError):
    """
    Base exception for store operations.
    Used for errors related to data storage operations.
    """

    pass


class GraphStoreError(StoreError):
    """
    Graph store operation errors.
    Raised when graph database operations fail.
    """

    pass


class ValidationError(BranchGraphError):
    """
    Validation errors.
    Raised on self-connections, out-of-range weights or otherwise invalid input.
    """

    pass


class NotFoundError(BranchGraphError):
    """
    Resource not found errors.
    Raised when a fragment or branch doesn't exist or isn't owned by the caller.
    """

    pass


class ConflictError(BranchGraphError):
    """
    Conflict errors.
    Raised when a branch already connects the same pair of fragments.
    """

    pass


class InternalError(BranchGraphError):
    """
    Internal errors.
    Wraps unexpected collaborator failures.
    """

    pass


class ConfigurationError(BranchGraphError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass
