"""Utility modules for BranchGraph."""

from branchgraph.utils.exceptions import (
    BranchGraphError,
    ConfigurationError,
    ConflictError,
    GraphStoreError,
    InternalError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from branchgraph.utils.id_generator import generate_branch_id, generate_fragment_id
from branchgraph.utils.logger import configure_logging, get_logger, setup_logging
from branchgraph.utils.time import (
    days_between,
    days_since,
    ensure_utc,
    is_recently_created,
    round_half_up,
    utc_now,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "configure_logging",
    # ID Generators
    "generate_fragment_id",
    "generate_branch_id",
    # Time helpers
    "utc_now",
    "ensure_utc",
    "days_between",
    "days_since",
    "round_half_up",
    "is_recently_created",
    # Exceptions
    "BranchGraphError",
    "StoreError",
    "GraphStoreError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "InternalError",
    "ConfigurationError",
]
