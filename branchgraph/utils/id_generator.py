"""
ID generation utilities for BranchGraph.

Provides consistent ID generation for all entity types:
- Fragments: frag_xxx
- Branches: branch_xxx
"""

from uuid import uuid4


def generate_fragment_id() -> str:
    """
    Generate unique Fragment ID.

    Returns:
        ID in format "frag_xxx" where xxx is 12 hex characters
    """
    return f"frag_{uuid4().hex[:12]}"


def generate_branch_id() -> str:
    """
    Generate unique Branch ID.

    Returns:
        ID in format "branch_xxx" where xxx is 12 hex characters
    """
    return f"branch_{uuid4().hex[:12]}"
