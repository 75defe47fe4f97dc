"""
Bounded breadth-first traversal over branches.

Branches are walked in both directions. Membership of the result depends
only on the graph and the depth bound, never on branch order.
"""

from collections import defaultdict, deque
from collections.abc import Iterable

from branchgraph.models.branch import Branch


def build_adjacency(branches: Iterable[Branch]) -> dict[str, set[str]]:
    """Undirected adjacency map from a branch list."""
    adjacency: dict[str, set[str]] = defaultdict(set)
    for branch in branches:
        adjacency[branch.source_id].add(branch.target_id)
        adjacency[branch.target_id].add(branch.source_id)
    return adjacency


def neighbors_by_depth(
    focus_id: str, branches: Iterable[Branch], max_depth: int
) -> dict[str, int]:
    """
    Hop distance from the focus for every fragment within ``max_depth``.

    Args:
        focus_id: Fragment to start from (depth 0)
        branches: Edges to traverse, in either direction
        max_depth: Nodes at this depth are kept but not expanded

    Returns:
        Mapping of fragment ID to its BFS depth; always contains the focus
    """
    adjacency = build_adjacency(branches)
    depths = {focus_id: 0}
    queue = deque([focus_id])

    while queue:
        current = queue.popleft()
        depth = depths[current]

        if depth >= max_depth:
            continue

        for neighbor in adjacency.get(current, ()):
            if neighbor not in depths:
                depths[neighbor] = depth + 1
                queue.append(neighbor)

    return depths


def connected_set(focus_id: str, branches: Iterable[Branch], max_depth: int) -> set[str]:
    """Fragments reachable from ``focus_id`` in at most ``max_depth`` hops, focus included."""
    return set(neighbors_by_depth(focus_id, branches, max_depth))


def restrict_to(
    branches: Iterable[Branch], fragment_ids: set[str]
) -> list[Branch]:
    """Branches whose endpoints both lie inside ``fragment_ids``."""
    return [
        branch
        for branch in branches
        if branch.source_id in fragment_ids and branch.target_id in fragment_ids
    ]
