"""
BranchGraph: connection graph engine for personal note fragments.

Fragments are linked into a graph of typed, weighted branches, either
explicitly or by the heuristic auto-linker, and can be summarized as a
memory tree or styled for visualization.
"""

__version__ = "0.1.0"
