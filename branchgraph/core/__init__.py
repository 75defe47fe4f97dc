"""Core building blocks: graph storage, scoring, traversal and visualization."""
