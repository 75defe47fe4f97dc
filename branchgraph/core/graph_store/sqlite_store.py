"""
SQLite graph store implementation.

Fragments and branches live in two tables. Each branch row also stores its
canonical endpoint pair (pair_low, pair_high) under a UNIQUE index, so a
second edge between the same two fragments is rejected by the database even
when two writers race.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from branchgraph.core.graph_store.base import GraphStore
from branchgraph.models.branch import (
    Branch,
    BranchFilters,
    BranchPatch,
    BranchType,
    BranchWriteResult,
    canonical_pair,
)
from branchgraph.models.fragment import Fragment, FragmentFilters, FragmentType
from branchgraph.utils.exceptions import GraphStoreError, NotFoundError
from branchgraph.utils.logger import get_logger
from branchgraph.utils.time import ensure_utc, utc_now

logger = get_logger(__name__)


def _ts(value: datetime) -> str:
    """Serialize timestamps so that lexical order matches chronological order."""
    return ensure_utc(value).isoformat(timespec="microseconds")


class SQLiteGraphStore(GraphStore):
    """
    SQLite-based graph store for fragments and branches.

    Features:
    - Fast local storage
    - JSON columns for tags and metadata
    - Undirected uniqueness enforced by a canonical-pair index
    - Incident branches removed with their fragment (foreign key cascade)
    """

    def __init__(self, db_path: str = "data/branchgraph.db"):
        """
        Initialize SQLite graph store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None

        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite."""
        if self.connection is None:
            try:
                self.connection = await aiosqlite.connect(self.db_path)
                self.connection.row_factory = aiosqlite.Row
                await self.connection.execute("PRAGMA foreign_keys = ON")
                await self.connection.execute("PRAGMA journal_mode = WAL")
                await self.connection.commit()
            except aiosqlite.Error as e:
                logger.bind(db_path=self.db_path, error=str(e)).error(
                    f"Failed to connect to SQLite: {e}"
                )
                raise GraphStoreError(f"Failed to connect to SQLite: {e}") from e

    async def initialize(self) -> None:
        """Initialize database schema."""
        await self.connect()

        try:
            await self.connection.execute(
                """
                CREATE TABLE IF NOT EXISTS fragments (
                    id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    content TEXT NOT NULL,
                    type TEXT NOT NULL,
                    tags TEXT DEFAULT '[]',
                    mood TEXT,
                    metadata TEXT DEFAULT '{}',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """
            )

            await self.connection.execute(
                """
                CREATE TABLE IF NOT EXISTS branches (
                    id TEXT PRIMARY KEY,
                    source_id TEXT NOT NULL,
                    target_id TEXT NOT NULL,
                    pair_low TEXT NOT NULL,
                    pair_high TEXT NOT NULL,
                    type TEXT NOT NULL,
                    weight REAL NOT NULL DEFAULT 1.0 CHECK (weight >= 0.0 AND weight <= 1.0),
                    metadata TEXT DEFAULT '{}',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    CHECK (source_id != target_id),
                    FOREIGN KEY (source_id) REFERENCES fragments(id) ON DELETE CASCADE,
                    FOREIGN KEY (target_id) REFERENCES fragments(id) ON DELETE CASCADE
                )
            """
            )

            await self.connection.execute(
                "CREATE UNIQUE INDEX IF NOT EXISTS idx_branches_pair "
                "ON branches(pair_low, pair_high)"
            )
            await self.connection.execute(
                "CREATE INDEX IF NOT EXISTS idx_fragments_owner ON fragments(owner_id, created_at)"
            )
            await self.connection.execute(
                "CREATE INDEX IF NOT EXISTS idx_branches_source ON branches(source_id)"
            )
            await self.connection.execute(
                "CREATE INDEX IF NOT EXISTS idx_branches_target ON branches(target_id)"
            )
            await self.connection.execute(
                "CREATE INDEX IF NOT EXISTS idx_branches_type ON branches(type)"
            )

            await self.connection.commit()
        except aiosqlite.Error as e:
            logger.bind(db_path=self.db_path, error=str(e)).error(
                f"Failed to initialize SQLite schema: {e}"
            )
            raise GraphStoreError(f"Failed to initialize SQLite schema: {e}") from e

    # ═══════════════════════════════════════════════════════════
    # FRAGMENT OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def add_fragment(self, fragment: Fragment) -> None:
        """Add a fragment node."""
        await self.connect()

        try:
            await self.connection.execute(
                """
                INSERT INTO fragments (
                    id, owner_id, content, type, tags, mood, metadata, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                self._fragment_params(fragment),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            logger.bind(fragment_id=fragment.id, error=str(e)).error(
                f"Failed to add fragment {fragment.id}: {e}"
            )
            raise GraphStoreError(f"Failed to add fragment: {e}") from e

    async def update_fragment(self, fragment: Fragment) -> None:
        """Replace a stored fragment with its updated version."""
        await self.connect()

        try:
            cursor = await self.connection.execute(
                """
                UPDATE fragments
                SET content = ?, type = ?, tags = ?, mood = ?, metadata = ?, updated_at = ?
                WHERE id = ? AND owner_id = ?
                """,
                (
                    fragment.content,
                    fragment.type.value,
                    json.dumps(fragment.tags),
                    fragment.mood,
                    json.dumps(fragment.metadata),
                    _ts(fragment.updated_at),
                    fragment.id,
                    fragment.owner_id,
                ),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            logger.bind(fragment_id=fragment.id, error=str(e)).error(
                f"Failed to update fragment {fragment.id}: {e}"
            )
            raise GraphStoreError(f"Failed to update fragment: {e}") from e

        if cursor.rowcount == 0:
            raise NotFoundError(
                f"Fragment not found: {fragment.id}", context={"fragment_id": fragment.id}
            )

    async def delete_fragment(self, fragment_id: str, owner_id: str) -> None:
        """Delete a fragment and its incident branches."""
        await self.connect()

        try:
            cursor = await self.connection.execute(
                "DELETE FROM fragments WHERE id = ? AND owner_id = ?", (fragment_id, owner_id)
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            logger.bind(fragment_id=fragment_id, error=str(e)).error(
                f"Failed to delete fragment {fragment_id}: {e}"
            )
            raise GraphStoreError(f"Failed to delete fragment: {e}") from e

        if cursor.rowcount == 0:
            raise NotFoundError(
                f"Fragment not found: {fragment_id}", context={"fragment_id": fragment_id}
            )

    async def find_fragment_by_id(self, fragment_id: str, owner_id: str) -> Fragment | None:
        """Retrieve a fragment owned by the given user."""
        rows = await self._fetch(
            "find_fragment_by_id",
            "SELECT * FROM fragments WHERE id = ? AND owner_id = ?",
            [fragment_id, owner_id],
        )
        return self._row_to_fragment(rows[0]) if rows else None

    async def find_fragments(
        self, owner_id: str, filters: FragmentFilters | None = None
    ) -> list[Fragment]:
        """Query an owner's fragments, newest first."""
        query = "SELECT * FROM fragments WHERE owner_id = ?"
        params: list[Any] = [owner_id]

        if filters:
            if filters.type:
                query += " AND type = ?"
                params.append(filters.type.value)

            if filters.types:
                placeholders = ",".join("?" * len(filters.types))
                query += f" AND type IN ({placeholders})"
                params.extend(t.value for t in filters.types)

            if filters.search:
                query += " AND LOWER(content) LIKE ?"
                params.append(f"%{filters.search.lower()}%")

            if filters.tags:
                for tag in filters.tags:
                    query += " AND EXISTS (SELECT 1 FROM json_each(fragments.tags) WHERE value = ?)"
                    params.append(tag)

            if filters.mood:
                query += " AND mood = ?"
                params.append(filters.mood)

            if filters.created_after:
                query += " AND created_at >= ?"
                params.append(_ts(filters.created_after))

            if filters.created_before:
                query += " AND created_at <= ?"
                params.append(_ts(filters.created_before))

        query += " ORDER BY created_at DESC, id"

        if filters and filters.limit:
            query += " LIMIT ?"
            params.append(filters.limit)

        rows = await self._fetch("find_fragments", query, params)
        return [self._row_to_fragment(row) for row in rows]

    async def find_unlinked_fragments(self, owner_id: str, focus_id: str) -> list[Fragment]:
        """Fragments of the owner with no branch in either direction to the focus."""
        query = """
            SELECT * FROM fragments f
            WHERE f.owner_id = ? AND f.id != ?
              AND NOT EXISTS (
                  SELECT 1 FROM branches b
                  WHERE (b.source_id = f.id AND b.target_id = ?)
                     OR (b.source_id = ? AND b.target_id = f.id)
              )
            ORDER BY f.created_at DESC, f.id
        """
        rows = await self._fetch(
            "find_unlinked_fragments", query, [owner_id, focus_id, focus_id, focus_id]
        )
        return [self._row_to_fragment(row) for row in rows]

    # ═══════════════════════════════════════════════════════════
    # BRANCH OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def add_branch(self, branch: Branch) -> BranchWriteResult:
        """Insert a branch unless its unordered pair is already connected."""
        await self.connect()

        pair_low, pair_high = branch.pair

        try:
            cursor = await self.connection.execute(
                """
                INSERT INTO branches (
                    id, source_id, target_id, pair_low, pair_high, type, weight,
                    metadata, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (pair_low, pair_high) DO NOTHING
                """,
                (
                    branch.id,
                    branch.source_id,
                    branch.target_id,
                    pair_low,
                    pair_high,
                    branch.type.value,
                    branch.weight,
                    json.dumps(branch.metadata),
                    _ts(branch.created_at),
                    _ts(branch.updated_at),
                ),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            logger.bind(source_id=branch.source_id, target_id=branch.target_id, error=str(e)).error(
                f"Failed to add branch {branch.source_id} -> {branch.target_id}: {e}"
            )
            raise GraphStoreError(f"Failed to add branch: {e}") from e

        if cursor.rowcount == 0:
            rows = await self._fetch(
                "add_branch",
                "SELECT id FROM branches WHERE pair_low = ? AND pair_high = ?",
                [pair_low, pair_high],
            )
            existing_id = rows[0]["id"] if rows else None
            logger.bind(existing_id=existing_id).debug(
                f"Branch already exists between {branch.source_id} and {branch.target_id}"
            )
            return BranchWriteResult.conflict(existing_id)

        return BranchWriteResult.ok(branch)

    async def get_branch(self, branch_id: str, owner_id: str) -> Branch | None:
        """Get a branch touching at least one fragment owned by the user."""
        query = f"""
            {self._branch_select()}
            WHERE b.id = ? AND (s.owner_id = ? OR t.owner_id = ?)
        """
        rows = await self._fetch("get_branch", query, [branch_id, owner_id, owner_id])
        return self._row_to_branch(rows[0]) if rows else None

    async def find_branches(
        self, owner_id: str, filters: BranchFilters | None = None
    ) -> list[Branch]:
        """Query branches involving the owner's fragments, newest first."""
        query = f"{self._branch_select()} WHERE (s.owner_id = ? OR t.owner_id = ?)"
        params: list[Any] = [owner_id, owner_id]

        if filters:
            if filters.type:
                query += " AND b.type = ?"
                params.append(filters.type.value)

            if filters.types:
                placeholders = ",".join("?" * len(filters.types))
                query += f" AND b.type IN ({placeholders})"
                params.extend(t.value for t in filters.types)

            if filters.source_id:
                query += " AND b.source_id = ?"
                params.append(filters.source_id)

            if filters.target_id:
                query += " AND b.target_id = ?"
                params.append(filters.target_id)

            if filters.fragment_id:
                query += " AND (b.source_id = ? OR b.target_id = ?)"
                params.extend([filters.fragment_id, filters.fragment_id])

            if filters.min_weight is not None:
                query += " AND b.weight >= ?"
                params.append(filters.min_weight)

            if filters.max_weight is not None:
                query += " AND b.weight <= ?"
                params.append(filters.max_weight)

            if filters.search:
                query += " AND (LOWER(s.content) LIKE ? OR LOWER(t.content) LIKE ?)"
                pattern = f"%{filters.search.lower()}%"
                params.extend([pattern, pattern])

            if filters.created_after:
                query += " AND b.created_at >= ?"
                params.append(_ts(filters.created_after))

            if filters.created_before:
                query += " AND b.created_at <= ?"
                params.append(_ts(filters.created_before))

        query += " ORDER BY b.created_at DESC, b.id"

        if filters and filters.limit:
            query += " LIMIT ?"
            params.append(filters.limit)

        rows = await self._fetch("find_branches", query, params)
        return [self._row_to_branch(row) for row in rows]

    async def branch_exists(self, first_id: str, second_id: str) -> bool:
        """Whether any branch connects the two fragments, in either direction."""
        pair_low, pair_high = canonical_pair(first_id, second_id)
        rows = await self._fetch(
            "branch_exists",
            "SELECT 1 FROM branches WHERE pair_low = ? AND pair_high = ? LIMIT 1",
            [pair_low, pair_high],
        )
        return bool(rows)

    async def update_branch(self, branch_id: str, patch: BranchPatch) -> Branch:
        """Apply a patch to a branch, merging metadata."""
        rows = await self._fetch(
            "update_branch", f"{self._branch_select()} WHERE b.id = ?", [branch_id]
        )
        if not rows:
            raise NotFoundError(f"Branch not found: {branch_id}", context={"branch_id": branch_id})

        current = self._row_to_branch(rows[0])
        updated = current.model_copy(
            update={
                "type": patch.type or current.type,
                "weight": patch.weight if patch.weight is not None else current.weight,
                "metadata": {**current.metadata, **(patch.metadata or {})},
                "updated_at": utc_now(),
            }
        )

        try:
            await self.connection.execute(
                """
                UPDATE branches
                SET type = ?, weight = ?, metadata = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    updated.type.value,
                    updated.weight,
                    json.dumps(updated.metadata),
                    _ts(updated.updated_at),
                    branch_id,
                ),
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            logger.bind(branch_id=branch_id, error=str(e)).error(
                f"Failed to update branch {branch_id}: {e}"
            )
            raise GraphStoreError(f"Failed to update branch: {e}") from e

        return updated

    async def delete_branch(self, branch_id: str) -> None:
        """Delete a single branch."""
        await self.connect()

        try:
            cursor = await self.connection.execute(
                "DELETE FROM branches WHERE id = ?", (branch_id,)
            )
            await self.connection.commit()
        except aiosqlite.Error as e:
            logger.bind(branch_id=branch_id, error=str(e)).error(
                f"Failed to delete branch {branch_id}: {e}"
            )
            raise GraphStoreError(f"Failed to delete branch: {e}") from e

        if cursor.rowcount == 0:
            raise NotFoundError(f"Branch not found: {branch_id}", context={"branch_id": branch_id})

    # ═══════════════════════════════════════════════════════════
    # UTILITY METHODS
    # ═══════════════════════════════════════════════════════════

    async def count_incident_branches(self, owner_id: str) -> dict[str, int]:
        """Count branches incident to each of the owner's fragments."""
        query = """
            SELECT f.id AS fragment_id, COUNT(b.id) AS edge_count
            FROM fragments f
            LEFT JOIN branches b ON b.source_id = f.id OR b.target_id = f.id
            WHERE f.owner_id = ?
            GROUP BY f.id
        """
        rows = await self._fetch("count_incident_branches", query, [owner_id])
        return {row["fragment_id"]: row["edge_count"] for row in rows}

    async def close(self) -> None:
        """Close the connection."""
        if self.connection is not None:
            await self.connection.close()
            self.connection = None

    # ═══════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════

    async def _fetch(self, operation: str, query: str, params: list[Any]) -> list[aiosqlite.Row]:
        """Run a read query, wrapping driver failures."""
        await self.connect()

        try:
            cursor = await self.connection.execute(query, params)
            return list(await cursor.fetchall())
        except aiosqlite.Error as e:
            logger.bind(operation=operation, error=str(e)).error(
                f"SQLite query failed in {operation}: {e}"
            )
            raise GraphStoreError(f"Failed to {operation}: {e}") from e

    @staticmethod
    def _branch_select() -> str:
        return """
            SELECT b.* FROM branches b
            JOIN fragments s ON s.id = b.source_id
            JOIN fragments t ON t.id = b.target_id
        """

    @staticmethod
    def _fragment_params(fragment: Fragment) -> tuple:
        return (
            fragment.id,
            fragment.owner_id,
            fragment.content,
            fragment.type.value,
            json.dumps(fragment.tags),
            fragment.mood,
            json.dumps(fragment.metadata),
            _ts(fragment.created_at),
            _ts(fragment.updated_at),
        )

    def _row_to_fragment(self, row: aiosqlite.Row) -> Fragment:
        """Convert database row to Fragment object."""
        return Fragment(
            id=row["id"],
            owner_id=row["owner_id"],
            content=row["content"],
            type=FragmentType(row["type"]),
            tags=json.loads(row["tags"]) if row["tags"] else [],
            mood=row["mood"],
            metadata=json.loads(row["metadata"]) if row["metadata"] else {},
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _row_to_branch(self, row: aiosqlite.Row) -> Branch:
        """Convert database row to Branch object."""
        return Branch(
            id=row["id"],
            source_id=row["source_id"],
            target_id=row["target_id"],
            type=BranchType(row["type"]),
            weight=row["weight"],
            metadata=json.loads(row["metadata"]) if row["metadata"] else {},
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
