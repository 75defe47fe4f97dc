"""
Heuristic auto-linking.

Scores pairs of an owner's fragments, keeps the strongest candidates and
persists them as branches:

1. Build the candidate pool (unlinked fragments around a focus, or the most
   recent fragments compared pairwise)
2. Score every pair and drop those under the minimum weight
3. Optionally add reverse candidates for strong links
4. Rank by weight and cap the count
5. Write each survivor; already-connected pairs are skipped
"""

from collections.abc import Iterable, Iterator

from branchgraph.config import AutoLinkConfig
from branchgraph.core.graph_store.base import GraphStore
from branchgraph.core.scoring import ScoringEngine
from branchgraph.models.branch import Branch, BranchCandidate, BranchRecord, BranchType
from branchgraph.models.fragment import Fragment, FragmentFilters
from branchgraph.services.branch_service import to_branch_record
from branchgraph.utils.exceptions import InternalError, NotFoundError, ValidationError
from branchgraph.utils.id_generator import generate_branch_id
from branchgraph.utils.logger import get_logger


class AutoLinker:
    """Proposes and persists branches between an owner's fragments."""

    def __init__(
        self,
        graph_store: GraphStore,
        scoring_engine: ScoringEngine | None = None,
        config: AutoLinkConfig | None = None,
        logger=None,
    ):
        """
        Initialize auto-linker.

        Args:
            graph_store: Graph store to read fragments from and write branches to
            scoring_engine: Pairwise scorer (defaults to all four dimensions)
            config: Default parameters and pool limits
            logger: Optional bound logger (defaults to this module's logger)
        """
        self.graph_store = graph_store
        self.scoring_engine = scoring_engine or ScoringEngine()
        self.config = config or AutoLinkConfig()
        self.logger = logger or get_logger(__name__)

    async def auto_link(
        self,
        owner_id: str,
        focus_fragment_id: str | None = None,
        allowed_types: Iterable[BranchType] | None = None,
        min_weight: float | None = None,
        max_connections: int | None = None,
        bidirectional: bool | None = None,
    ) -> list[BranchRecord]:
        """
        Create the strongest heuristic connections for an owner.

        Args:
            owner_id: Owner whose fragments are linked
            focus_fragment_id: Only link this fragment to fragments it isn't
                connected to yet; when omitted, the most recent fragments are
                linked among themselves
            allowed_types: Dimensions to score (defaults from config)
            min_weight: Minimum weight for a candidate to be kept
            max_connections: Maximum number of candidates to persist
            bidirectional: Also propose reverse links for strong connections

        Returns:
            Created branches in creation order

        Raises:
            NotFoundError: If the focus fragment doesn't exist for the owner
            ValidationError: If a parameter is out of range
            InternalError: If reading candidates fails
        """
        if allowed_types is None:
            allowed_types = self.config.default_types
        if min_weight is None:
            min_weight = self.config.min_weight
        if max_connections is None:
            max_connections = self.config.max_connections
        if bidirectional is None:
            bidirectional = self.config.bidirectional
        allowed = set(allowed_types)

        if not 0.0 <= min_weight <= 1.0:
            raise ValidationError(
                "min_weight must be within [0, 1]", context={"min_weight": min_weight}
            )
        if max_connections < 1:
            raise ValidationError(
                "max_connections must be at least 1", context={"max_connections": max_connections}
            )

        context = {"operation": "auto_link", "owner_id": owner_id, "focus_id": focus_fragment_id}

        try:
            fragments, pairs = await self._candidate_pairs(owner_id, focus_fragment_id)
        except NotFoundError:
            raise
        except Exception as e:
            self.logger.bind(**context, error=str(e)).error(
                f"Failed to load auto-link candidates: {e}"
            )
            raise InternalError(f"Failed to auto-link fragments: {e}") from e

        candidates = self.collect_candidates(pairs, allowed, min_weight, bidirectional)
        ranked = self.rank(candidates, max_connections)

        self.logger.bind(**context).debug(
            f"Auto-link scored {len(candidates)} candidates, persisting {len(ranked)}"
        )

        created = await self._persist(ranked, fragments, owner_id)

        self.logger.bind(**context, created=len(created)).info(
            f"Auto-linked {len(created)} fragments for owner {owner_id}"
        )
        return created

    def collect_candidates(
        self,
        pairs: Iterable[tuple[Fragment, Fragment]],
        allowed_types: set[BranchType],
        min_weight: float,
        bidirectional: bool,
    ) -> list[BranchCandidate]:
        """
        Score each (source, target) pair and keep those reaching ``min_weight``.

        With ``bidirectional`` a reverse candidate with identical type, weight
        and metadata follows every forward candidate whose weight exceeds the
        configured threshold.
        """
        candidates: list[BranchCandidate] = []

        for source, target in pairs:
            score = self.scoring_engine.score(source, target, allowed_types)
            if score.weight < min_weight:
                continue

            forward = BranchCandidate(
                source_id=source.id,
                target_id=target.id,
                type=score.type,
                weight=score.weight,
                metadata=score.metadata,
            )
            candidates.append(forward)

            if bidirectional and score.weight > self.config.bidirectional_threshold:
                candidates.append(forward.reversed())

        return candidates

    @staticmethod
    def rank(candidates: list[BranchCandidate], max_connections: int) -> list[BranchCandidate]:
        """Strongest first, original order among equal weights, capped."""
        return sorted(candidates, key=lambda c: c.weight, reverse=True)[:max_connections]

    async def _candidate_pairs(
        self, owner_id: str, focus_fragment_id: str | None
    ) -> tuple[dict[str, Fragment], Iterator[tuple[Fragment, Fragment]]]:
        if focus_fragment_id:
            focus = await self.graph_store.find_fragment_by_id(focus_fragment_id, owner_id)
            if focus is None:
                raise NotFoundError(
                    "Fragment not found",
                    context={"fragment_id": focus_fragment_id, "owner_id": owner_id},
                )
            pool = await self.graph_store.find_unlinked_fragments(owner_id, focus_fragment_id)
            fragments = {f.id: f for f in pool}
            fragments[focus.id] = focus
            return fragments, ((candidate, focus) for candidate in pool)

        pool = await self.graph_store.find_fragments(
            owner_id, FragmentFilters(limit=self.config.candidate_pool_limit)
        )
        fragments = {f.id: f for f in pool}
        pairs = ((first, second) for first in pool for second in pool if first.id != second.id)
        return fragments, pairs

    async def _persist(
        self, candidates: list[BranchCandidate], fragments: dict[str, Fragment], owner_id: str
    ) -> list[BranchRecord]:
        created: list[BranchRecord] = []

        for candidate in candidates:
            branch = Branch(
                id=generate_branch_id(),
                source_id=candidate.source_id,
                target_id=candidate.target_id,
                type=candidate.type,
                weight=candidate.weight,
                metadata=candidate.metadata,
            )

            try:
                result = await self.graph_store.add_branch(branch)
            except Exception as e:
                self.logger.bind(
                    owner_id=owner_id,
                    source_id=candidate.source_id,
                    target_id=candidate.target_id,
                    error=str(e),
                ).warning(f"Failed to create auto-connection: {e}")
                continue

            if not result.created:
                self.logger.bind(owner_id=owner_id, existing_id=result.existing_id).debug(
                    f"Skipping auto-connection {candidate.source_id} -> "
                    f"{candidate.target_id}: already connected"
                )
                continue

            created.append(
                to_branch_record(
                    result.branch,
                    fragments[candidate.source_id],
                    fragments[candidate.target_id],
                )
            )

        return created
