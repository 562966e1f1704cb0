"""
Rename-aware path tracking.

The tracked path is folded over the commit sequence: each step takes the path
the previous step settled on plus the commit's name-status records against its
parent, and returns the next path together with a PathResolution describing
the decision. The state is passed in and returned explicitly, so a step never
looks at any commit other than its own.
"""

from collections.abc import Iterable, Iterator

from ..shared_utilities import get_logger
from .data_models import MatchPolicy, PathResolution, PathStatusRecord

logger = get_logger(__name__)


def match_record(record: PathStatusRecord, tracked_path: str) -> str | None:
    """Return the path a single record maps ``tracked_path`` to, if it mentions it.

    Rename/copy records map in either direction: landing on the tracked path
    resolves to the source, leaving it resolves to the destination.
    """
    if record.is_two_operand:
        if record.new_path == tracked_path:
            return record.old_path
        if record.old_path == tracked_path:
            return record.new_path
        return None

    if record.old_path == tracked_path:
        return record.old_path
    return None


def resolve(
    records: Iterable[PathStatusRecord],
    previous_path: str,
    commit: str = "",
    policy: MatchPolicy = MatchPolicy.LAST,
) -> PathResolution:
    """Resolve which path identifies the tracked file at one commit.

    Args:
        records: Name-status records of the commit against its parent, in git order
        previous_path: Path the tracked file had at the previously resolved commit
        commit: Commit id, recorded on the resolution
        policy: Winner when several records match

    Returns:
        PathResolution; ``resolved_path == previous_path`` when nothing matched
    """
    candidates = tuple(
        candidate
        for candidate in (match_record(record, previous_path) for record in records)
        if candidate is not None
    )

    if not candidates:
        return PathResolution(
            commit=commit,
            previous_path=previous_path,
            resolved_path=previous_path,
            matched=False,
        )

    resolved = candidates[-1] if policy is MatchPolicy.LAST else candidates[0]
    resolution = PathResolution(
        commit=commit,
        previous_path=previous_path,
        resolved_path=resolved,
        matched=True,
        candidates=candidates,
    )

    if resolution.ambiguous:
        logger.warning(
            f"Commit {commit}: {len(candidates)} records match '{previous_path}' "
            f"({', '.join(candidates)}), keeping '{resolved}' ({policy.value} match)"
        )

    return resolution


def step(
    state: str,
    commit: str,
    records: Iterable[PathStatusRecord],
    policy: MatchPolicy = MatchPolicy.LAST,
) -> tuple[str, PathResolution]:
    """One fold step: (tracked path, commit records) -> (next tracked path, resolution)."""
    resolution = resolve(records, state, commit=commit, policy=policy)
    return resolution.resolved_path, resolution


def track_paths(
    initial_path: str,
    steps: Iterable[tuple[str, Iterable[PathStatusRecord]]],
    policy: MatchPolicy = MatchPolicy.LAST,
) -> Iterator[tuple[str, PathResolution]]:
    """Fold the tracked path over ``(commit, records)`` pairs.

    Records are consumed lazily, so a caller may fetch each commit's diff only
    when its turn comes.

    Yields:
        ``(state_after_commit, resolution)`` for every commit, in input order
    """
    state = initial_path
    for commit, records in steps:
        state, resolution = step(state, commit, records, policy)
        if resolution.resolved_path != resolution.previous_path:
            logger.debug(
                f"Commit {commit}: '{resolution.previous_path}' -> "
                f"'{resolution.resolved_path}'"
            )
        yield state, resolution
