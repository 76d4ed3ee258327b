#!/usr/bin/env python3
"""
Three-way classification primitives

Shared by the nucleotide and the aminoacid finders. Every mutated position is
classified by comparing the reference state, the state recorded at the
query's nearest tree node (if any) and the query state.
"""

from typing import Callable, Iterable, List, Optional, Sequence, Tuple
from dataclasses import dataclass
from enum import Enum
import numpy as np

from ..mutations.ancestral_map import AncestralMutationMap
from ..mutations.mutation import GAP


class MutationCategory(Enum):
    """Classification of a query mutation against its ancestor"""
    EXPLAINED = "explained"    # Query state equals the ancestral state
    NOVEL = "novel"            # Ancestor had no divergence at the position
    REVERSION = "reversion"    # Query reverts to reference, ancestor diverged
    DIVERGENT = "divergent"    # Query differs from both ancestor and reference


def classify_state(ref: str, ancestral: Optional[str], query: str) -> MutationCategory:
    """
    Classify a query state at one position

    Args:
        ref: Reference state
        ancestral: State recorded at the ancestral node, None if not recorded
        query: Query state

    Returns:
        MutationCategory: Classification
    """
    parent = ancestral if ancestral is not None else ref
    if query == parent:
        return MutationCategory.EXPLAINED
    if ancestral is None or ancestral == ref:
        return MutationCategory.NOVEL
    if query == ref:
        return MutationCategory.REVERSION
    return MutationCategory.DIVERGENT


class PositionMask:
    """
    Set of excluded positions stored as merged, sorted half-open ranges
    """

    def __init__(self, ranges: Iterable[Tuple[int, int]] = ()):
        merged: List[List[int]] = []
        for begin, end in sorted((int(b), int(e)) for b, e in ranges if e > b):
            if merged and begin <= merged[-1][1]:
                merged[-1][1] = max(merged[-1][1], end)
            else:
                merged.append([begin, end])
        self._starts = np.array([r[0] for r in merged], dtype=np.int64)
        self._ends = np.array([r[1] for r in merged], dtype=np.int64)

    @classmethod
    def outside_of(cls, begin: int, end: int, length: int, ranges: Iterable[Tuple[int, int]] = ()) -> 'PositionMask':
        """Mask of the given ranges plus everything outside [begin, end) within [0, length)"""
        return cls(list(ranges) + [(0, begin), (end, length)])

    def contains(self, pos: int) -> bool:
        idx = int(np.searchsorted(self._starts, pos, side='right')) - 1
        return idx >= 0 and pos < self._ends[idx]

    def __contains__(self, pos: int) -> bool:
        return self.contains(pos)

    def __len__(self) -> int:
        """Number of masked positions"""
        return int(np.sum(self._ends - self._starts))


@dataclass(frozen=True)
class ClassifiedPosition:
    """
    A private mutation at one position

    Attributes:
        pos: Position (nucleotide or codon)
        ref: Reference state
        ancestral: Ancestral state, None if not recorded
        query: Query state ('-' for a deletion)
        category: Classification (never EXPLAINED)
        labels: Matching labels from the catalog
    """
    pos: int
    ref: str
    ancestral: Optional[str]
    query: str
    category: MutationCategory
    labels: Tuple[str, ...] = ()

    @property
    def parent_state(self) -> str:
        """State the query mutated from on its own branch"""
        return self.ancestral if self.ancestral is not None else self.ref

    @property
    def is_deletion(self) -> bool:
        return self.query == GAP


@dataclass(frozen=True)
class ClassifiedMutations:
    substitutions: Tuple[ClassifiedPosition, ...]
    deletions: Tuple[ClassifiedPosition, ...]


def classify_mutations(
    substitutions: Iterable[Tuple[int, str]],
    deleted_positions: Iterable[int],
    ancestral_map: AncestralMutationMap,
    ref_state_at: Callable[[int], str],
    excluded: PositionMask,
    is_definitive: Callable[[str], bool],
    substitution_labels: Callable[[int, str], Tuple[str, ...]],
    deletion_labels: Callable[[int], Tuple[str, ...]],
    detect_implicit_reversions: bool = True,
) -> ClassifiedMutations:
    """
    Classify the mutations of one coordinate space (genome or one gene)

    Args:
        substitutions: Query (position, state) substitutions
        deleted_positions: Positions deleted in the query
        ancestral_map: States at the nearest tree node
        ref_state_at: Reference state lookup
        excluded: Positions without a definitive query call
        is_definitive: Whether a query state is a definitive call
        substitution_labels: Label lookup for (position, state)
        deletion_labels: Label lookup for deleted position
        detect_implicit_reversions: Report ancestral positions the query does
            not mutate as reversions to reference

    Returns:
        ClassifiedMutations: Private substitutions and deletions, sorted by position
    """
    touched = set()
    private_subs: List[ClassifiedPosition] = []
    private_dels: List[ClassifiedPosition] = []

    for pos, query in substitutions:
        touched.add(pos)
        if pos in excluded or not is_definitive(query):
            continue
        classified = _classify_position(pos, query, ancestral_map, ref_state_at, substitution_labels)
        if classified is not None:
            private_subs.append(classified)

    for pos in sorted(set(deleted_positions)):
        touched.add(pos)
        if pos in excluded:
            continue
        classified = _classify_position(pos, GAP, ancestral_map, ref_state_at, lambda p, _: deletion_labels(p))
        if classified is not None:
            private_dels.append(classified)

    if detect_implicit_reversions:
        for pos, ancestral in ancestral_map.items():
            if pos in touched or pos in excluded:
                continue
            # Untouched position: the query carries the reference state
            ref = ref_state_at(pos)
            if not is_definitive(ref):
                continue
            if classify_state(ref, ancestral, ref) == MutationCategory.REVERSION:
                private_subs.append(ClassifiedPosition(
                    pos=pos, ref=ref, ancestral=ancestral, query=ref, category=MutationCategory.REVERSION
                ))

    private_subs.sort(key=lambda c: (c.pos, c.query))
    private_dels.sort(key=lambda c: c.pos)
    return ClassifiedMutations(substitutions=tuple(private_subs), deletions=tuple(private_dels))


def _classify_position(pos, query, ancestral_map, ref_state_at, labels_for) -> Optional[ClassifiedPosition]:
    ref = ref_state_at(pos)
    ancestral = ancestral_map.get(pos)
    category = classify_state(ref, ancestral, query)
    if category == MutationCategory.EXPLAINED:
        return None

    # Reversions to reference are reported without labels
    labels = () if category == MutationCategory.REVERSION else labels_for(pos, query)
    return ClassifiedPosition(pos=pos, ref=ref, ancestral=ancestral, query=query, category=category, labels=labels)


def group_contiguous(positions: Sequence[ClassifiedPosition]) -> List[List[ClassifiedPosition]]:
    """
    Split sorted positions into contiguous runs of identical classification

    Runs never merge across a change of category or labels.
    """
    groups: List[List[ClassifiedPosition]] = []
    for item in positions:
        if groups:
            last = groups[-1][-1]
            if (item.pos == last.pos + 1
                    and item.category == last.category
                    and item.labels == last.labels):
                groups[-1].append(item)
                continue
        groups.append([item])
    return groups
