#!/usr/bin/env python3
"""
Nucleotide private mutation finder

Classifies the query's nucleotide substitutions and deletions against the
mutations accumulated at its nearest tree node.
"""

from typing import Optional

from ..config.finder_config import FinderConfig, DEFAULT_FINDER_CONFIG
from ..errors import InvalidAncestralMapError, PrivateMutationsError
from ..mutations.ancestral_map import AncestralMutationMap
from ..mutations.labels import NucLabelCatalog
from ..mutations.query import QueryAnalysis
from ..utils.sequence_utils import is_definitive_state
from .classify import PositionMask, classify_mutations
from .private_data import PrivateNucleotideMutations


def find_private_nuc_mutations(
    node_mut_map: AncestralMutationMap,
    query: QueryAnalysis,
    ref_seq: str,
    substitution_labels: Optional[NucLabelCatalog] = None,
    deletion_labels: Optional[NucLabelCatalog] = None,
    config: Optional[FinderConfig] = None,
) -> PrivateNucleotideMutations:
    """
    Find private nucleotide mutations of a query

    Args:
        node_mut_map: Ancestral nucleotide states at the query's nearest node
        query: Aligned query
        ref_seq: Reference sequence
        substitution_labels: Label catalog for substitutions
        deletion_labels: Label catalog for deletions
        config: Finder configuration

    Returns:
        PrivateNucleotideMutations: Classified private mutations

    Raises:
        InvalidAncestralMapError: Ancestral map position beyond the reference
        PrivateMutationsError: Query mutation beyond the reference
    """
    config = config or DEFAULT_FINDER_CONFIG
    ref_len = len(ref_seq)

    if node_mut_map.max_position >= ref_len:
        raise InvalidAncestralMapError(
            f"Ancestral nucleotide mutation at position {node_mut_map.max_position + 1} "
            f"is outside of the reference sequence (length {ref_len})"
        )

    for sub in query.substitutions:
        if sub.pos >= ref_len:
            raise PrivateMutationsError(
                f"Query '{query.seq_name}': substitution {sub} is outside of the reference sequence (length {ref_len})"
            )
    for deletion in query.deletions:
        if deletion.end > ref_len:
            raise PrivateMutationsError(
                f"Query '{query.seq_name}': deletion {deletion} is outside of the reference sequence (length {ref_len})"
            )

    excluded_ranges = [(r.begin, r.end) for r in query.missing]
    excluded_ranges += [(r.begin, r.end) for r in query.non_acgtns]
    if query.alignment_range is not None:
        excluded = PositionMask.outside_of(
            query.alignment_range.begin, query.alignment_range.end, ref_len, excluded_ranges
        )
    else:
        excluded = PositionMask(excluded_ranges)

    substitution_labels = substitution_labels or NucLabelCatalog()
    deletion_labels = deletion_labels or NucLabelCatalog()
    definitive = set(config.definitive_nucleotides)

    # Substitutions to '-' are deletions reported in substitution form
    substitutions = [(s.pos, s.qry_nuc) for s in query.substitutions if not s.is_deletion]
    deleted_positions = [s.pos for s in query.substitutions if s.is_deletion]
    for deletion in query.deletions:
        deleted_positions.extend(deletion.positions())

    classified = classify_mutations(
        substitutions=substitutions,
        deleted_positions=deleted_positions,
        ancestral_map=node_mut_map,
        ref_state_at=lambda pos: ref_seq[pos],
        excluded=excluded,
        is_definitive=lambda state: is_definitive_state(state, definitive),
        substitution_labels=substitution_labels.lookup,
        deletion_labels=deletion_labels.lookup_deletion,
        detect_implicit_reversions=config.detect_implicit_reversions,
    )

    return PrivateNucleotideMutations.from_classified(classified.substitutions, classified.deletions)
