"""
Private mutation finding module

This module classifies query mutations against the mutations accumulated at
the query's nearest tree node, including:
- Shared three-way classification primitives
- Nucleotide private mutation finder
- Per-gene aminoacid private mutation finder with gene-scoped error containment
"""

from .classify import MutationCategory, classify_state, PositionMask
from .private_data import (
    PrivateDeletionRange,
    PrivateNucleotideMutations,
    PrivateAminoacidMutations,
    GeneWarning,
    PrivateAaMutationsReport
)
from .nuc_finder import find_private_nuc_mutations
from .aa_finder import find_private_aa_mutations, find_private_aa_mutations_for_gene

__all__ = [
    'MutationCategory',
    'classify_state',
    'PositionMask',
    'PrivateDeletionRange',
    'PrivateNucleotideMutations',
    'PrivateAminoacidMutations',
    'GeneWarning',
    'PrivateAaMutationsReport',
    'find_private_nuc_mutations',
    'find_private_aa_mutations',
    'find_private_aa_mutations_for_gene'
]
