"""
privmut - Private mutation detection against a reference phylogeny

Main features:
- Nucleotide private mutation finding (reversions, labeled and unlabeled substitutions, deletions)
- Per-gene aminoacid private mutation finding with gene-scoped error containment
- Label catalogs of known recurring mutations
- Dataset configuration (reference, gene map, reference peptides)
- Batch analysis API
"""

__version__ = "0.1.0"

# Export main API interfaces
from .api import analyze_batch, find_private_mutations, Outcome
from .config.dataset_config import DatasetConfig
from .config.finder_config import FinderConfig
from .mutations.ancestral_map import AncestralMutationMap, AaAncestralMutationMap, AncestralNode
from .mutations.query import QueryAnalysis
from .private.nuc_finder import find_private_nuc_mutations
from .private.aa_finder import find_private_aa_mutations

__all__ = [
    '__version__',
    # Main API
    'analyze_batch',
    'find_private_mutations',
    'Outcome',
    # Inputs
    'DatasetConfig',
    'FinderConfig',
    'AncestralMutationMap',
    'AaAncestralMutationMap',
    'AncestralNode',
    'QueryAnalysis',
    # Finders
    'find_private_nuc_mutations',
    'find_private_aa_mutations'
]
