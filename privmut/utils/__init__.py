"""
Utility modules
"""

from .genes import Gene, GeneMap
from .misc import open_text_file, read_fasta_reference
from .sequence_utils import build_ref_peptides, translate_gene
__all__ = [
    'Gene',
    'GeneMap',
    'open_text_file',
    'read_fasta_reference',
    'build_ref_peptides',
    'translate_gene'
]
