"""
Mutation module - mutation types, ancestral maps, label catalogs and aligned queries
"""

from .mutation import (
    GAP,
    NucSub,
    NucDel,
    NucRange,
    NucDelRange,
    NucSubLabeled,
    AaSub,
    AaDel,
    AaRange,
    AaSubLabeled
)
from .ancestral_map import AncestralMutationMap, AaAncestralMutationMap, AncestralNode
from .labels import LabelCatalog, NucLabelCatalog, AaLabelCatalog
from .query import QueryAnalysis

__all__ = [
    'GAP',
    'NucSub',
    'NucDel',
    'NucRange',
    'NucDelRange',
    'NucSubLabeled',
    'AaSub',
    'AaDel',
    'AaRange',
    'AaSubLabeled',
    'AncestralMutationMap',
    'AaAncestralMutationMap',
    'AncestralNode',
    'LabelCatalog',
    'NucLabelCatalog',
    'AaLabelCatalog',
    'QueryAnalysis'
]
