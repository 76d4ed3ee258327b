#!/usr/bin/env python3
"""
Ancestral mutation maps

Represents the state accumulated at a tree node along its root-to-node path.
Only positions that differ from the reference (at some point along the path)
are stored. Lookups use binary search over sorted position arrays.
"""

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass, field
import numpy as np

from .mutation import NucSub, NucDel, AaSub, AaDel, GAP


class AncestralMutationMap:
    """
    Sparse, immutable position -> state mapping

    Backed by two parallel numpy arrays sorted by position.
    """

    def __init__(self, entries: Optional[Mapping[int, str]] = None):
        """
        Initialize map

        Args:
            entries: Mapping from 0-based position to ancestral state
        """
        entries = dict(entries or {})
        positions = np.array(sorted(entries), dtype=np.int64)
        if len(positions) > 0 and positions[0] < 0:
            raise ValueError(f"Ancestral position must be non-negative, got {positions[0]}")
        for pos, state in entries.items():
            if not isinstance(state, str) or len(state) != 1:
                raise ValueError(f"Ancestral state must be a single character, got {state!r} at position {pos}")
        states = np.array([entries[int(p)].upper() for p in positions], dtype='<U1')

        positions.setflags(write=False)
        states.setflags(write=False)
        self._positions = positions
        self._states = states

    @classmethod
    def from_path(cls, mutations: Iterable[Union[NucSub, NucDel, AaSub, AaDel, Tuple[int, str]]]) -> 'AncestralMutationMap':
        """
        Replay mutations in root-to-node order

        A position mutated several times along the path keeps its last state.

        Args:
            mutations: Substitutions, deletions or (position, state) pairs

        Returns:
            AncestralMutationMap: Map of final states
        """
        entries: Dict[int, str] = {}
        for mutation in mutations:
            pos, state = _position_and_state(mutation)
            entries[pos] = state
        return cls(entries)

    def get(self, pos: int) -> Optional[str]:
        """Return ancestral state at position, or None if not recorded"""
        idx = int(np.searchsorted(self._positions, pos))
        if idx < len(self._positions) and self._positions[idx] == pos:
            return str(self._states[idx])
        return None

    def __contains__(self, pos: int) -> bool:
        return self.get(pos) is not None

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[int]:
        return (int(p) for p in self._positions)

    def items(self) -> Iterator[Tuple[int, str]]:
        """Iterate (position, state) pairs in ascending position order"""
        return ((int(p), str(s)) for p, s in zip(self._positions, self._states))

    @property
    def positions(self) -> np.ndarray:
        return self._positions

    @property
    def max_position(self) -> int:
        """Largest recorded position, -1 for an empty map"""
        if len(self._positions) == 0:
            return -1
        return int(self._positions[-1])

    def to_dict(self) -> Dict[int, str]:
        return dict(self.items())

    def __eq__(self, other) -> bool:
        if not isinstance(other, AncestralMutationMap):
            return NotImplemented
        return (np.array_equal(self._positions, other._positions)
                and np.array_equal(self._states, other._states))

    def __repr__(self) -> str:
        return f"AncestralMutationMap({self.to_dict()})"


class AaAncestralMutationMap:
    """
    Per-gene ancestral aminoacid maps

    A gene without an entry has no recorded divergence from the reference.
    """

    def __init__(self, genes: Optional[Mapping[str, Union[AncestralMutationMap, Mapping[int, str]]]] = None):
        self._genes: Dict[str, AncestralMutationMap] = {}
        for gene, gene_map in (genes or {}).items():
            if not isinstance(gene_map, AncestralMutationMap):
                gene_map = AncestralMutationMap(gene_map)
            self._genes[gene] = gene_map

    @classmethod
    def from_path(cls, mutations: Iterable[Union[AaSub, AaDel]]) -> 'AaAncestralMutationMap':
        """Replay aminoacid mutations in root-to-node order, grouped by gene"""
        per_gene: Dict[str, Dict[int, str]] = {}
        for mutation in mutations:
            pos, state = _position_and_state(mutation)
            per_gene.setdefault(mutation.gene, {})[pos] = state
        return cls(per_gene)

    def get_gene(self, gene: str) -> AncestralMutationMap:
        """Return map for a gene, empty if the gene has no recorded mutations"""
        return self._genes.get(gene, _EMPTY_MAP)

    def genes(self) -> List[str]:
        return list(self._genes)

    def __contains__(self, gene: str) -> bool:
        return gene in self._genes

    def __len__(self) -> int:
        return len(self._genes)

    def __repr__(self) -> str:
        return f"AaAncestralMutationMap({ {g: m.to_dict() for g, m in self._genes.items()} })"


_EMPTY_MAP = AncestralMutationMap()


@dataclass(frozen=True)
class AncestralNode:
    """
    Nearest tree node of a placed query

    Attributes:
        name: Node name in the reference tree
        nuc_mutations: Nucleotide ancestral map
        aa_mutations: Per-gene aminoacid ancestral maps
    """
    name: str = ""
    nuc_mutations: AncestralMutationMap = field(default_factory=AncestralMutationMap)
    aa_mutations: AaAncestralMutationMap = field(default_factory=AaAncestralMutationMap)

    @classmethod
    def from_path(cls, name: str,
                  nuc_path: Iterable[Union[NucSub, NucDel]] = (),
                  aa_path: Iterable[Union[AaSub, AaDel]] = ()) -> 'AncestralNode':
        """Build node maps from root-to-node mutation lists"""
        return cls(
            name=name,
            nuc_mutations=AncestralMutationMap.from_path(nuc_path),
            aa_mutations=AaAncestralMutationMap.from_path(aa_path),
        )


def _position_and_state(mutation) -> Tuple[int, str]:
    if isinstance(mutation, NucSub):
        return mutation.pos, mutation.qry_nuc
    if isinstance(mutation, AaSub):
        return mutation.pos, mutation.qry_aa
    if isinstance(mutation, (NucDel, AaDel)):
        return mutation.pos, GAP
    pos, state = mutation
    return int(pos), state
