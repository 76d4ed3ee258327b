#!/usr/bin/env python3
"""
Label catalogs for known recurring mutations

A catalog maps (position, mutated state) to an ordered set of labels, for
example the names of lineages a mutation is defining for. Catalogs are built
once per analysis run and expose no mutation API afterwards, so a single
instance can be shared across queries and threads.
"""

from typing import Dict, Hashable, Iterable, List, Mapping, Tuple
from types import MappingProxyType
import re

from .mutation import GAP

_NUC_KEY_RE = re.compile(r'^[A-Z\-]?(\d+)([A-Z\-])$')
_AA_KEY_RE = re.compile(r'^([^:]+):[A-Za-z\-*]?(\d+)([A-Za-z\-*])$')

NO_LABELS: Tuple[str, ...] = ()


class LabelCatalog:
    """Immutable lookup from a mutation key to its labels"""

    def __init__(self, entries: Iterable[Tuple[Hashable, str]] = ()):
        """
        Initialize catalog

        Args:
            entries: (key, label) pairs. Labels for the same key keep the order
                of first appearance; duplicates are dropped.
        """
        collected: Dict[Hashable, List[str]] = {}
        for key, label in entries:
            labels = collected.setdefault(key, [])
            if label not in labels:
                labels.append(label)
        self._entries = MappingProxyType({key: tuple(labels) for key, labels in collected.items()})

    def _get(self, key: Hashable) -> Tuple[str, ...]:
        return self._entries.get(key, NO_LABELS)

    @property
    def entries(self) -> Mapping[Hashable, Tuple[str, ...]]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} entries)"


class NucLabelCatalog(LabelCatalog):
    """Nucleotide catalog keyed by (position, state)"""

    @classmethod
    def from_triples(cls, triples: Iterable[Tuple[int, str, str]]) -> 'NucLabelCatalog':
        """
        Build catalog from (0-based position, mutated state, label) triples
        """
        return cls(((int(pos), state.upper()), label) for pos, state, label in triples)

    @classmethod
    def from_label_map(cls, label_map: Mapping[str, Iterable[str]]) -> 'NucLabelCatalog':
        """
        Build catalog from a JSON label map

        Keys use 1-based positions, e.g. {"241T": ["19A"], "11288-": ["21K"]}.
        """
        triples = []
        for key, labels in label_map.items():
            match = _NUC_KEY_RE.match(key.strip().upper())
            if match is None:
                raise ValueError(f"Unable to parse nucleotide label key: '{key}'")
            pos = int(match.group(1)) - 1
            if pos < 0:
                raise ValueError(f"Label key position must be 1-based: '{key}'")
            for label in labels:
                triples.append((pos, match.group(2), label))
        return cls.from_triples(triples)

    def lookup(self, pos: int, state: str) -> Tuple[str, ...]:
        """Return labels for a mutation, empty tuple if unlabeled"""
        return self._get((pos, state))

    def lookup_deletion(self, pos: int) -> Tuple[str, ...]:
        return self._get((pos, GAP))


class AaLabelCatalog(LabelCatalog):
    """Aminoacid catalog keyed by (gene, codon, state)"""

    @classmethod
    def from_triples(cls, triples: Iterable[Tuple[str, int, str, str]]) -> 'AaLabelCatalog':
        """
        Build catalog from (gene, 0-based codon, mutated state, label) entries
        """
        return cls(((gene, int(pos), state.upper()), label) for gene, pos, state, label in triples)

    @classmethod
    def from_label_map(cls, label_map: Mapping[str, Iterable[str]]) -> 'AaLabelCatalog':
        """
        Build catalog from a JSON label map

        Keys use 1-based codons, e.g. {"S:501Y": ["20I"], "S:69-": ["20I"]}.
        """
        triples = []
        for key, labels in label_map.items():
            match = _AA_KEY_RE.match(key.strip())
            if match is None:
                raise ValueError(f"Unable to parse aminoacid label key: '{key}'")
            gene, codon, state = match.groups()
            pos = int(codon) - 1
            if pos < 0:
                raise ValueError(f"Label key codon must be 1-based: '{key}'")
            for label in labels:
                triples.append((gene, pos, state, label))
        return cls.from_triples(triples)

    def lookup(self, gene: str, pos: int, state: str) -> Tuple[str, ...]:
        return self._get((gene, pos, state))

    def lookup_deletion(self, gene: str, pos: int) -> Tuple[str, ...]:
        return self._get((gene, pos, GAP))

    def genes(self) -> List[str]:
        """Genes referenced by the catalog, in order of first appearance"""
        seen: Dict[str, None] = {}
        for gene, _, _ in self._entries:
            seen.setdefault(gene, None)
        return list(seen)
