#!/usr/bin/env python3
"""
Nucleotide and aminoacid mutation data structures

Positions are 0-based in memory. Text notation uses 1-based positions,
e.g. "A11T" for a nucleotide substitution at 0-based position 10.
"""

from typing import Tuple, Iterator
from dataclasses import dataclass
import re

GAP = '-'

_NUC_SUB_RE = re.compile(r'^([A-Z\-*])?(\d+)([A-Z\-*])$')
_AA_SUB_RE = re.compile(r'^([^:]+):([A-Za-z\-*])?(\d+)([A-Za-z\-*])$')
_RANGE_RE = re.compile(r'^(\d+)(?:-(\d+))?$')


@dataclass(frozen=True, order=True)
class NucSub:
    """
    Nucleotide substitution

    Attributes:
        pos: 0-based position in reference coordinates
        ref_nuc: State the query mutated from
        qry_nuc: State observed in the query
    """
    pos: int
    ref_nuc: str
    qry_nuc: str

    def __post_init__(self):
        if self.pos < 0:
            raise ValueError(f"Substitution position must be non-negative, got {self.pos}")
        if self.ref_nuc == self.qry_nuc:
            raise ValueError(f"Substitution query state must differ from reference state: {self.ref_nuc}{self.pos + 1}{self.qry_nuc}")

    @property
    def is_deletion(self) -> bool:
        return self.qry_nuc == GAP

    @classmethod
    def from_str(cls, text: str) -> 'NucSub':
        """
        Parse notation like "C241T" (1-based position)

        The reference state is required, since a substitution without it
        cannot be validated.
        """
        match = _NUC_SUB_RE.match(text.strip().upper())
        if match is None or match.group(1) is None:
            raise ValueError(f"Unable to parse nucleotide substitution: '{text}'")
        ref_nuc, pos, qry_nuc = match.groups()
        return cls(pos=int(pos) - 1, ref_nuc=ref_nuc, qry_nuc=qry_nuc)

    def __str__(self) -> str:
        return f"{self.ref_nuc}{self.pos + 1}{self.qry_nuc}"


@dataclass(frozen=True, order=True)
class NucDel:
    """Single deleted nucleotide position"""
    pos: int
    ref_nuc: str

    def to_sub(self) -> NucSub:
        return NucSub(pos=self.pos, ref_nuc=self.ref_nuc, qry_nuc=GAP)

    def __str__(self) -> str:
        return f"{self.ref_nuc}{self.pos + 1}{GAP}"


@dataclass(frozen=True, order=True)
class NucRange:
    """Half-open range of 0-based positions [begin, end)"""
    begin: int
    end: int

    def __post_init__(self):
        if self.begin < 0:
            raise ValueError(f"Range begin must be non-negative, got {self.begin}")
        if self.end < self.begin:
            raise ValueError(f"Range end ({self.end}) cannot be less than begin ({self.begin})")

    @property
    def length(self) -> int:
        return self.end - self.begin

    def is_empty(self) -> bool:
        return self.end == self.begin

    def contains(self, pos: int) -> bool:
        return self.begin <= pos < self.end

    def positions(self) -> Iterator[int]:
        return iter(range(self.begin, self.end))

    @classmethod
    def from_str(cls, text: str):
        """Parse "11-13" or "11" (1-based, inclusive)"""
        match = _RANGE_RE.match(text.strip())
        if match is None:
            raise ValueError(f"Unable to parse range: '{text}'")
        first = int(match.group(1))
        last = int(match.group(2)) if match.group(2) else first
        if first < 1 or last < first:
            raise ValueError(f"Invalid 1-based range: '{text}'")
        return cls(begin=first - 1, end=last)

    def __str__(self) -> str:
        if self.length == 1:
            return f"{self.begin + 1}"
        return f"{self.begin + 1}-{self.end}"


@dataclass(frozen=True, order=True)
class NucDelRange(NucRange):
    """Contiguous deletion in the query"""


@dataclass(frozen=True)
class NucSubLabeled:
    """Private nucleotide substitution matched against the label catalog"""
    substitution: NucSub
    labels: Tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.substitution}|{','.join(self.labels)}"


@dataclass(frozen=True, order=True)
class AaSub:
    """
    Aminoacid substitution

    Attributes:
        gene: Gene name
        pos: 0-based codon position within the gene
        ref_aa: State the query mutated from
        qry_aa: State observed in the query
    """
    gene: str
    pos: int
    ref_aa: str
    qry_aa: str

    def __post_init__(self):
        if self.pos < 0:
            raise ValueError(f"Codon position must be non-negative, got {self.pos}")
        if self.ref_aa == self.qry_aa:
            raise ValueError(f"Substitution query state must differ from reference state: {self}")

    @property
    def is_deletion(self) -> bool:
        return self.qry_aa == GAP

    @classmethod
    def from_str(cls, text: str) -> 'AaSub':
        """Parse notation like "S:N501Y" (1-based codon)"""
        match = _AA_SUB_RE.match(text.strip())
        if match is None or match.group(2) is None:
            raise ValueError(f"Unable to parse aminoacid substitution: '{text}'")
        gene, ref_aa, pos, qry_aa = match.groups()
        return cls(gene=gene, pos=int(pos) - 1, ref_aa=ref_aa.upper(), qry_aa=qry_aa.upper())

    def __str__(self) -> str:
        return f"{self.gene}:{self.ref_aa}{self.pos + 1}{self.qry_aa}"


@dataclass(frozen=True, order=True)
class AaDel:
    """Single deleted codon"""
    gene: str
    pos: int
    ref_aa: str

    def to_sub(self) -> AaSub:
        return AaSub(gene=self.gene, pos=self.pos, ref_aa=self.ref_aa, qry_aa=GAP)

    @classmethod
    def from_str(cls, text: str) -> 'AaDel':
        """Parse notation like "S:H69-" """
        sub = AaSub.from_str(text)
        if not sub.is_deletion:
            raise ValueError(f"Aminoacid deletion must end with '{GAP}': '{text}'")
        return cls(gene=sub.gene, pos=sub.pos, ref_aa=sub.ref_aa)

    def __str__(self) -> str:
        return f"{self.gene}:{self.ref_aa}{self.pos + 1}{GAP}"


@dataclass(frozen=True, order=True)
class AaRange:
    """Half-open range of codons [begin, end) within one gene"""
    gene: str
    begin: int
    end: int

    def __post_init__(self):
        if self.begin < 0 or self.end < self.begin:
            raise ValueError(f"Invalid codon range {self.begin}-{self.end} in gene '{self.gene}'")

    @property
    def length(self) -> int:
        return self.end - self.begin

    def contains(self, pos: int) -> bool:
        return self.begin <= pos < self.end

    @classmethod
    def from_str(cls, gene: str, text: str) -> 'AaRange':
        nuc_range = NucRange.from_str(text)
        return cls(gene=gene, begin=nuc_range.begin, end=nuc_range.end)

    def __str__(self) -> str:
        if self.length == 1:
            return f"{self.gene}:{self.begin + 1}"
        return f"{self.gene}:{self.begin + 1}-{self.end}"


@dataclass(frozen=True)
class AaSubLabeled:
    """Private aminoacid substitution matched against the label catalog"""
    substitution: AaSub
    labels: Tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.substitution}|{','.join(self.labels)}"

