#!/usr/bin/env python3
"""
Gene map

Gene coordinates on the reference and conversions between nucleotide ranges
and gene-local codon ranges.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple
from dataclasses import dataclass
from urllib.parse import unquote

from .misc import open_text_file

GFF_GENE_FEATURE_TYPES = ('gene',)
GFF_NAME_ATTRIBUTES = ('gene_name', 'gene', 'Name', 'locus_tag', 'ID')


@dataclass(frozen=True)
class Gene:
    """
    Gene annotation

    Attributes:
        name: Gene name
        start: 0-based start position on the reference (inclusive)
        end: 0-based end position on the reference (exclusive)
        strand: '+' or '-'
        frame: Bases to skip at the 5' end of the gene before the first
            codon (0, 1 or 2), as in the GFF3 phase column
    """
    name: str
    start: int
    end: int
    strand: str = '+'
    frame: int = 0

    def __post_init__(self):
        if not self.name:
            raise ValueError("Gene name cannot be empty")
        if self.start < 0 or self.end <= self.start:
            raise ValueError(f"Invalid coordinates for gene '{self.name}': {self.start}-{self.end}")
        if self.strand not in ('+', '-'):
            raise ValueError(f"Gene strand must be '+' or '-', got '{self.strand}'")
        if self.frame not in (0, 1, 2):
            raise ValueError(f"Gene frame must be 0, 1 or 2, got {self.frame}")
        if self.frame >= self.length:
            raise ValueError(f"Gene '{self.name}' is shorter than its frame offset")

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def coding_start(self) -> int:
        """First reference position of the coding region"""
        return self.start + self.frame if self.strand == '+' else self.start

    @property
    def coding_end(self) -> int:
        """Reference position after the coding region"""
        return self.end if self.strand == '+' else self.end - self.frame

    @property
    def num_codons(self) -> int:
        return (self.length - self.frame) // 3

    def codon_range_covered(self, begin: int, end: int) -> Tuple[int, int]:
        """
        Codons of this gene fully inside the nucleotide range [begin, end)

        Returns:
            (first codon, end codon), half-open and possibly empty
        """
        overlap_begin = max(begin, self.coding_start)
        overlap_end = min(end, self.coding_end)
        if overlap_end <= overlap_begin:
            return 0, 0

        if self.strand == '+':
            rel_begin = overlap_begin - self.coding_start
            rel_end = overlap_end - self.coding_start
        else:
            rel_begin = self.coding_end - overlap_end
            rel_end = self.coding_end - overlap_begin

        codon_begin = -(-rel_begin // 3)
        codon_end = min(rel_end // 3, self.num_codons)
        if codon_end <= codon_begin:
            return 0, 0
        return codon_begin, codon_end


class GeneMap:
    """Ordered collection of genes keyed by name"""

    def __init__(self, genes: Iterable[Gene] = ()):
        self._genes: Dict[str, Gene] = {}
        for gene in genes:
            if gene.name in self._genes:
                raise ValueError(f"Duplicate gene in gene map: '{gene.name}'")
            self._genes[gene.name] = gene

    @classmethod
    def from_records(cls, records: Iterable[Dict]) -> 'GeneMap':
        """
        Build from JSON records with 1-based inclusive coordinates

        Example record: {"name": "S", "start": 21563, "end": 25384, "strand": "+"}
        """
        genes = []
        for record in records:
            genes.append(Gene(
                name=record['name'],
                start=int(record['start']) - 1,
                end=int(record['end']),
                strand=record.get('strand', '+'),
                frame=int(record.get('frame', 0)),
            ))
        return cls(genes)

    @classmethod
    def from_gff3(cls, file_path: str) -> 'GeneMap':
        """Read 'gene' features from a GFF3 file (plain or gzipped)"""
        genes = []
        with open_text_file(file_path) as handle:
            for line_number, line in enumerate(handle, start=1):
                if line.startswith('##FASTA'):
                    break
                if not line.strip() or line.startswith('#'):
                    continue
                gene = _parse_gff3_gene(line, line_number)
                if gene is not None:
                    genes.append(gene)
        return cls(genes)

    def get(self, name: str) -> Optional[Gene]:
        return self._genes.get(name)

    def names(self) -> List[str]:
        return list(self._genes)

    def __getitem__(self, name: str) -> Gene:
        return self._genes[name]

    def __contains__(self, name: str) -> bool:
        return name in self._genes

    def __iter__(self) -> Iterator[Gene]:
        return iter(self._genes.values())

    def __len__(self) -> int:
        return len(self._genes)

    def __repr__(self) -> str:
        return f"GeneMap({self.names()})"


def _parse_gff3_gene(line: str, line_number: int) -> Optional[Gene]:
    columns = line.rstrip('\n').split('\t')
    if len(columns) != 9:
        raise ValueError(f"Invalid GFF3 record at line {line_number}: expected 9 columns, got {len(columns)}")

    _, _, feature_type, start, end, _, strand, phase, attributes = columns
    if feature_type not in GFF_GENE_FEATURE_TYPES:
        return None

    attrs = {}
    for item in attributes.strip().split(';'):
        if '=' in item:
            key, value = item.split('=', 1)
            attrs[key.strip()] = unquote(value.strip())

    name = next((attrs[key] for key in GFF_NAME_ATTRIBUTES if key in attrs), None)
    if name is None:
        raise ValueError(f"GFF3 gene at line {line_number} has no name attribute")

    return Gene(
        name=name,
        start=int(start) - 1,
        end=int(end),
        strand=strand if strand in ('+', '-') else '+',
        frame=int(phase) if phase in ('0', '1', '2') else 0,
    )
