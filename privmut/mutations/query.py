#!/usr/bin/env python3
"""
Aligned query as supplied by the alignment and translation layers
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple
from dataclasses import dataclass, field

from .mutation import NucSub, NucRange, NucDelRange, AaSub, AaDel, AaRange
from ..utils.genes import GeneMap


@dataclass(frozen=True)
class QueryAnalysis:
    """
    Aligned query sequence

    All nucleotide coordinates are 0-based reference positions; aminoacid
    coordinates are 0-based codons within each gene.

    Attributes:
        seq_name: Query name
        substitutions: Nucleotide substitutions relative to the reference
        deletions: Deleted nucleotide ranges
        missing: Ranges of unsequenced bases (N)
        non_acgtns: Ranges of ambiguous bases
        alignment_range: Aligned part of the reference, None for the whole reference
        aa_substitutions: Aminoacid substitutions, all genes
        aa_deletions: Deleted codons, all genes
        unknown_aa_ranges: Gene -> codon ranges translated as unknown (X)
        aa_alignment_ranges: Gene -> aligned codon range; derived from the gene
            map and alignment_range when not given
    """
    seq_name: str = ""
    substitutions: Tuple[NucSub, ...] = ()
    deletions: Tuple[NucDelRange, ...] = ()
    missing: Tuple[NucRange, ...] = ()
    non_acgtns: Tuple[NucRange, ...] = ()
    alignment_range: Optional[NucRange] = None
    aa_substitutions: Tuple[AaSub, ...] = ()
    aa_deletions: Tuple[AaDel, ...] = ()
    unknown_aa_ranges: Mapping[str, Tuple[AaRange, ...]] = field(default_factory=dict)
    aa_alignment_ranges: Optional[Mapping[str, AaRange]] = None

    def __post_init__(self):
        # Normalize sequences to tuples so that instances stay immutable
        for name in ('substitutions', 'deletions', 'missing', 'non_acgtns', 'aa_substitutions', 'aa_deletions'):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        object.__setattr__(self, 'unknown_aa_ranges',
                           {gene: tuple(ranges) for gene, ranges in self.unknown_aa_ranges.items()})
        if self.aa_alignment_ranges is not None:
            object.__setattr__(self, 'aa_alignment_ranges', dict(self.aa_alignment_ranges))

    def genes(self) -> List[str]:
        """Genes named in the query's aminoacid results, in order of first appearance"""
        seen: Dict[str, None] = {}
        for sub in self.aa_substitutions:
            seen.setdefault(sub.gene, None)
        for deletion in self.aa_deletions:
            seen.setdefault(deletion.gene, None)
        for gene in self.unknown_aa_ranges:
            seen.setdefault(gene, None)
        return list(seen)

    def aa_substitutions_for(self, gene: str) -> List[AaSub]:
        return [sub for sub in self.aa_substitutions if sub.gene == gene]

    def aa_deletions_for(self, gene: str) -> List[AaDel]:
        return [deletion for deletion in self.aa_deletions if deletion.gene == gene]

    def aa_alignment_range_for(self, gene: str, gene_map: GeneMap, num_codons: int) -> Tuple[int, int]:
        """
        Aligned codon range of a gene

        Args:
            gene: Gene name
            gene_map: Gene map used to project the nucleotide alignment range
            num_codons: Length of the gene's reference peptide

        Returns:
            (first codon, end codon), half-open
        """
        if self.aa_alignment_ranges is not None and gene in self.aa_alignment_ranges:
            aa_range = self.aa_alignment_ranges[gene]
            return aa_range.begin, min(aa_range.end, num_codons)

        if self.alignment_range is None:
            return 0, num_codons

        gene_info = gene_map.get(gene)
        if gene_info is None:
            # No coordinates to project onto: only the peptide bounds apply
            return 0, num_codons

        begin, end = gene_info.codon_range_covered(self.alignment_range.begin, self.alignment_range.end)
        return begin, min(end, num_codons)

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> 'QueryAnalysis':
        """
        Build from a Nextclade-style JSON record

        Example:
            {
                "seqName": "sample_1",
                "substitutions": ["C241T", "A23403G"],
                "deletions": ["11288-11296"],
                "missing": ["1-54"],
                "nonACGTNs": ["2000"],
                "alignmentRange": "55-29800",
                "aaSubstitutions": ["S:D614G"],
                "aaDeletions": ["ORF1a:S3675-"],
                "unknownAaRanges": {"ORF1a": ["1-18"]}
            }
        """
        alignment_range = record.get('alignmentRange')
        aa_alignment_ranges = record.get('aaAlignmentRanges')

        return cls(
            seq_name=record.get('seqName', ''),
            substitutions=tuple(NucSub.from_str(s) for s in record.get('substitutions', [])),
            deletions=tuple(NucDelRange.from_str(s) for s in record.get('deletions', [])),
            missing=tuple(NucRange.from_str(s) for s in record.get('missing', [])),
            non_acgtns=tuple(NucRange.from_str(s) for s in record.get('nonACGTNs', [])),
            alignment_range=NucRange.from_str(alignment_range) if alignment_range else None,
            aa_substitutions=tuple(AaSub.from_str(s) for s in record.get('aaSubstitutions', [])),
            aa_deletions=tuple(AaDel.from_str(s) for s in record.get('aaDeletions', [])),
            unknown_aa_ranges={
                gene: tuple(AaRange.from_str(gene, s) for s in ranges)
                for gene, ranges in record.get('unknownAaRanges', {}).items()
            },
            aa_alignment_ranges=(
                {gene: AaRange.from_str(gene, s) for gene, s in aa_alignment_ranges.items()}
                if aa_alignment_ranges is not None else None
            ),
        )
