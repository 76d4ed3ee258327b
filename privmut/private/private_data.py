"""
Private mutation result data structures

This module defines the values produced by the nucleotide and aminoacid
private mutation finders.
"""

from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass

from ..mutations.mutation import NucSub, NucSubLabeled, AaSub, AaSubLabeled
from .classify import ClassifiedPosition, MutationCategory, group_contiguous


@dataclass(frozen=True)
class PrivateDeletionRange:
    """
    Contiguous private deletion with a single classification

    Attributes:
        begin: First deleted position (0-based, nucleotide or codon)
        end: Position after the last deleted one
        ref_states: States the query deleted on its own branch, one per position
        labels: Labels shared by every position of the range
        category: NOVEL or DIVERGENT
        gene: Gene name for aminoacid deletions, None for nucleotides
    """
    begin: int
    end: int
    ref_states: str
    labels: Tuple[str, ...] = ()
    category: MutationCategory = MutationCategory.NOVEL
    gene: Optional[str] = None

    def __post_init__(self):
        if self.end <= self.begin:
            raise ValueError(f"Deletion range must not be empty: {self.begin}-{self.end}")
        if len(self.ref_states) != self.end - self.begin:
            raise ValueError("ref_states must have one state per deleted position")

    @property
    def length(self) -> int:
        return self.end - self.begin

    @property
    def is_labeled(self) -> bool:
        return len(self.labels) > 0

    def __str__(self) -> str:
        prefix = f"{self.gene}:" if self.gene is not None else ""
        if self.length == 1:
            return f"{prefix}{self.begin + 1}"
        return f"{prefix}{self.begin + 1}-{self.end}"


def _deletion_ranges(deletions: Tuple[ClassifiedPosition, ...], gene: Optional[str]) -> Tuple[PrivateDeletionRange, ...]:
    ranges = []
    for group in group_contiguous(deletions):
        ranges.append(PrivateDeletionRange(
            begin=group[0].pos,
            end=group[-1].pos + 1,
            ref_states=''.join(item.parent_state for item in group),
            labels=group[0].labels,
            category=group[0].category,
            gene=gene,
        ))
    return tuple(ranges)


def _labeled_to_dict(labeled) -> Dict[str, Any]:
    return {'substitution': str(labeled.substitution), 'labels': list(labeled.labels)}


def _deletion_to_dict(deletion: PrivateDeletionRange) -> Dict[str, Any]:
    return {
        'range': str(deletion),
        'refStates': deletion.ref_states,
        'labels': list(deletion.labels),
        'category': deletion.category.value,
    }


@dataclass(frozen=True)
class _PrivateMutationsBase:
    """Fields and counters shared by nucleotide and aminoacid results"""
    private_substitutions: tuple
    reversions: tuple
    reversion_substitutions: tuple
    labeled_substitutions: tuple
    unlabeled_substitutions: tuple
    private_deletions: Tuple[PrivateDeletionRange, ...]
    labeled_deletions: Tuple[PrivateDeletionRange, ...]
    unlabeled_deletions: Tuple[PrivateDeletionRange, ...]
    reversion_deletions: Tuple[PrivateDeletionRange, ...]

    @property
    def total_private_substitutions(self) -> int:
        return len(self.private_substitutions)

    @property
    def total_reversions(self) -> int:
        return len(self.reversions)

    @property
    def total_reversion_substitutions(self) -> int:
        return len(self.reversion_substitutions)

    @property
    def total_labeled_substitutions(self) -> int:
        return len(self.labeled_substitutions)

    @property
    def total_unlabeled_substitutions(self) -> int:
        return len(self.unlabeled_substitutions)

    @property
    def total_private_deletions(self) -> int:
        """Number of privately deleted positions"""
        return sum(d.length for d in self.private_deletions)

    @property
    def total_private_deletion_ranges(self) -> int:
        return len(self.private_deletions)

    def is_empty(self) -> bool:
        return not self.private_substitutions and not self.private_deletions

    def counts(self) -> Dict[str, int]:
        return {
            'totalPrivateSubstitutions': self.total_private_substitutions,
            'totalReversions': self.total_reversions,
            'totalReversionSubstitutions': self.total_reversion_substitutions,
            'totalLabeledSubstitutions': self.total_labeled_substitutions,
            'totalUnlabeledSubstitutions': self.total_unlabeled_substitutions,
            'totalPrivateDeletions': self.total_private_deletions,
            'totalPrivateDeletionRanges': self.total_private_deletion_ranges,
        }

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation using text notation"""
        result = {
            'privateSubstitutions': [str(s) for s in self.private_substitutions],
            'reversions': [str(s) for s in self.reversions],
            'reversionSubstitutions': [str(s) for s in self.reversion_substitutions],
            'labeledSubstitutions': [_labeled_to_dict(s) for s in self.labeled_substitutions],
            'unlabeledSubstitutions': [str(s) for s in self.unlabeled_substitutions],
            'privateDeletions': [_deletion_to_dict(d) for d in self.private_deletions],
            'labeledDeletions': [_deletion_to_dict(d) for d in self.labeled_deletions],
            'unlabeledDeletions': [_deletion_to_dict(d) for d in self.unlabeled_deletions],
            'reversionDeletions': [_deletion_to_dict(d) for d in self.reversion_deletions],
        }
        result.update(self.counts())
        return result


@dataclass(frozen=True)
class PrivateNucleotideMutations(_PrivateMutationsBase):
    """
    Private nucleotide mutations of one query

    Attributes:
        private_substitutions: All private substitutions (reversions + labeled + unlabeled)
        reversions: Reversions to reference
        reversion_substitutions: Substitutions away from a divergent ancestral
            state to a third state; each also appears in labeled or unlabeled
        labeled_substitutions: Non-reversion substitutions found in the label catalog
        unlabeled_substitutions: Non-reversion substitutions not in the catalog
        private_deletions: All private deletion ranges
        labeled_deletions: Deletion ranges found in the label catalog
        unlabeled_deletions: Deletion ranges not in the catalog
        reversion_deletions: Deletion ranges where the ancestor carried a divergent base
    """
    private_substitutions: Tuple[NucSub, ...] = ()
    reversions: Tuple[NucSub, ...] = ()
    reversion_substitutions: Tuple[NucSub, ...] = ()
    labeled_substitutions: Tuple[NucSubLabeled, ...] = ()
    unlabeled_substitutions: Tuple[NucSub, ...] = ()
    private_deletions: Tuple[PrivateDeletionRange, ...] = ()
    labeled_deletions: Tuple[PrivateDeletionRange, ...] = ()
    unlabeled_deletions: Tuple[PrivateDeletionRange, ...] = ()
    reversion_deletions: Tuple[PrivateDeletionRange, ...] = ()

    @classmethod
    def from_classified(cls, substitutions: Tuple[ClassifiedPosition, ...],
                        deletions: Tuple[ClassifiedPosition, ...]) -> 'PrivateNucleotideMutations':
        def make_sub(item: ClassifiedPosition) -> NucSub:
            return NucSub(pos=item.pos, ref_nuc=item.parent_state, qry_nuc=item.query)

        fields = _partition(substitutions, make_sub, NucSubLabeled)
        fields.update(_partition_deletions(_deletion_ranges(deletions, gene=None)))
        return cls(**fields)


@dataclass(frozen=True)
class PrivateAminoacidMutations(_PrivateMutationsBase):
    """
    Private aminoacid mutations of one query in one gene

    Same partitioning as PrivateNucleotideMutations, in codon space.
    """
    gene: str = ""
    private_substitutions: Tuple[AaSub, ...] = ()
    reversions: Tuple[AaSub, ...] = ()
    reversion_substitutions: Tuple[AaSub, ...] = ()
    labeled_substitutions: Tuple[AaSubLabeled, ...] = ()
    unlabeled_substitutions: Tuple[AaSub, ...] = ()
    private_deletions: Tuple[PrivateDeletionRange, ...] = ()
    labeled_deletions: Tuple[PrivateDeletionRange, ...] = ()
    unlabeled_deletions: Tuple[PrivateDeletionRange, ...] = ()
    reversion_deletions: Tuple[PrivateDeletionRange, ...] = ()

    @classmethod
    def from_classified(cls, gene: str, substitutions: Tuple[ClassifiedPosition, ...],
                        deletions: Tuple[ClassifiedPosition, ...]) -> 'PrivateAminoacidMutations':
        def make_sub(item: ClassifiedPosition) -> AaSub:
            return AaSub(gene=gene, pos=item.pos, ref_aa=item.parent_state, qry_aa=item.query)

        fields = _partition(substitutions, make_sub, AaSubLabeled)
        fields.update(_partition_deletions(_deletion_ranges(deletions, gene=gene)))
        return cls(gene=gene, **fields)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['gene'] = self.gene
        return result


def _partition(substitutions, make_sub, make_labeled) -> Dict[str, tuple]:
    private, reversions, divergent, labeled, unlabeled = [], [], [], [], []
    for item in substitutions:
        sub = make_sub(item)
        private.append(sub)
        if item.category == MutationCategory.REVERSION:
            reversions.append(sub)
            continue
        if item.category == MutationCategory.DIVERGENT:
            divergent.append(sub)
        if item.labels:
            labeled.append(make_labeled(substitution=sub, labels=item.labels))
        else:
            unlabeled.append(sub)
    return {
        'private_substitutions': tuple(private),
        'reversions': tuple(reversions),
        'reversion_substitutions': tuple(divergent),
        'labeled_substitutions': tuple(labeled),
        'unlabeled_substitutions': tuple(unlabeled),
    }


def _partition_deletions(ranges: Tuple[PrivateDeletionRange, ...]) -> Dict[str, tuple]:
    return {
        'private_deletions': ranges,
        'labeled_deletions': tuple(r for r in ranges if r.is_labeled),
        'unlabeled_deletions': tuple(r for r in ranges if not r.is_labeled),
        'reversion_deletions': tuple(r for r in ranges if r.category == MutationCategory.DIVERGENT),
    }


@dataclass(frozen=True)
class GeneWarning:
    """Non-fatal, gene-scoped problem reported alongside the results"""
    gene: str
    message: str

    def __str__(self) -> str:
        return f"{self.gene}: {self.message}"


@dataclass(frozen=True)
class PrivateAaMutationsReport:
    """
    Aminoacid private mutations for all genes of one query

    Attributes:
        genes: Gene name -> private mutations, genes that failed are omitted
        warnings: Gene-scoped warnings for omitted genes
    """
    genes: Dict[str, PrivateAminoacidMutations]
    warnings: Tuple[GeneWarning, ...] = ()

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def failed_genes(self) -> List[str]:
        return [w.gene for w in self.warnings]

    @property
    def total_private_substitutions(self) -> int:
        return sum(m.total_private_substitutions for m in self.genes.values())

    @property
    def total_private_deletions(self) -> int:
        return sum(m.total_private_deletions for m in self.genes.values())

    def __getitem__(self, gene: str) -> PrivateAminoacidMutations:
        return self.genes[gene]

    def __contains__(self, gene: str) -> bool:
        return gene in self.genes

    def to_dict(self) -> Dict[str, Any]:
        return {
            'genes': {gene: m.to_dict() for gene, m in self.genes.items()},
            'warnings': [{'gene': w.gene, 'message': w.message} for w in self.warnings],
        }
