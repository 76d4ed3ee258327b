#!/usr/bin/env python3
"""
Aminoacid private mutation finder

Repeats the nucleotide classification independently for every gene, in codon
space, using the gene's reference peptide as the reference state. A gene
without a reference peptide is reported as a warning and omitted; all other
genes are still processed.
"""

from typing import Dict, List, Mapping, Optional
from concurrent.futures import ThreadPoolExecutor
import warnings

from ..config.finder_config import FinderConfig, DEFAULT_FINDER_CONFIG
from ..errors import (
    InvalidAncestralMapError,
    InvalidLabelCatalogError,
    NonFatalError,
    PrivateMutationsError,
    PrivateMutationsWarning,
    RefPeptideNotFoundError,
)
from ..mutations.ancestral_map import AaAncestralMutationMap
from ..mutations.labels import AaLabelCatalog
from ..mutations.query import QueryAnalysis
from ..utils.genes import GeneMap
from ..utils.sequence_utils import AMINOACIDS, is_definitive_state
from .classify import PositionMask, classify_mutations
from .private_data import GeneWarning, PrivateAaMutationsReport, PrivateAminoacidMutations


def find_private_aa_mutations_for_gene(
    gene: str,
    node_mut_map: AaAncestralMutationMap,
    query: QueryAnalysis,
    ref_peptides: Mapping[str, str],
    gene_map: GeneMap,
    substitution_labels: AaLabelCatalog,
    deletion_labels: AaLabelCatalog,
    config: FinderConfig = DEFAULT_FINDER_CONFIG,
) -> PrivateAminoacidMutations:
    """
    Find private aminoacid mutations of a query in one gene

    Raises:
        RefPeptideNotFoundError: No reference peptide for the gene (non-fatal)
        InvalidAncestralMapError: Ancestral codon beyond the reference peptide
        PrivateMutationsError: Query codon beyond the reference peptide
    """
    ref_peptide = ref_peptides.get(gene)
    if ref_peptide is None:
        raise RefPeptideNotFoundError(gene)

    num_codons = len(ref_peptide)
    gene_ancestral = node_mut_map.get_gene(gene)
    if gene_ancestral.max_position >= num_codons:
        raise InvalidAncestralMapError(
            f"Ancestral aminoacid mutation at codon {gene_ancestral.max_position + 1} "
            f"is outside of gene '{gene}' (length {num_codons})"
        )

    substitutions = query.aa_substitutions_for(gene)
    deletions = query.aa_deletions_for(gene)
    for mutation in substitutions + deletions:
        if mutation.pos >= num_codons:
            raise PrivateMutationsError(
                f"Query '{query.seq_name}': aminoacid mutation {mutation} is outside of gene '{gene}' (length {num_codons})"
            )

    aligned_begin, aligned_end = query.aa_alignment_range_for(gene, gene_map, num_codons)
    unknown = [(r.begin, r.end) for r in query.unknown_aa_ranges.get(gene, ())]
    excluded = PositionMask.outside_of(aligned_begin, aligned_end, num_codons, unknown)

    definitive = AMINOACIDS - {config.unknown_aminoacid}

    classified = classify_mutations(
        substitutions=[(s.pos, s.qry_aa) for s in substitutions if not s.is_deletion],
        deleted_positions=[d.pos for d in deletions] + [s.pos for s in substitutions if s.is_deletion],
        ancestral_map=gene_ancestral,
        ref_state_at=lambda pos: ref_peptide[pos],
        excluded=excluded,
        is_definitive=lambda state: is_definitive_state(state, definitive),
        substitution_labels=lambda pos, state: substitution_labels.lookup(gene, pos, state),
        deletion_labels=lambda pos: deletion_labels.lookup_deletion(gene, pos),
        detect_implicit_reversions=config.detect_implicit_reversions,
    )

    return PrivateAminoacidMutations.from_classified(gene, classified.substitutions, classified.deletions)


def find_private_aa_mutations(
    node_mut_map: AaAncestralMutationMap,
    query: QueryAnalysis,
    ref_peptides: Mapping[str, str],
    gene_map: GeneMap,
    substitution_labels: Optional[AaLabelCatalog] = None,
    deletion_labels: Optional[AaLabelCatalog] = None,
    config: Optional[FinderConfig] = None,
) -> PrivateAaMutationsReport:
    """
    Find private aminoacid mutations of a query in all genes

    Args:
        node_mut_map: Per-gene ancestral aminoacid states at the query's nearest node
        query: Aligned and translated query
        ref_peptides: Gene name -> reference peptide
        gene_map: Gene map
        substitution_labels: Label catalog for aminoacid substitutions
        deletion_labels: Label catalog for aminoacid deletions
        config: Finder configuration

    Returns:
        PrivateAaMutationsReport: Per-gene results and warnings for omitted genes

    Raises:
        InvalidLabelCatalogError: A label catalog references a gene missing from the gene map
        InvalidAncestralMapError: Ancestral codon beyond a reference peptide
    """
    config = config or DEFAULT_FINDER_CONFIG
    substitution_labels = substitution_labels if substitution_labels is not None else AaLabelCatalog()
    deletion_labels = deletion_labels if deletion_labels is not None else AaLabelCatalog()

    for catalog in (substitution_labels, deletion_labels):
        unknown_genes = [gene for gene in catalog.genes() if gene not in gene_map]
        if unknown_genes:
            raise InvalidLabelCatalogError(
                f"Aminoacid label catalog references genes not present in the gene map: {', '.join(unknown_genes)}"
            )

    genes = _genes_to_process(gene_map, query, node_mut_map)

    def process(gene: str):
        try:
            return find_private_aa_mutations_for_gene(
                gene, node_mut_map, query, ref_peptides, gene_map,
                substitution_labels, deletion_labels, config,
            )
        except NonFatalError as e:
            return GeneWarning(gene=gene, message=str(e))

    if config.max_workers > 1 and len(genes) > 1:
        with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
            outcomes = list(executor.map(process, genes))
    else:
        outcomes = [process(gene) for gene in genes]

    results: Dict[str, PrivateAminoacidMutations] = {}
    gene_warnings: List[GeneWarning] = []
    for gene, outcome in zip(genes, outcomes):
        if isinstance(outcome, GeneWarning):
            warnings.warn(str(outcome), PrivateMutationsWarning, stacklevel=2)
            gene_warnings.append(outcome)
        else:
            results[gene] = outcome

    return PrivateAaMutationsReport(genes=results, warnings=tuple(gene_warnings))


def _genes_to_process(gene_map: GeneMap, query: QueryAnalysis, node_mut_map: AaAncestralMutationMap) -> List[str]:
    """Gene map order, then remaining genes named by the query or the ancestor"""
    genes = gene_map.names()
    known = set(genes)
    extra = {gene for gene in query.genes() + node_mut_map.genes() if gene not in known}
    return genes + sorted(extra)
