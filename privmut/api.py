#!/usr/bin/env python3
"""
privmut Main API Module

Provides simplified high-level interface for private mutation analysis
"""

from typing import List, Optional, Dict, Any, Union, Tuple, Sequence
from dataclasses import dataclass, field
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
import time
import pandas as pd

from .config.dataset_config import DatasetConfig
from .config.finder_config import FinderConfig
from .errors import PrivateMutationsError
from .mutations.ancestral_map import AncestralNode
from .mutations.query import QueryAnalysis
from .private.aa_finder import find_private_aa_mutations
from .private.nuc_finder import find_private_nuc_mutations
from .private.private_data import GeneWarning, PrivateAaMutationsReport, PrivateNucleotideMutations


class Outcome(Enum):
    """Outcome of one query's private mutation analysis"""
    OK = "ok"              # All genes processed
    WARNING = "warning"    # Some genes omitted, results otherwise complete
    FATAL = "fatal"        # Query aborted, no results


@dataclass(frozen=True)
class QueryPrivateMutations:
    """
    Private mutations of a single query

    Attributes:
        index: Position of the query in the batch
        seq_name: Query name
        node_name: Name of the nearest tree node
        status: Outcome of the analysis
        nuc: Nucleotide private mutations, None if the query failed
        aa: Aminoacid private mutations, None if the query failed
        error: Error message of a failed query
    """
    index: int
    seq_name: str
    node_name: str
    status: Outcome
    nuc: Optional[PrivateNucleotideMutations] = None
    aa: Optional[PrivateAaMutationsReport] = None
    error: Optional[str] = None

    @property
    def warnings(self) -> Tuple[GeneWarning, ...]:
        if self.aa is None:
            return ()
        return self.aa.warnings

    def is_successful(self) -> bool:
        return self.status != Outcome.FATAL


@dataclass
class BatchResult:
    """
    Private mutation results of a batch of queries

    Attributes:
        results: One result per input query, in input order
        processing_time: Processing time in seconds
        dataset_used: Dataset name used
    """
    results: List[QueryPrivateMutations]
    processing_time: float = 0.0
    dataset_used: str = "example"
    summary_stats: Dict[str, Any] = field(default_factory=dict)

    @property
    def num_queries(self) -> int:
        return len(self.results)

    @property
    def num_failed(self) -> int:
        return len([r for r in self.results if r.status == Outcome.FATAL])

    @property
    def num_with_warnings(self) -> int:
        return len([r for r in self.results if r.status == Outcome.WARNING])

    @property
    def total_private_substitutions(self) -> int:
        return sum(r.nuc.total_private_substitutions for r in self.results if r.nuc is not None)

    def to_df(self) -> pd.DataFrame:
        """Convert results to pandas DataFrame

        Returns:
            pd.DataFrame: One row per query with columns:
                - seq_name, node_name, status, error
                - private nucleotide counters (reversions, labeled, unlabeled, ...)
                - private_substitutions: Comma-separated private substitutions
                - labeled_substitutions: Comma-separated "mutation|label,label" entries
                - private_deletions: Comma-separated private deletion ranges
                - aa_private_substitutions: Comma-separated private aminoacid substitutions
                - failed_genes: Comma-separated genes omitted with a warning
        """
        rows = []
        for r in self.results:
            row = {
                'seq_name': r.seq_name,
                'node_name': r.node_name,
                'status': r.status.value,
                'error': r.error or '',
            }
            if r.nuc is not None:
                row.update({
                    'total_private_substitutions': r.nuc.total_private_substitutions,
                    'total_reversions': r.nuc.total_reversions,
                    'total_reversion_substitutions': r.nuc.total_reversion_substitutions,
                    'total_labeled_substitutions': r.nuc.total_labeled_substitutions,
                    'total_unlabeled_substitutions': r.nuc.total_unlabeled_substitutions,
                    'total_private_deletions': r.nuc.total_private_deletions,
                    'private_substitutions': ','.join(str(s) for s in r.nuc.private_substitutions),
                    'labeled_substitutions': ';'.join(str(s) for s in r.nuc.labeled_substitutions),
                    'private_deletions': ','.join(str(d) for d in r.nuc.private_deletions),
                })
            if r.aa is not None:
                row['aa_private_substitutions'] = ','.join(
                    str(s) for m in r.aa.genes.values() for s in m.private_substitutions
                )
                row['failed_genes'] = ','.join(r.aa.failed_genes)
            rows.append(row)
        return pd.DataFrame(rows)

    def print_summary(self):
        """Print analysis results summary"""
        print(f"Private Mutation Analysis Results Summary")
        print(f"=" * 40)
        print(f"Dataset: {self.dataset_used}")
        print(f"Processing time: {self.processing_time:.2f} seconds")
        print(f"")
        print(f"Query statistics:")
        print(f"  Total queries: {self.num_queries}")
        print(f"  Failed queries: {self.num_failed}")
        print(f"  Queries with gene warnings: {self.num_with_warnings}")
        print(f"")
        print(f"Private mutation statistics:")
        for key, value in self.summary_stats.items():
            if isinstance(value, float):
                print(f"  {key}: {value:.2f}")
            else:
                print(f"  {key}: {value}")


def find_private_mutations(
    query: QueryAnalysis,
    node: AncestralNode,
    dataset: DatasetConfig,
    config: Optional[FinderConfig] = None,
    index: int = 0,
) -> QueryPrivateMutations:
    """
    Find nucleotide and aminoacid private mutations of one query

    Args:
        query: Aligned and translated query
        node: Nearest tree node with its ancestral mutation maps
        dataset: Dataset configuration (reference, genes, peptides, label catalogs)
        config: Finder configuration
        index: Position of the query in its batch

    Returns:
        QueryPrivateMutations: Result with OK or WARNING status

    Raises:
        PrivateMutationsError: Unrecoverable data error for this query
    """
    nuc = find_private_nuc_mutations(
        node.nuc_mutations,
        query,
        dataset.reference_sequence,
        dataset.nuc_substitution_labels,
        dataset.nuc_deletion_labels,
        config,
    )
    aa = find_private_aa_mutations(
        node.aa_mutations,
        query,
        dataset.ref_peptides,
        dataset.gene_map,
        dataset.aa_substitution_labels,
        dataset.aa_deletion_labels,
        config,
    )
    return QueryPrivateMutations(
        index=index,
        seq_name=query.seq_name,
        node_name=node.name,
        status=Outcome.WARNING if aa.has_warnings else Outcome.OK,
        nuc=nuc,
        aa=aa,
    )


def analyze_batch(
    items: Sequence[Tuple[QueryAnalysis, AncestralNode]],
    dataset: Union[str, DatasetConfig] = 'example',
    config: Optional[FinderConfig] = None,
    n_jobs: int = 1,
    verbose: bool = False
) -> BatchResult:
    """
    Find private mutations for a batch of placed queries

    Queries are independent; a query failing with an unrecoverable data error
    is reported with FATAL status and does not stop the others.

    Args:
        items: (query, nearest node) pairs
        dataset: Dataset name of a bundled configuration or DatasetConfig object
        config: Finder configuration
        n_jobs: Number of worker threads, one task per query
        verbose: Whether to show detailed information

    Returns:
        BatchResult: Results in input order
    """
    start_time = time.time()

    if n_jobs < 1:
        raise ValueError(f"n_jobs must be at least 1, got {n_jobs}")

    if isinstance(dataset, str):
        from .config.dataset_config import load_dataset_config_by_name
        dataset_config = load_dataset_config_by_name(dataset)
    else:
        dataset_config = dataset

    if verbose:
        print(f"Starting private mutation analysis of {len(items)} queries...")
        print(f"Using dataset: {dataset_config.name}")

    def process(indexed_item: Tuple[int, Tuple[QueryAnalysis, AncestralNode]]) -> QueryPrivateMutations:
        index, (query, node) = indexed_item
        try:
            return find_private_mutations(query, node, dataset_config, config, index=index)
        except PrivateMutationsError as e:
            return QueryPrivateMutations(
                index=index,
                seq_name=query.seq_name,
                node_name=node.name,
                status=Outcome.FATAL,
                error=str(e),
            )

    indexed_items = list(enumerate(items))
    if n_jobs > 1 and len(indexed_items) > 1:
        with ThreadPoolExecutor(max_workers=n_jobs) as executor:
            results = list(executor.map(process, indexed_items))
    else:
        results = [process(item) for item in indexed_items]

    if verbose:
        for r in results:
            if r.status == Outcome.FATAL:
                print(f"⚠️  Query {r.index + 1} ({r.seq_name}) failed: {r.error}")

    processing_time = time.time() - start_time
    batch = BatchResult(
        results=results,
        processing_time=processing_time,
        dataset_used=dataset_config.name,
        summary_stats=_generate_summary_stats(results),
    )

    if verbose:
        print(f"Analysis completed, time taken: {processing_time:.2f} seconds")
        batch.print_summary()

    return batch


def _generate_summary_stats(results: List[QueryPrivateMutations]) -> Dict[str, Any]:
    """Generate summary statistics"""
    successful = [r for r in results if r.nuc is not None]

    stats = {
        'total_queries': len(results),
        'failed_queries': len(results) - len(successful),
        'queries_with_warnings': len([r for r in results if r.status == Outcome.WARNING]),
    }

    if successful:
        n = len(successful)
        stats.update({
            'avg_private_substitutions': sum(r.nuc.total_private_substitutions for r in successful) / n,
            'avg_reversions': sum(r.nuc.total_reversions for r in successful) / n,
            'avg_labeled_substitutions': sum(r.nuc.total_labeled_substitutions for r in successful) / n,
            'avg_unlabeled_substitutions': sum(r.nuc.total_unlabeled_substitutions for r in successful) / n,
            'avg_private_deletions': sum(r.nuc.total_private_deletions for r in successful) / n,
            'max_private_substitutions': max(r.nuc.total_private_substitutions for r in successful),
        })

    gene_warning_counts: Dict[str, int] = {}
    for r in results:
        for w in r.warnings:
            gene_warning_counts[w.gene] = gene_warning_counts.get(w.gene, 0) + 1
    stats['gene_warning_distribution'] = gene_warning_counts

    return stats
