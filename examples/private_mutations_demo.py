#!/usr/bin/env python3
"""
Private mutation finding demo

Shows how to classify the mutations of placed query sequences against the
mutations accumulated at their nearest tree node, using the bundled example
dataset
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from privmut import AncestralNode, QueryAnalysis, analyze_batch, find_private_mutations
from privmut.config import FinderConfig, get_example_dataset_config
from privmut.mutations import AaSub, NucDelRange, NucRange, NucSub


def demo_single_query():
    """Single query against one node"""
    print("=== Single query ===\n")

    dataset = get_example_dataset_config()
    print(dataset.summary())
    print()

    # Node carries C11T and T38C, query kept C11T, reverted 38 and gained G20C
    node = AncestralNode.from_path(
        "node_1",
        nuc_path=[NucSub.from_str("C11T"), NucSub.from_str("T38C")],
        aa_path=[AaSub.from_str("ORF1:P4L")],
    )
    query = QueryAnalysis(
        seq_name="query_1",
        substitutions=[NucSub.from_str("C11T"), NucSub.from_str("C20G")],
        deletions=[NucDelRange.from_str("43-44")],
        aa_substitutions=[AaSub.from_str("ORF1:P4L")],
    )

    result = find_private_mutations(query, node, dataset)
    nuc = result.nuc

    print(f"Query: {result.seq_name} (nearest node: {result.node_name}), status: {result.status.value}")
    print(f"  Private substitutions: {', '.join(str(s) for s in nuc.private_substitutions)}")
    print(f"  Reversions: {', '.join(str(s) for s in nuc.reversions) or '-'}")
    print(f"  Labeled: {'; '.join(str(s) for s in nuc.labeled_substitutions) or '-'}")
    print(f"  Unlabeled: {', '.join(str(s) for s in nuc.unlabeled_substitutions) or '-'}")
    for deletion in nuc.private_deletions:
        labels = ','.join(deletion.labels) or 'unlabeled'
        print(f"  Deletion {deletion}: {labels}")

    for gene, mutations in result.aa.genes.items():
        if mutations.is_empty():
            continue
        print(f"  {gene}: {', '.join(str(s) for s in mutations.private_substitutions)}")


def demo_batch():
    """Batch with a failing query and a gene-scoped warning"""
    print("\n=== Batch analysis ===\n")

    node = AncestralNode.from_path("node_2", nuc_path=[NucSub.from_str("T38C")])
    items = [
        (QueryAnalysis(seq_name="reverted"), node),
        (QueryAnalysis(seq_name="partial", missing=[NucRange(30, 60)]), node),
        (QueryAnalysis(seq_name="unknown_gene", aa_substitutions=[AaSub("ORF9", 0, "M", "K")]), node),
        (QueryAnalysis(seq_name="outside_reference", substitutions=[NucSub(99, "A", "G")]), node),
    ]

    batch = analyze_batch(items, dataset='example', n_jobs=2, verbose=True)

    print("\nPer-query table:")
    print(batch.to_df()[['seq_name', 'status', 'total_reversions', 'failed_genes', 'error']])


def demo_config():
    """Finder configuration switches"""
    print("\n=== Finder configuration ===\n")

    node = AncestralNode.from_path("node_3", nuc_path=[NucSub.from_str("T38C")])
    items = [(QueryAnalysis(seq_name="query"), node)]

    for detect in (True, False):
        config = FinderConfig(detect_implicit_reversions=detect)
        batch = analyze_batch(items, config=config)
        print(f"detect_implicit_reversions={detect}: "
              f"{batch.results[0].nuc.total_reversions} reversions")


if __name__ == "__main__":
    demo_single_query()
    demo_batch()
    demo_config()
