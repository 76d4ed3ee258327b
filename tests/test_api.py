#!/usr/bin/env python3
"""
privmut main API tests
"""

import pandas as pd
import pytest

from privmut import (
    AncestralMutationMap,
    AncestralNode,
    Outcome,
    QueryAnalysis,
    analyze_batch,
    find_private_mutations,
)
from privmut.api import BatchResult, QueryPrivateMutations
from privmut.config import FinderConfig, get_example_dataset_config
from privmut.errors import InvalidAncestralMapError, PrivateMutationsWarning
from privmut.mutations import AaDel, AaSub, NucDelRange, NucSub


def labeled_query(name="query_1"):
    return QueryAnalysis(
        seq_name=name,
        substitutions=[NucSub(10, "C", "T"), NucSub(19, "C", "G")],
        deletions=[NucDelRange(42, 44)],
        aa_substitutions=[AaSub("ORF1", 3, "P", "L")],
        aa_deletions=[AaDel("S", 4, "Q")],
    )


class TestFindPrivateMutations:

    def test_labeled_mutations_from_example_dataset(self):
        dataset = get_example_dataset_config()
        result = find_private_mutations(labeled_query(), AncestralNode(name="root"), dataset)

        assert result.status == Outcome.OK
        assert result.is_successful()
        assert result.seq_name == "query_1"
        assert result.node_name == "root"

        nuc = result.nuc
        assert nuc.labeled_substitutions[0].substitution == NucSub(10, "C", "T")
        assert nuc.labeled_substitutions[0].labels == ("exampleLineage",)
        assert nuc.unlabeled_substitutions == (NucSub(19, "C", "G"),)
        assert [(d.begin, d.end) for d in nuc.labeled_deletions] == [(42, 44)]

        orf1 = result.aa["ORF1"]
        assert orf1.labeled_substitutions[0].labels == ("exampleLineage",)
        assert result.aa["S"].labeled_deletions[0].labels == ("delLineage",)
        assert result.warnings == ()

    def test_reversion_at_node(self):
        dataset = get_example_dataset_config()
        node = AncestralNode.from_path("node_1", nuc_path=[NucSub(37, "T", "C")])
        result = find_private_mutations(QueryAnalysis(seq_name="q"), node, dataset)

        assert result.nuc.reversions == (NucSub(37, "C", "T"),)

    def test_invalid_ancestral_map_raises(self):
        dataset = get_example_dataset_config()
        node = AncestralNode(name="bad", nuc_mutations=AncestralMutationMap({60: "G"}))

        with pytest.raises(InvalidAncestralMapError):
            find_private_mutations(QueryAnalysis(), node, dataset)

    def test_missing_peptide_gives_warning_status(self):
        dataset = get_example_dataset_config()
        query = QueryAnalysis(seq_name="q", aa_substitutions=[AaSub("ORF9", 0, "M", "K")])

        with pytest.warns(PrivateMutationsWarning):
            result = find_private_mutations(query, AncestralNode(), dataset)

        assert result.status == Outcome.WARNING
        assert result.is_successful()
        assert [w.gene for w in result.warnings] == ["ORF9"]


class TestAnalyzeBatch:

    def make_items(self):
        return [
            (labeled_query("q1"), AncestralNode(name="root")),
            (QueryAnalysis(seq_name="q2"), AncestralNode(name="bad", nuc_mutations=AncestralMutationMap({60: "G"}))),
            (QueryAnalysis(seq_name="q3", aa_substitutions=[AaSub("ORF9", 0, "M", "K")]), AncestralNode(name="root")),
            (QueryAnalysis(seq_name="q4"), AncestralNode.from_path("n4", nuc_path=[NucSub(37, "T", "C")])),
        ]

    def run(self, **kwargs):
        with pytest.warns(PrivateMutationsWarning):
            return analyze_batch(self.make_items(), **kwargs)

    def test_outcomes_in_input_order(self):
        batch = self.run()

        assert isinstance(batch, BatchResult)
        assert [r.seq_name for r in batch.results] == ["q1", "q2", "q3", "q4"]
        assert [r.index for r in batch.results] == [0, 1, 2, 3]
        assert [r.status for r in batch.results] == [
            Outcome.OK, Outcome.FATAL, Outcome.WARNING, Outcome.OK,
        ]
        assert batch.num_queries == 4
        assert batch.num_failed == 1
        assert batch.num_with_warnings == 1
        assert batch.dataset_used == "example"

    def test_fatal_query_has_error_and_no_results(self):
        failed = self.run().results[1]

        assert isinstance(failed, QueryPrivateMutations)
        assert not failed.is_successful()
        assert failed.nuc is None
        assert failed.aa is None
        assert failed.warnings == ()
        assert failed.error

    def test_summary_stats(self):
        stats = self.run().summary_stats

        assert stats['total_queries'] == 4
        assert stats['failed_queries'] == 1
        assert stats['queries_with_warnings'] == 1
        assert stats['max_private_substitutions'] == 2
        assert stats['gene_warning_distribution'] == {"ORF9": 1}

    def test_total_private_substitutions(self):
        assert self.run().total_private_substitutions == 3

    def test_threaded_batch_matches_sequential(self):
        sequential = self.run()
        threaded = self.run(n_jobs=3)

        assert sequential.results == threaded.results

    def test_to_df(self):
        df = self.run().to_df()

        assert isinstance(df, pd.DataFrame)
        assert len(df) == 4
        assert list(df['seq_name']) == ["q1", "q2", "q3", "q4"]
        assert list(df['status']) == ["ok", "fatal", "warning", "ok"]
        assert df.loc[0, 'private_substitutions'] == "C11T,C20G"
        assert df.loc[0, 'labeled_substitutions'] == "C11T|exampleLineage"
        assert df.loc[2, 'failed_genes'] == "ORF9"
        assert df.loc[3, 'total_reversions'] == 1

    def test_dataset_object_and_config(self):
        items = [(QueryAnalysis(seq_name="q"), AncestralNode.from_path("n", nuc_path=[NucSub(37, "T", "C")]))]
        batch = analyze_batch(
            items,
            dataset=get_example_dataset_config(),
            config=FinderConfig(detect_implicit_reversions=False),
        )

        assert batch.results[0].nuc.is_empty()

    def test_invalid_n_jobs(self):
        with pytest.raises(ValueError):
            analyze_batch([], n_jobs=0)

    def test_unknown_dataset(self):
        with pytest.raises(ValueError):
            analyze_batch([], dataset="nonexistent")

    def test_verbose_prints_summary(self, capsys):
        self.run(verbose=True)

        out = capsys.readouterr().out
        assert "Private Mutation Analysis Results Summary" in out
        assert "Failed queries: 1" in out
