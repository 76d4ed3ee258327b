#!/usr/bin/env python3
"""
Configuration tests
"""

import json

import pytest

from privmut.config import (
    DEFAULT_FINDER_CONFIG,
    DatasetConfig,
    FinderConfig,
    get_example_dataset_config,
    load_dataset_config_by_name,
)

EXAMPLE_REF = "ATGGCTAAACCCGGGTTTACAGATCTGCATATGAACGTTTGGCAAGAAAGTCGCTAAGCT"


class TestExampleDataset:

    def test_load_example(self):
        config = load_dataset_config_by_name("example")

        assert config.name == "example"
        assert config.reference_name == "example_reference"
        assert config.get_reference_sequence() == EXAMPLE_REF
        assert len(config.reference_sequence) == 60
        assert config.gene_names() == ["ORF1", "S"]

    def test_translated_peptides(self):
        config = load_dataset_config_by_name("example")

        assert config.get_ref_peptide("ORF1") == "MAKPGFTDLH"
        assert config.get_ref_peptide("S") == "MNVWQESR"
        assert config.get_ref_peptide("ORF9") is None

    def test_gene_coordinates_are_zero_based(self):
        gene = load_dataset_config_by_name("example").gene_map["S"]

        assert gene.start == 30
        assert gene.end == 54
        assert gene.num_codons == 8

    def test_label_catalogs(self):
        config = load_dataset_config_by_name("example")

        assert config.nuc_substitution_labels.lookup(10, "T") == ("exampleLineage",)
        assert config.nuc_substitution_labels.lookup(37, "C") == ("lineageB", "lineageC")
        assert config.nuc_deletion_labels.lookup_deletion(42) == ("delLineage",)
        assert config.aa_substitution_labels.lookup("S", 2, "A") == ("lineageB", "lineageC")
        assert config.aa_substitution_labels.lookup("ORF1", 3, "L") == ("exampleLineage",)
        assert config.aa_deletion_labels.lookup_deletion("S", 4) == ("delLineage",)

    def test_lazy_example_is_cached(self):
        assert get_example_dataset_config() is get_example_dataset_config()

    def test_summary(self):
        summary = load_dataset_config_by_name("example").summary()

        assert "Name: example" in summary
        assert "Genes: 2" in summary
        assert "S (+): 31-54, 8 aa" in summary

    def test_unknown_dataset(self):
        with pytest.raises(ValueError, match="Unsupported dataset"):
            load_dataset_config_by_name("nonexistent")


class TestDatasetConfig:

    def test_requires_input(self):
        with pytest.raises(ValueError):
            DatasetConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DatasetConfig(config_file=str(tmp_path / "missing.json"))

    def test_from_dict(self):
        config = DatasetConfig(config_data={
            "name": "tiny",
            "reference": {"sequence": "atgaaaccctaa"},
            "genes": [{"name": "G", "start": 1, "end": 12}],
        })

        assert config.reference_name == "tiny"
        assert config.reference_sequence == "ATGAAACCCTAA"
        assert config.ref_peptides == {"G": "MKP*"}
        assert len(config.nuc_substitution_labels) == 0

    def test_explicit_peptides_override_translation(self):
        config = DatasetConfig(config_data={
            "reference": {"sequence": "ATGAAACCC"},
            "genes": [{"name": "G", "start": 1, "end": 9}],
            "ref_peptides": {"G": "mkq", "H": "MA"},
        })

        assert config.ref_peptides == {"G": "MKQ", "H": "MA"}

    def test_reverse_strand_gene(self):
        config = DatasetConfig(config_data={
            "reference": {"sequence": "ATGAAACCC"},
            "genes": [{"name": "R", "start": 1, "end": 9, "strand": "-"}],
        })

        assert config.get_ref_peptide("R") == "GFH"

    def test_invalid_reference(self):
        with pytest.raises(ValueError):
            DatasetConfig(config_data={"reference": {"sequence": "ACGT!!"}})
        with pytest.raises(ValueError):
            DatasetConfig(config_data={"reference": {"name": "no sequence"}})

    def test_gene_beyond_reference(self):
        with pytest.raises(ValueError, match="beyond reference length"):
            DatasetConfig(config_data={
                "reference": {"sequence": "ATGAAACCC"},
                "genes": [{"name": "G", "start": 1, "end": 12}],
            })

    def test_invalid_label_key(self):
        with pytest.raises(ValueError):
            DatasetConfig(config_data={
                "reference": {"sequence": "ATGAAACCC"},
                "nucMutLabelMap": {"not-a-key": ["x"]},
            })

    def test_fasta_and_gff3_relative_to_config_file(self, tmp_path):
        (tmp_path / "ref.fasta").write_text(">my_ref description\nATGAAACCC\nTTTGGGTAA\n")
        (tmp_path / "genes.gff3").write_text(
            "##gff-version 3\n"
            "my_ref\tsrc\tregion\t1\t18\t.\t+\t.\tID=region1\n"
            "my_ref\tsrc\tgene\t1\t9\t.\t+\t.\tID=gene-A;gene=A\n"
            "my_ref\tsrc\tgene\t10\t18\t.\t-\t.\tName=B\n"
        )
        config_file = tmp_path / "dataset.json"
        config_file.write_text(json.dumps({
            "name": "files",
            "reference": {"fasta": "ref.fasta"},
            "genes": {"gff3": "genes.gff3"},
            "aaMutLabelMap": {"A:2R": ["lineageR"]},
        }))

        config = DatasetConfig(config_file=str(config_file))

        assert config.reference_name == "my_ref"
        assert config.reference_sequence == "ATGAAACCCTTTGGGTAA"
        assert config.gene_names() == ["A", "B"]
        assert config.ref_peptides == {"A": "MKP", "B": "LPK"}
        assert config.aa_substitution_labels.lookup("A", 1, "R") == ("lineageR",)


class TestFinderConfig:

    def test_defaults(self):
        assert DEFAULT_FINDER_CONFIG.detect_implicit_reversions
        assert DEFAULT_FINDER_CONFIG.max_workers == 1
        assert DEFAULT_FINDER_CONFIG.definitive_nucleotides == "ACGT"
        assert DEFAULT_FINDER_CONFIG.unknown_aminoacid == "X"

    def test_validation(self):
        with pytest.raises(ValueError):
            FinderConfig(max_workers=0)
        with pytest.raises(ValueError):
            FinderConfig(definitive_nucleotides="")
        with pytest.raises(ValueError):
            FinderConfig(unknown_aminoacid="XX")
