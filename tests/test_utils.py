#!/usr/bin/env python3
"""
Utility function tests
"""

import gzip

import pytest

from privmut.private import MutationCategory, PositionMask, classify_state
from privmut.utils import Gene, GeneMap, build_ref_peptides, open_text_file, read_fasta_reference, translate_gene
from privmut.utils.sequence_utils import is_definitive_state, is_valid_dna


class TestSequenceUtils:

    def test_is_valid_dna(self):
        assert is_valid_dna("ACGT")
        assert is_valid_dna("acgt")
        assert is_valid_dna("")
        assert not is_valid_dna("ACGN")
        assert is_valid_dna("ACGN", allow_ambiguous=True)
        assert not is_valid_dna("ACGX", allow_ambiguous=True)

    def test_is_definitive_state(self):
        assert is_definitive_state("A", "ACGT")
        assert not is_definitive_state("N", "ACGT")
        assert not is_definitive_state("-", "ACGT")
        assert not is_definitive_state("AC", "ACGT")

    def test_translate_forward(self):
        assert translate_gene("CCATGAAACCCTAA", Gene("G", 2, 14)) == "MKP*"

    def test_translate_reverse_strand(self):
        assert translate_gene("ATGAAACCC", Gene("R", 0, 9, strand="-")) == "GFH"

    def test_translate_drops_partial_codon(self):
        assert translate_gene("ATGAAACC", Gene("G", 0, 8)) == "MK"

    def test_translate_skips_frame_offset(self):
        assert translate_gene("CATGAAACCC", Gene("G", 0, 10, frame=1)) == "MKP"

    def test_translate_reverse_strand_frame_offset(self):
        # Frame offset counts from the gene's 5' end, the last reference base
        assert translate_gene("ATGAAACCCA", Gene("R", 0, 10, strand="-", frame=1)) == "GFH"

    def test_translate_gene_beyond_reference(self):
        with pytest.raises(ValueError):
            translate_gene("ATG", Gene("G", 0, 6))

    def test_build_ref_peptides(self):
        gene_map = GeneMap([Gene("A", 0, 6), Gene("B", 6, 12)])
        ref = "ATGAAACCCTAA"

        assert build_ref_peptides(ref, gene_map) == {"A": "MK", "B": "P*"}
        assert build_ref_peptides(ref, gene_map, genes=["B"]) == {"B": "P*"}


class TestGenes:

    def test_gene_validation(self):
        with pytest.raises(ValueError):
            Gene("", 0, 3)
        with pytest.raises(ValueError):
            Gene("G", 5, 5)
        with pytest.raises(ValueError):
            Gene("G", 0, 3, strand=".")
        with pytest.raises(ValueError):
            Gene("G", 0, 1, frame=1)
        with pytest.raises(ValueError):
            Gene("G", 0, 3, frame=3)

    def test_codon_range_forward(self):
        gene = Gene("S", 30, 54)

        assert gene.codon_range_covered(0, 36) == (0, 2)
        assert gene.codon_range_covered(31, 54) == (1, 8)
        assert gene.codon_range_covered(0, 100) == (0, 8)
        assert gene.codon_range_covered(0, 30) == (0, 0)
        assert gene.codon_range_covered(31, 33) == (0, 0)

    def test_codon_range_reverse(self):
        gene = Gene("R", 0, 9, strand="-")

        # Nucleotides 0-3 hold the last codon of a reverse strand gene
        assert gene.codon_range_covered(0, 4) == (2, 3)
        assert gene.codon_range_covered(6, 9) == (0, 1)

    def test_codon_range_with_frame_offset(self):
        gene = Gene("G", 0, 10, frame=1)

        assert gene.num_codons == 3
        assert gene.codon_range_covered(0, 7) == (0, 2)
        assert gene.codon_range_covered(4, 10) == (1, 3)

        reverse = Gene("R", 0, 10, strand="-", frame=1)
        assert reverse.codon_range_covered(0, 4) == (2, 3)
        assert reverse.codon_range_covered(9, 10) == (0, 0)

    def test_gene_map(self):
        gene_map = GeneMap.from_records([
            {"name": "ORF1", "start": 1, "end": 30},
            {"name": "S", "start": 31, "end": 54, "strand": "+"},
        ])

        assert gene_map.names() == ["ORF1", "S"]
        assert gene_map["ORF1"] == Gene("ORF1", 0, 30)
        assert "S" in gene_map
        assert gene_map.get("N") is None
        assert len(gene_map) == 2

    def test_frame_from_records_and_gff3_phase(self, tmp_path):
        gene_map = GeneMap.from_records([{"name": "G", "start": 1, "end": 10, "frame": 1}])
        assert gene_map["G"].frame == 1

        path = tmp_path / "phase.gff3"
        path.write_text("chr\tsrc\tgene\t1\t11\t.\t+\t2\tName=P\n")
        gene = GeneMap.from_gff3(str(path))["P"]
        assert gene.frame == 2
        assert gene.num_codons == 3

    def test_duplicate_gene(self):
        with pytest.raises(ValueError, match="Duplicate"):
            GeneMap([Gene("S", 0, 3), Gene("S", 3, 6)])

    def test_gff3_invalid_columns(self, tmp_path):
        path = tmp_path / "bad.gff3"
        path.write_text("chr\tsrc\tgene\t1\t9\n")

        with pytest.raises(ValueError, match="line 1"):
            GeneMap.from_gff3(str(path))

    def test_gff3_stops_at_fasta_section(self, tmp_path):
        path = tmp_path / "genes.gff3"
        path.write_text(
            "chr\tsrc\tgene\t1\t9\t.\t+\t0\tgene_name=A\n"
            "chr\tsrc\tCDS\t1\t9\t.\t+\t0\tID=cds-A\n"
            "##FASTA\n"
            ">chr\n"
            "ATGAAACCC\n"
        )

        gene_map = GeneMap.from_gff3(str(path))
        assert gene_map.names() == ["A"]


class TestMisc:

    def test_open_gzipped_text(self, tmp_path):
        path = tmp_path / "ref.fasta.gz"
        with gzip.open(path, "wt") as f:
            f.write(">ref\nacgt\n")

        with open_text_file(path) as handle:
            assert handle.read().startswith(">ref")

        assert read_fasta_reference(path) == ("ref", "ACGT")

    def test_fasta_must_have_one_record(self, tmp_path):
        path = tmp_path / "two.fasta"
        path.write_text(">a\nACGT\n>b\nACGT\n")

        with pytest.raises(ValueError, match="exactly one"):
            read_fasta_reference(path)


class TestClassification:

    @pytest.mark.parametrize("ref, ancestral, query, expected", [
        ("A", None, "A", MutationCategory.EXPLAINED),
        ("A", None, "T", MutationCategory.NOVEL),
        ("A", "A", "T", MutationCategory.NOVEL),
        ("A", "G", "G", MutationCategory.EXPLAINED),
        ("A", "G", "A", MutationCategory.REVERSION),
        ("A", "G", "T", MutationCategory.DIVERGENT),
        ("A", "-", "A", MutationCategory.REVERSION),
        ("A", "G", "-", MutationCategory.DIVERGENT),
    ])
    def test_classify_state(self, ref, ancestral, query, expected):
        assert classify_state(ref, ancestral, query) == expected

    def test_position_mask_merges_ranges(self):
        mask = PositionMask([(7, 10), (5, 8), (20, 22), (3, 3)])

        assert 4 not in mask
        assert 5 in mask
        assert 9 in mask
        assert 10 not in mask
        assert 21 in mask
        assert len(mask) == 7

    def test_position_mask_outside_of(self):
        mask = PositionMask.outside_of(3, 8, 12, [(5, 6)])

        assert 2 in mask
        assert 3 not in mask
        assert 5 in mask
        assert 7 not in mask
        assert 8 in mask
        assert 11 in mask

    def test_empty_mask(self):
        mask = PositionMask()

        assert 0 not in mask
        assert len(mask) == 0
