#!/usr/bin/env python3
"""
Sequence processing utility functions

Alphabets, reference validation and reference peptide translation
"""

from typing import Dict, Iterable, Optional
import warnings

from Bio.Seq import Seq
from Bio import BiopythonWarning

from .genes import Gene, GeneMap


# Sequence related constants
DNA_BASES = set('ACGT')
DNA_BASES_AMBIGUOUS = set('ACGTRYSWKMBDHVN')
AMINOACIDS = set('ACDEFGHIKLMNPQRSTVWY*')
UNKNOWN_AA = 'X'


def is_valid_dna(seq: str, allow_ambiguous: bool = False) -> bool:
    """
    Validate if sequence is valid DNA

    Args:
        seq: Sequence to validate
        allow_ambiguous: Whether to allow ambiguous bases

    Returns:
        bool: Whether sequence is valid DNA
    """
    if not seq:
        return True

    seq = seq.upper()
    allowed_bases = DNA_BASES_AMBIGUOUS if allow_ambiguous else DNA_BASES

    return all(base in allowed_bases for base in seq)


def is_definitive_state(state: str, alphabet: Iterable[str]) -> bool:
    """Whether a single-character state is a definitive call in the alphabet"""
    return len(state) == 1 and state in alphabet


def translate_gene(ref_seq: str, gene: Gene) -> str:
    """
    Translate the reference region of a gene into its peptide

    Bases before the gene's reading frame and trailing bases of an
    incomplete last codon are dropped. Stop codons are kept as '*'.

    Args:
        ref_seq: Full reference nucleotide sequence
        gene: Gene annotation

    Returns:
        str: Reference peptide
    """
    if gene.end > len(ref_seq):
        raise ValueError(f"Gene '{gene.name}' ends at {gene.end}, beyond reference length {len(ref_seq)}")

    nuc = Seq(ref_seq[gene.coding_start:gene.coding_end])
    if gene.strand == '-':
        nuc = nuc.reverse_complement()
    nuc = nuc[:len(nuc) - len(nuc) % 3]

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", BiopythonWarning)
        return str(nuc.translate())


def build_ref_peptides(ref_seq: str, gene_map: GeneMap,
                       genes: Optional[Iterable[str]] = None) -> Dict[str, str]:
    """
    Translate reference peptides for genes of the gene map

    Args:
        ref_seq: Full reference nucleotide sequence
        gene_map: Gene map
        genes: Restrict translation to these gene names

    Returns:
        Dict[str, str]: Gene name -> reference peptide
    """
    selected = set(genes) if genes is not None else None
    peptides = {}
    for gene in gene_map:
        if selected is not None and gene.name not in selected:
            continue
        peptides[gene.name] = translate_gene(ref_seq, gene)
    return peptides
