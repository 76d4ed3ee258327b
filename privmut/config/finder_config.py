#!/usr/bin/env python3
"""
Private mutation finder configuration
"""

from dataclasses import dataclass

from ..utils.sequence_utils import DNA_BASES, UNKNOWN_AA


@dataclass(frozen=True)
class FinderConfig:
    """
    Finder behavior switches

    Attributes:
        detect_implicit_reversions: Report ancestral mutations the query does
            not carry (and has a definitive call for) as reversions to reference
        max_workers: Number of threads used to process genes of one query
        definitive_nucleotides: Query nucleotide states considered definitive calls
        unknown_aminoacid: Aminoacid state of codons without a definitive call
    """
    detect_implicit_reversions: bool = True
    max_workers: int = 1
    definitive_nucleotides: str = ''.join(sorted(DNA_BASES))
    unknown_aminoacid: str = UNKNOWN_AA

    def __post_init__(self):
        """Validate configuration parameters"""
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        if not self.definitive_nucleotides:
            raise ValueError("definitive_nucleotides cannot be empty")
        if len(self.unknown_aminoacid) != 1:
            raise ValueError(f"unknown_aminoacid must be a single character, got '{self.unknown_aminoacid}'")


DEFAULT_FINDER_CONFIG = FinderConfig()
