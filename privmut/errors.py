#!/usr/bin/env python3
"""
Private mutation error types

Errors are split in two families:
- NonFatalError: scoped to a single gene, contained by the amino-acid finder
- everything else: data/programmer errors that abort the current query
"""


class PrivateMutationsError(Exception):
    """Base class for all private mutation errors"""


class NonFatalError(PrivateMutationsError):
    """Marker for errors that must not abort the whole query"""


class RefPeptideNotFoundError(NonFatalError):
    """Reference peptide is missing for a gene named in the query results"""

    def __init__(self, gene: str):
        self.gene = gene
        super().__init__(
            f"When searching for private aminoacid mutations: reference peptide not found for gene '{gene}'. "
            f"This gene will be omitted from the results."
        )


class InvalidAncestralMapError(PrivateMutationsError):
    """Ancestral mutation map references a position outside of the reference"""


class InvalidLabelCatalogError(PrivateMutationsError):
    """Label catalog references an unknown gene"""


class PrivateMutationsWarning(UserWarning):
    """Warning category for contained (non-fatal) gene failures"""
