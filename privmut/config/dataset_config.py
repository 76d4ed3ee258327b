#!/usr/bin/env python3
"""
Dataset configuration module

Loads the per-run inputs shared by all queries: reference sequence, gene map,
reference peptides and label catalogs
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

from ..mutations.labels import NucLabelCatalog, AaLabelCatalog
from ..utils.genes import GeneMap
from ..utils.misc import read_fasta_reference
from ..utils.sequence_utils import build_ref_peptides, is_valid_dna


class DatasetConfig:
    """
    Dataset configuration class

    Holds the reference sequence, gene map, reference peptides and the
    nucleotide/aminoacid label catalogs. Built once per analysis run and
    shared read-only by every query.
    """

    def __init__(self, config_data: Optional[Dict] = None, config_file: Optional[str] = None):
        """
        Initialize configuration

        Args:
            config_data: Configuration dictionary data
            config_file: JSON configuration file path
        """
        self.base_dir = Path.cwd()
        if config_file:
            self._load_from_file(config_file)
        elif config_data:
            self._load_from_dict(config_data)
        else:
            raise ValueError("Must provide config_data or config_file")

    def _load_from_file(self, config_file: str):
        """Load configuration from JSON file"""
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file does not exist: {config_file}")

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = json.load(f)

        # Relative paths inside the file are relative to the file itself
        self.base_dir = config_path.resolve().parent
        self._load_from_dict(config_data)

    def _load_from_dict(self, config_data: Dict):
        """Load configuration from dictionary"""
        self.name = config_data.get('name', 'unnamed')

        # Reference sequence
        ref_data = config_data['reference']
        if 'sequence' in ref_data:
            self.reference_name = ref_data.get('name', self.name)
            self.reference_sequence = ref_data['sequence'].upper()
        elif 'fasta' in ref_data:
            self.reference_name, self.reference_sequence = read_fasta_reference(self._resolve(ref_data['fasta']))
        else:
            raise ValueError("Reference must provide 'sequence' or 'fasta'")

        if not self.reference_sequence:
            raise ValueError("Reference sequence cannot be empty")
        if not is_valid_dna(self.reference_sequence, allow_ambiguous=True):
            raise ValueError("Reference sequence contains invalid characters")

        # Gene map
        genes_data = config_data.get('genes', [])
        if isinstance(genes_data, dict) and 'gff3' in genes_data:
            self.gene_map = GeneMap.from_gff3(self._resolve(genes_data['gff3']))
        else:
            self.gene_map = GeneMap.from_records(genes_data)

        for gene in self.gene_map:
            if gene.end > len(self.reference_sequence):
                raise ValueError(
                    f"Gene '{gene.name}' ends at {gene.end}, beyond reference length {len(self.reference_sequence)}"
                )

        # Reference peptides: explicit ones win, the rest are translated
        explicit_peptides = {gene: peptide.upper() for gene, peptide in config_data.get('ref_peptides', {}).items()}
        missing = [gene.name for gene in self.gene_map if gene.name not in explicit_peptides]
        self.ref_peptides = build_ref_peptides(self.reference_sequence, self.gene_map, genes=missing)
        self.ref_peptides.update(explicit_peptides)

        # Label catalogs
        self.nuc_substitution_labels = NucLabelCatalog.from_label_map(config_data.get('nucMutLabelMap', {}))
        self.nuc_deletion_labels = NucLabelCatalog.from_label_map(config_data.get('nucDelLabelMap', {}))
        self.aa_substitution_labels = AaLabelCatalog.from_label_map(config_data.get('aaMutLabelMap', {}))
        self.aa_deletion_labels = AaLabelCatalog.from_label_map(config_data.get('aaDelLabelMap', {}))

    def _resolve(self, path: str) -> str:
        resolved = Path(path)
        if not resolved.is_absolute():
            resolved = self.base_dir / resolved
        return str(resolved)

    def get_reference_sequence(self) -> str:
        """Get reference sequence"""
        return self.reference_sequence

    def get_ref_peptide(self, gene: str) -> Optional[str]:
        """Get reference peptide of a gene, None if unavailable"""
        return self.ref_peptides.get(gene)

    def gene_names(self) -> List[str]:
        return self.gene_map.names()

    def summary(self) -> str:
        """Return configuration summary information"""
        lines = [
            "=== Dataset Configuration Summary ===",
            f"Name: {self.name}",
            f"Reference: {self.reference_name} ({len(self.reference_sequence)} bp)",
            f"Genes: {len(self.gene_map)}",
        ]
        for gene in self.gene_map:
            peptide = self.ref_peptides.get(gene.name, '')
            lines.append(f"  {gene.name} ({gene.strand}): {gene.start + 1}-{gene.end}, {len(peptide)} aa")
        lines += [
            "",
            "=== Label Catalogs ===",
            f"Nucleotide substitutions: {len(self.nuc_substitution_labels)}",
            f"Nucleotide deletions: {len(self.nuc_deletion_labels)}",
            f"Aminoacid substitutions: {len(self.aa_substitution_labels)}",
            f"Aminoacid deletions: {len(self.aa_deletion_labels)}",
        ]
        return "\n".join(lines)


def load_dataset_config_by_name(name: str = "example") -> DatasetConfig:
    """
    Load a bundled dataset configuration by name

    Args:
        name: Dataset name, the file config/data/dataset_<name>.json must exist

    Returns:
        DatasetConfig: Corresponding configuration object
    """
    config_dir = Path(__file__).parent / "data"
    available = sorted(p.stem[len("dataset_"):] for p in config_dir.glob("dataset_*.json"))
    if name not in available:
        raise ValueError(f"Unsupported dataset: {name}. Available datasets: {available}")

    config_file = config_dir / f"dataset_{name}.json"
    return DatasetConfig(config_file=str(config_file))


# Predefined configuration
EXAMPLE_DATASET = None  # Lazily loaded on first access


def get_example_dataset_config() -> DatasetConfig:
    """Get the bundled example dataset configuration (lazy loading)"""
    global EXAMPLE_DATASET
    if EXAMPLE_DATASET is None:
        EXAMPLE_DATASET = load_dataset_config_by_name("example")
    return EXAMPLE_DATASET
