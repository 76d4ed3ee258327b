import gzip

from Bio import SeqIO


def open_text_file(file_path):
    """Open text or gz file in text mode."""
    file_path = str(file_path)
    if file_path.endswith(".gz"):
        return gzip.open(file_path, "rt")
    return open(file_path, "r")


def read_fasta_reference(file_path):
    """
    Read a single-record FASTA reference.
    Returns (name, sequence) with the sequence uppercased.
    """
    with open_text_file(file_path) as handle:
        records = list(SeqIO.parse(handle, "fasta"))

    if len(records) != 1:
        raise ValueError(f"Expected exactly one reference record in {file_path}, found {len(records)}.")

    record = records[0]
    seq = str(record.seq).upper()
    if not seq:
        raise ValueError(f"Reference sequence in {file_path} is empty.")
    return record.id, seq
