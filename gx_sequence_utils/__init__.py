"""Streaming FASTA parsing utilities."""

from .fasta import (
    FastaError,
    FastaIOError,
    FastaReader,
    FastaRecord,
    MalformedInputError,
    RecordIssue,
    read_fasta,
    write_fasta,
)

__version__ = "0.1.0"

__all__ = [
    "FastaError",
    "FastaIOError",
    "FastaReader",
    "FastaRecord",
    "MalformedInputError",
    "RecordIssue",
    "read_fasta",
    "write_fasta",
    "__version__",
]
