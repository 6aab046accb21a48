"""Tabular exports of per-record statistics."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import pandas as pd

from ..fasta import FastaRecord
from .paths import ensure_dir

logger = logging.getLogger(__name__)

LENGTH_COLUMNS = ["id", "description", "length"]


def lengths_frame(records: Iterable[FastaRecord]) -> pd.DataFrame:
    rows = [
        {"id": record.id, "description": record.description or "", "length": len(record)}
        for record in records
    ]
    return pd.DataFrame(rows, columns=LENGTH_COLUMNS)


def write_length_table(path: Path, records: Iterable[FastaRecord]) -> pd.DataFrame:
    """Write an ``id, description, length`` CSV and return the frame."""

    frame = lengths_frame(records)
    ensure_dir(path.parent)
    frame.to_csv(path, index=False)
    logger.debug("Wrote %d rows to %s", len(frame), path)
    return frame
