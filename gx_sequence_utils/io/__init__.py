"""IO helpers for gx-sequence-utils."""

from .paths import ensure_dir, now_iso, write_json
from .tables import write_length_table

__all__ = [
    "ensure_dir",
    "now_iso",
    "write_json",
    "write_length_table",
]
