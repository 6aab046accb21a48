"""Streaming FASTA reader and record type.

Records are parsed one at a time from any object exposing ``readline()``.
The reader keeps a single line of lookahead (the header of the next record),
so memory use is bounded by the largest record rather than the file.

Formatting is a one-way projection: ``str(record)`` always writes the
sequence on a single line, so re-formatting a parsed record is stable while
the line wrapping of the input is not preserved.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Iterable, Iterator, Optional, Union

from .config import READER_DEFAULTS

logger = logging.getLogger(__name__)

HEADER_MARKER = ">"
_HEADER_SPLIT_RE = re.compile(r"\s+")


class FastaError(RuntimeError):
    """Base error raised while reading FASTA input."""


class MalformedInputError(FastaError):
    """Raised when a record does not start with the header marker."""


class FastaIOError(FastaError):
    """Raised when the underlying source fails on a read."""


class RecordIssue(enum.Enum):
    """Reasons a parsed record fails validation."""

    MISSING_ID = "Expecting id for Fasta record."
    NON_ASCII_SEQUENCE = "Non-ascii character found in sequence."


@dataclass(slots=True)
class FastaRecord:
    id: str = ""
    description: Optional[str] = None
    sequence: str = ""

    def __len__(self) -> int:
        return len(self.sequence)

    def __str__(self) -> str:
        return self.to_fasta()

    def is_empty(self) -> bool:
        return not self.id and self.description is None and not self.sequence

    def check(self) -> Optional[RecordIssue]:
        """Return the first validation issue of the record, or ``None``."""

        if not self.id:
            return RecordIssue.MISSING_ID
        if not self.sequence.isascii():
            return RecordIssue.NON_ASCII_SEQUENCE
        return None

    def to_fasta(self) -> str:
        header = self.id if self.description is None else f"{self.id} {self.description}"
        return f"{HEADER_MARKER}{header}\n{self.sequence}\n"


def parse_header(line: str) -> tuple[str, Optional[str]]:
    """Split a header line into ``(id, description)``.

    Trailing whitespace is stripped before splitting, so a header such as
    ``">id   "`` yields ``("id", None)`` rather than an empty description.
    """

    text = line[len(HEADER_MARKER):] if line.startswith(HEADER_MARKER) else line
    parts = _HEADER_SPLIT_RE.split(text.rstrip(), maxsplit=1)
    if len(parts) == 1:
        return parts[0], None
    return parts[0], parts[1]


class FastaReader:
    """Lazy iterator of :class:`FastaRecord` over a line-buffered source.

    The reader owns ``source`` unless ``owns_source`` is false; use it as a
    context manager or call :meth:`close` to release it. After a
    :class:`FastaError` has been raised, or once the input is exhausted,
    iteration stops for good.

    A header made of a bare ``>`` with no sequence lines is yielded as an
    empty record (see :meth:`FastaRecord.is_empty`) and iteration continues;
    it does not end the stream.

    Byte sources are decoded line by line, so ``encoding`` must encode ``>``
    and ``\\n`` as the single ASCII bytes.
    """

    def __init__(
        self,
        source: IO[Any],
        encoding: str = READER_DEFAULTS.encoding,
        owns_source: bool = True,
    ) -> None:
        _require_line_compatible(encoding)
        self._source = source
        self._encoding = encoding
        self._owns_source = owns_source
        self._line_cache = ""
        self._error_has_occurred = False
        self._exhausted = False

    @classmethod
    def from_path(cls, path: Union[str, Path], encoding: str = READER_DEFAULTS.encoding) -> "FastaReader":
        _require_line_compatible(encoding)
        return cls(Path(path).open("rb"), encoding=encoding)

    def __iter__(self) -> "FastaReader":
        return self

    def __next__(self) -> FastaRecord:
        if self._error_has_occurred or self._exhausted:
            raise StopIteration
        try:
            record = self._read_record()
        except Exception:
            self._error_has_occurred = True
            self._line_cache = ""
            raise
        if record is None:
            self._exhausted = True
            logger.debug("End of FASTA input reached")
            raise StopIteration
        return record

    def __enter__(self) -> "FastaReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._exhausted = True
        self._line_cache = ""
        if self._owns_source:
            self._source.close()

    def _read_record(self) -> Optional[FastaRecord]:
        if not self._line_cache:
            self._line_cache = self._readline()
            if not self._line_cache:
                return None

        if not self._line_cache.startswith(HEADER_MARKER):
            logger.debug("Line without header marker where a record was expected: %r", self._line_cache[:80])
            raise MalformedInputError("Expected > at record start.")

        record_id, description = parse_header(self._line_cache)
        chunks: list[str] = []
        while True:
            self._line_cache = self._readline()
            if not self._line_cache or self._line_cache.startswith(HEADER_MARKER):
                break
            chunks.append(self._line_cache.rstrip())
        return FastaRecord(id=record_id, description=description, sequence="".join(chunks))

    def _readline(self) -> str:
        try:
            line = self._source.readline()
            if isinstance(line, bytes):
                line = line.decode(self._encoding)
        except Exception as exc:
            logger.debug("Read from FASTA source failed: %s", exc)
            raise FastaIOError(f"Failed to read FASTA input: {exc}") from exc
        return line


def _require_line_compatible(encoding: str) -> None:
    try:
        encoded = f"{HEADER_MARKER}\n".encode(encoding)
    except LookupError as exc:
        raise ValueError(f"Unknown encoding: {encoding!r}") from exc
    if encoded != b">\n":
        raise ValueError(f"Encoding {encoding!r} is not ASCII-compatible; FASTA lines cannot be split in it")


def read_fasta(path: Union[str, Path], encoding: str = READER_DEFAULTS.encoding) -> Iterator[FastaRecord]:
    """Yield records from a FASTA file, closing it once iteration ends."""

    with FastaReader.from_path(path, encoding=encoding) as reader:
        yield from reader


def write_fasta(handle: IO[str], records: Iterable[FastaRecord]) -> int:
    """Write records in canonical single-line form and return how many were written."""

    count = 0
    for record in records:
        handle.write(record.to_fasta())
        count += 1
    return count


__all__ = [
    "FastaError",
    "FastaIOError",
    "FastaReader",
    "FastaRecord",
    "MalformedInputError",
    "RecordIssue",
    "parse_header",
    "read_fasta",
    "write_fasta",
]
