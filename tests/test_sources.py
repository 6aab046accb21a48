"""Tests for opening FASTA sources."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
import requests
from urllib3.exceptions import ProtocolError

from gx_sequence_utils import sources
from gx_sequence_utils.config import RuntimeConfig
from gx_sequence_utils.fasta import FastaIOError, FastaReader


class FakeRaw(io.BytesIO):
    decode_content = False


class DroppedConnectionRaw(io.RawIOBase):
    """Body that delivers one chunk and then loses the connection."""

    decode_content = False

    def __init__(self, chunk: bytes) -> None:
        self.chunk = chunk

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if not self.chunk:
            raise ProtocolError("Connection broken: IncompleteRead")
        size = len(self.chunk)
        buffer[:size] = self.chunk
        self.chunk = b""
        return size


class FakeResponse:
    def __init__(self, body: bytes, status_code: int = 200, raw: io.IOBase | None = None) -> None:
        self.raw = raw if raw is not None else FakeRaw(body)
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, responses: list[FakeResponse]) -> None:
        self.responses = list(responses)
        self.calls: list[dict] = []

    def get(self, url: str, **kwargs) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        return self.responses.pop(0)


def test_open_source_local_file(tmp_path: Path) -> None:
    path = tmp_path / "seqs.fa"
    path.write_text(">a\nAC\n", encoding="utf-8")
    with FastaReader(sources.open_source(str(path))) as reader:
        assert [record.id for record in reader] == ["a"]


def test_open_source_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Input file not found"):
        sources.open_source(str(tmp_path / "missing.fa"))


def test_open_source_streams_url() -> None:
    session = FakeSession([FakeResponse(b">remote one\nAC\nGT\n")])
    stream = sources.open_source(
        "https://example.org/seqs.fa",
        RuntimeConfig(http_timeout=7),
        session=session,
    )
    records = list(FastaReader(stream))
    assert records[0].id == "remote"
    assert records[0].sequence == "ACGT"
    assert session.calls[0]["stream"] is True
    assert session.calls[0]["timeout"] == 7


def test_open_url_retries_then_fails(monkeypatch) -> None:
    monkeypatch.setattr(sources.time, "sleep", lambda _: None)
    session = FakeSession([FakeResponse(b"", status_code=503), FakeResponse(b"", status_code=503)])
    with pytest.raises(OSError, match="Failed to fetch"):
        sources.open_url("http://example.org/x.fa", retries=2, session=session)
    assert len(session.calls) == 2


def test_open_url_recovers_after_transient_error(monkeypatch) -> None:
    monkeypatch.setattr(sources.time, "sleep", lambda _: None)
    session = FakeSession([FakeResponse(b"", status_code=502), FakeResponse(b">ok\nA\n")])
    stream = sources.open_url("http://example.org/x.fa", retries=3, session=session)
    assert [record.id for record in FastaReader(stream)] == ["ok"]


def test_is_remote() -> None:
    assert sources.is_remote("HTTPS://example.org/a.fa")
    assert not sources.is_remote("data/a.fa")


def test_connection_lost_mid_stream_ends_reader() -> None:
    raw = DroppedConnectionRaw(b">remote one\nACGT")
    session = FakeSession([FakeResponse(b"", raw=raw)])
    reader = FastaReader(sources.open_url("https://example.org/seqs.fa", session=session))
    with pytest.raises(FastaIOError) as excinfo:
        next(reader)
    assert isinstance(excinfo.value.__cause__, ProtocolError)
    with pytest.raises(StopIteration):
        next(reader)
