"""Default settings and environment overrides for gx-sequence-utils."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import find_dotenv, load_dotenv

ENVIRONMENT_VARIABLES = (
    "GXSEQ_ENCODING",
    "GXSEQ_HTTP_TIMEOUT",
    "GXSEQ_HTTP_RETRIES",
)

DEFAULT_REPORT_PATH = Path("fasta_check.json")


@dataclass(slots=True)
class ReaderDefaults:
    """Options for decoding FASTA input."""

    encoding: str = "utf-8"


@dataclass(slots=True)
class HttpDefaults:
    """Options used when streaming FASTA over HTTP."""

    timeout: int = 30
    retries: int = 3
    user_agent: str = "gx-sequence-utils"


@dataclass(slots=True)
class CheckDefaults:
    """Default values for the check command."""

    report_path: Path = DEFAULT_REPORT_PATH


READER_DEFAULTS = ReaderDefaults()
HTTP_DEFAULTS = HttpDefaults()
CHECK_DEFAULTS = CheckDefaults()


@dataclass
class RuntimeConfig:
    """Settings resolved from defaults and the environment."""

    encoding: str = READER_DEFAULTS.encoding
    http_timeout: int = HTTP_DEFAULTS.timeout
    http_retries: int = HTTP_DEFAULTS.retries

    def as_dict(self) -> Dict[str, object]:
        return {
            "GXSEQ_ENCODING": self.encoding,
            "GXSEQ_HTTP_TIMEOUT": self.http_timeout,
            "GXSEQ_HTTP_RETRIES": self.http_retries,
        }


def load_env_file(start_path: Optional[Path] = None) -> Optional[Path]:
    """Load the closest .env file into os.environ without overriding existing values."""

    if start_path is not None:
        candidate = _find_upwards(Path(start_path).resolve())
    else:
        found = find_dotenv(usecwd=True)
        candidate = Path(found) if found else None
    if candidate is None:
        return None
    load_dotenv(candidate, override=False)
    return candidate


def collect_runtime_config(
    env: Optional[Mapping[str, str]] = None,
    start_path: Optional[Path] = None,
) -> RuntimeConfig:
    """Resolve runtime settings, reading a .env file first when ``env`` is not given."""

    if env is None:
        load_env_file(start_path)
        env = os.environ
    return RuntimeConfig(
        encoding=env.get("GXSEQ_ENCODING") or READER_DEFAULTS.encoding,
        http_timeout=_int_from_env(env, "GXSEQ_HTTP_TIMEOUT", HTTP_DEFAULTS.timeout),
        http_retries=max(_int_from_env(env, "GXSEQ_HTTP_RETRIES", HTTP_DEFAULTS.retries), 1),
    )


def _int_from_env(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc


def _find_upwards(start: Path) -> Optional[Path]:
    current = start
    last = None
    while last != current:
        candidate = current / ".env"
        if candidate.exists():
            return candidate
        last = current
        current = current.parent
    return None
