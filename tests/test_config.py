from pathlib import Path

import pytest

from gx_sequence_utils import config


def test_collect_runtime_config_defaults() -> None:
    cfg = config.collect_runtime_config(env={})
    assert cfg.encoding == "utf-8"
    assert cfg.http_timeout == config.HTTP_DEFAULTS.timeout
    assert cfg.http_retries == config.HTTP_DEFAULTS.retries


@pytest.fixture
def clean_env(monkeypatch):
    # register the keys so values loaded from .env are removed afterwards
    for key in config.ENVIRONMENT_VARIABLES:
        monkeypatch.setenv(key, "unset")
        monkeypatch.delenv(key)
    return monkeypatch


def test_collect_runtime_config_reads_env_file(tmp_path: Path, clean_env) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "\n".join(
            [
                "GXSEQ_ENCODING=latin-1",
                "GXSEQ_HTTP_TIMEOUT=5",
                "GXSEQ_HTTP_RETRIES=0",
            ]
        ),
        encoding="utf-8",
    )
    nested_dir = tmp_path / "nested" / "deeper"
    nested_dir.mkdir(parents=True)

    cfg = config.collect_runtime_config(start_path=nested_dir)

    assert cfg.encoding == "latin-1"
    assert cfg.http_timeout == 5
    assert cfg.http_retries == 1
    assert cfg.as_dict()["GXSEQ_HTTP_TIMEOUT"] == 5


def test_existing_environment_wins_over_env_file(tmp_path: Path, clean_env) -> None:
    (tmp_path / ".env").write_text("GXSEQ_ENCODING=latin-1\n", encoding="utf-8")
    clean_env.setenv("GXSEQ_ENCODING", "ascii")
    cfg = config.collect_runtime_config(start_path=tmp_path)
    assert cfg.encoding == "ascii"


def test_invalid_integer_names_variable() -> None:
    with pytest.raises(ValueError, match="GXSEQ_HTTP_TIMEOUT"):
        config.collect_runtime_config(env={"GXSEQ_HTTP_TIMEOUT": "soon"})
