"""Command-line interface for gx-sequence-utils."""

from __future__ import annotations

import argparse
import os
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator

from . import __version__
from .config import CHECK_DEFAULTS, RuntimeConfig, collect_runtime_config, load_env_file
from .fasta import FastaError, FastaReader, FastaRecord, write_fasta
from .io import ensure_dir, now_iso, write_json, write_length_table
from .logging_utils import configure_logging, get_logger
from .sources import STDIN_MARKER, open_source

Handler = Callable[[argparse.Namespace, RuntimeConfig], int]

EXIT_INVALID_RECORDS = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gxseq",
        description="Streaming FASTA utilities.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--encoding",
        help="Text encoding of the input (default: GXSEQ_ENCODING or utf-8).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    _add_lengths_parser(subparsers)
    _add_check_parser(subparsers)
    _add_reformat_parser(subparsers)
    return parser


def _add_input_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "input",
        help="FASTA path, http(s) URL, or '-' for stdin.",
    )


def _add_lengths_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("lengths", help="Print every record followed by its sequence length.")
    _add_input_argument(parser)
    parser.add_argument(
        "--table",
        type=Path,
        help="Also write an id/description/length CSV to this path.",
    )
    parser.set_defaults(handler=_handle_lengths)


def _add_check_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("check", help="Validate ids and sequence characters of every record.")
    _add_input_argument(parser)
    parser.add_argument(
        "--report",
        type=Path,
        default=CHECK_DEFAULTS.report_path,
        help=f"JSON report path (default: {CHECK_DEFAULTS.report_path}).",
    )
    parser.set_defaults(handler=_handle_check)


def _add_reformat_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("reformat", help="Rewrite records with single-line sequences.")
    _add_input_argument(parser)
    parser.add_argument(
        "--output",
        type=Path,
        help="Output FASTA path (default: stdout).",
    )
    parser.set_defaults(handler=_handle_reformat)


def _open_reader(location: str, config: RuntimeConfig) -> FastaReader:
    # stdin belongs to the process, not to the reader
    owns_source = location != STDIN_MARKER
    stream = open_source(location, config)
    try:
        return FastaReader(stream, encoding=config.encoding, owns_source=owns_source)
    except ValueError:
        if owns_source:
            stream.close()
        raise


def _echo_lengths(records: Iterable[FastaRecord]) -> Iterator[FastaRecord]:
    for record in records:
        sys.stdout.write(f"{record}length: {len(record)}\n")
        yield record


def _handle_lengths(args: argparse.Namespace, config: RuntimeConfig) -> int:
    logger = get_logger()
    with _open_reader(args.input, config) as reader:
        if args.table:
            frame = write_length_table(args.table, _echo_lengths(reader))
            logger.info("Length table (%d records) -> %s", len(frame), args.table)
        else:
            for _ in _echo_lengths(reader):
                pass
    return 0


def _handle_check(args: argparse.Namespace, config: RuntimeConfig) -> int:
    logger = get_logger()
    total = 0
    issues: list[dict[str, Any]] = []
    with _open_reader(args.input, config) as reader:
        for index, record in enumerate(reader, start=1):
            total += 1
            issue = record.check()
            if issue is None:
                continue
            logger.warning("Record %d (%r): %s", index, record.id, issue.value)
            issues.append(
                {
                    "index": index,
                    "id": record.id,
                    "issue": issue.name,
                    "message": issue.value,
                }
            )

    report = {
        "input": args.input,
        "total_records": total,
        "invalid_records": len(issues),
        "issues": issues,
        "timestamp": now_iso(),
    }
    write_json(args.report, report)
    logger.info("Checked %d records, %d invalid", total, len(issues))
    logger.info("Check report -> %s", args.report)
    return EXIT_INVALID_RECORDS if issues else 0


def _handle_reformat(args: argparse.Namespace, config: RuntimeConfig) -> int:
    logger = get_logger()
    with _open_reader(args.input, config) as reader:
        if args.output:
            ensure_dir(args.output.parent)
            target = args.output.open("w", encoding="utf-8")
        else:
            target = nullcontext(sys.stdout)
        with target as handle:
            count = write_fasta(handle, reader)
    logger.info("Reformatted %d records", count)
    return 0


def main(argv: list[str] | None = None) -> int:
    load_env_file()
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)
    logger = get_logger()
    handler: Handler = args.handler

    try:
        config = collect_runtime_config(env=os.environ)
        if args.encoding:
            config.encoding = args.encoding
        return handler(args, config)
    except (FastaError, OSError, ValueError) as exc:
        logger.error(str(exc))
        return 1
    except Exception:  # pragma: no cover - safety net
        logger.exception("Unexpected error")
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
