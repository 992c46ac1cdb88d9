from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

from ..config.loader import ConfigError, ConvertConfig, load_config, resolve_config_path
from ..logging.init import log_summary, setup_logging
from ..models.stage_result import StageFailure
from ..reader.format_d import parse_format_d
from ..services.batch import BatchError, convert_all, scan_csv_files
from ..services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (override) so CSV2INSERT_CONFIG can come from there
- Load config (--config > $CSV2INSERT_CONFIG > config/convert.yml)
- Convert the given files, or every matching file in source_directory
- Print a SUMMARY line and exit with 0 (all converted), 2 (some failed) or 1 (fatal)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

PREVIEW_ROWS = 5


def _load_env_file(path: Path, override: bool = True) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="csv2insert", description="Format D CSV -> SQL INSERT script generator"
    )
    p.add_argument("files", nargs="*", type=Path, help="CSV files to convert (default: scan source_directory)")
    p.add_argument("--config", help="Config file path (default: $CSV2INSERT_CONFIG or config/convert.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data", action="store_true", help="Print table, columns and first rows of each file then exit"
    )
    return p.parse_args(argv)


def _inspect_data(cfg: ConvertConfig, files: list[Path]) -> int:
    if not files:
        print("inspect: no csv files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            text = f.read_text(encoding=cfg.encoding)
        except (OSError, UnicodeDecodeError) as e:
            print(f"  read_error: {e}")
            continue
        parsed = parse_format_d(text)
        if isinstance(parsed, StageFailure):
            print(f"  format_errors={len(parsed.errors)} truncated={parsed.truncated}")
            for err in parsed.errors[:PREVIEW_ROWS]:
                print(f"    line={err.file_line} column={err.column_name} reason={err.reason}")
            continue
        table = parsed.value
        print(f"  TABLE: {table.table_name} rows={len(table.rows)}")
        print(f"  COLUMNS: {', '.join(f'{h}:{t.id}' for h, t in zip(table.headers, table.types, strict=True))}")
        df = pd.DataFrame(
            [row.values for row in table.rows[:PREVIEW_ROWS]],
            columns=list(table.headers),
            index=[row.file_line for row in table.rows[:PREVIEW_ROWS]],
            dtype=str,
        )
        df.index.name = "line"
        print(df.to_string())
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # None -> read sys.argv; an explicit [] must not pick up pytest's own arguments
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)

    config_path = resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    files: list[Path] | None = list(args.files) if args.files else None
    if files is None:
        try:
            files = scan_csv_files(Path(cfg.source_directory), cfg.file_pattern)
        except BatchError as e:
            logger.error(str(e))
            return EXIT_FATAL
        logger.info(f"Converting files from: {cfg.source_directory}")

    if args.inspect_data:
        return _inspect_data(cfg, files)

    result = convert_all(cfg, files=files)

    summary_line = render_summary_line(result.total_files, result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line.removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
