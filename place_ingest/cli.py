import argparse
import sys
import time
from pathlib import Path

from place_ingest.config import IngestConfig
from place_ingest.errors import IngestError
from place_ingest.logging_utils import setup_logging
from place_ingest.pipeline import find_input_files, ingest_files
from place_ingest.registry import UserRegistry
from place_ingest.store import PixelStore

DEFAULTS = IngestConfig()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="place-ingest",
        description="Load r/place canvas history (*.csv.gzip) into a DuckDB pixels table.",
    )
    p.add_argument("input_dir", help="Directory holding the gzip CSV files.")
    p.add_argument("--database", default=DEFAULTS.database, help="DuckDB database file.")
    p.add_argument("--table", default=DEFAULTS.table)
    p.add_argument("--chunk-size", type=int, default=DEFAULTS.chunk_size, help="Rows per transaction.")
    p.add_argument("--suffix", default=DEFAULTS.suffix, help="File name suffix of the input files.")
    p.add_argument("--skip-bad-rows", action="store_true", help="Log and skip rows that fail to parse.")
    p.add_argument("--user-lookup", default=None, help="Write user_key -> user_id to this parquet file.")
    p.add_argument("--replace", action="store_true", help="Delete the database file before loading.")
    p.add_argument("--log-level", default="INFO")
    return p.parse_args(argv)


def run(cfg: IngestConfig, input_dir: str, user_lookup: str | None = None, replace: bool = False) -> int:
    paths = find_input_files(input_dir, cfg.suffix)
    if not paths:
        # still a successful run: the table is created and left empty
        print(f"No {cfg.suffix} files found in {input_dir}")

    db_path = Path(cfg.database)
    if replace and db_path.exists():
        db_path.unlink()

    t0 = time.perf_counter_ns()

    registry = UserRegistry()
    with PixelStore.connect(cfg.database, cfg.table) as store:
        report = ingest_files(paths, store, registry, cfg.chunk_size, cfg.skip_bad_rows)

    if user_lookup:
        registry.write_parquet(user_lookup)
        print(f"Wrote user lookup: {user_lookup} (users={len(registry)})")

    t1 = time.perf_counter_ns()
    ms = (t1 - t0) / 1_000_000

    print(f"Execution Time (ms): {ms:.2f}")
    print(f"Files: {report.files}  Chunks: {report.chunks}  Rows: {report.rows}")
    print(f"Distinct users: {report.users}")
    if cfg.skip_bad_rows:
        print(f"Skipped rows: {report.skipped}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        cfg = IngestConfig(
            chunk_size=args.chunk_size,
            suffix=args.suffix,
            table=args.table,
            database=args.database,
            skip_bad_rows=args.skip_bad_rows,
        )
        return run(cfg, args.input_dir, args.user_lookup, args.replace)
    except (IngestError, OSError, EOFError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
