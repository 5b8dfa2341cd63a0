import csv
import gzip
import logging
from contextlib import closing
from dataclasses import dataclass
from itertools import islice
from pathlib import Path
from typing import Iterable, Iterator, TypeVar

from place_ingest.config import CHUNK_SIZE, SUFFIX
from place_ingest.errors import ROW_ERRORS, FormatError
from place_ingest.records import read_record
from place_ingest.registry import UserRegistry
from place_ingest.store import PixelStore

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class IngestReport:
    files: int = 0
    rows: int = 0
    chunks: int = 0
    skipped: int = 0
    users: int = 0


def find_input_files(directory: str | Path, suffix: str = SUFFIX) -> list[Path]:
    # sorted so user keys come out the same on every run over the same files
    root = Path(directory)
    return sorted(p for p in root.iterdir() if p.is_file() and p.name.endswith(suffix))


def iter_records(path: str | Path) -> Iterator[tuple[int, list[str]]]:
    """Yield (line number, fields) for every data row of a gzip CSV file."""
    with gzip.open(path, "rt", newline="", encoding="utf-8") as f:
        reader = csv.reader(f)
        try:
            header = next(reader, None)
            log.debug("%s header: %s", path, header)
            for row in reader:
                # blank lines are not records
                if not row:
                    continue
                yield reader.line_num, row
        except csv.Error as e:
            raise FormatError(str(e), location=f"{path}:{reader.line_num}") from e


def chunked(items: Iterable[T], size: int = CHUNK_SIZE) -> Iterator[list[T]]:
    it = iter(items)
    while chunk := list(islice(it, size)):
        yield chunk


def _load_chunk(
    chunk: list[tuple[int, list[str]]],
    path: str | Path,
    store: PixelStore,
    registry: UserRegistry,
    skip_bad_rows: bool,
    report: IngestReport,
) -> None:
    with store.transaction() as writer:
        for line_num, row in chunk:
            try:
                event = read_record(row, registry)
            except ROW_ERRORS as e:
                e.location = f"{path}:{line_num}"
                if not skip_bad_rows:
                    raise
                log.warning("skipping row: %s", e)
                report.skipped += 1
                continue
            writer.insert(event)
        inserted = len(writer)

    report.chunks += 1
    report.rows += inserted
    log.info("committed %d rows from %s (%d users so far)", inserted, path, len(registry))


def ingest_file(
    path: str | Path,
    store: PixelStore,
    registry: UserRegistry,
    chunk_size: int = CHUNK_SIZE,
    skip_bad_rows: bool = False,
    report: IngestReport | None = None,
) -> IngestReport:
    """
    Load one file, one transaction per chunk of `chunk_size` rows.

    A bad row aborts its chunk (nothing from that chunk is kept) and the
    error is re-raised; chunks committed before it stay. With
    `skip_bad_rows` the row is logged and left out instead.
    """
    if report is None:
        report = IngestReport()

    records = iter_records(path)
    with closing(records):
        for chunk in chunked(records, chunk_size):
            _load_chunk(chunk, path, store, registry, skip_bad_rows, report)

    report.files += 1
    report.users = len(registry)
    return report


def ingest_files(
    paths: Iterable[str | Path],
    store: PixelStore,
    registry: UserRegistry | None = None,
    chunk_size: int = CHUNK_SIZE,
    skip_bad_rows: bool = False,
) -> IngestReport:
    """Create the table, then load every file in order with one shared registry."""
    if registry is None:
        registry = UserRegistry()
    paths = list(paths)
    report = IngestReport()

    store.create_table()
    for i, path in enumerate(paths, start=1):
        log.info("file %d/%d: %s", i, len(paths), path)
        ingest_file(path, store, registry, chunk_size, skip_bad_rows, report)

    report.users = len(registry)
    return report
