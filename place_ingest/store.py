import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import duckdb
import polars as pl

from place_ingest.errors import StorageError
from place_ingest.records import PixelEvent

log = logging.getLogger(__name__)

# column order matches PixelEvent.as_row()
PIXEL_SCHEMA = {
    "timestamp": pl.Int64,
    "id": pl.Int64,
    "x": pl.Int32,
    "y": pl.Int32,
    "x1": pl.Int32,
    "y1": pl.Int32,
    "color": pl.UInt32,
}

_TABLE_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class ChunkWriter:
    """Collects the rows of one chunk; they are written when the chunk commits."""

    def __init__(self):
        self.rows: list[tuple[int, ...]] = []

    def insert(self, event: PixelEvent) -> None:
        self.rows.append(event.as_row())

    def __len__(self) -> int:
        return len(self.rows)

    def to_frame(self) -> pl.DataFrame:
        return pl.DataFrame(self.rows, schema=PIXEL_SCHEMA, orient="row")


class PixelStore:
    def __init__(self, con: duckdb.DuckDBPyConnection, table: str = "pixels"):
        if not _TABLE_NAME.fullmatch(table):
            raise StorageError(f"bad table name {table!r}")
        self.con = con
        self.table = table

    @classmethod
    def connect(cls, database: str | Path = ":memory:", table: str = "pixels") -> "PixelStore":
        try:
            con = duckdb.connect(database=str(database))
        except duckdb.Error as e:
            raise StorageError(f"cannot open {database}: {e}") from e
        return cls(con, table)

    def close(self) -> None:
        self.con.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def create_table(self) -> None:
        self._execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                timestamp BIGINT,
                id BIGINT,
                x INTEGER,
                y INTEGER,
                x1 INTEGER,
                y1 INTEGER,
                color UINTEGER
            )
            """
        )

    def count(self) -> int:
        return self._execute(f"SELECT count(*) FROM {self.table}").fetchone()[0]

    def rows(self) -> list[tuple]:
        return self._execute(f"SELECT * FROM {self.table}").fetchall()

    @contextmanager
    def transaction(self) -> Iterator[ChunkWriter]:
        """
        One chunk, one transaction. Rows handed to the writer are inserted and
        committed when the block exits cleanly; any exception rolls the whole
        chunk back and is re-raised.
        """
        writer = ChunkWriter()
        self._execute("BEGIN TRANSACTION")
        try:
            yield writer
            if len(writer):
                self._insert(writer.to_frame())
            self._execute("COMMIT")
        except BaseException:
            self._rollback()
            raise

    def _rollback(self) -> None:
        # a failed COMMIT has already ended the transaction
        try:
            self.con.rollback()
        except duckdb.Error as e:
            log.debug("rollback after failed transaction: %s", e)

    def _insert(self, frame: pl.DataFrame) -> None:
        self.con.register("chunk_rows", frame.to_arrow())
        try:
            self._execute(f"INSERT INTO {self.table} SELECT * FROM chunk_rows")
        finally:
            self.con.unregister("chunk_rows")

    def _execute(self, query: str):
        try:
            return self.con.execute(query)
        except duckdb.Error as e:
            raise StorageError(str(e)) from e
