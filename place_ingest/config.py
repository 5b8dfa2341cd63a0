from dataclasses import dataclass

CHUNK_SIZE = 100_000
SUFFIX = ".csv.gzip"
TABLE = "pixels"
DATABASE = "db.duckdb"


@dataclass(frozen=True)
class IngestConfig:
    chunk_size: int = CHUNK_SIZE
    suffix: str = SUFFIX
    table: str = TABLE
    database: str = DATABASE
    # off: the first bad row aborts the run
    skip_bad_rows: bool = False

    def __post_init__(self):
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
