from place_ingest.errors import (
    FormatError,
    IngestError,
    InvalidCalendarDate,
    MissingFieldError,
    NumericParseError,
    StorageError,
)
from place_ingest.pipeline import IngestReport, find_input_files, ingest_file, ingest_files
from place_ingest.records import PixelEvent, read_record
from place_ingest.registry import UserRegistry
from place_ingest.store import PixelStore

__version__ = "0.1.0"
