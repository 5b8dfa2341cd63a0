from dataclasses import dataclass

from place_ingest.colors import read_color
from place_ingest.coords import Shape, coordinate_columns, read_coords
from place_ingest.errors import FormatError, MissingFieldError
from place_ingest.registry import UserRegistry
from place_ingest.timestamps import parse_timestamp

# timestamp, user, coordinate, pixel_color
N_FIELDS = 4


@dataclass(frozen=True)
class PixelEvent:
    timestamp: int  # epoch ms
    user_id: int  # registry key
    shape: Shape
    color: int

    def as_row(self) -> tuple[int, ...]:
        """(timestamp, id, x, y, x1, y1, color), the column order of the pixels table."""
        x, y, x1, y1 = coordinate_columns(self.shape)
        return self.timestamp, self.user_id, x, y, x1, y1, self.color


def read_record(row: list[str], registry: UserRegistry) -> PixelEvent:
    if len(row) < N_FIELDS:
        raise MissingFieldError(f"expected {N_FIELDS} fields, got {len(row)}")
    if len(row) > N_FIELDS:
        raise FormatError(f"expected {N_FIELDS} fields, got {len(row)}")
    ts_text, user_text, coord_text, color_text = row

    timestamp = parse_timestamp(ts_text)
    if not user_text:
        raise MissingFieldError("empty user id")
    shape = read_coords(coord_text)
    color = read_color(color_text)

    # only rows that parsed completely get to register their user
    return PixelEvent(timestamp, registry.resolve(user_text), shape, color)
