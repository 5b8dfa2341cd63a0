import re
from dataclasses import dataclass

from place_ingest.errors import FormatError, NumericParseError

# stored in x1/y1 when the shape has no such field
ABSENT = 2**31 - 1

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INT = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Point:
    x: int
    y: int


# moderator brush, "R" is the radius
@dataclass(frozen=True)
class Circle:
    x: int
    y: int
    r: int


# moderator fill from (x, y) to (x1, y1)
@dataclass(frozen=True)
class Rectangle:
    x: int
    y: int
    x1: int
    y1: int


Shape = Point | Circle | Rectangle


def parse_i32(text: str) -> int:
    if not _INT.fullmatch(text):
        raise NumericParseError(f"not an integer: {text!r}")
    value = int(text)
    if not INT32_MIN <= value <= INT32_MAX:
        raise NumericParseError(f"integer out of 32-bit range: {text!r}")
    return value


def _read_circle(text: str, commas: list[int]) -> Circle:
    # not JSON, just looks like it: {"X": 424, "Y": 636, "R": 3}
    colons = [i for i, ch in enumerate(text) if ch == ":"]
    if len(colons) < 3:
        raise FormatError(f"circle payload needs 3 ':' separators: {text!r}")
    # each value starts 2 chars after its colon (': '), the last one
    # stops before the closing brace
    return Circle(
        parse_i32(text[colons[0] + 2:commas[0]]),
        parse_i32(text[colons[1] + 2:commas[1]]),
        parse_i32(text[colons[2] + 2:len(text) - 1]),
    )


def read_coords(text: str) -> Shape:
    """
    The coordinate column carries three shapes with no type tag, so the
    shape is picked by the number of commas:
      1 -> "x,y"
      2 -> '{"X": x, "Y": y, "R": r}'
      3 -> "x,y,x1,y1"
    """
    commas = [i for i, ch in enumerate(text) if ch == ","]

    if len(commas) == 1:
        return Point(parse_i32(text[:commas[0]]), parse_i32(text[commas[0] + 1:]))
    if len(commas) == 2:
        return _read_circle(text, commas)
    if len(commas) == 3:
        return Rectangle(
            parse_i32(text[:commas[0]]),
            parse_i32(text[commas[0] + 1:commas[1]]),
            parse_i32(text[commas[1] + 1:commas[2]]),
            parse_i32(text[commas[2] + 1:]),
        )
    raise FormatError(f"coordinate has {len(commas)} commas: {text!r}")


def coordinate_columns(shape: Shape) -> tuple[int, int, int, int]:
    """Flatten a shape into the (x, y, x1, y1) columns of the pixels table."""
    if isinstance(shape, Point):
        return shape.x, shape.y, ABSENT, ABSENT
    if isinstance(shape, Circle):
        return shape.x, shape.y, shape.r, ABSENT
    return shape.x, shape.y, shape.x1, shape.y1
