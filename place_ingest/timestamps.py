from datetime import datetime, timezone

from place_ingest.errors import FormatError, InvalidCalendarDate

# year, month, day, hour, minute, second, fraction
N_COMPONENTS = 7
FRACTION = 6

# place value of a component's first digit: room for a 5 digit year,
# 4 digits for everything after it
FIRST_MULTIPLIER = 10000
NEXT_MULTIPLIER = 1000


def _fraction_to_ms(value: int, n_digits: int) -> int:
    if n_digits <= 3:
        return value * 10 ** (3 - n_digits)
    return value // 10 ** (n_digits - 3)


def read_date(text: str) -> tuple[int, ...]:
    """
    Split a timestamp like '2023-07-20 13:00:26.088 UTC' into
    (year, month, day, hour, minute, second, milliseconds).

    Every non-digit closes the current component, so '-', ':', ' ', '.' and
    the 'U' of the UTC suffix are all the same to this parser. The scan stops
    once the seventh component is closed; a token that runs out before that
    is rejected.
    """
    components = [0] * N_COMPONENTS
    current = 0
    multiplier = FIRST_MULTIPLIER
    n_digits = 0

    for ch in text:
        if "0" <= ch <= "9":
            if current >= N_COMPONENTS:
                raise FormatError(f"too many date components in {text!r}")
            if multiplier == 0:
                raise FormatError(f"date component {current} too long in {text!r}")
            components[current] += (ord(ch) - ord("0")) * multiplier
            multiplier //= 10
            n_digits += 1
            continue

        if current >= N_COMPONENTS:
            return tuple(components)

        if n_digits == 0 and current != FRACTION:
            raise FormatError(f"unexpected {ch!r} in date {text!r}")

        # drop the place value the component never used: '04' was added as 400
        components[current] //= multiplier * 10 if multiplier else 1
        if current == FRACTION:
            # an empty fraction ('... 13:00:26 UTC') is whole seconds
            components[current] = _fraction_to_ms(components[current], n_digits)

        current += 1
        multiplier = NEXT_MULTIPLIER
        n_digits = 0

    if current >= N_COMPONENTS:
        return tuple(components)
    raise FormatError(f"date ended before all components were read: {text!r}")


def date_components_to_ms(c: tuple[int, ...]) -> int:
    try:
        dt = datetime(c[0], c[1], c[2], c[3], c[4], c[5], tzinfo=timezone.utc)
    except (ValueError, OverflowError) as e:
        raise InvalidCalendarDate(f"invalid date {c[:6]}: {e}") from e
    return int(dt.timestamp()) * 1000 + c[FRACTION]


def parse_timestamp(text: str) -> int:
    return date_components_to_ms(read_date(text))
