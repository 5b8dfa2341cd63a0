import csv
import gzip

import pytest

HEADER = ["timestamp", "user", "coordinate", "pixel_color"]


def write_history(path, rows, header=HEADER):
    with gzip.open(path, "wt", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        if header is not None:
            writer.writerow(header)
        writer.writerows(rows)
    return path


@pytest.fixture
def history_file(tmp_path):
    def make(name, rows, header=HEADER):
        return write_history(tmp_path / name, rows, header)

    return make
