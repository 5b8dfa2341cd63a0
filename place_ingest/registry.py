from pathlib import Path

import polars as pl


class UserRegistry:
    """
    Maps user id strings to small integer keys, 1, 2, 3, ... in the order
    they are first seen. One registry is shared by every file of a run so a
    user keeps the same key across files and chunks.
    """

    def __init__(self):
        self._keys: dict[str, int] = {}
        self._count = 0

    def resolve(self, user_id: str) -> int:
        key = self._keys.get(user_id)
        if key is None:
            self._count += 1
            key = self._count
            self._keys[user_id] = key
        return key

    def __len__(self) -> int:
        return self._count

    def items(self):
        # dicts keep insertion order, which is key order here
        return self._keys.items()

    def to_frame(self) -> pl.DataFrame:
        pairs = list(self.items())
        return pl.DataFrame(
            {
                "user_key": [key for _, key in pairs],
                "user_id": [user_id for user_id, _ in pairs],
            },
            schema={"user_key": pl.Int64, "user_id": pl.Utf8},
        )

    def write_parquet(self, path: str | Path) -> None:
        self.to_frame().write_parquet(path, compression="zstd", compression_level=10)
