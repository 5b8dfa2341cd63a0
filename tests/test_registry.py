import polars as pl

from place_ingest.registry import UserRegistry


def test_first_seen_order():
    reg = UserRegistry()
    ids = [reg.resolve(u) for u in ["a", "b", "a", "c", "b", "a"]]
    assert ids == [1, 2, 1, 3, 2, 1]
    assert len(reg) == 3


def test_repeat_resolve_is_stable():
    reg = UserRegistry()
    first = reg.resolve("user==")
    for _ in range(5):
        assert reg.resolve("user==") == first
    assert len(reg) == 1


def test_kth_distinct_gets_k():
    reg = UserRegistry()
    for k in range(1, 1001):
        assert reg.resolve(f"user-{k}") == k
    assert list(reg.items())[:2] == [("user-1", 1), ("user-2", 2)]


def test_write_parquet(tmp_path):
    reg = UserRegistry()
    reg.resolve("x")
    reg.resolve("y")
    out = tmp_path / "users.parquet"
    reg.write_parquet(out)

    df = pl.read_parquet(out)
    assert df.columns == ["user_key", "user_id"]
    assert df["user_key"].to_list() == [1, 2]
    assert df["user_id"].to_list() == ["x", "y"]


def test_empty_registry_frame():
    df = UserRegistry().to_frame()
    assert df.height == 0
    assert df.schema["user_key"] == pl.Int64
