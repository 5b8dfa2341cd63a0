import duckdb
import polars as pl

from place_ingest.cli import main

TS = "2023-07-20 13:00:26.088 UTC"


def test_loads_directory(tmp_path, history_file, capsys):
    history_file("2023_place_canvas_history-000000000001.csv.gzip", [[TS, "b", "1,1", "#000000"], [TS, "a", "2,2", "#FFFFFF"]])
    history_file("2023_place_canvas_history-000000000000.csv.gzip", [[TS, "a", '{"X": 3, "Y": 4, "R": 5}', "#FF4500"]])
    db = tmp_path / "out" / "db.duckdb"
    db.parent.mkdir()
    lookup = tmp_path / "users.parquet"

    code = main([str(tmp_path), "--database", str(db), "--chunk-size", "1", "--user-lookup", str(lookup)])

    assert code == 0
    out = capsys.readouterr().out
    assert "Rows: 3" in out
    assert "Distinct users: 2" in out

    con = duckdb.connect(str(db))
    ids = [r[0] for r in con.execute("SELECT id FROM pixels").fetchall()]
    con.close()
    # files load in name order, so "a" from ...000 is user 1
    assert ids == [1, 2, 1]

    assert pl.read_parquet(lookup)["user_id"].to_list() == ["a", "b"]


def test_replace(tmp_path, history_file):
    history_file("a.csv.gzip", [[TS, "a", "1,1", "#000000"]])
    db = tmp_path / "db.duckdb"
    args = [str(tmp_path), "--database", str(db)]

    assert main(args) == 0
    assert main(args) == 0
    assert main(args + ["--replace"]) == 0

    con = duckdb.connect(str(db))
    assert con.execute("SELECT count(*) FROM pixels").fetchone()[0] == 1
    con.close()


def test_bad_row_exits_nonzero(tmp_path, history_file, capsys):
    history_file("a.csv.gzip", [[TS, "a", "1", "#000000"]])
    code = main([str(tmp_path), "--database", str(tmp_path / "db.duckdb")])
    assert code == 1
    assert "Error:" in capsys.readouterr().err


def test_skip_bad_rows_flag(tmp_path, history_file, capsys):
    history_file("a.csv.gzip", [[TS, "a", "1", "#000000"], [TS, "a", "1,1", "#000000"]])
    code = main([str(tmp_path), "--database", str(tmp_path / "db.duckdb"), "--skip-bad-rows"])
    assert code == 0
    assert "Skipped rows: 1" in capsys.readouterr().out


def test_empty_directory_creates_table(tmp_path, capsys):
    db = tmp_path / "db.duckdb"
    assert main([str(tmp_path), "--database", str(db)]) == 0
    assert "No .csv.gzip files" in capsys.readouterr().out

    con = duckdb.connect(str(db))
    assert con.execute("SELECT count(*) FROM pixels").fetchone()[0] == 0
    con.close()


def test_bad_chunk_size(tmp_path, history_file, capsys):
    history_file("a.csv.gzip", [[TS, "a", "1,1", "#000000"]])
    assert main([str(tmp_path), "--database", str(tmp_path / "db.duckdb"), "--chunk-size", "0"]) == 1
