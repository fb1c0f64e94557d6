import pytest

from kmeans.__main__ import main


def test_cli_clusters_file(tmp_path, capsys):
    path = tmp_path / "input.txt"
    path.write_text("0 0\n10 0\n0 1\n10 1\n", encoding="utf-8")

    assert main([str(path), "-k", "2", "--print-data", "--precision", "1"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("4 x 2\n0.0 0.0\n")
    assert "Clusters: 2" in out
    assert "[0] 0.0 0.5" in out
    assert "[1] 10.0 0.5" in out


def test_cli_rejects_too_many_clusters(tmp_path, capsys):
    path = tmp_path / "input.txt"
    path.write_text("0 0\n1 1\n", encoding="utf-8")

    assert main([str(path), "-k", "3"]) == 2
    assert "cannot form 3 clusters from 2 points" in capsys.readouterr().err


def test_cli_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.txt")]) == 2
    assert capsys.readouterr().err.startswith("error:")


def test_cli_malformed_file(tmp_path, capsys):
    path = tmp_path / "input.txt"
    path.write_text("0,0\n1,x\n", encoding="utf-8")

    assert main([str(path), "--delimiter", ","]) == 2
    assert "line 2" in capsys.readouterr().err


def test_cli_rejects_undecodable_file(tmp_path, capsys):
    path = tmp_path / "input.txt"
    path.write_bytes(b"0 0\n1 \xff\n")

    assert main([str(path)]) == 2
    assert "not valid utf-8 text" in capsys.readouterr().err


def test_cli_rejects_negative_precision(tmp_path, capsys):
    path = tmp_path / "input.txt"
    path.write_text("0 0\n1 1\n", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main([str(path), "--precision", "-1"])
    assert exc.value.code == 2
    assert "must be non-negative" in capsys.readouterr().err
