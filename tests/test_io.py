import numpy as np
import pytest

from kmeans import ClusteringEngine
from kmeans.dataset import Dataset
from kmeans.exceptions import DatasetFormatError, InvalidConfiguration
from kmeans.io import format_matrix, format_result, load_dataset, parse_dataset


def test_parse_whitespace_with_comments_and_blank_lines():
    text = """# four points
0 0
0\t1

10   0
10 1
"""
    dataset = parse_dataset(text.splitlines())
    assert dataset.shape == (4, 2)
    np.testing.assert_array_equal(dataset.data, [[0, 0], [0, 1], [10, 0], [10, 1]])


def test_parse_with_delimiter():
    dataset = parse_dataset(["1.5, -2", "3e2,4"], delimiter=",")
    np.testing.assert_array_equal(dataset.data, [[1.5, -2.0], [300.0, 4.0]])


@pytest.mark.parametrize("lines,message", [
    (["1 2", "3 4", "5"], "line 3"),
    (["1 2", "x 4"], "line 2"),
    (["# only a comment", ""], "no data rows"),
    (["1 nan"], "line 1"),
    (["1,2,"], "line 1"),
])
def test_parse_errors(lines, message):
    delimiter = "," if lines[0].endswith(",") else None
    with pytest.raises(DatasetFormatError, match=message):
        parse_dataset(lines, delimiter=delimiter)


def test_load_dataset(tmp_path):
    path = tmp_path / "input.txt"
    path.write_text("1 2 3\n4 5 6\n", encoding="utf-8")
    dataset = load_dataset(path)
    assert (dataset.rows, dataset.cols) == (2, 3)


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_dataset(tmp_path / "missing.txt")


def test_dataset_is_read_only():
    dataset = Dataset([[1.0, 2.0], [3.0, 4.0]])
    assert len(dataset) == 2
    np.testing.assert_array_equal(dataset[1], [3.0, 4.0])
    with pytest.raises(ValueError):
        dataset.data[0, 0] = 9.0


def test_dataset_from_rows_rejects_ragged():
    with pytest.raises(InvalidConfiguration):
        Dataset.from_rows([[1.0, 2.0], [3.0]])


def test_format_matrix():
    assert format_matrix([[0, 1], [2.5, -3]], precision=1) == "0.0 1.0\n2.5 -3.0"


def test_format_result():
    result = ClusteringEngine(4, 2, 2, [[0, 0], [0, 1], [10, 0], [10, 1]], init=[[0, 0], [10, 0]]).run()
    text = format_result(result, precision=2)
    assert "Clusters: 2" in text
    assert "converged after 1 iteration(s)" in text
    assert "[1] 10.00 0.50  (2 point(s))" in text
    assert "0 0 1 1" in text


def test_load_undecodable_file(tmp_path):
    path = tmp_path / "input.txt"
    path.write_bytes(b"0 0\n1 \xff\n")
    with pytest.raises(DatasetFormatError, match="not valid utf-8"):
        load_dataset(path)
