"""
Plain-text loading and reporting of numeric matrices.

Input format: one point per line, values separated by whitespace (or by the
given delimiter). Blank lines and lines starting with ``#`` are skipped.
There is no header row.
"""

import logging
import os
from typing import Iterable, Optional, Union

import numpy as np

from .dataset import Dataset
from .engine import ClusteringResult
from .exceptions import DatasetFormatError

logger = logging.getLogger(__name__)


def parse_dataset(lines: Iterable[str], delimiter: Optional[str] = None) -> Dataset:
    """Parse text lines into a :class:`Dataset`.

    Raises:
        DatasetFormatError: on a non-numeric value, a row whose length differs
            from the first row, or input with no data rows.
    """
    rows = []
    width = None
    for lineno, line in enumerate(lines, start=1):
        text = line.strip()
        if not text or text.startswith('#'):
            continue
        tokens = [t.strip() for t in text.split(delimiter)]
        try:
            values = [float(t) for t in tokens]
        except ValueError as e:
            raise DatasetFormatError(f"line {lineno}: {e}") from e
        if not all(np.isfinite(values)):
            raise DatasetFormatError(f"line {lineno}: NaN or infinite value")
        if width is None:
            width = len(values)
        elif len(values) != width:
            raise DatasetFormatError(
                f"line {lineno}: expected {width} values, found {len(values)}"
            )
        rows.append(values)

    if not rows:
        raise DatasetFormatError("no data rows found")
    return Dataset(np.array(rows, dtype=np.float64))


def load_dataset(
    path: Union[str, os.PathLike],
    delimiter: Optional[str] = None,
    encoding: str = 'utf-8',
) -> Dataset:
    """Read a dataset from a text file."""
    try:
        with open(path, encoding=encoding) as f:
            dataset = parse_dataset(f, delimiter=delimiter)
    except UnicodeDecodeError as e:
        raise DatasetFormatError(f"{path}: not valid {encoding} text: {e}") from e
    logger.debug("Loaded %d x %d matrix from %s", dataset.rows, dataset.cols, path)
    return dataset


def format_matrix(matrix, precision: int = 4) -> str:
    """Render a matrix as one line per row, columns separated by spaces."""
    if isinstance(matrix, Dataset):
        matrix = matrix.data
    matrix = np.atleast_2d(np.asarray(matrix, dtype=np.float64))
    return "\n".join(
        " ".join(f"{value:.{precision}f}" for value in row) for row in matrix
    )


def format_result(result: ClusteringResult, precision: int = 4) -> str:
    """Human-readable summary of a clustering run."""
    status = "converged" if result.converged else "stopped at iteration cap"
    lines = [
        f"Clusters: {result.n_clusters}",
        f"Status: {status} after {result.n_iter} iteration(s)",
        f"Inertia: {result.inertia:.{precision}f}",
        "Centroids:",
    ]
    sizes = result.cluster_sizes
    for c, centroid in enumerate(result.centroids):
        coords = " ".join(f"{value:.{precision}f}" for value in centroid)
        lines.append(f"  [{c}] {coords}  ({sizes[c]} point(s))")
    lines.append("Assignment:")
    lines.append("  " + " ".join(str(int(label)) for label in result.labels))
    if result.degenerate_events:
        lines.append(f"Empty cluster events: {len(result.degenerate_events)}")
    return "\n".join(lines)
