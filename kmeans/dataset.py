"""
Dataset container handed to the clustering engine.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Sequence, Union

import numpy as np

from .exceptions import InvalidConfiguration


ArrayLike = Union[np.ndarray, Sequence[Sequence[float]], "Dataset"]


def as_matrix(data: ArrayLike) -> np.ndarray:
    """Copy ``data`` into a 2-D float64 array.

    Raises:
        InvalidConfiguration: if the rows are ragged, non-numeric, not
            two-dimensional, or hold NaN/inf values.
    """
    if isinstance(data, Dataset):
        return np.array(data.data, dtype=np.float64)
    try:
        matrix = np.array(data, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration(f"dataset is not a rectangular numeric matrix: {e}") from e
    if matrix.ndim != 2:
        raise InvalidConfiguration(
            f"dataset must be two-dimensional (rows x cols), got {matrix.ndim} dimension(s)"
        )
    if not np.all(np.isfinite(matrix)):
        raise InvalidConfiguration("dataset contains NaN or infinite values")
    return matrix


@dataclass(frozen=True, eq=False)
class Dataset:
    """An ordered, immutable sequence of points of equal dimensionality.

    Args:
        data: Row-major matrix of shape (rows, cols).
    """

    data: np.ndarray

    def __post_init__(self) -> None:
        matrix = as_matrix(self.data)
        matrix.setflags(write=False)
        object.__setattr__(self, "data", matrix)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> Dataset:
        """Build a dataset from a list of points, rejecting ragged rows."""
        widths = {len(row) for row in rows}
        if len(widths) > 1:
            raise InvalidConfiguration(f"rows have differing lengths: {sorted(widths)}")
        return cls(np.array(rows, dtype=np.float64))

    @property
    def rows(self) -> int:
        return self.data.shape[0]

    @property
    def cols(self) -> int:
        return self.data.shape[1]

    @property
    def shape(self):
        return self.data.shape

    def __len__(self) -> int:
        return self.rows

    def __getitem__(self, index: int) -> np.ndarray:
        return self.data[index]

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self.data)
