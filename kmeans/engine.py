"""
Lloyd's algorithm engine for K-means clustering.

The engine takes a numeric matrix and a cluster count, then alternates two
steps until the assignment stops changing:

- assign: every point goes to its nearest centroid (squared Euclidean
  distance, lowest cluster index on ties)
- update: every centroid becomes the mean of the points assigned to it

Example:
    >>> engine = ClusteringEngine(4, 2, 2, [[0, 0], [0, 1], [10, 0], [10, 1]])
    >>> result = engine.run()
    >>> result.converged
    True
"""

from __future__ import annotations
import enum
import logging
from dataclasses import dataclass, field
from numbers import Integral, Real
from typing import List, Optional, Tuple, Union

import numpy as np

from .dataset import ArrayLike, as_matrix
from .exceptions import EngineStateError, InvalidConfiguration, NotFittedError

logger = logging.getLogger(__name__)

INIT_METHODS = ("first", "random", "k-means++")
EMPTY_CLUSTER_POLICIES = ("keep", "farthest")

InitSpec = Union[str, np.ndarray, List[List[float]]]


def squared_euclidean(a, b) -> float:
    """Squared Euclidean distance between two vectors of equal length."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"vectors have different shapes: {a.shape} vs {b.shape}")
    diff = a - b
    return float(np.dot(diff, diff))


def pairwise_squared_distances(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Squared distances from every point to every centroid.

    Args:
        X: Points of shape (n_samples, n_features)
        centroids: Centroids of shape (n_clusters, n_features)

    Returns:
        Array of shape (n_samples, n_clusters)
    """
    # (n_samples, 1, n_features) - (1, n_clusters, n_features)
    diff = X[:, np.newaxis, :] - centroids[np.newaxis, :, :]
    return np.einsum("ijk,ijk->ij", diff, diff)


def nearest_centroid(X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Index of the closest centroid for each point; ties go to the lowest index."""
    # argmin returns the first occurrence of the minimum
    return np.argmin(pairwise_squared_distances(X, centroids), axis=1)


class EngineState(enum.Enum):
    """Lifecycle of a single clustering run."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    ITERATING = "iterating"
    CONVERGED = "converged"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"

    @property
    def is_terminal(self) -> bool:
        return self in (EngineState.CONVERGED, EngineState.MAX_ITERATIONS_REACHED)


@dataclass(frozen=True)
class DegenerateCluster:
    """A cluster that received no points during an update step."""

    iteration: int
    cluster: int
    policy: str


@dataclass(frozen=True, eq=False)
class KMeansConfig:
    """Parameters of a clustering run.

    Attributes:
        n_clusters: Number of clusters (k)
        max_iters: Cap on update passes; reaching it is not an error
        tol: If positive, also stop once no centroid moves farther than this
        init: 'first', 'random', 'k-means++' or an explicit (k, cols) array
        empty_cluster: 'keep' the previous centroid or re-seed it at the
            'farthest' point
        random_state: Seed or Generator for the random initializations
        verbose: Log progress at INFO instead of DEBUG
    """

    n_clusters: int
    max_iters: int = 100
    tol: float = 0.0
    init: InitSpec = "first"
    empty_cluster: str = "keep"
    random_state: Optional[Union[int, np.random.Generator, np.random.SeedSequence]] = None
    verbose: bool = False

    def __post_init__(self) -> None:
        if not _is_int(self.n_clusters) or self.n_clusters < 1:
            raise InvalidConfiguration(f"n_clusters must be a positive integer, got {self.n_clusters!r}")
        if not _is_int(self.max_iters) or self.max_iters < 1:
            raise InvalidConfiguration(f"max_iters must be a positive integer, got {self.max_iters!r}")
        if not isinstance(self.tol, Real) or not np.isfinite(self.tol) or self.tol < 0:
            raise InvalidConfiguration(f"tol must be a non-negative number, got {self.tol!r}")
        if self.empty_cluster not in EMPTY_CLUSTER_POLICIES:
            raise InvalidConfiguration(
                f"Unknown empty cluster policy: {self.empty_cluster!r} "
                f"(expected one of {EMPTY_CLUSTER_POLICIES})"
            )
        if isinstance(self.init, str):
            if self.init not in INIT_METHODS:
                raise InvalidConfiguration(
                    f"Unknown initialization method: {self.init!r} (expected one of {INIT_METHODS})"
                )
        else:
            seeds = as_matrix(self.init)
            if seeds.shape[0] != self.n_clusters:
                raise InvalidConfiguration(
                    f"init has {seeds.shape[0]} centroids but n_clusters is {self.n_clusters}"
                )
            seeds.setflags(write=False)
            object.__setattr__(self, "init", seeds)


@dataclass(frozen=True, eq=False)
class ClusteringResult:
    """Final, read-only output of a clustering run."""

    centroids: np.ndarray
    labels: np.ndarray
    converged: bool
    n_iter: int
    state: EngineState
    inertia: float
    degenerate_events: Tuple[DegenerateCluster, ...] = field(default_factory=tuple)

    @property
    def n_clusters(self) -> int:
        return self.centroids.shape[0]

    @property
    def cluster_sizes(self) -> np.ndarray:
        """Number of points in each cluster, empty clusters included."""
        return np.bincount(self.labels, minlength=self.n_clusters)

    def assignment(self) -> dict:
        """Point index -> cluster index."""
        return {i: int(label) for i, label in enumerate(self.labels)}

    def members(self, cluster: int) -> np.ndarray:
        """Indices of the points assigned to ``cluster``."""
        return np.flatnonzero(self.labels == cluster)


def _is_int(value) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


class ClusteringEngine:
    """Single run of Lloyd's algorithm over a fixed dataset.

    The engine copies the input matrix and owns its centroids and assignment
    for the whole run. Call :meth:`run` to iterate until convergence or the
    iteration cap, or drive :meth:`assign` and :meth:`update_centroids` by
    hand.

    Args:
        rows: Number of points
        cols: Dimensionality of each point
        k: Number of clusters
        data: Matrix of shape (rows, cols) or a :class:`Dataset`
        **options: Any other :class:`KMeansConfig` field

    Raises:
        InvalidConfiguration: if ``k < 1``, ``cols < 1``, ``rows < k`` or the
            data does not have shape ``rows x cols``.
    """

    def __init__(self, rows: int, cols: int, k: int, data: ArrayLike, **options):
        self.state = EngineState.UNINITIALIZED
        config = options.pop("config", None)
        if config is None:
            config = KMeansConfig(n_clusters=k, **options)
        elif options:
            raise InvalidConfiguration("pass either a config or keyword options, not both")
        elif config.n_clusters != k:
            raise InvalidConfiguration(f"config is for {config.n_clusters} clusters, k is {k}")
        self.config = config

        for name, value in (("rows", rows), ("cols", cols)):
            if not _is_int(value) or value < 1:
                raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")
        if rows < k:
            raise InvalidConfiguration(f"cannot form {k} clusters from {rows} points")

        X = as_matrix(data)
        if X.shape != (rows, cols):
            raise InvalidConfiguration(
                f"dataset has shape {X.shape[0]}x{X.shape[1]}, declared {rows}x{cols}"
            )
        X.setflags(write=False)

        self.rows = rows
        self.cols = cols
        self.k = k
        self._X = X
        self._rng = np.random.default_rng(config.random_state)
        self._log = logger.info if config.verbose else logger.debug

        self.centroids = self._init_centroids()
        self.labels: Optional[np.ndarray] = None
        self.n_iter = 0
        self.degenerate_events: List[DegenerateCluster] = []
        self._result: Optional[ClusteringResult] = None
        self._labels_stale = False
        self._last_shift = 0.0
        self.state = EngineState.INITIALIZED

    @classmethod
    def from_config(cls, data: ArrayLike, config: KMeansConfig) -> ClusteringEngine:
        """Build an engine whose shape is taken from ``data`` itself."""
        X = as_matrix(data)
        return cls(X.shape[0], X.shape[1], config.n_clusters, X, config=config)

    @property
    def max_iters(self) -> int:
        return self.config.max_iters

    @property
    def tol(self) -> float:
        return self.config.tol

    @property
    def data(self) -> np.ndarray:
        return self._X

    def _init_centroids(self) -> np.ndarray:
        """Pick the k starting centroids."""
        init = self.config.init
        if isinstance(init, np.ndarray):
            if init.shape != (self.k, self.cols):
                raise InvalidConfiguration(
                    f"init centroids have shape {init.shape}, expected {(self.k, self.cols)}"
                )
            return np.array(init, dtype=np.float64)
        if init == "first":
            return self._X[: self.k].copy()
        if init == "random":
            indices = self._rng.choice(self.rows, self.k, replace=False)
            return self._X[indices].copy()
        return self._kmeans_plus_plus_init()

    def _kmeans_plus_plus_init(self) -> np.ndarray:
        """K-means++ seeding: each new centroid is drawn with probability
        proportional to its squared distance from the nearest chosen one."""
        X = self._X
        centroids = np.empty((self.k, self.cols))
        centroids[0] = X[self._rng.integers(self.rows)]
        min_sq = pairwise_squared_distances(X, centroids[:1])[:, 0]

        for c_id in range(1, self.k):
            total = min_sq.sum()
            if total == 0.0:
                # Every point coincides with a chosen centroid
                next_idx = int(self._rng.integers(self.rows))
            else:
                cumulative = np.cumsum(min_sq / total)
                next_idx = int(np.searchsorted(cumulative, self._rng.random()))
                next_idx = min(next_idx, self.rows - 1)
            centroids[c_id] = X[next_idx]
            min_sq = np.minimum(min_sq, pairwise_squared_distances(X, centroids[c_id:c_id + 1])[:, 0])

        return centroids

    def _require_active(self, step: str) -> None:
        if self.state is EngineState.UNINITIALIZED:
            raise EngineStateError(f"cannot {step}: engine is not initialized")
        if self.state.is_terminal:
            raise EngineStateError(f"cannot {step}: run already finished ({self.state.value})")

    def assign(self) -> int:
        """Assign every point to its nearest centroid.

        Returns:
            Number of points whose cluster changed (all of them on the first
            call).
        """
        self._require_active("assign")
        labels = nearest_centroid(self._X, self.centroids)
        if self.labels is None:
            changed = self.rows
        else:
            changed = int(np.count_nonzero(labels != self.labels))
        self.labels = labels
        self._labels_stale = False
        self.state = EngineState.ITERATING
        return changed

    def update_centroids(self) -> float:
        """Move each centroid to the mean of its assigned points.

        Empty clusters follow the configured policy and are recorded as
        :class:`DegenerateCluster` events.

        Returns:
            Largest Euclidean distance any centroid moved.
        """
        self._require_active("update centroids")
        if self.labels is None:
            raise EngineStateError("cannot update centroids before the first assignment")

        self.n_iter += 1
        X, labels = self._X, self.labels
        new_centroids = self.centroids.copy()
        empty = []

        for c in range(self.k):
            mask = labels == c
            if np.any(mask):
                new_centroids[c] = X[mask].mean(axis=0)
            else:
                empty.append(c)

        if empty:
            if self.config.empty_cluster == "farthest":
                self._reseed_farthest(new_centroids, empty)
            for c in empty:
                event = DegenerateCluster(self.n_iter, c, self.config.empty_cluster)
                self.degenerate_events.append(event)
                logger.warning(
                    "Cluster %d is empty at iteration %d, policy %r",
                    c, self.n_iter, self.config.empty_cluster,
                )

        shift = float(np.sqrt(np.max(np.sum((new_centroids - self.centroids) ** 2, axis=1))))
        self.centroids = new_centroids
        # labels no longer reflect the moved centroids until the next assign
        self._labels_stale = True
        self._last_shift = shift
        return shift

    def _reseed_farthest(self, centroids: np.ndarray, empty: List[int]) -> None:
        """Place each empty centroid on the point farthest from its own centroid."""
        dists = np.sum((self._X - centroids[self.labels]) ** 2, axis=1)
        for c in empty:
            idx = int(np.argmax(dists))
            centroids[c] = self._X[idx]
            # never reuse a point within the same step
            dists[idx] = -np.inf

    def inertia(self) -> float:
        """Sum of squared distances from each point to its assigned centroid."""
        if self.labels is None:
            raise NotFittedError("no assignment has been computed yet")
        diff = self._X - self.centroids[self.labels]
        return float(np.sum(diff * diff))

    def _check(self, changed: int, shift: float) -> bool:
        """Stopping rule applied after an update followed by an assign."""
        self._log(
            "Iteration %d: %d point(s) reassigned, max centroid shift %.6g",
            self.n_iter, changed, shift,
        )
        return changed == 0 or (self.tol > 0 and shift <= self.tol)

    def run(self) -> ClusteringResult:
        """Iterate assign/update until convergence or ``max_iters``."""
        if self.state.is_terminal:
            return self.result()

        self._log(
            "Running K-means with %d clusters on %d points of dimension %d",
            self.k, self.rows, self.cols,
        )

        converged = False
        if self.labels is None:
            self.assign()
        elif self._labels_stale:
            # finish the pass left open by a manual update_centroids()
            converged = self._check(self.assign(), self._last_shift)

        while not converged and self.n_iter < self.max_iters:
            shift = self.update_centroids()
            converged = self._check(self.assign(), shift)

        if converged:
            self.state = EngineState.CONVERGED
            self._log("Converged after %d iteration(s)", self.n_iter)
        else:
            self.state = EngineState.MAX_ITERATIONS_REACHED
            logger.warning(
                "K-means did not converge within %d iteration(s)", self.max_iters
            )

        return self.result()

    def result(self) -> ClusteringResult:
        """Frozen copy of the run's output; only valid in a terminal state."""
        if not self.state.is_terminal:
            raise NotFittedError(f"results are not available in state {self.state.value!r}")
        if self._result is None:
            centroids = self.centroids.copy()
            labels = self.labels.copy()
            centroids.setflags(write=False)
            labels.setflags(write=False)
            self._result = ClusteringResult(
                centroids=centroids,
                labels=labels,
                converged=self.state is EngineState.CONVERGED,
                n_iter=self.n_iter,
                state=self.state,
                inertia=self.inertia(),
                degenerate_events=tuple(self.degenerate_events),
            )
        return self._result
