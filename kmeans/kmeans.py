"""
K-means clustering estimator.
Wraps :class:`ClusteringEngine` behind a fit/predict interface.
"""

import logging
from typing import Optional

import numpy as np

from .dataset import ArrayLike, as_matrix
from .engine import ClusteringEngine, ClusteringResult, InitSpec, KMeansConfig, _is_int, nearest_centroid
from .exceptions import InvalidConfiguration, NotFittedError

logger = logging.getLogger(__name__)


class KMeans:
    """
    K-means clustering with Lloyd's algorithm.

    Features:
    - Deterministic first-k initialization by default, random or k-means++ seeding on request
    - Multiple initialization attempts, keeping the lowest inertia
    - Stops as soon as no point changes cluster
    - Explicit handling of empty clusters
    """

    def __init__(
        self,
        n_clusters: int,
        max_iters: int = 100,
        tol: float = 0.0,
        n_init: int = 1,
        init: InitSpec = 'first',
        empty_cluster: str = 'keep',
        random_state: Optional[int] = None,
        verbose: bool = False
    ):
        """
        Initialize K-means clustering.

        Args:
            n_clusters: Number of clusters
            max_iters: Maximum number of iterations per run
            tol: Centroid movement tolerance (0 means stop only on a stable assignment)
            n_init: Number of runs for the random initializations
            init: Initialization method ('first', 'random', 'k-means++') or initial centroids
            empty_cluster: 'keep' or 'farthest'
            random_state: Random seed for reproducibility
            verbose: Whether to log progress at INFO level
        """
        if not _is_int(n_init) or n_init < 1:
            raise InvalidConfiguration(f"n_init must be a positive integer, got {n_init!r}")
        self.n_clusters = n_clusters
        self.max_iters = max_iters
        self.tol = tol
        self.n_init = n_init
        self.init = init
        self.empty_cluster = empty_cluster
        self.random_state = random_state
        self.verbose = verbose

        # Results
        self.cluster_centers_ = None
        self.labels_ = None
        self.inertia_ = None
        self.n_iter_ = None
        self.converged_ = None
        self.result_: Optional[ClusteringResult] = None

    def _config(self, random_state) -> KMeansConfig:
        return KMeansConfig(
            n_clusters=self.n_clusters,
            max_iters=self.max_iters,
            tol=self.tol,
            init=self.init,
            empty_cluster=self.empty_cluster,
            random_state=random_state,
            verbose=self.verbose,
        )

    def fit(self, X: ArrayLike) -> 'KMeans':
        """
        Fit K-means clustering to the data.

        Args:
            X: Input data of shape (n_samples, n_features)

        Returns:
            self
        """
        X = as_matrix(X)
        log = logger.info if self.verbose else logger.debug

        randomized = isinstance(self.init, str) and self.init in ('random', 'k-means++')
        n_runs = self.n_init if randomized else 1
        seeds = np.random.SeedSequence(self.random_state).spawn(n_runs)

        log("Fitting K-means with %d clusters on %d samples...", self.n_clusters, X.shape[0])

        best: Optional[ClusteringResult] = None
        for run, seed in enumerate(seeds):
            if n_runs > 1:
                log("Initialization %d/%d", run + 1, n_runs)
            result = ClusteringEngine.from_config(X, self._config(seed)).run()
            if best is None or result.inertia < best.inertia:
                best = result

        self.result_ = best
        self.cluster_centers_ = best.centroids
        self.labels_ = best.labels
        self.inertia_ = best.inertia
        self.n_iter_ = best.n_iter
        self.converged_ = best.converged

        log("Final inertia: %.2f", self.inertia_)
        return self

    def predict(self, X: ArrayLike) -> np.ndarray:
        """
        Predict cluster labels for new data.

        Args:
            X: Input data of shape (n_samples, n_features)

        Returns:
            Cluster labels
        """
        if self.cluster_centers_ is None:
            raise NotFittedError("Model must be fitted before prediction")

        X = as_matrix(X)
        if X.shape[1] != self.cluster_centers_.shape[1]:
            raise InvalidConfiguration(
                f"X has {X.shape[1]} features, model was fitted with {self.cluster_centers_.shape[1]}"
            )
        return nearest_centroid(X, self.cluster_centers_)

    def fit_predict(self, X: ArrayLike) -> np.ndarray:
        """Fit the model and return the cluster label of each sample."""
        return self.fit(X).labels_

    def get_cluster_info(self) -> dict:
        """Get information about the clustering results."""
        if self.cluster_centers_ is None:
            raise NotFittedError("Model must be fitted first")

        cluster_sizes = np.bincount(self.labels_, minlength=self.n_clusters)

        return {
            'n_clusters': self.n_clusters,
            'inertia': self.inertia_,
            'n_iterations': self.n_iter_,
            'converged': self.converged_,
            'cluster_sizes': {k: int(size) for k, size in enumerate(cluster_sizes)},
            'empty_clusters': [k for k, size in enumerate(cluster_sizes) if size == 0],
            'avg_cluster_size': float(np.mean(cluster_sizes)),
            'std_cluster_size': float(np.std(cluster_sizes)),
            'min_cluster_size': int(np.min(cluster_sizes)),
            'max_cluster_size': int(np.max(cluster_sizes))
        }
