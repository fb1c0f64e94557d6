"""
Helpers around the K-means estimator: synthetic data, quality metrics and timing.
"""

import time
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from sklearn.datasets import make_blobs
from sklearn.metrics import calinski_harabasz_score, davies_bouldin_score, silhouette_score

from .dataset import ArrayLike, as_matrix
from .kmeans import KMeans


def create_sample_dataset(
    n_samples: int = 1000,
    n_features: int = 2,
    n_clusters: int = 3,
    cluster_std: float = 1.0,
    random_state: Optional[int] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Gaussian blobs for experiments.

    Returns:
        (X, y) where y holds the generating blob of each sample
    """
    X, y = make_blobs(
        n_samples=n_samples,
        n_features=n_features,
        centers=n_clusters,
        cluster_std=cluster_std,
        random_state=random_state,
    )
    return X, y


def evaluate_clustering(X: ArrayLike, labels: np.ndarray) -> Dict[str, Optional[float]]:
    """
    Internal quality metrics of a clustering.

    Silhouette, Calinski-Harabasz and Davies-Bouldin are only defined for
    2 <= n_labels <= n_samples - 1; outside that range they are None.
    """
    X = as_matrix(X)
    labels = np.asarray(labels)
    n_labels = len(np.unique(labels))

    metrics: Dict[str, Optional[float]] = {
        'n_clusters_found': n_labels,
        'silhouette': None,
        'calinski_harabasz': None,
        'davies_bouldin': None,
    }
    if 2 <= n_labels <= X.shape[0] - 1:
        metrics['silhouette'] = float(silhouette_score(X, labels))
        metrics['calinski_harabasz'] = float(calinski_harabasz_score(X, labels))
        metrics['davies_bouldin'] = float(davies_bouldin_score(X, labels))
    return metrics


def benchmark_kmeans(X: ArrayLike, k_values: Sequence[int], **kwargs) -> List[dict]:
    """Fit one model per k and record time, iterations and inertia."""
    X = as_matrix(X)
    results = []
    for k in k_values:
        model = KMeans(n_clusters=k, **kwargs)
        start = time.perf_counter()
        model.fit(X)
        elapsed = time.perf_counter() - start
        results.append({
            'k': k,
            'fit_time': elapsed,
            'n_iterations': model.n_iter_,
            'converged': model.converged_,
            'inertia': model.inertia_,
        })
    return results
