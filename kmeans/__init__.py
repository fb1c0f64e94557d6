"""
K-means clustering (Lloyd's algorithm) for numeric matrices.
"""

from .version import __version__
from .dataset import Dataset
from .engine import (
    ClusteringEngine,
    ClusteringResult,
    DegenerateCluster,
    EngineState,
    KMeansConfig,
    nearest_centroid,
    pairwise_squared_distances,
    squared_euclidean,
)
from .exceptions import (
    DatasetFormatError,
    EngineStateError,
    InvalidConfiguration,
    KMeansError,
    NotFittedError,
)
from .io import format_matrix, format_result, load_dataset, parse_dataset
from .kmeans import KMeans
from .utils import benchmark_kmeans, create_sample_dataset, evaluate_clustering

__all__ = [
    "ClusteringEngine", "ClusteringResult", "DegenerateCluster", "EngineState", "KMeansConfig",
    "Dataset", "KMeans",
    "squared_euclidean", "pairwise_squared_distances", "nearest_centroid",
    "KMeansError", "InvalidConfiguration", "DatasetFormatError", "NotFittedError", "EngineStateError",
    "load_dataset", "parse_dataset", "format_matrix", "format_result",
    "create_sample_dataset", "evaluate_clustering", "benchmark_kmeans",
    "__version__",
]
