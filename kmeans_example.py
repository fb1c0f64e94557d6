"""Simple example using the Lloyd K-means estimator on synthetic blobs."""

import logging

import numpy as np

from kmeans import KMeans, create_sample_dataset, evaluate_clustering


def simple_example():
    """Simple example demonstrating K-means usage."""
    print("Simple K-means Example")
    print("=" * 50)

    X, y = create_sample_dataset(n_samples=2000, n_features=16, n_clusters=20, random_state=42)
    print(f"Using {X.shape[0]} samples with {X.shape[1]} features")

    print("\nCreating KMeans model with k=20...")
    kmeans = KMeans(
        n_clusters=20,
        max_iters=200,
        n_init=3,
        init='k-means++',
        random_state=42,
        verbose=True
    )

    print("\nFitting KMeans...")
    kmeans.fit(X)

    print(f"\nResults:")
    print(f"  Final inertia: {kmeans.inertia_:.2f}")
    print(f"  Iterations: {kmeans.n_iter_}")
    print(f"  Converged: {kmeans.converged_}")
    print(f"  Cluster centers shape: {kmeans.cluster_centers_.shape}")

    info = kmeans.get_cluster_info()
    print(f"\nCluster distribution:")
    print(f"  Average cluster size: {info['avg_cluster_size']:.1f}")
    print(f"  Largest cluster: {info['max_cluster_size']}")
    print(f"  Smallest cluster: {info['min_cluster_size']}")

    metrics = evaluate_clustering(X, kmeans.labels_)
    print(f"\nQuality:")
    print(f"  Silhouette: {metrics['silhouette']:.3f}")
    print(f"  Davies-Bouldin: {metrics['davies_bouldin']:.3f}")

    print(f"\nTesting prediction on new points...")
    queries = X[:100] + np.random.default_rng(0).normal(scale=0.1, size=(100, X.shape[1]))
    predicted_labels = kmeans.predict(queries)
    print(f"Predicted {len(predicted_labels)} labels")
    print(f"Label distribution: {np.bincount(predicted_labels, minlength=20)}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')
    simple_example()
