"""Command line entry point: load a text matrix, cluster it, print the result.

Example:
    python -m kmeans input.txt -k 2
    python -m kmeans points.csv -k 3 --delimiter , --init k-means++ --seed 42
"""

import argparse
import logging
import sys
from typing import List, Optional

from .engine import EMPTY_CLUSTER_POLICIES, INIT_METHODS, ClusteringEngine, KMeansConfig
from .exceptions import KMeansError
from .io import format_matrix, format_result, load_dataset

logger = logging.getLogger(__name__)


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {number}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog='kmeans-lloyd',
        description="Cluster the points of a text matrix with Lloyd's K-means",
    )
    p.add_argument('input', nargs='?', default='input.txt', help='Text file, one point per line')
    p.add_argument('-k', '--clusters', type=int, default=2, help='Number of clusters')
    p.add_argument('--max-iters', type=int, default=100, help='Iteration cap')
    p.add_argument('--tol', type=float, default=0.0, help='Stop once no centroid moves more than this')
    p.add_argument('--init', choices=INIT_METHODS, default='first', help='Initial centroid selection')
    p.add_argument('--empty-cluster', choices=EMPTY_CLUSTER_POLICIES, default='keep',
                   help='What to do with a cluster that loses all its points')
    p.add_argument('--seed', type=int, default=None, help='Random seed for random / k-means++ init')
    p.add_argument('--delimiter', default=None, help='Column separator (default: whitespace)')
    p.add_argument('--precision', type=_non_negative_int, default=4, help='Decimal places in the output')
    p.add_argument('--print-data', action='store_true', help='Print the loaded matrix first')
    p.add_argument('-v', '--verbose', action='store_true', help='Log every iteration')
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        dataset = load_dataset(args.input, delimiter=args.delimiter)
        config = KMeansConfig(
            n_clusters=args.clusters,
            max_iters=args.max_iters,
            tol=args.tol,
            init=args.init,
            empty_cluster=args.empty_cluster,
            random_state=args.seed,
            verbose=args.verbose,
        )
        engine = ClusteringEngine(dataset.rows, dataset.cols, args.clusters, dataset, config=config)
    except (OSError, KMeansError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.print_data:
        print(f"{dataset.rows} x {dataset.cols}")
        print(format_matrix(dataset, precision=args.precision))
        print()

    result = engine.run()
    print(format_result(result, precision=args.precision))
    return 0


if __name__ == '__main__':
    sys.exit(main())
