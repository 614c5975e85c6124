from pathlib import Path
from typing import List, Optional
import argparse
import logging

from pkmeans.config import DEFAULT_CHUNK_SIZE, DEFAULT_THRESHOLD, KMeansConfig
from pkmeans.core.threaded import kmeans_clustering
from pkmeans.data.generate import BlobsConfig, generate_blobs, save_dataset_bin, save_dataset_txt
from pkmeans.data.io import file_read, file_write
from pkmeans.exceptions import ConfigurationError
from pkmeans.metrics.metrics import throughput
from pkmeans.metrics.timers import Timer
from pkmeans.utils.logging import format_run_prefix, setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pkmeans",
        description="Параллельная (пул потоков) кластеризация K-means.",
    )
    parser.add_argument(
        "-i",
        "--input",
        type=Path,
        required=True,
        help="Файл с точками для кластеризации.",
    )
    parser.add_argument(
        "-n",
        "--clusters",
        type=int,
        required=True,
        help="Количество кластеров (K > 1).",
    )
    parser.add_argument(
        "-b",
        "--binary",
        action="store_true",
        help="Входной файл в бинарном формате.",
    )
    parser.add_argument(
        "-t",
        "--threshold",
        type=float,
        default=DEFAULT_THRESHOLD,
        help=f"Порог доли сменивших кластер точек (по умолчанию {DEFAULT_THRESHOLD}).",
    )
    parser.add_argument(
        "-p",
        "--threads",
        type=int,
        default=0,
        help="Количество потоков (0 = по числу ядер).",
    )
    parser.add_argument(
        "-c",
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        help=f"Размер чанка индексов на воркер (по умолчанию {DEFAULT_CHUNK_SIZE}).",
    )
    parser.add_argument(
        "-o",
        "--timing",
        action="store_true",
        help="Вывести тайминги ввода-вывода и вычислений.",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Журнал итераций.",
    )
    parser.add_argument(
        "--generate",
        type=int,
        nargs=3,
        metavar=("N", "D", "K"),
        help="Сначала сгенерировать синтетический набор в файл --input.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Seed для --generate.",
    )
    return parser


def _generate(args: argparse.Namespace) -> None:
    n_objs, n_coords, n_blobs = args.generate
    data, _ = generate_blobs(BlobsConfig(N=n_objs, D=n_coords, K=n_blobs, seed=args.seed))
    if args.binary:
        save_dataset_bin(data, args.input)
    else:
        save_dataset_txt(data, args.input)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logger = setup_logger(logging.DEBUG if args.debug else logging.INFO)

    try:
        config = KMeansConfig(
            n_clusters=args.clusters,
            threshold=args.threshold,
            n_threads=args.threads if args.threads > 0 else None,
            chunk_size=args.chunk_size,
            debug=args.debug,
        )

        if args.generate:
            _generate(args)

        with Timer() as t_read:
            X = file_read(args.input, binary=args.binary)

        prefix = format_run_prefix(X.shape, config.n_clusters)
        logger.info(f"{prefix} Clustering with {config.resolved_threads()} threads")

        result = kmeans_clustering(X, config, logger=logger)

        with Timer() as t_write:
            file_write(args.input, result.centroids, result.membership)
    except (ConfigurationError, OSError) as e:
        logger.error(str(e))
        return 1

    logger.info(
        f"{prefix} Finished: {result.state.value} after {result.n_iters} iterations "
        f"(delta={result.delta:.6f})"
    )

    if args.timing:
        N, D = X.shape
        io_time = t_read.elapsed + t_write.elapsed
        print(f"Number of threads = {result.n_threads}")
        print(f"Input file:     {args.input}")
        print(f"numObjs       = {N}")
        print(f"numCoords     = {D}")
        print(f"numClusters   = {config.n_clusters}")
        print(f"threshold     = {config.threshold:.4f}")
        print(f"nloops        = {result.n_iters}")
        print()
        print(f"I/O time           = {io_time:10.4f} sec")
        print(f"Computation timing = {result.elapsed:10.4f} sec")
        if result.elapsed > 0:
            ops = throughput(N, config.n_clusters, D, result.n_iters, result.elapsed)
            print(f"Throughput         = {ops:10.4e} ops/sec")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
