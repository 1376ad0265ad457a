# main.py
import argparse
import json
import sys
from pathlib import Path

from kpartition.core.partition import DEFAULT_DELTA_THRESHOLD, DEFAULT_N_ITERS, KMeans
from kpartition.data.dataset import Dataset
from kpartition.errors import KMeansError
from kpartition.experiments.config import BenchmarkConfig, repeats_for
from kpartition.experiments.runner import BenchmarkRunner
from kpartition.parallel.dispatcher import ParallelConfig
from kpartition.utils.logging import format_dataset_prefix, setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Разбиение наблюдений на k кластеров (алгоритм Ллойда)."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--dataset",
        type=Path,
        help="Файл с наблюдениями (.npy или текст: координаты через пробел).",
    )
    source.add_argument(
        "--blobs",
        type=int,
        nargs=3,
        metavar=("N", "D", "GROUPS"),
        help="Сгенерировать датасет make_blobs из N точек размерности D.",
    )
    parser.add_argument("-k", type=int, required=True, help="Количество кластеров.")
    parser.add_argument(
        "--workers", type=int, default=1, help="Количество потоков-воркеров."
    )
    parser.add_argument(
        "--delta",
        type=float,
        default=DEFAULT_DELTA_THRESHOLD,
        help="Порог сходимости: доля точек, сменивших кластер, в (0, 1).",
    )
    parser.add_argument(
        "--max-rounds",
        type=int,
        default=DEFAULT_N_ITERS,
        help="Предел числа раундов.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed генератора.")
    parser.add_argument(
        "--plot-dir",
        type=Path,
        default=None,
        help="Сохранять PNG-график каждого раунда в эту директорию.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Записать центроиды и метки в JSON.",
    )
    parser.add_argument(
        "--benchmark",
        type=int,
        nargs="+",
        default=None,
        metavar="WORKERS",
        help="Вместо одного прогона замерить масштабирование по числу воркеров.",
    )
    parser.add_argument(
        "--repeats",
        type=int,
        default=None,
        help="Число замеров на конфигурацию (по умолчанию зависит от N).",
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.benchmark and args.plot_dir is not None:
        parser.error("--plot-dir cannot be combined with --benchmark")
    logger = setup_logger()

    try:
        if args.dataset is not None:
            dataset = Dataset.load(args.dataset)
        else:
            N, D, groups = args.blobs
            dataset = Dataset.blobs(N, D, groups, seed=args.seed)

        plotter = None
        if args.plot_dir is not None:
            # matplotlib импортируется только при построении графиков
            from kpartition.plotting.plotter import MatplotlibPlotter

            plotter = MatplotlibPlotter(output_dir=args.plot_dir)

        def model_factory(n_workers: int = args.workers, **kw) -> KMeans:
            return KMeans(
                delta_threshold=args.delta,
                plotter=kw.get("plotter"),
                n_iters=args.max_rounds,
                parallel=ParallelConfig(n_workers=n_workers),
                seed=args.seed,
                logger=kw.get("logger"),
            )

        prefix = format_dataset_prefix(dict(dataset.dataset_info, K=args.k))

        if args.benchmark:
            config = BenchmarkConfig(
                workers=tuple(args.benchmark),
                repeats=args.repeats or repeats_for(len(dataset)),
            )
            results = BenchmarkRunner(
                dataset, model_factory, k=args.k, config=config, logger=logger
            ).run()
            if args.output is not None:
                args.output.write_text(
                    json.dumps(results, ensure_ascii=False, indent=2),
                    encoding="utf-8",
                )
            return 0

        logger.info(f"{prefix} Partitioning with {args.workers} worker(s)")
        model = model_factory(plotter=plotter, logger=logger)
        clusters = model.partition(dataset.X, args.k)
    except KMeansError as err:
        logger.error(f"Partitioning failed: {err}")
        return 1

    for ci, cluster in enumerate(clusters):
        center = ", ".join(f"{v:.4f}" for v in cluster.center)
        logger.info(f"{prefix} cluster {ci}: size={len(cluster)} center=[{center}]")
    logger.info(
        f"{prefix} Finished after {model.n_iters_actual} rounds "
        f"(T_assign={model.t_assign_total:.6f}s, "
        f"T_recover={model.t_recover_total:.6f}s, "
        f"T_update={model.t_update_total:.6f}s)"
    )

    if args.output is not None:
        payload = {
            "centroids": clusters.centers.tolist(),
            "labels": clusters.labels.tolist(),
            "rounds": model.n_iters_actual,
        }
        args.output.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        logger.info(f"Result saved to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
