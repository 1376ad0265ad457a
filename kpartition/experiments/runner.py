import logging
from typing import Any, Callable, Dict, List

import numpy as np

from kpartition.experiments.config import BenchmarkConfig
from kpartition.metrics.metrics import efficiency, speedup, throughput
from kpartition.metrics.timers import Timer
from kpartition.utils.logging import format_dataset_prefix


class BenchmarkRunner:
    """
    Замеряет время partition(...) на одном датасете для разного числа воркеров.

    Ожидается, что снаружи будет передан:
    - dataset: экземпляр Dataset
    - model_factory: callable, создающий KMeans по числу воркеров
      (``model_factory(n_workers=..., logger=...)``)

    Прогон с одним воркером (первый в ``config.workers``) служит базой для
    ускорения и эффективности.
    """

    def __init__(
        self,
        dataset: Any,
        model_factory: Callable[..., Any],
        k: int,
        config: BenchmarkConfig = BenchmarkConfig(),
        logger: logging.Logger | None = None,
    ) -> None:
        self.dataset = dataset
        self.model_factory = model_factory
        self.k = k
        self.config = config
        self.logger = logger

        meta: Dict[str, Any] = dict(self.dataset.dataset_info, K=k)
        self._dataset_prefix = format_dataset_prefix(meta)

    def _measure(self, n_workers: int) -> Dict[str, Any]:
        X = self.dataset.X

        for _ in range(self.config.warmup):
            self.model_factory(n_workers=n_workers).partition(X, self.k)

        times: List[float] = []
        rounds: List[int] = []
        assign_totals: List[float] = []
        for run_idx in range(1, self.config.repeats + 1):
            model = self.model_factory(n_workers=n_workers)
            with Timer() as t_fit:
                model.partition(X, self.k)
            times.append(t_fit.elapsed)
            rounds.append(int(model.n_iters_actual))
            assign_totals.append(float(model.t_assign_total))

            if self.logger:
                self.logger.info(
                    f"{self._dataset_prefix} workers={n_workers} "
                    f"run {run_idx}/{self.config.repeats}: "
                    f"T={t_fit.elapsed:.6f}s, rounds={rounds[-1]}"
                )

        t_avg = float(np.mean(times))
        return {
            "n_workers": n_workers,
            "T_avg": t_avg,
            "T_std": float(np.std(times)),
            "T_min": float(np.min(times)),
            "T_assign_total_avg": float(np.mean(assign_totals)),
            "rounds_avg": float(np.mean(rounds)),
            "throughput_ops": throughput(
                len(self.dataset), self.k, int(np.mean(rounds)), t_avg
            )
            if t_avg > 0.0
            else 0.0,
        }

    def run(self) -> List[Dict[str, Any]]:
        """
        Прогоняет все конфигурации воркеров.

        :return: список словарей со статистикой времени, ускорением
            и эффективностью для каждого числа воркеров
        """
        results = [self._measure(w) for w in self.config.workers]
        if not results:
            return results

        t_base = results[0]["T_avg"]
        for r in results:
            r["speedup"] = speedup(t_base, r["T_avg"]) if r["T_avg"] > 0.0 else 0.0
            r["efficiency"] = efficiency(r["speedup"], r["n_workers"])

            if self.logger:
                self.logger.info(
                    f"{self._dataset_prefix} workers={r['n_workers']}: "
                    f"T_avg={r['T_avg']:.6f}s, speedup={r['speedup']:.2f}, "
                    f"efficiency={r['efficiency']:.2f}"
                )

        return results
