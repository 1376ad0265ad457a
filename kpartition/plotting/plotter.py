"""
Построение графиков раундов разбиения.

MatplotlibPlotter реализует протокол ``Plotter``: после каждого раунда
сохраняет диаграмму рассеяния по первым двум измерениям (центроиды отмечены
крестами) в файл ``round_<NNN>.png``, где NNN это порядковый номер вызова;
номер раунда восстановления отрицателен и может повторяться.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from kpartition.clusters.store import Clusters  # noqa: E402


@dataclass
class MatplotlibPlotter:
    """Сохраняет PNG-график каждого раунда в ``output_dir``."""

    output_dir: Path = Path("plots")
    dims: tuple[int, int] = (0, 1)
    dpi: int = 100
    calls: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.output_dir = Path(self.output_dir)

    def plot(self, clusters: Clusters, iteration: int) -> None:
        x_dim, y_dim = self.dims
        D = clusters.X.shape[1]
        # одномерные данные рисуем на прямой y=0
        if D == 1:
            y_dim = x_dim

        self.output_dir.mkdir(parents=True, exist_ok=True)

        fig, ax = plt.subplots(figsize=(8, 6))
        try:
            cmap = plt.get_cmap("tab10")
            for ci, cluster in enumerate(clusters):
                color = cmap(ci % 10)
                xs = cluster.points_in_dimension(x_dim)
                ys = cluster.points_in_dimension(y_dim) if D > 1 else 0 * xs
                ax.scatter(xs, ys, s=12, alpha=0.7, color=color, label=f"cluster {ci}")

            cx = clusters.centers_in_dimension(x_dim)
            cy = clusters.centers_in_dimension(y_dim) if D > 1 else 0 * cx
            ax.scatter(cx, cy, marker="x", s=120, linewidths=2.5, color="black", label="centroids")

            title = (
                f"Round {iteration}"
                if iteration >= 0
                else f"Empty-cluster recovery ({-iteration} changes)"
            )
            ax.set_title(title)
            ax.set_xlabel(f"dim {x_dim}")
            ax.set_ylabel(f"dim {y_dim}" if D > 1 else "")
            if len(clusters) <= 10:
                ax.legend(loc="best", fontsize=8)

            fig.savefig(self.output_dir / f"round_{self.calls:03d}.png", dpi=self.dpi)
            self.calls += 1
        finally:
            plt.close(fig)
