"""
Plotting for the region view.

Plots are optional output: the reports never depend on them, and a missing
score column simply means no plot is written.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd

from skilookup.config import PLOTS_DIR
from skilookup.scoring.metrics import MONTH_COLUMN, SCORE_COLUMN
from skilookup.utils.helpers import slugify

logger = logging.getLogger(__name__)

TREND_WINDOW = 3


def rolling_mean(values, window: int) -> np.ndarray:
    """
    Smooth a series with a centred moving average.

    Position i averages the values from i - half + 1 to i + half - 1
    (clipped to the array), with half = ceil(window / 2). A window of 1 or
    less returns the values unchanged.

    Example:
        >>> rolling_mean([1.0, 2.0, 3.0, 4.0], 3)
        array([1.5, 2. , 3. , 3.5])
    """
    values = np.asarray(values, dtype=float)
    if window <= 1 or values.size == 0:
        return values.copy()

    half = -(-window // 2)
    n = values.size
    out = np.empty(n, dtype=float)
    for i in range(n):
        lo = max(0, i - half + 1)
        hi = min(n, i + half)
        out[i] = values[lo:hi].mean()
    return out


def save_region_score_trend(
    history: pd.DataFrame,
    region: str,
    output_dir: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """
    Plot a region's monthly weighted score and save it as PNG.

    A dashed rolling mean (window 3) is added once there are at least three
    scored months.

    Args:
        history: Output of region_history with a ``weighted_score`` column
        region: Region name for the title and file name
        output_dir: Target directory (default: ``plots/`` in the project root)

    Returns:
        Path to the saved image, or None when there is nothing to plot
    """
    if MONTH_COLUMN not in history.columns or SCORE_COLUMN not in history.columns:
        return None
    valid = history.loc[history[SCORE_COLUMN].notna()].sort_values(MONTH_COLUMN)
    if valid.empty:
        return None

    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    months = pd.to_datetime(valid[MONTH_COLUMN])
    scores = valid[SCORE_COLUMN].astype(float).to_numpy()

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(months, scores, color="mediumpurple", linewidth=2, marker="o", markersize=4, label="Weighted score")
    if len(scores) >= TREND_WINDOW:
        ax.plot(
            months,
            rolling_mean(scores, TREND_WINDOW),
            color="orange",
            linewidth=2,
            linestyle="--",
            label=f"Rolling mean (w={TREND_WINDOW})",
        )
    ax.set_title(f"{region}: weighted score trend")
    ax.set_xlabel("Month")
    ax.set_ylabel("Weighted score")
    ax.legend(loc="upper right")
    fig.autofmt_xdate()
    plt.tight_layout()

    output_dir = Path(output_dir) if output_dir is not None else PLOTS_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"{slugify(region)}_score_trend.png"
    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)

    logger.info(f"Saved score trend for {region} to {output_path}")
    return output_path
