"""Histogram demo.

Drops 5000 particles through a 15-row board without any clock, then draws
the board and saves it next to the working directory.
"""

from __future__ import annotations

import logging

import matplotlib.pyplot as plt
import numpy as np

from ..core.config import BoardConfig, configure_logging
from ..simulation.board import GaltonBoard
from ..visualization.renderer import BoardRenderer

logger = logging.getLogger(__name__)


def main(num_paths: int = 5000, seed: int = 0) -> None:
    configure_logging()
    config = BoardConfig(row_count=15, batch_size=50, seed=seed)
    board = GaltonBoard.from_config(config, rng=np.random.default_rng(seed))
    board.run(num_paths)

    stats = board.stats()
    logger.info("Bin counts:\n%s", stats.histogram_frame().to_string(index=False))

    renderer = BoardRenderer(board)
    renderer.render(title=f"Galton Board ({config.row_count} rows)")
    plt.tight_layout()
    plt.savefig("histogram_demo.png", dpi=150)
    logger.info("Saved histogram_demo.png")
    plt.show()


if __name__ == "__main__":
    main()
