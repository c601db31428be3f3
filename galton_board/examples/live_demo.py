"""Live animation demo.

Reads the board configuration from ``GALTON_*`` environment variables and
animates it in a matplotlib window, e.g.::

    GALTON_RATE=50 GALTON_BATCH_SIZE=10 python -m galton_board.examples.live_demo
"""

from __future__ import annotations

import matplotlib.pyplot as plt

from ..core.config import BoardConfig, configure_logging
from ..simulation.board import GaltonBoard
from ..visualization.renderer import BoardRenderer


def main() -> None:
    configure_logging()
    config = BoardConfig.from_env()
    board = GaltonBoard.from_config(config)
    renderer = BoardRenderer(board)
    anim = renderer.animate(max_fps=config.max_fps)  # noqa: F841 (keep a reference)
    plt.show()


if __name__ == "__main__":
    main()
