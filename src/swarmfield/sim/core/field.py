from __future__ import annotations

from typing import List, Tuple

from ..utils.math2d import wrap_index

MAX_CELL_VALUE = 1.0


class PheromoneField:
    """Square toroidal grid of pheromone intensities in ``[0, 1]``.

    Cells are stored row-major in a flat list, ``index = iy * size + ix``.
    Every public accessor wraps its coordinates first, so any real-valued
    position resolves to an in-bounds cell.
    """

    def __init__(self, size: int, diffusion_mode: str = "in_place"):
        if size <= 0:
            raise ValueError(f"Field size must be positive, got {size}")
        if diffusion_mode not in ("in_place", "buffered"):
            raise ValueError(f"Unknown diffusion mode: {diffusion_mode}")
        self._size = size
        self._diffusion_mode = diffusion_mode
        self._cells: List[float] = [0.0] * (size * size)

    @property
    def size(self) -> int:
        return self._size

    @property
    def diffusion_mode(self) -> str:
        return self._diffusion_mode

    def cell_of(self, x: float, y: float) -> Tuple[int, int]:
        return (wrap_index(x, self._size), wrap_index(y, self._size))

    def sample(self, x: float, y: float) -> float:
        ix, iy = self.cell_of(x, y)
        return self._cells[iy * self._size + ix]

    def deposit(self, x: float, y: float, amount: float) -> None:
        ix, iy = self.cell_of(x, y)
        index = iy * self._size + ix
        self._cells[index] = min(MAX_CELL_VALUE, self._cells[index] + amount)

    def clear(self) -> None:
        cells = self._cells
        for index in range(len(cells)):
            cells[index] = 0.0

    def diffuse_and_decay(self, decay: float) -> None:
        if self._diffusion_mode == "buffered":
            self._diffuse(list(self._cells), decay)
        else:
            self._diffuse(self._cells, decay)

    def _diffuse(self, source: List[float], decay: float) -> None:
        # Cross stencil (no diagonals). When ``source`` is the live grid the
        # pass reads neighbours already updated earlier in the same pass.
        size = self._size
        cells = self._cells
        last = size - 1
        for y in range(size):
            row = y * size
            up = (last if y == 0 else y - 1) * size
            down = (0 if y == last else y + 1) * size
            for x in range(size):
                left = last if x == 0 else x - 1
                right = 0 if x == last else x + 1
                total = source[row + x] + source[up + x] + source[down + x] + source[row + left] + source[row + right]
                cells[row + x] = (total / 5) * decay

    def values(self) -> Tuple[float, ...]:
        return tuple(self._cells)

    def total(self) -> float:
        return sum(self._cells)

    def max_value(self) -> float:
        return max(self._cells)

    def occupied_cells(self) -> int:
        return len(self._cells) - self._cells.count(0.0)

