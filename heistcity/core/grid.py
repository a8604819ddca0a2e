"""Grid geometry for the two board topologies.

Hex boards use axial coordinates (q, r) stored in ``Position.x`` /
``Position.y``; the cube third axis is ``s = -q - r``.  Square boards use
plain cartesian cells.  Both share the ``GridGeometry`` interface so every
spatial call can be written once and threaded with a ``GridType`` or a
match-sized ``GridGeometry``.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterator

from heistcity.core.enums import GridType
from heistcity.core.models import Position

if TYPE_CHECKING:
    from heistcity.config import EngineConfig

SQRT3 = math.sqrt(3.0)

# Neighbour order is part of path tie-breaking; do not reorder.
HEX_DIRECTIONS: tuple[Position, ...] = (
    Position(1, 0),    # E
    Position(1, -1),   # NE
    Position(0, -1),   # NW
    Position(-1, 0),   # W
    Position(-1, 1),   # SW
    Position(0, 1),    # SE
)

SQUARE_DIRECTIONS: tuple[Position, ...] = (
    Position(0, -1),   # N
    Position(1, 0),    # E
    Position(0, 1),    # S
    Position(-1, 0),   # W
)

# Tie-break nudge for points landing exactly on a hex edge (sums to zero).
_LINE_EPSILON = (1e-6, 1e-6, -2e-6)


# ---------------------------------------------------------------------------
# Rounding helpers
# ---------------------------------------------------------------------------

def round_half_up(value: float) -> int:
    """Round to nearest integer, .5 toward +inf (Python's round() is banker's)."""
    return math.floor(value + 0.5)


def cube_round(q: float, r: float, s: float) -> Position:
    """Snap fractional cube coordinates to the nearest hex.

    The axis with the largest rounding residual is recomputed from the
    other two so that ``q + r + s == 0`` holds for the result.
    """
    rq = round_half_up(q)
    rr = round_half_up(r)
    rs = round_half_up(s)

    q_diff = abs(rq - q)
    r_diff = abs(rr - r)
    s_diff = abs(rs - s)

    if q_diff > r_diff and q_diff > s_diff:
        rq = -rr - rs
    elif r_diff > s_diff:
        rr = -rq - rs
    return Position(rq, rr)


def axial_round(q: float, r: float) -> Position:
    return cube_round(q, r, -q - r)


def hex_distance(a: Position, b: Position) -> int:
    dq = a.x - b.x
    dr = a.y - b.y
    return max(abs(dq), abs(dr), abs(dq + dr))


def chebyshev_distance(a: Position, b: Position) -> int:
    return max(abs(a.x - b.x), abs(a.y - b.y))


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


# ---------------------------------------------------------------------------
# Line drawing
# ---------------------------------------------------------------------------

def hex_line_draw(start: Position, end: Position) -> list[Position]:
    """Return the hexes on the line from *start* to *end*, both inclusive.

    Always ``hex_distance(start, end) + 1`` cells long.
    """
    n = hex_distance(start, end)
    if n == 0:
        return [start]

    sq, sr = start.x, start.y
    eq, er = end.x, end.y
    ss, es = -sq - sr, -eq - er
    eps_q, eps_r, eps_s = _LINE_EPSILON

    cells: list[Position] = []
    for i in range(n + 1):
        t = i / n
        q = _lerp(sq, eq, t) + eps_q
        r = _lerp(sr, er, t) + eps_r
        s = _lerp(ss, es, t) + eps_s
        cells.append(cube_round(q, r, s))
    return cells


def square_line_draw(start: Position, end: Position) -> list[Position]:
    """Cartesian counterpart of ``hex_line_draw`` (N = Chebyshev distance)."""
    n = chebyshev_distance(start, end)
    if n == 0:
        return [start]

    cells: list[Position] = []
    for i in range(n + 1):
        t = i / n
        x = _lerp(start.x, end.x, t) + _LINE_EPSILON[0]
        y = _lerp(start.y, end.y, t) + _LINE_EPSILON[1]
        cells.append(Position(round_half_up(x), round_half_up(y)))
    return cells


# ---------------------------------------------------------------------------
# Grid implementations
# ---------------------------------------------------------------------------

class GridGeometry(ABC):
    """Coordinate conversion, adjacency, distance and bounds for one topology."""

    grid_type: GridType

    @abstractmethod
    def distance(self, a: Position, b: Position) -> int:
        """Integer cell distance between two cells."""

    @abstractmethod
    def neighbors(self, pos: Position) -> list[Position]:
        """Adjacent cells in fixed direction order (may be out of bounds)."""

    @abstractmethod
    def in_bounds(self, pos: Position) -> bool:
        ...

    @abstractmethod
    def snap(self, x: float, y: float) -> Position:
        """Nearest cell to fractional grid coordinates."""

    @abstractmethod
    def clamp(self, x: float, y: float) -> Position:
        """Nearest in-bounds cell to fractional grid coordinates."""

    @abstractmethod
    def to_pixel(self, pos: Position) -> tuple[float, float]:
        ...

    @abstractmethod
    def from_pixel(self, px: float, py: float) -> tuple[float, float]:
        """Fractional grid coordinates under a pixel (use ``snap`` to round)."""

    @abstractmethod
    def line(self, a: Position, b: Position) -> list[Position]:
        ...

    @abstractmethod
    def all_cells(self) -> Iterator[Position]:
        ...

    def cells_in_range(self, center: Position, radius: int) -> list[Position]:
        """In-bounds cells within *radius* of *center* (center included)."""
        cells: list[Position] = []
        for y in range(center.y - radius, center.y + radius + 1):
            for x in range(center.x - radius, center.x + radius + 1):
                pos = Position(x, y)
                if self.in_bounds(pos) and self.distance(center, pos) <= radius:
                    cells.append(pos)
        return cells

    def is_adjacent(self, a: Position, b: Position) -> bool:
        return self.distance(a, b) == 1


class HexGrid(GridGeometry):
    """Hex-shaped board of axial cells with pointy-top pixel layout."""

    __slots__ = ("radius", "size_inches", "pixel_scale", "_center_px")

    grid_type = GridType.HEX

    def __init__(
        self,
        radius: int = 15,
        size_inches: float = 0.6,
        pixel_scale: int = 25,
        canvas_inches: int = 36,
    ) -> None:
        self.radius = radius
        self.size_inches = size_inches
        self.pixel_scale = pixel_scale
        self._center_px = canvas_inches * pixel_scale / 2

    def distance(self, a: Position, b: Position) -> int:
        return hex_distance(a, b)

    def neighbors(self, pos: Position) -> list[Position]:
        return [pos + d for d in HEX_DIRECTIONS]

    def in_bounds(self, pos: Position) -> bool:
        return hex_distance(pos, Position(0, 0)) <= self.radius

    def snap(self, x: float, y: float) -> Position:
        return axial_round(x, y)

    def clamp(self, x: float, y: float) -> Position:
        snapped = axial_round(x, y)
        if self.in_bounds(snapped):
            return snapped

        # Binary search for the largest scale toward the centre that lands inside.
        lo, hi = 0.0, 1.0
        for _ in range(10):
            mid = (lo + hi) / 2
            if self.in_bounds(axial_round(x * mid, y * mid)):
                lo = mid
            else:
                hi = mid
        return axial_round(x * lo, y * lo)

    def to_pixel(self, pos: Position) -> tuple[float, float]:
        ix = self.size_inches * SQRT3 * (pos.x + pos.y / 2)
        iy = self.size_inches * 1.5 * pos.y
        return (
            ix * self.pixel_scale + self._center_px,
            iy * self.pixel_scale + self._center_px,
        )

    def from_pixel(self, px: float, py: float) -> tuple[float, float]:
        ix = (px - self._center_px) / self.pixel_scale
        iy = (py - self._center_px) / self.pixel_scale
        q = (SQRT3 / 3 * ix - iy / 3) / self.size_inches
        r = (2 / 3 * iy) / self.size_inches
        return q, r

    def line(self, a: Position, b: Position) -> list[Position]:
        return hex_line_draw(a, b)

    def all_cells(self) -> Iterator[Position]:
        n = self.radius
        for r in range(-n, n + 1):
            for q in range(max(-n, -r - n), min(n, -r + n) + 1):
                yield Position(q, r)


class SquareGrid(GridGeometry):
    """Square board of 1-inch cells, four-way adjacency, Chebyshev range."""

    __slots__ = ("size", "pixel_scale")

    grid_type = GridType.SQUARE

    def __init__(self, size: int = 36, pixel_scale: int = 25) -> None:
        self.size = size
        self.pixel_scale = pixel_scale

    def distance(self, a: Position, b: Position) -> int:
        return chebyshev_distance(a, b)

    def neighbors(self, pos: Position) -> list[Position]:
        return [pos + d for d in SQUARE_DIRECTIONS]

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.size and 0 <= pos.y < self.size

    def snap(self, x: float, y: float) -> Position:
        return Position(round_half_up(x), round_half_up(y))

    def clamp(self, x: float, y: float) -> Position:
        snapped = self.snap(x, y)
        hi = self.size - 1
        return Position(min(max(snapped.x, 0), hi), min(max(snapped.y, 0), hi))

    def to_pixel(self, pos: Position) -> tuple[float, float]:
        return float(pos.x * self.pixel_scale), float(pos.y * self.pixel_scale)

    def from_pixel(self, px: float, py: float) -> tuple[float, float]:
        return px / self.pixel_scale, py / self.pixel_scale

    def line(self, a: Position, b: Position) -> list[Position]:
        return square_line_draw(a, b)

    def all_cells(self) -> Iterator[Position]:
        for y in range(self.size):
            for x in range(self.size):
                yield Position(x, y)


# A topology (default board size) or a geometry built for one match.
GridSpec = GridType | GridGeometry

_DEFAULT_GRIDS: dict[GridType, GridGeometry] = {
    GridType.HEX: HexGrid(),
    GridType.SQUARE: SquareGrid(),
}


def make_grid(grid_type: GridType, config: EngineConfig | None = None) -> GridGeometry:
    """Return the geometry for *grid_type*, sized from *config* when given."""
    if config is None:
        return _DEFAULT_GRIDS[GridType(grid_type)]
    if grid_type == GridType.HEX:
        return HexGrid(
            radius=config.hex_map_radius,
            size_inches=config.hex_size_inches,
            pixel_scale=config.pixel_scale,
            canvas_inches=config.square_map_size,
        )
    return SquareGrid(size=config.square_map_size, pixel_scale=config.pixel_scale)


def get_grid(grid: GridSpec) -> GridGeometry:
    """Geometry for *grid*: a built geometry is returned as is, a bare
    ``GridType`` maps to the shared default-sized instance.
    """
    if isinstance(grid, GridGeometry):
        return grid
    return _DEFAULT_GRIDS[GridType(grid)]
