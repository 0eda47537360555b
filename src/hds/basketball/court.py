from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from hds.contracts import Position, ShotZone
from hds.basketball.rules import MOVEMENT_SPEED
from hds.core.errors import CourtBoundsError

# Home team formation, attacking the right-hand basket. The away side mirrors
# it across the half-court line.
HOME_FORMATION: dict[Position, tuple[int, int]] = {
    Position.PG: (5, 15),
    Position.SG: (10, 10),
    Position.SF: (10, 20),
    Position.PF: (20, 12),
    Position.C: (20, 18),
}

CLOSE_RANGE = 8.0
MID_RANGE = 15.0


@dataclass(slots=True)
class MoveResult:
    x: float
    y: float
    remaining: float
    blocked: bool = False


class Court:
    """Grid court addressed by match player index.

    Coordinates are floats; the grid cell of a player is the floor of its
    coordinates and holds at most one player.
    """

    def __init__(self, player_positions: Sequence[Position], width: int = 50, height: int = 30) -> None:
        if width < 1 or height < 1:
            raise CourtBoundsError(f"court dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._positions = [Position(p) for p in player_positions]
        self._grid: list[list[int | None]] = self._empty_grid()
        self._coords: dict[int, tuple[float, float]] = {}
        self._formation: dict[int, tuple[int, int]] = {}
        self.ball_possession: int | None = None
        self.ball_position: tuple[float, float] = self._center()

    def place_player(self, index: int, x: float, y: float) -> None:
        self._check_index(index)
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            raise CourtBoundsError(f"invalid court position: ({x}, {y})")
        cx, cy = math.floor(x), math.floor(y)
        occupant = self._grid[cy][cx]
        if occupant is not None and occupant != index:
            raise CourtBoundsError(f"cell ({cx}, {cy}) already holds player {occupant}")
        self._clear_cell(index)
        self._grid[cy][cx] = index
        self._coords[index] = (float(x), float(y))
        if self.ball_possession == index:
            self.ball_position = (float(x), float(y))

    def remove_player(self, index: int) -> None:
        self._clear_cell(index)
        self._coords.pop(index, None)
        self._formation.pop(index, None)
        if self.ball_possession == index:
            self.set_ball_possession(None)

    def substitute(self, out_index: int, in_index: int) -> None:
        if out_index not in self._coords:
            raise CourtBoundsError(f"player {out_index} is not on the court")
        x, y = self._coords[out_index]
        slot = self._formation.get(out_index)
        self.remove_player(out_index)
        self.place_player(in_index, x, y)
        if slot is not None:
            self._formation[in_index] = slot

    def is_placed(self, index: int) -> bool:
        return index in self._coords

    def position_of(self, index: int) -> tuple[float, float]:
        if index not in self._coords:
            raise CourtBoundsError(f"player {index} is not on the court")
        return self._coords[index]

    def occupant(self, x: int, y: int) -> int | None:
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            raise CourtBoundsError(f"invalid court position: ({x}, {y})")
        return self._grid[y][x]

    def setup_teams(self, home: Sequence[int], away: Sequence[int]) -> None:
        self.reset()
        for side_indices, mirrored in ((home, False), (away, True)):
            for index in side_indices:
                self._check_index(index)
                x, y = HOME_FORMATION[self._positions[index]]
                if mirrored:
                    x = self.width - x
                cell = self._nearest_free_cell(x, y)
                self._formation[index] = cell
                self.place_player(index, *cell)

        point_guard = next((i for i in home if self._positions[i] is Position.PG), None)
        if point_guard is not None:
            self.set_ball_possession(point_guard)

    def reset_positions(self) -> None:
        """Restore the canonical formation and clear the ball for a new possession."""
        self.set_ball_possession(None)
        for index in list(self._coords):
            self._clear_cell(index)
        self._coords.clear()
        for index, (x, y) in self._formation.items():
            self.place_player(index, x, y)

    def reset(self) -> None:
        self._grid = self._empty_grid()
        self._coords.clear()
        self._formation.clear()
        self.ball_possession = None
        self.ball_position = self._center()

    def set_ball_possession(self, index: int | None) -> None:
        if index is None:
            self.ball_possession = None
            return
        if index not in self._coords:
            raise CourtBoundsError(f"ball cannot go to player {index}: not on the court")
        self.ball_possession = index
        self.ball_position = self._coords[index]

    def speed_of(self, index: int) -> float:
        self._check_index(index)
        return MOVEMENT_SPEED[self._positions[index]]

    def move_player(self, index: int, target_x: float, target_y: float) -> MoveResult:
        current_x, current_y = self.position_of(index)
        dx = target_x - current_x
        dy = target_y - current_y
        distance = math.hypot(dx, dy)
        if distance == 0:
            return MoveResult(x=current_x, y=current_y, remaining=0.0)

        step = min(distance, self.speed_of(index))
        ratio = step / distance
        new_x = max(0.0, min(self.width - 1, current_x + dx * ratio))
        new_y = max(0.0, min(self.height - 1, current_y + dy * ratio))

        occupant = self._grid[math.floor(new_y)][math.floor(new_x)]
        if occupant is not None and occupant != index:
            return MoveResult(x=current_x, y=current_y, remaining=distance, blocked=True)

        self.place_player(index, new_x, new_y)
        return MoveResult(x=new_x, y=new_y, remaining=distance - step)

    def distance(self, a: int, b: int) -> float:
        ax, ay = self.position_of(a)
        bx, by = self.position_of(b)
        return math.hypot(ax - bx, ay - by)

    def are_adjacent(self, a: int, b: int, max_distance: float = 3.0) -> bool:
        return self.distance(a, b) <= max_distance

    def get_players_in_range(self, x: float, y: float, max_range: float = 5.0) -> list[tuple[int, float]]:
        nearby = []
        for index, (px, py) in self._coords.items():
            dist = math.hypot(px - x, py - y)
            if dist <= max_range:
                nearby.append((index, dist))
        return sorted(nearby, key=lambda item: item[1])

    def get_nearest_opponent(self, index: int, opponents: Iterable[int]) -> int | None:
        nearest: int | None = None
        best = math.inf
        for opponent in opponents:
            if opponent not in self._coords:
                continue
            dist = self.distance(index, opponent)
            if dist < best:
                best = dist
                nearest = opponent
        return nearest

    def get_passing_options(self, index: int, teammates: Iterable[int], max_range: float = 15.0) -> list[tuple[int, float]]:
        options = []
        for mate in teammates:
            if mate == index or mate not in self._coords:
                continue
            dist = self.distance(index, mate)
            if 0 < dist <= max_range:
                options.append((mate, dist))
        return sorted(options, key=lambda item: item[1])

    def basket_for(self, attacking_right: bool) -> tuple[int, int]:
        return (self.width - 1 if attacking_right else 0, self.height // 2)

    def distance_to_basket(self, index: int, attacking_right: bool) -> float:
        x, y = self.position_of(index)
        bx, by = self.basket_for(attacking_right)
        return math.hypot(bx - x, by - y)

    def get_shooting_distance(self, index: int, attacking_right: bool) -> ShotZone:
        distance = self.distance_to_basket(index, attacking_right)
        if distance <= CLOSE_RANGE:
            return ShotZone.CLOSE
        if distance <= MID_RANGE:
            return ShotZone.MID
        return ShotZone.THREE

    def snapshot(self) -> dict[str, object]:
        return {
            "width": self.width,
            "height": self.height,
            "ball_position": {"x": round(self.ball_position[0], 1), "y": round(self.ball_position[1], 1)},
            "ball_possession": self.ball_possession,
            "players": [
                {
                    "index": index,
                    "position": self._positions[index].value,
                    "x": round(x, 1),
                    "y": round(y, 1),
                    "has_ball": self.ball_possession == index,
                }
                for index, (x, y) in sorted(self._coords.items())
            ],
        }

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._positions):
            raise CourtBoundsError(f"unknown player index {index}")

    def _clear_cell(self, index: int) -> None:
        coords = self._coords.get(index)
        if coords is None:
            return
        cx, cy = math.floor(coords[0]), math.floor(coords[1])
        if self._grid[cy][cx] == index:
            self._grid[cy][cx] = None

    def _nearest_free_cell(self, x: int, y: int) -> tuple[int, int]:
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            raise CourtBoundsError(f"formation spot ({x}, {y}) is outside a {self.width}x{self.height} court")
        for radius in range(max(self.width, self.height)):
            for dy in range(-radius, radius + 1):
                for dx in range(-radius, radius + 1):
                    if max(abs(dx), abs(dy)) != radius:
                        continue
                    cx, cy = x + dx, y + dy
                    if 0 <= cx < self.width and 0 <= cy < self.height and self._grid[cy][cx] is None:
                        return cx, cy
        raise CourtBoundsError("court has no free cell left")

    def _empty_grid(self) -> list[list[int | None]]:
        return [[None for _ in range(self.width)] for _ in range(self.height)]

    def _center(self) -> tuple[float, float]:
        return (float(self.width // 2), float(self.height // 2))
