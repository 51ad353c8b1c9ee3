"""
Path search over the board
----

Two different questions get answered here:

* `has_path_to_goal()`: can the pawn *ever* reach its goal row? Plain breadth-first search over the
  4-neighbour grid with fenced-off edges removed. Pawns are ignored (they move, or can be jumped),
  so this is purely about the walls. Fence legality relies on it.

* `weighted_distance()` / `shortest_path_from()`: how far is the goal *for the AI*? Dijkstra over the
  jump-aware move graph, where stepping onto a cell costs 1 plus small penalties for cells close to a
  fence or next to the opponent. The penalties make the AI prefer open lanes.
"""

import heapq
import math
from collections import deque
from itertools import count
from typing import Iterable, Optional

from src.quoridor.board import Board, Player
from src.quoridor.fence import Fence, is_blocked
from src.quoridor.moves import pawn_destinations
from src.quoridor.position import ORTHOGONAL_DIRECTIONS, Position

# Manhattan distance to the nearest fence-affected cell -> extra cost of stepping on the cell
FENCE_PROXIMITY_PENALTIES: dict[int, float] = {0: 0.10, 1: 0.05, 2: 0.03, 3: 0.01}
OPPONENT_ADJACENCY_PENALTY = 0.10
BASE_STEP_COST = 1.0


# --- PATH EXISTENCE ---
def has_path_to_goal(
    board: Board, player: Player, fences: Optional[Iterable[Fence]] = None
) -> bool:
    """
    Breadth-first search from the player's cell towards its goal row.
    ---

    `fences` may be a hypothetical collection (ex. the placed fences plus one candidate). Defaults to the
    fences on the board.
    """
    fence_set = frozenset(board.fences if fences is None else fences)
    start = player.position
    visited: set[Position] = {start}
    queue: deque[Position] = deque([start])

    while queue:
        current = queue.popleft()
        if current.row == player.goal_row:
            return True

        for direction in ORTHOGONAL_DIRECTIONS:
            neighbour = current.step(direction)
            if not neighbour.is_within_bounds() or neighbour in visited:
                continue
            if is_blocked(fence_set, current, neighbour):
                continue
            visited.add(neighbour)
            queue.append(neighbour)

    return False


# --- PENALTIES ---
def fence_distance(board: Board, position: Position) -> float:
    """Manhattan distance from the cell to the closest cell touched by any fence (inf without fences)"""
    return min(
        (
            position.manhattan(cell)
            for fence in board.fences
            for cell in fence.affected_cells()
        ),
        default=math.inf,
    )


def fence_proximity_penalty(board: Board, position: Position) -> float:
    if not board.fences:
        return 0.0
    distance = fence_distance(board, position)
    return FENCE_PROXIMITY_PENALTIES.get(int(distance), 0.0)


def _opponents(board: Board, goal_row: int) -> list[Player]:
    """The pawn heading for `goal_row` is the mover, every other pawn is in its way"""
    return [player for player in board.players if player.goal_row != goal_row]


def opponent_adjacency_penalty(board: Board, position: Position, goal_row: int) -> float:
    """Cells around the opponent (diagonals included) invite being jumped"""
    if any(
        position.is_neighbour_of(opponent.position)
        for opponent in _opponents(board, goal_row)
    ):
        return OPPONENT_ADJACENCY_PENALTY
    return 0.0


def edge_weight(board: Board, destination: Position, goal_row: int) -> float:
    return (
        BASE_STEP_COST
        + fence_proximity_penalty(board, destination)
        + opponent_adjacency_penalty(board, destination, goal_row)
    )


# --- WEIGHTED SHORTEST PATH ---
def _dijkstra(
    board: Board, start: Position, goal_row: int
) -> tuple[Optional[Position], dict[Position, float], dict[Position, Position]]:
    """
    Dijkstra from `start` until the first cell on `goal_row` is settled.
    ---

    Returns the goal cell reached (None if unreachable), the tentative distances and the predecessor map.
    Ties in the queue are settled in order of discovery.
    """
    occupied = [opponent.position for opponent in _opponents(board, goal_row)]
    step_costs: dict[Position, float] = {}
    distances: dict[Position, float] = {start: 0.0}
    previous: dict[Position, Position] = {}
    visited: set[Position] = set()
    tie_breaker = count()
    queue: list[tuple[float, int, Position]] = [(0.0, next(tie_breaker), start)]

    while queue:
        distance, _, current = heapq.heappop(queue)
        if current in visited:
            continue
        visited.add(current)

        if current.row == goal_row:
            return current, distances, previous

        for move in sorted(pawn_destinations(board, current, occupied)):
            if move in visited:
                continue
            if move not in step_costs:
                step_costs[move] = edge_weight(board, move, goal_row)
            new_distance = distance + step_costs[move]
            if new_distance < distances.get(move, math.inf):
                distances[move] = new_distance
                previous[move] = current
                heapq.heappush(queue, (new_distance, next(tie_breaker), move))

    return None, distances, previous


def weighted_distance(board: Board, start: Position, goal_row: int) -> float:
    """Heuristic cost to reach `goal_row` from `start`. `math.inf` when there is no way through."""
    goal, distances, _ = _dijkstra(board, start, goal_row)
    if goal is None:
        return math.inf
    return distances[goal]


def shortest_path_from(board: Board, player: Player) -> list[Position]:
    """
    The optimal route for the player, starting with its current cell.
    ---

    Same search as `weighted_distance()`, but the route is reconstructed so the AI can simply take the
    second cell. Empty list if the goal cannot be reached, a single cell if the player already stands on it.
    """
    goal, _, previous = _dijkstra(board, player.position, player.goal_row)
    if goal is None:
        return []

    path = [goal]
    while path[-1] != player.position:
        path.append(previous[path[-1]])
    path.reverse()
    return path
