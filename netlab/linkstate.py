"""Link-state routing: shortest paths from one router using Dijkstra's method."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import TextIO

UNREACHABLE = 1000
"""Cost that stands for "no link"; negative costs are read as this value."""


@dataclass(frozen=True)
class Route:
    """The cheapest way from the source router to one destination."""

    destination: int
    cost: int
    path: tuple[int, ...]


def _normalised(costs: Sequence[Sequence[int]]) -> list[list[int]]:
    matrix = [[UNREACHABLE if cost < 0 else cost for cost in row] for row in costs]
    if not matrix:
        raise ValueError("the cost matrix is empty")
    if any(len(row) != len(matrix) for row in matrix):
        raise ValueError("the cost matrix must be square")
    return matrix


def shortest_paths(costs: Sequence[Sequence[int]], source: int) -> list[Route]:
    """Return one route per router, in router order, starting from ``source``."""
    matrix = _normalised(costs)
    count = len(matrix)
    if not 0 <= source < count:
        raise ValueError(f"source router {source} is not in 0..{count - 1}")

    dist = list(matrix[source])
    previous = [source] * count
    done = [False] * count
    done[source] = True

    for _ in range(count):
        candidates = [w for w, finished in enumerate(done) if not finished and dist[w] < UNREACHABLE]
        if not candidates:
            break
        nearest = min(candidates, key=dist.__getitem__)
        done[nearest] = True
        base = dist[nearest]
        for w, cost in enumerate(matrix[nearest]):
            if not done[w] and base + cost < dist[w]:
                dist[w] = base + cost
                previous[w] = nearest

    routes = []
    for destination in range(count):
        hops = [destination]
        node = destination
        while node != source:
            node = previous[node]
            hops.append(node)
        routes.append(Route(destination, dist[destination], tuple(reversed(hops))))
    return routes


def format_routes(routes: Iterable[Route], source: int) -> str:
    """Render routes as a report, each path written from destination back to source."""
    lines = ["Printing the shortest paths from the source vertex:"]
    for route in routes:
        lines.append(f"{source}->{route.destination}")
        lines.append("The path:" + "<-".join(str(hop) for hop in reversed(route.path)))
        lines.append(f"Shortest Distance:{route.cost}")
    return "\n".join(lines)


def _read_ints(stream: TextIO) -> Iterator[int]:
    for line in stream:
        for token in line.split():
            yield int(token)


def main(argv: Sequence[str] | None = None) -> int:
    """Read the router count, the cost matrix and the source from standard input."""
    parser = argparse.ArgumentParser(
        prog="netlab-linkstate",
        description=(
            "Read the number of routers, the cost matrix row by row and the source "
            f"router from standard input. Use {UNREACHABLE} or a negative value for no link."
        ),
    )
    parser.parse_args(argv)
    try:
        numbers = _read_ints(sys.stdin)
        count = next(numbers)
        costs = [[next(numbers) for _ in range(count)] for _ in range(count)]
        source = next(numbers)
        routes = shortest_paths(costs, source)
    except StopIteration:
        print("error: input ended early", file=sys.stderr)
        return 1
    except ValueError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    print(format_routes(routes, source))
    return 0