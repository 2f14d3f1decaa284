import logging
import math
import numpy as np
import os
import csv
from typing import Dict, Tuple, List
import matplotlib.pyplot as plt

from .distances import DistanceTable

logger = logging.getLogger(__name__)

# Fitness of a chromosome that cannot be driven (wrong length or missing edge)
INVALID_FITNESS = math.inf


def create_random_route(num_cities: int, start: int, rng: np.random.Generator) -> list:
    """
    Create a random chromosome fixed at the start city.

    Args:
        num_cities: Total number of cities including the start.
        start: Index of the start city.
        rng: Random number generator.

    Returns:
        [start] followed by a shuffle of every other city index.
    """
    cities = [c for c in range(num_cities) if c != start]
    rng.shuffle(cities)
    return [start] + cities


def evaluate_route(route: list, table: DistanceTable) -> float:
    """
    Total directed cycle distance of a chromosome, closing edge included.

    Args:
        route: Permutation of city indices.
        table: Distance table.

    Returns:
        The distance, or INVALID_FITNESS when the route has the wrong length or
        uses a leg the table has no edge for.
    """
    n = len(table)
    if route is None or len(route) != n or n == 0:
        return INVALID_FITNESS

    total = 0
    for u, v in zip(route, route[1:] + route[:1]):
        if not 0 <= u < n or not 0 <= v < n:
            return INVALID_FITNESS
        d = table.cost(u, v)
        if d == INVALID_FITNESS:
            return INVALID_FITNESS
        total += d
    return total


def nearest_neighbor_route(table: DistanceTable, start_city: str) -> Tuple[List[str], int]:
    """
    Greedy nearest neighbour tour from ``start_city``.

    Zero or missing distances are not edges. If no unvisited city is reachable the
    tour stops early and returns to the start with whatever cities it has.

    Args:
        table: Distance table.
        start_city: Name of the start (and end) city.

    Returns:
        City names from the start back to the start, and the total distance.
    """
    start = table.require_index(start_city)
    n = len(table)

    visited = {start}
    route = [start]
    total = 0
    current = start

    for _ in range(n - 1):
        next_city = None
        shortest = None
        for city in range(n):
            if city in visited:
                continue
            d = table.distance(current, city)
            if d > 0 and (shortest is None or d < shortest):
                next_city, shortest = city, d

        if next_city is None:
            logger.warning("No reachable unvisited city from '%s', stopping after %d of %d cities",
                           table.city_name(current), len(route), n)
            break

        route.append(next_city)
        visited.add(next_city)
        total += shortest
        current = next_city

    if current != start and table.has_edge(current, start):
        total += table.distance(current, start)
    elif current == start:
        total += table.distance(start, start)
    route.append(start)

    return table.names_for(route), total


def route_to_names(route: list, table: DistanceTable) -> List[str]:
    """City names of a chromosome with the start city appended to close the cycle."""
    names = table.names_for(route)
    if names:
        names.append(names[0])
    return names


def validate_route(table: DistanceTable, route: List[str]) -> Tuple[bool, str]:
    """
    Check a closed route of city names against the table's edge graph.

    Args:
        table: Distance table.
        route: City names, first and last equal to the start.

    Returns:
        (bool, str): (is_valid, error_message)
    """
    if len(route) < 2:
        return False, "Route is too short"

    if route[0] != route[-1]:
        return False, f"Route doesn't return to start (starts at {route[0]}, ends at {route[-1]})"

    for name in route:
        if name not in table:
            return False, f"Unknown city {name}"

    stops = route[:-1]
    missing = set(table.city_names) - set(stops)
    if missing:
        return False, f"Missing cities: {sorted(missing)}"
    if len(stops) != len(set(stops)):
        return False, "Some cities are visited more than once"

    graph = table.to_graph()
    indices = [table.city_index(name) for name in route]
    for step, (u, v) in enumerate(zip(indices, indices[1:])):
        if u == v:
            continue
        if not graph.has_edge(u, v):
            return False, f"No direct edge between {route[step]} and {route[step + 1]} at step {step}"

    return True, "Valid"


def save_solution_to_file(route, method, distance, baseline, filename=None, output_dir=None):
    """
    Append one solver result to a CSV file.

    Args:
        route: City names of the route.
        method: Name of the solver that produced it.
        distance: Total distance of the route.
        baseline: Distance to compare against (e.g. the nearest neighbour tour).
        filename: Optional filename (defaults to 'results.csv').
        output_dir: Optional output directory.

    Returns:
        Full path to the saved file.
    """
    if filename is None:
        filename = "results.csv"

    if output_dir is not None:
        os.makedirs(output_dir, exist_ok=True)
        filename = os.path.join(output_dir, filename)

    if baseline and math.isfinite(baseline) and math.isfinite(distance):
        improvement = (baseline - distance) / baseline * 100
    else:
        improvement = 0.0

    file_exists = os.path.isfile(filename)

    with open(filename, 'a', newline='') as f:
        fieldnames = ['Method', 'Start', 'Cities', 'Baseline', 'Distance', 'Improvement_%', 'Route']
        writer = csv.DictWriter(f, fieldnames=fieldnames)

        if not file_exists:
            writer.writeheader()

        writer.writerow({
            'Method': method,
            'Start': route[0] if route else '',
            'Cities': max(len(route) - 1, 0),
            'Baseline': baseline,
            'Distance': distance,
            'Improvement_%': f"{improvement:.2f}",
            'Route': " -> ".join(route)
        })

    return filename


def plot_evolution(history: Dict[str, list], title: str = "GA Evolution", save_path=None):
    """
    Plot best and average distance over generations.

    Args:
        history: Dictionary with 'best_history' and 'avg_history' lists.
        title: Plot title.
        save_path: Optional path to save the plot image.
    """
    plt.figure(figsize=(10, 6))

    generations = range(len(history['best_history']))
    # invalid chromosomes have infinite fitness, keep them off the plot
    best = [b if math.isfinite(b) else np.nan for b in history['best_history']]
    avg = [a if math.isfinite(a) else np.nan for a in history['avg_history']]
    plt.plot(generations, best, 'b-', label='Best Distance', linewidth=2)
    plt.plot(generations, avg, 'g--', label='Average Distance', linewidth=1.5, alpha=0.7)

    plt.xlabel('Generation', fontsize=12)
    plt.ylabel('Distance', fontsize=12)
    plt.title(title, fontsize=14)
    plt.legend()
    plt.grid(True, alpha=0.3)
    plt.tight_layout()

    if save_path:
        directory = os.path.dirname(save_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        plt.close()
    else:
        plt.show()
