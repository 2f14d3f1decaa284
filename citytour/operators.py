import numpy as np
from typing import Callable, Dict, List, Optional

from .distances import DistanceTable

def tournament_selection(population: list, fitness_values: list, tournament_size: int, rng: np.random.Generator) -> list:
    """
    Select the best individual from a random tournament.

    Contestants are drawn with replacement; on equal fitness the first one drawn wins.

    Args:
        population: List of individuals in the population.
        fitness_values: List of fitness values for each individual.
        tournament_size: Number of individuals competing in the tournament.
        rng: Random number generator.

    Returns:
        Copy of the selected individual.
    """
    indices = rng.integers(0, len(population), size=tournament_size)
    best_idx = int(indices[0])
    for idx in indices[1:]:
        if fitness_values[idx] < fitness_values[best_idx]:
            best_idx = int(idx)
    return list(population[best_idx])

def order_crossover(parent1: list, parent2: list, rng: np.random.Generator) -> list:
    """
    OX crossover over the free segment [1, N) of two routes fixed at position 0.

    Args:
        parent1: First parent route, parent1[0] is the start city.
        parent2: Second parent route with the same start city.
        rng: Random number generator.

    Returns:
        Child route: parent1's slice [a, b] in place, the other cities in parent2's
        order starting right after b and wrapping around the free segment.
    """
    size = len(parent1)
    if size < 3:
        return list(parent1)

    free = size - 1
    start, end = sorted(int(c) for c in rng.integers(1, size, size=2))

    child = [-1] * size
    child[0] = parent1[0]
    child[start:end + 1] = parent1[start:end + 1]
    used = set(child[start:end + 1])

    # free-segment positions in fill order: end+1, ..., N-1, 1, ..., end
    order = [1 + (end + k) % free for k in range(free)]
    targets = [pos for pos in order if child[pos] == -1]
    donors = [parent2[pos] for pos in order if parent2[pos] not in used]

    for pos, city in zip(targets, donors):
        child[pos] = city
    return child

def heuristic_greedy_crossover(parent1: list, parent2: list, rng: np.random.Generator = None,
                               table: DistanceTable = None) -> list:
    """
    HGreX crossover: extend the child with the cheaper of the two parents' successor edges.

    When neither parent offers an unused successor the nearest unused city is taken.
    Deterministic, ``rng`` is accepted only to share the crossover signature.

    Args:
        parent1: First parent route, parent1[0] is the start city.
        parent2: Second parent route with the same start city.
        rng: Unused.
        table: Distance table the edge costs come from.

    Returns:
        Child route starting at parent1[0].
    """
    if table is None:
        raise ValueError("heuristic_greedy_crossover needs a distance table")

    size = len(parent1)
    succ1 = _successors(parent1)
    succ2 = _successors(parent2)

    child = [parent1[0]]
    used = {parent1[0]}
    current = parent1[0]

    while len(child) < size:
        options = [c for c in (succ1.get(current), succ2.get(current))
                   if c is not None and c not in used]
        if not options:
            unused = [c for c in parent1 if c not in used]
            nxt = min(unused, key=lambda c: table.cost(current, c))
        elif len(options) == 1:
            nxt = options[0]
        else:
            # min() keeps the first on ties, so parent1's successor wins
            nxt = min(options, key=lambda c: table.cost(current, c))

        child.append(nxt)
        used.add(nxt)
        current = nxt
    return child

def _successors(route: list) -> Dict[int, Optional[int]]:
    return {city: (route[i + 1] if i + 1 < len(route) else None) for i, city in enumerate(route)}

def swap_mutation(individual: list, rng: np.random.Generator) -> list:
    """
    Swap two random cities in the route, never touching position 0.

    Args:
        individual: Route to mutate.
        rng: Random number generator.

    Returns:
        Mutated route with two cities swapped.
    """
    size = len(individual)
    if size <= 2: return individual
    idx1, idx2 = (int(i) for i in rng.choice(np.arange(1, size), size=2, replace=False))
    individual[idx1], individual[idx2] = individual[idx2], individual[idx1]
    return individual

def restore_start(individual: list, start: int) -> list:
    """Move ``start`` back to position 0, swapping the displaced city into its slot."""
    if individual and individual[0] != start:
        pos = individual.index(start)
        individual[0], individual[pos] = individual[pos], individual[0]
    return individual

CROSSOVERS: Dict[str, Callable[..., List[int]]] = {
    'ox': order_crossover,
    'hgrex': heuristic_greedy_crossover,
}
