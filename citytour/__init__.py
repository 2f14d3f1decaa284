from .distances import DistanceTable, CityNotFoundError, IndexOutOfRangeError, load_distance_table
from .GA import GeneticAlgorithm, GAConfig, solve
from .utils import (create_random_route, evaluate_route, nearest_neighbor_route, route_to_names,
                    validate_route, INVALID_FITNESS)
from .operators import (tournament_selection, order_crossover, heuristic_greedy_crossover,
                        swap_mutation, restore_start, CROSSOVERS)

__all__ = [
    'DistanceTable', 'CityNotFoundError', 'IndexOutOfRangeError', 'load_distance_table',
    'GeneticAlgorithm', 'GAConfig', 'solve',
    'create_random_route', 'evaluate_route', 'nearest_neighbor_route', 'route_to_names',
    'validate_route', 'INVALID_FITNESS',
    'tournament_selection', 'order_crossover', 'heuristic_greedy_crossover',
    'swap_mutation', 'restore_start', 'CROSSOVERS'
]
