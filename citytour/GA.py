import functools
import logging
import numpy as np
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Union
from tqdm import tqdm

from .distances import DistanceTable
from .utils import (
    create_random_route,
    evaluate_route,
    nearest_neighbor_route,
    route_to_names,
)
from .operators import (
    CROSSOVERS,
    heuristic_greedy_crossover,
    restore_start,
    swap_mutation,
    tournament_selection,
)

logger = logging.getLogger(__name__)

MIN_POPULATION_SIZE = 10
DEFAULT_POPULATION_SIZE = 50
MIN_GENERATIONS = 10
DEFAULT_GENERATIONS = 200

@dataclass
class GAConfig:
    population_size: int = DEFAULT_POPULATION_SIZE
    generations: int = DEFAULT_GENERATIONS
    mutation_rate: float = 0.01
    tournament_size: int = 5
    elite_size: int = 2
    crossover: str = 'ox'
    seed: Optional[int] = None
    verbose: bool = True
    update_interval: int = 10

    def __post_init__(self):
        if self.population_size <= 0:
            raise ValueError(f"population_size must be positive, got {self.population_size}")
        if self.generations <= 0:
            raise ValueError(f"generations must be positive, got {self.generations}")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError(f"mutation_rate must be in [0, 1], got {self.mutation_rate}")
        if self.tournament_size < 1:
            raise ValueError(f"tournament_size must be at least 1, got {self.tournament_size}")
        if not 0 <= self.elite_size <= self.population_size:
            raise ValueError(f"elite_size must be in [0, {self.population_size}], got {self.elite_size}")
        if self.crossover not in CROSSOVERS:
            raise ValueError(f"Unknown crossover '{self.crossover}', expected one of {sorted(CROSSOVERS)}")
        if self.update_interval < 1:
            raise ValueError(f"update_interval must be at least 1, got {self.update_interval}")

    @classmethod
    def with_fallbacks(cls, population_size: Optional[int] = None, generations: Optional[int] = None,
                       **kwargs) -> "GAConfig":
        """Build a config from user input, replacing missing or too small sizes with the defaults."""
        if population_size is None or population_size < MIN_POPULATION_SIZE:
            if population_size is not None:
                logger.warning("Population size %s below %d, using %d",
                               population_size, MIN_POPULATION_SIZE, DEFAULT_POPULATION_SIZE)
            population_size = DEFAULT_POPULATION_SIZE
        if generations is None or generations < MIN_GENERATIONS:
            if generations is not None:
                logger.warning("Generations %s below %d, using %d",
                               generations, MIN_GENERATIONS, DEFAULT_GENERATIONS)
            generations = DEFAULT_GENERATIONS
        return cls(population_size=population_size, generations=generations, **kwargs)

class GeneticAlgorithm:
    def __init__(self, table: DistanceTable, start_city: str, config: GAConfig = None,
                 crossover: Union[str, Callable, None] = None, rng: np.random.Generator = None):
        self.table = table
        self.config = config or GAConfig()
        self.start = table.require_index(start_city)
        self.num_cities = len(table)
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        crossover = crossover if crossover is not None else self.config.crossover
        self.crossover_name = crossover if isinstance(crossover, str) else getattr(crossover, '__name__', 'custom')
        self.crossover = self._bind_crossover(crossover)

        self.best_fitness_history: List[float] = []
        self.avg_fitness_history: List[float] = []

        self.population = self._create_initial_population()

    def _bind_crossover(self, crossover) -> Callable:
        if callable(crossover):
            op = crossover
        elif crossover in CROSSOVERS:
            op = CROSSOVERS[crossover]
        else:
            raise ValueError(f"Unknown crossover '{crossover}', expected one of {sorted(CROSSOVERS)}")
        if op is heuristic_greedy_crossover:
            return functools.partial(op, table=self.table)
        return op

    def _create_initial_population(self) -> List[list]:
        return [create_random_route(self.num_cities, self.start, self.rng)
                for _ in range(self.config.population_size)]

    def _evaluate(self, route: list) -> float:
        return evaluate_route(route, self.table)

    def _evaluate_population(self, population: List[list]) -> List[float]:
        return [self._evaluate(route) for route in population]

    def _next_generation(self, population: List[list], fitness_values: List[float]) -> List[list]:
        new_population = []
        sorted_idx = np.argsort(fitness_values, kind='stable')

        # Elitism
        for i in sorted_idx[:self.config.elite_size]:
            new_population.append(list(population[i]))

        # Offspring
        while len(new_population) < self.config.population_size:
            p1 = tournament_selection(population, fitness_values, self.config.tournament_size, self.rng)
            p2 = tournament_selection(population, fitness_values, self.config.tournament_size, self.rng)

            child = self.crossover(p1, p2, self.rng)
            if self.rng.random() < self.config.mutation_rate:
                child = swap_mutation(child, self.rng)
            new_population.append(restore_start(child, self.start))

        return new_population

    @property
    def history(self) -> Dict[str, List[float]]:
        return {
            'best_history': self.best_fitness_history,
            'avg_history': self.avg_fitness_history
        }

    def run(self, generations: int = None) -> Tuple[List[str], float]:
        """
        Evolve the population for ``generations`` generations (config value by default).

        Returns:
            City names of the best route, closed at the start city, and its distance.
        """
        if generations is None:
            generations = self.config.generations
        if generations <= 0:
            raise ValueError(f"generations must be positive, got {generations}")

        population = self.population
        fitness_values = self._evaluate_population(population)

        pbar = None
        if self.config.verbose:
            pbar = tqdm(total=generations, desc=f"GA ({self.crossover_name})", unit="gen")

        interval = self.config.update_interval
        for gen in range(generations):
            population = self._next_generation(population, fitness_values)
            fitness_values = self._evaluate_population(population)

            best_fitness = float(np.min(fitness_values))
            self.best_fitness_history.append(best_fitness)
            self.avg_fitness_history.append(float(np.mean(fitness_values)))

            if gen % interval == 0 or gen == generations - 1:
                logger.debug("Generation %d: best distance = %s", gen, best_fitness)
            if pbar and ((gen + 1) % interval == 0 or gen == generations - 1):
                pbar.update(gen + 1 - pbar.n)
                pbar.set_postfix({'best': f'{best_fitness:.0f}'})

        if pbar: pbar.close()

        self.population = population
        best_idx = int(np.argmin(fitness_values))
        best_route = population[best_idx]
        return route_to_names(best_route, self.table), fitness_values[best_idx]

def solve(table: DistanceTable, start_city: str, method: str = 'genetic',
          config: GAConfig = None) -> Tuple[List[str], float]:
    """
    Solve the fixed-start TSP on ``table``.

    Args:
        table: Distance table.
        start_city: Name of the start (and end) city.
        method: 'genetic' or 'nearest_neighbor'.
        config: GA configuration, ignored by nearest neighbour.

    Returns:
        City names of the route, closed at the start city, and its distance.
    """
    if method == 'nearest_neighbor':
        return nearest_neighbor_route(table, start_city)
    if method == 'genetic':
        ga = GeneticAlgorithm(table, start_city, config)
        return ga.run()
    raise ValueError(f"Unknown method '{method}', expected 'genetic' or 'nearest_neighbor'")
