import argparse
import logging

from citytour import CROSSOVERS, DistanceTable, GAConfig, GeneticAlgorithm, nearest_neighbor_route, validate_route
from citytour.utils import plot_evolution, save_solution_to_file


def solution(table: DistanceTable, start_city: str, method: str, config: GAConfig,
             results: str = None, plot_dir: str = None):
    """
    Run one solver on the loaded table and report its route.

    Args:
        table: Loaded distance table.
        start_city: Start (and end) city name.
        method: 'nearest_neighbor', 'genetic' (crossover from config), 'ox' or 'hgrex'.
        config: GA configuration used by the GA methods.
        results: Optional CSV file to append the result to.
        plot_dir: Optional directory for the GA evolution plot.

    Returns:
        (route, distance)
    """
    if method == 'nearest_neighbor':
        route, distance = nearest_neighbor_route(table, start_city)
        history = None
    else:
        ga = GeneticAlgorithm(table, start_city, config)
        route, distance = ga.run()
        history = ga.history

    print(f"\nRoute using {method}:")
    print(" -> ".join(route))
    print(f"Total distance: {distance} km")

    valid, msg = validate_route(table, route)
    if not valid:
        print(f"Warning: {msg}")

    if results:
        baseline = nearest_neighbor_route(table, start_city)[1]
        filename = save_solution_to_file(route, method, distance, baseline, filename=results)
        print(f"Solution saved to: {filename}")

    if plot_dir and history is not None:
        plot_path = f"{plot_dir}/{start_city}_{method}_evolution.png"
        plot_evolution(history, title=f"GA Evolution ({method}, start={start_city})", save_path=plot_path)
        print(f"Evolution plot saved to: {plot_path}")

    return route, distance


def main(argv=None):
    parser = argparse.ArgumentParser(description="City route optimization")
    parser.add_argument("distances", help="distance file, one 'City d0 d1 ...' line per city")
    parser.add_argument("start", help="start city name")
    parser.add_argument("--method", choices=["nearest_neighbor", "genetic", "ox", "hgrex", "all"], default="all")
    parser.add_argument("--crossover", choices=sorted(CROSSOVERS), default="ox",
                        help="crossover used by --method genetic")
    parser.add_argument("--population-size", type=int, default=None)
    parser.add_argument("--generations", type=int, default=None)
    parser.add_argument("--mutation-rate", type=float, default=0.01)
    parser.add_argument("--tournament-size", type=int, default=5)
    parser.add_argument("--elite-size", type=int, default=2)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--results", default=None, help="CSV file to append results to")
    parser.add_argument("--plot", default=None, help="directory for GA evolution plots")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    table = DistanceTable.from_file(args.distances)
    if len(table) == 0:
        parser.error("No cities loaded.")
    if args.start not in table:
        parser.error(f"City '{args.start}' not found in the loaded data.")

    methods = ["nearest_neighbor", "ox", "hgrex"] if args.method == "all" else [args.method]
    for method in methods:
        config = GAConfig.with_fallbacks(
            population_size=args.population_size,
            generations=args.generations,
            mutation_rate=args.mutation_rate,
            tournament_size=args.tournament_size,
            elite_size=args.elite_size,
            crossover=method if method in CROSSOVERS else args.crossover,
            seed=args.seed,
        )
        solution(table, args.start, method, config, results=args.results, plot_dir=args.plot)


if __name__ == "__main__":
    main()
