#!/usr/bin/env python3
"""
Unit tests for the nearest neighbour solver
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from citytour import DistanceTable, CityNotFoundError, nearest_neighbor_route, solve, validate_route
from tests.ga_test_utils import square_table, ring_table


class TestNearestNeighbor(unittest.TestCase):

    def test_square_scenario(self):
        route, distance = nearest_neighbor_route(square_table(), "A")
        self.assertEqual(route, ["A", "B", "D", "C", "A"])
        self.assertEqual(distance, 80)

    def test_other_start(self):
        route, distance = nearest_neighbor_route(square_table(), "C")
        self.assertEqual(route, ["C", "A", "B", "D", "C"])
        self.assertEqual(distance, 15 + 10 + 25 + 30)

    def test_unknown_start(self):
        with self.assertRaises(CityNotFoundError):
            nearest_neighbor_route(square_table(), "Z")

    def test_follows_cheap_ring(self):
        table = ring_table(6)
        route, distance = nearest_neighbor_route(table, "C0")
        self.assertEqual(route, ["C0", "C1", "C2", "C3", "C4", "C5", "C0"])
        self.assertEqual(distance, 6)

    def test_zero_distance_is_not_an_edge(self):
        # A -> C is stored as 0, so B must be chosen first
        table = DistanceTable.build([("A", [0, 9, 0]), ("B", [9, 0, 4]), ("C", [2, 4, 0])])
        route, distance = nearest_neighbor_route(table, "A")
        self.assertEqual(route, ["A", "B", "C", "A"])
        self.assertEqual(distance, 9 + 4 + 2)

    def test_early_exit_when_stuck(self):
        table = DistanceTable.build([("A", [0, 5, 0]), ("B", [5, 0, 0]), ("C", [1, 1, 0])])
        with self.assertLogs('citytour.utils', level='WARNING'):
            route, distance = nearest_neighbor_route(table, "A")
        self.assertEqual(route, ["A", "B", "A"])
        self.assertEqual(distance, 10)
        valid, msg = validate_route(table, route)
        self.assertFalse(valid)
        self.assertIn("Missing cities", msg)

    def test_missing_closing_edge_adds_nothing(self):
        table = DistanceTable.build([("A", [0, 3]), ("B", [0, 0])])
        route, distance = nearest_neighbor_route(table, "A")
        self.assertEqual(route, ["A", "B", "A"])
        self.assertEqual(distance, 3)

    def test_single_city(self):
        table = DistanceTable.build([("A", [0])])
        self.assertEqual(nearest_neighbor_route(table, "A"), (["A", "A"], 0))

    def test_deterministic(self):
        table = ring_table(7, asymmetric=False)
        self.assertEqual(nearest_neighbor_route(table, "C3"), nearest_neighbor_route(table, "C3"))

    def test_solve_entry_point(self):
        self.assertEqual(solve(square_table(), "A", method="nearest_neighbor"),
                         (["A", "B", "D", "C", "A"], 80))

    def test_solve_unknown_method(self):
        with self.assertRaises(ValueError):
            solve(square_table(), "A", method="brute_force")


if __name__ == '__main__':
    unittest.main()
