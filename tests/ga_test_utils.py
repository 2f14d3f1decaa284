"""Shared fixtures for the citytour tests"""

from citytour import DistanceTable

SQUARE_ROWS = [
    ("A", [0, 10, 15, 20]),
    ("B", [10, 0, 35, 25]),
    ("C", [15, 35, 0, 30]),
    ("D", [20, 25, 30, 0]),
]


def square_table():
    """Four-city table whose nearest neighbour tour from A is A-B-D-C-A (80)"""
    return DistanceTable.build(SQUARE_ROWS)


def ring_table(n=8, asymmetric=True):
    """n cities where i -> i+1 costs 1 and every other edge is expensive"""
    rows = []
    for i in range(n):
        dists = []
        for j in range(n):
            if i == j:
                dists.append(0)
            elif j == (i + 1) % n:
                dists.append(1)
            else:
                dists.append(50 if asymmetric else 10)
        rows.append((f"C{i}", dists))
    return DistanceTable.build(rows)


def is_valid_chromosome(chromosome, n, start):
    return len(chromosome) == n and chromosome[0] == start and sorted(chromosome) == list(range(n))
