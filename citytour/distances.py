import logging
import math
from typing import Iterable, List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

logger = logging.getLogger(__name__)


class CityNotFoundError(LookupError):
    """Raised when a city name is not present in the distance table."""

    def __init__(self, name: str):
        super().__init__(f"City '{name}' not found.")
        self.name = name


class IndexOutOfRangeError(IndexError):
    """Raised when a city index falls outside [0, city_count)."""


class DistanceTable:
    """
    Named cities plus an N x N directed distance matrix.

    matrix[i][j] is the cost of travelling from city i to city j. The matrix may be
    asymmetric. A stored 0 between two different cities means there is no edge;
    a city's entry for itself is always treated as an edge.
    """

    def __init__(self, city_names: Sequence[str], matrix):
        matrix = np.array(matrix, dtype=np.int64)
        n = len(city_names)
        if matrix.shape != (n, n):
            raise ValueError(f"Distance matrix must be {n}x{n}, got {matrix.shape}")
        if (matrix < 0).any():
            raise ValueError("Distances must be non-negative")
        matrix.flags.writeable = False

        self._names = tuple(city_names)
        self._matrix = matrix
        self._index = {}
        for i, name in enumerate(self._names):
            if name in self._index:
                logger.warning("Duplicate city name '%s' at index %d, lookups return index %d",
                               name, i, self._index[name])
                continue
            self._index[name] = i

    @classmethod
    def build(cls, rows: Iterable[Tuple[str, Sequence[int]]]) -> "DistanceTable":
        """
        Build a table from (city_name, distances) rows.

        Row i's j-th distance becomes matrix[i][j]. Short rows are padded with 0,
        entries beyond the number of cities are ignored.
        """
        rows = [(name, list(dists)) for name, dists in rows]
        n = len(rows)
        matrix = np.zeros((n, n), dtype=np.int64)
        for i, (_, dists) in enumerate(rows):
            dists = dists[:n]
            matrix[i, :len(dists)] = dists
        return cls([name for name, _ in rows], matrix)

    @classmethod
    def from_file(cls, file_path: str) -> "DistanceTable":
        """
        Load a table from a whitespace-separated text file.

        Each non-blank line is ``Name d0 d1 ... dN-1``. Tokens that are not integers
        are stored as 0.
        """
        rows = []
        with open(file_path, encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                parts = line.split()
                if not parts:
                    continue
                dists = []
                for token in parts[1:]:
                    try:
                        dists.append(int(token))
                    except ValueError:
                        logger.warning("%s:%d: cannot parse distance %r, using 0",
                                       file_path, line_no, token)
                        dists.append(0)
                rows.append((parts[0], dists))

        table = cls.build(rows)
        logger.info("Loaded %d cities from %s", len(table), file_path)
        return table

    @property
    def city_names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name) -> bool:
        return name in self._index

    def __repr__(self) -> str:
        return f"DistanceTable({len(self)} cities)"

    def city_count(self) -> int:
        return len(self._names)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._names):
            raise IndexOutOfRangeError(
                f"City index {index} out of range [0, {len(self._names)})")

    def city_name(self, index: int) -> str:
        self._check_index(index)
        return self._names[index]

    def city_index(self, name: str) -> Optional[int]:
        """Index of the first city called ``name``, or None."""
        return self._index.get(name)

    def require_index(self, name: str) -> int:
        index = self._index.get(name)
        if index is None:
            raise CityNotFoundError(name)
        return index

    def distance(self, i: int, j: int) -> int:
        self._check_index(i)
        self._check_index(j)
        return int(self._matrix[i, j])

    def has_edge(self, i: int, j: int) -> bool:
        return i == j or self.distance(i, j) > 0

    def cost(self, i: int, j: int) -> float:
        """Distance from i to j, or inf when there is no edge."""
        d = self.distance(i, j)
        if i != j and d <= 0:
            return math.inf
        return d

    def names_for(self, indices: Iterable[int]) -> List[str]:
        return [self.city_name(i) for i in indices]

    def to_graph(self) -> nx.DiGraph:
        """Directed graph with one node per city index and a 'dist' attribute per edge."""
        graph = nx.DiGraph()
        for i, name in enumerate(self._names):
            graph.add_node(i, name=name)
        rows, cols = np.nonzero(self._matrix)
        for i, j in zip(rows.tolist(), cols.tolist()):
            if i != j:
                graph.add_edge(i, j, dist=int(self._matrix[i, j]))
        return graph


def load_distance_table(file_path: str) -> DistanceTable:
    return DistanceTable.from_file(file_path)
