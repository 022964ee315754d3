"""
disjoint_set.py — Union-Find
=============================
Tracks connected-component membership for Kruskal's algorithm.

  - find()  uses path compression: every node on the walk up is repointed
            straight at the root.
  - union() merges by rank and is a no-op when both sides already share
            a root.

Together these give amortised near-O(1) per operation.
"""

from typing import List

from errors import IndexOutOfRange


class DisjointSet:
    """
    Attributes:
        parent : parent[i] is i's parent; roots point at themselves.
        rank   : Upper bound on the height of the tree rooted at i.
    """

    def __init__(self, n: int):
        self.parent: List[int] = list(range(n))
        self.rank:   List[int] = [0] * n
        self._components: int  = n

    @classmethod
    def make(cls, n: int) -> "DisjointSet":
        """`n` singleton sets {0}, {1}, …, {n-1}."""
        return cls(n)

    def __len__(self) -> int:
        return len(self.parent)

    @property
    def components(self) -> int:
        """Number of disjoint sets currently held."""
        return self._components

    def find(self, x: int) -> int:
        self._check(x)
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: int, y: int) -> bool:
        """Merge the sets holding x and y.  Returns False if already joined."""
        root_x = self.find(x)
        root_y = self.find(y)
        if root_x == root_y:
            return False

        if self.rank[root_x] < self.rank[root_y]:
            self.parent[root_x] = root_y
        elif self.rank[root_x] > self.rank[root_y]:
            self.parent[root_y] = root_x
        else:
            self.parent[root_y] = root_x
            self.rank[root_x] += 1
        self._components -= 1
        return True

    def connected(self, x: int, y: int) -> bool:
        return self.find(x) == self.find(y)

    def _check(self, x: int) -> None:
        if not 0 <= x < len(self.parent):
            raise IndexOutOfRange(x, len(self.parent))
