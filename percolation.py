import numpy as np
from scipy.cluster.hierarchy import DisjointSet


class Percolation:
    """
    An n-by-n grid of sites for site percolation, opened one site at a time.

    Two union-find structures are kept over the same sites:
    'uf' has both a virtual top and a virtual bottom and answers percolates(),
    'ufNoBottom' only has the virtual top and answers isFull() without backwash.
    """

    # create a n by n grid with all sites blocked
    def __init__(self, n: int):
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
            raise ValueError("n must be an integer")
        if n <= 0:
            raise ValueError("n must be a positive integer")

        self.gridSize = int(n)
        self.gridSquare = self.gridSize * self.gridSize
        self.grid = np.zeros((self.gridSize, self.gridSize), dtype=bool)

        # site (row, col) lives at index 1..n*n, the virtual sites sit at both ends
        self.virtualTop = 0
        self.virtualBottom = self.gridSquare + 1

        self.uf = DisjointSet(range(self.gridSquare + 2))
        self.ufNoBottom = DisjointSet(range(self.gridSquare + 1))

        self.openSite = 0

    # open the site[row, col] if it's not open yet
    def open(self, row: int, col: int):
        self.validState(row, col)

        if self.grid[row - 1][col - 1]:
            return

        self.grid[row - 1][col - 1] = True
        self.openSite += 1

        index = self.flattenGrid(row, col)

        ## top row
        if row == 1:
            self.uf.merge(self.virtualTop, index)
            self.ufNoBottom.merge(self.virtualTop, index)

        ## bottom row, never in ufNoBottom
        if row == self.gridSize:
            self.uf.merge(self.virtualBottom, index)

        ## up, down, left, right
        for nRow, nCol in ((row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1)):
            self.connectIfOpen(index, nRow, nCol)

    # is site[row, col] open?
    def isOpen(self, row: int, col: int) -> bool:
        self.validState(row, col)
        return bool(self.grid[row - 1][col - 1])

    # is site[row, col] connected to the top through open sites?
    def isFull(self, row: int, col: int) -> bool:
        self.validState(row, col)
        if not self.grid[row - 1][col - 1]:
            return False
        index = self.flattenGrid(row, col)
        return self.ufNoBottom[index] == self.ufNoBottom[self.virtualTop]

    def numberOfOpenSites(self) -> int:
        return self.openSite

    def percolates(self) -> bool:
        return self.uf[self.virtualTop] == self.uf[self.virtualBottom]

    def validState(self, row: int, col: int):
        for value in (row, col):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"site index {value!r} must be an integer")
        if not self.isOnGrid(row, col):
            raise ValueError(
                f"site ({row}, {col}) is outside the grid [1, {self.gridSize}] x [1, {self.gridSize}]"
            )

    def flattenGrid(self, row: int, col: int) -> int:
        return int(self.gridSize * (row - 1) + col)

    def isOnGrid(self, row: int, col: int) -> bool:
        return 1 <= row <= self.gridSize and 1 <= col <= self.gridSize

    def connectIfOpen(self, index: int, row: int, col: int):
        if self.isOnGrid(row, col) and self.grid[row - 1][col - 1]:
            neighbour = self.flattenGrid(row, col)
            self.uf.merge(index, neighbour)
            self.ufNoBottom.merge(index, neighbour)

    def __repr__(self):
        return f"Percolation(n={self.gridSize}, open={self.openSite}, percolates={self.percolates()})"
