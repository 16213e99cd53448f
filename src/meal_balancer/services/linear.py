"""Dense linear system solver."""

import logging
from collections.abc import Sequence

# Pivots smaller than this are treated as zero; the matching unknown resolves to 0.
PIVOT_EPSILON = 1e-12

_logger = logging.getLogger(__name__)


def solve_linear_system(
    matrix: Sequence[Sequence[float]], rhs: Sequence[float]
) -> list[float]:
    """Solve ``matrix @ x = rhs`` by Gaussian elimination with partial pivoting.

    Degenerate systems (duplicate or empty food compositions) do not raise:
    columns whose pivot falls below ``PIVOT_EPSILON`` are skipped during
    elimination and their unknown is set to zero during back substitution.
    The inputs are not modified.
    """
    n = len(rhs)
    a = [list(row) for row in matrix]
    b = list(rhs)
    for col in range(n):
        pivot_row = max(range(col, n), key=lambda r: abs(a[r][col]))
        if pivot_row != col:
            a[col], a[pivot_row] = a[pivot_row], a[col]
            b[col], b[pivot_row] = b[pivot_row], b[col]
        pivot = a[col][col]
        if abs(pivot) < PIVOT_EPSILON:
            continue
        for r in range(col + 1, n):
            factor = a[r][col] / pivot
            if factor == 0:
                continue
            for c in range(col, n):
                a[r][c] -= factor * a[col][c]
            b[r] -= factor * b[col]

    x = [0.0] * n
    degenerate = 0
    for i in range(n - 1, -1, -1):
        if abs(a[i][i]) < PIVOT_EPSILON:
            degenerate += 1
            continue
        total = b[i]
        for j in range(i + 1, n):
            total -= a[i][j] * x[j]
        x[i] = total / a[i][i]
    if degenerate:
        _logger.debug("Linear system has %s near-singular pivots of %s", degenerate, n)
    return x
