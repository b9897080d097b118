"""
Benchmark objectives.

All of them are written for maximization: classic minimization problems are
negated so that the optimum has the highest total.
"""

from typing import List, Sequence

from src.genalgo.core.parameter import Number
from src.genalgo.fitness.base import ObjectiveFunction


class Sphere(ObjectiveFunction):
    """Negated sphere, ``-sum(x_i^2)``. Optimum 0 at the origin."""

    def evaluate(self, params: Sequence[Number]) -> List[float]:
        return [-float(sum(x * x for x in params))]


class Rosenbrock(ObjectiveFunction):
    """Negated two-dimensional Rosenbrock function. Optimum 0 at (1, 1)."""

    def evaluate(self, params: Sequence[Number]) -> List[float]:
        x, y = params[0], params[1]
        return [-(pow(1 - x, 2) + 100 * pow(y - x * x, 2))]


class ConstrainedRosenbrock(Rosenbrock):
    """
    Rosenbrock restricted by two constraints.

    ``x*y + x - y + 1.5 <= 0`` and ``10 - x*y <= 0``. Constraint values are
    returned as is, so a non-negative entry marks a violation.
    """

    @property
    def constraint_count(self) -> int:
        return 2

    def evaluate(self, params: Sequence[Number]) -> List[float]:
        x, y = params[0], params[1]
        total = super().evaluate(params)[0]
        return [
            total,
            x * y + x - y + 1.5,
            10 - x * y
        ]
