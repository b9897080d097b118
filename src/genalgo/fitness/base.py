"""
Base classes for objective functions.

An objective maps the decoded parameter vector of a chromosome to a list of
scores. The first score is the total to maximize; any further scores are
constraint values, violated when greater than or equal to zero.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional, Sequence, Callable

from src.genalgo.core.parameter import Number


class ObjectiveFunction(ABC):
    """
    Abstract base class for objective functions.

    Subclasses implement ``evaluate``; instances are callable so they can be
    handed to the engine or to ``Chromosome.evaluate`` directly.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize objective with optional configuration.

        Args:
            config: Configuration parameters for the objective
        """
        self.config = config or {}
        self.evaluations = 0

    @abstractmethod
    def evaluate(self, params: Sequence[Number]) -> List[float]:
        """
        Score a decoded parameter vector.

        Args:
            params: Decoded parameter values, one per gene

        Returns:
            ``[total, *constraints]``
        """
        pass

    @property
    def constraint_count(self) -> int:
        """Number of constraint values returned after the total."""
        return 0

    def __call__(self, params: Sequence[Number]) -> List[float]:
        self.evaluations += 1
        return self.evaluate(params)


class FunctionObjective(ObjectiveFunction):
    """Adapts a plain callable returning a number or a sequence of scores."""

    def __init__(self, function: Callable[[Sequence[Number]], Any], constraint_count: int = 0):
        super().__init__()
        self.function = function
        self._constraint_count = constraint_count

    @property
    def constraint_count(self) -> int:
        return self._constraint_count

    def evaluate(self, params: Sequence[Number]) -> List[float]:
        scores = self.function(params)
        if isinstance(scores, (int, float)):
            return [float(scores)]
        return [float(s) for s in scores]
