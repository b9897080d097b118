"""
Genalgo - a bit-string genetic algorithm engine.

Decision variables are quantized onto fixed-width bit strings and evolved with
configurable selection, crossover, mutation and constraint adaptation
operators, including self-adaptive (evolution strategy) mutations.
"""

from src.genalgo.exceptions import (
    GenalgoError,
    InvalidBounds,
    SelectionIndexOverflow,
    EncodeDecodeMismatch
)
from src.genalgo.core.config import (
    GAConfig,
    EvolutionParameters,
    MutationInfo,
    OperatorConfig,
    LoggingConfig,
    SelectionType,
    CrossoverType,
    MutationType,
    AdaptationType,
    create_default_config,
    create_test_config
)
from src.genalgo.core.parameter import Parameter, build_parameters
from src.genalgo.core.chromosome import Chromosome
from src.genalgo.core.population import Population, ForcedValues
from src.genalgo.core.engine import GeneticAlgorithm, EvolutionResult
from src.genalgo.fitness import (
    ObjectiveFunction,
    FunctionObjective,
    Sphere,
    Rosenbrock,
    ConstrainedRosenbrock
)

__version__ = "1.0.0"

__all__ = [
    # Errors
    "GenalgoError",
    "InvalidBounds",
    "SelectionIndexOverflow",
    "EncodeDecodeMismatch",
    # Configuration
    "GAConfig",
    "EvolutionParameters",
    "MutationInfo",
    "OperatorConfig",
    "LoggingConfig",
    "SelectionType",
    "CrossoverType",
    "MutationType",
    "AdaptationType",
    "create_default_config",
    "create_test_config",
    # Encoding and population
    "Parameter",
    "build_parameters",
    "Chromosome",
    "Population",
    "ForcedValues",
    # Engine
    "GeneticAlgorithm",
    "EvolutionResult",
    # Objectives
    "ObjectiveFunction",
    "FunctionObjective",
    "Sphere",
    "Rosenbrock",
    "ConstrainedRosenbrock",
]
