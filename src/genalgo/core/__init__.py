"""
Genalgo Core Module - Genetic Algorithm Components.

This module contains the core components of the genalgo engine, including
configuration, parameter encoding, chromosome representation, population
management and the evolution driver.
"""

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

from src.genalgo.core.parameter import (
    Parameter,
    Number,
    build_parameters
)

from src.genalgo.core.chromosome import (
    Chromosome,
    SIGMA_UNSET
)

from src.genalgo.core.population import (
    Population,
    ForcedValues
)

from src.genalgo.core.engine import (
    GeneticAlgorithm,
    EvolutionResult
)

__all__ = [
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

    # Encoding
    "Parameter",
    "Number",
    "build_parameters",

    # Chromosome representation
    "Chromosome",
    "SIGMA_UNSET",

    # Population management
    "Population",
    "ForcedValues",

    # Engine
    "GeneticAlgorithm",
    "EvolutionResult"
]
