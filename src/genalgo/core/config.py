"""
Genalgo Configuration Module.

This module defines configuration classes for the genetic algorithm engine,
including evolution parameters, operator choices, mutation settings and
logging options.
"""

from typing import Optional, Dict, Any, Literal
from enum import Enum
import json
import os

from pydantic import BaseModel, Field, ConfigDict, field_validator


class SelectionType(str, Enum):
    """Selection operators."""
    RWS = "rws"  # roulette wheel
    SUS = "sus"  # stochastic universal sampling
    RNK = "rnk"  # linear rank
    RSP = "rsp"  # linear rank with selective pressure
    TNT = "tnt"  # tournament
    TRS = "trs"  # transform ranking


class CrossoverType(str, Enum):
    """Crossover operators."""
    SIMPLE_ARITHMETIC = "simple_arithmetic"
    SINGLE_ARITHMETIC = "single_arithmetic"
    WHOLE_ARITHMETIC = "whole_arithmetic"
    ONE_POINT = "one_point"
    TWO_POINT = "two_point"
    UNIFORM = "uniform"


class MutationType(str, Enum):
    """Mutation operators."""
    SPM = "spm"  # single point bit flip
    BDM = "bdm"  # boundary
    UNM = "unm"  # uniform
    UNCORRELATED_ONE_STEP_FIXED = "uncorrelated_one_step_fixed"
    UNCORRELATED_ONE_STEP_BOUNDARY = "uncorrelated_one_step_boundary"
    UNCORRELATED_N_STEP_FIXED = "uncorrelated_n_step_fixed"
    UNCORRELATED_N_STEP_BOUNDARY = "uncorrelated_n_step_boundary"
    SIGMA_ADAPTING_PER_GENERATION = "sigma_adapting_per_generation"
    SIGMA_ADAPTING_PER_MUTATION = "sigma_adapting_per_mutation"


class AdaptationType(str, Enum):
    """Constraint adaptation methods."""
    NONE = "none"
    DAC = "dac"


class EvolutionParameters(BaseModel):
    """Parameters controlling the genetic algorithm evolution process."""

    model_config = ConfigDict(validate_assignment=True)

    # Population parameters
    population_size: int = Field(
        default=50,
        ge=2,
        description="Number of chromosomes in each generation"
    )
    mating_size: Optional[int] = Field(
        default=None,
        ge=1,
        description="Size of the mating pool (defaults to population size)"
    )
    generations: int = Field(
        default=40,
        ge=1,
        description="Maximum number of generations to evolve"
    )
    bits: int = Field(
        default=16,
        ge=1,
        le=64,
        description="Default encoding width of a parameter, in bits"
    )

    # Genetic operators
    mutation_rate: float = Field(
        default=0.05,
        ge=0.0,
        le=1.0,
        description="Probability of mutation for each gene (each bit for SPM)"
    )
    crossover_rate: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Probability of crossover between parents"
    )
    recombination_ratio: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Fixed blend ratio for arithmetic crossover (None draws one per crossover)"
    )

    # Selection parameters
    elite_size: int = Field(
        default=1,
        ge=0,
        description="Number of best chromosomes copied unchanged to the next generation"
    )
    tournament_size: int = Field(
        default=10,
        ge=2,
        description="Number of chromosomes in tournament selection"
    )
    selective_pressure: float = Field(
        default=1.5,
        ge=1.0,
        le=2.0,
        description="Selective pressure for rank selection with pressure (RSP)"
    )

    # Termination
    tolerance: float = Field(
        default=0.0,
        ge=0.0,
        description="Stop when the best total improves by less than this (0 disables)"
    )

    @field_validator('elite_size')
    def validate_elite_size(cls, v, info):
        """Ensure elite size is less than population size."""
        if 'population_size' in info.data and v >= info.data['population_size']:
            raise ValueError('Elite size must be less than population size')
        return v

    @property
    def matsize(self) -> int:
        """Effective mating pool size."""
        return self.mating_size or self.population_size


class MutationInfo(BaseModel):
    """Settings consumed by the mutation operators."""

    model_config = ConfigDict(validate_assignment=True)

    sigma: float = Field(
        default=1.0,
        gt=0.0,
        description="Initial step size for the fixed self-adaptive variants"
    )
    sigma_lowest: float = Field(
        default=0.0001,
        ge=0.0,
        description="Floor applied to every adapted step size"
    )
    ratio_boundary: float = Field(
        default=0.10,
        gt=0.0,
        le=1.0,
        description="Fraction of the bound range used as initial step size"
    )
    type: MutationType = Field(
        default=MutationType.SPM,
        description="Mutation operator to run"
    )


class OperatorConfig(BaseModel):
    """Choice of selection, crossover and constraint adaptation operators."""

    model_config = ConfigDict(validate_assignment=True)

    selection: SelectionType = Field(
        default=SelectionType.RWS,
        description="Selection method for building the mating pool"
    )
    crossover: CrossoverType = Field(
        default=CrossoverType.ONE_POINT,
        description="Crossover method for producing offspring"
    )
    adaptation: AdaptationType = Field(
        default=AdaptationType.DAC,
        description="Constraint adaptation applied after evaluation"
    )
    trs_initial_c: float = Field(
        default=0.2,
        gt=0.0,
        description="Initial coefficient of transform ranking selection"
    )
    trs_step: float = Field(
        default=0.1,
        ge=0.0,
        description="Per-generation increase of the transform ranking coefficient"
    )


class LoggingConfig(BaseModel):
    """Configuration for logging and monitoring."""

    enable_logging: bool = Field(
        default=True,
        description="Enable evolution progress logging"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_interval: int = Field(
        default=10,
        ge=1,
        description="Generations between progress reports"
    )
    precision: int = Field(
        default=5,
        ge=0,
        le=16,
        description="Decimals shown for values in progress reports"
    )
    metrics_export: bool = Field(
        default=True,
        description="Emit progress events to logfire"
    )


class GAConfig(BaseModel):
    """Main configuration class for the genetic algorithm."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra='forbid'
    )

    # Sub-configurations
    evolution: EvolutionParameters = Field(
        default_factory=EvolutionParameters,
        description="Evolution parameters"
    )
    operators: OperatorConfig = Field(
        default_factory=OperatorConfig,
        description="Operator selection"
    )
    mutation: MutationInfo = Field(
        default_factory=MutationInfo,
        description="Mutation settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging and monitoring configuration"
    )

    # General settings
    random_seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducibility"
    )
    strict_forced_values: bool = Field(
        default=False,
        description="Raise instead of logging when a forced gene fails to round-trip"
    )

    @classmethod
    def from_env(cls) -> "GAConfig":
        """Create configuration from environment variables."""
        config_dict: Dict[str, Any] = {}

        # Evolution parameters from env
        if pop_size := os.getenv("GENALGO_POPULATION_SIZE"):
            config_dict.setdefault("evolution", {})["population_size"] = int(pop_size)
        if mating_size := os.getenv("GENALGO_MATING_SIZE"):
            config_dict.setdefault("evolution", {})["mating_size"] = int(mating_size)
        if generations := os.getenv("GENALGO_GENERATIONS"):
            config_dict.setdefault("evolution", {})["generations"] = int(generations)
        if mutation_rate := os.getenv("GENALGO_MUTATION_RATE"):
            config_dict.setdefault("evolution", {})["mutation_rate"] = float(mutation_rate)
        if crossover_rate := os.getenv("GENALGO_CROSSOVER_RATE"):
            config_dict.setdefault("evolution", {})["crossover_rate"] = float(crossover_rate)
        if elite_size := os.getenv("GENALGO_ELITE_SIZE"):
            config_dict.setdefault("evolution", {})["elite_size"] = int(elite_size)

        # Operators from env
        if selection := os.getenv("GENALGO_SELECTION"):
            config_dict.setdefault("operators", {})["selection"] = selection.lower()
        if crossover := os.getenv("GENALGO_CROSSOVER"):
            config_dict.setdefault("operators", {})["crossover"] = crossover.lower()
        if mutation := os.getenv("GENALGO_MUTATION"):
            config_dict.setdefault("mutation", {})["type"] = mutation.lower()

        # General settings
        if random_seed := os.getenv("GENALGO_RANDOM_SEED"):
            config_dict["random_seed"] = int(random_seed)
        if log_level := os.getenv("GENALGO_LOG_LEVEL"):
            config_dict.setdefault("logging", {})["log_level"] = log_level.upper()

        return cls(**config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump(mode="json")

    def save(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> "GAConfig":
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls(**data)

    def validate_consistency(self) -> None:
        """Validate configuration consistency across components."""
        evolution = self.evolution

        if evolution.elite_size >= evolution.population_size:
            raise ValueError(
                f"Elite size ({evolution.elite_size}) must be less than "
                f"population size ({evolution.population_size})"
            )

        if evolution.tournament_size > evolution.population_size:
            raise ValueError(
                f"Tournament size ({evolution.tournament_size}) must not exceed "
                f"population size ({evolution.population_size})"
            )

        if self.mutation.sigma_lowest > self.mutation.sigma:
            raise ValueError(
                f"Lowest sigma ({self.mutation.sigma_lowest}) cannot exceed "
                f"initial sigma ({self.mutation.sigma})"
            )


# Convenience functions
def create_default_config() -> GAConfig:
    """Create a default configuration suitable for most use cases."""
    return GAConfig()


def create_test_config() -> GAConfig:
    """Create a configuration suitable for testing (smaller, faster, seeded)."""
    return GAConfig(
        evolution=EvolutionParameters(
            population_size=20,
            generations=10,
            mutation_rate=0.05,
            crossover_rate=0.8,
            elite_size=1,
            tournament_size=3
        ),
        logging=LoggingConfig(
            log_interval=1,
            metrics_export=False
        ),
        random_seed=42
    )
