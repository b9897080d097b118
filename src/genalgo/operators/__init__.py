"""
Genetic operators and the factories resolving configured operator types.

All factories share the caller's random generator with the operator they
build, so one seed drives a whole run.
"""

from typing import Optional

from src.genalgo.core.config import (
    SelectionType,
    CrossoverType,
    MutationType,
    AdaptationType,
    MutationInfo,
    OperatorConfig
)
from src.genalgo.operators.base import (
    GeneticOperator,
    SelectionOperator,
    CrossoverOperator,
    MutationOperator,
    AdaptationOperator,
    RandomSource,
    make_rng,
    cumulative_index
)
from src.genalgo.operators.selection import (
    RouletteWheelSelection,
    StochasticUniversalSampling,
    RankSelection,
    SelectivePressureRankSelection,
    TournamentSelection,
    TransformRankingSelection
)
from src.genalgo.operators.crossover import (
    SimpleArithmeticCrossover,
    SingleArithmeticCrossover,
    WholeArithmeticCrossover,
    OnePointCrossover,
    TwoPointCrossover,
    UniformCrossover
)
from src.genalgo.operators.mutation import (
    BoundaryMutation,
    SinglePointMutation,
    UniformMutation,
    SelfAdaptiveMutation,
    UncorrelatedOneStepFixed,
    UncorrelatedOneStepBoundary,
    UncorrelatedNStepFixed,
    UncorrelatedNStepBoundary,
    SigmaAdaptingPerGeneration,
    SigmaAdaptingPerMutation
)
from src.genalgo.operators.adaptation import DynamicConstraintAdaptation


CROSSOVERS = {
    CrossoverType.SIMPLE_ARITHMETIC: SimpleArithmeticCrossover,
    CrossoverType.SINGLE_ARITHMETIC: SingleArithmeticCrossover,
    CrossoverType.WHOLE_ARITHMETIC: WholeArithmeticCrossover,
    CrossoverType.ONE_POINT: OnePointCrossover,
    CrossoverType.TWO_POINT: TwoPointCrossover,
    CrossoverType.UNIFORM: UniformCrossover,
}

SELF_ADAPTIVE_MUTATIONS = {
    MutationType.UNCORRELATED_ONE_STEP_FIXED: UncorrelatedOneStepFixed,
    MutationType.UNCORRELATED_ONE_STEP_BOUNDARY: UncorrelatedOneStepBoundary,
    MutationType.UNCORRELATED_N_STEP_FIXED: UncorrelatedNStepFixed,
    MutationType.UNCORRELATED_N_STEP_BOUNDARY: UncorrelatedNStepBoundary,
    MutationType.SIGMA_ADAPTING_PER_GENERATION: SigmaAdaptingPerGeneration,
    MutationType.SIGMA_ADAPTING_PER_MUTATION: SigmaAdaptingPerMutation,
}


def make_selection(
    selection: SelectionType,
    rng: RandomSource = None,
    config: Optional[OperatorConfig] = None
) -> SelectionOperator:
    """Build the selection operator for ``selection``."""
    selection = SelectionType(selection)
    rng = make_rng(rng)

    if selection == SelectionType.RWS:
        return RouletteWheelSelection(rng)
    if selection == SelectionType.SUS:
        return StochasticUniversalSampling(rng)
    if selection == SelectionType.RNK:
        return RankSelection(rng)
    if selection == SelectionType.RSP:
        return SelectivePressureRankSelection(rng=rng)
    if selection == SelectionType.TNT:
        return TournamentSelection(rng=rng)

    config = config or OperatorConfig()
    return TransformRankingSelection(config.trs_initial_c, config.trs_step, rng)


def make_crossover(crossover: CrossoverType, rng: RandomSource = None) -> CrossoverOperator:
    """Build the crossover operator for ``crossover``."""
    return CROSSOVERS[CrossoverType(crossover)](make_rng(rng))


def make_mutation(
    info: MutationInfo,
    mutrate: float,
    rng: RandomSource = None
) -> MutationOperator:
    """Build the mutation operator named by ``info.type``."""
    mutation = MutationType(info.type)
    rng = make_rng(rng)

    if mutation == MutationType.SPM:
        return SinglePointMutation(mutrate, rng)
    if mutation == MutationType.BDM:
        return BoundaryMutation(mutrate, rng)
    if mutation == MutationType.UNM:
        return UniformMutation(mutrate, rng)
    return SELF_ADAPTIVE_MUTATIONS[mutation](mutrate, info, rng)


def make_adaptation(adaptation: AdaptationType) -> Optional[AdaptationOperator]:
    """Build the constraint adaptation operator, or None when disabled."""
    if AdaptationType(adaptation) == AdaptationType.DAC:
        return DynamicConstraintAdaptation()
    return None


__all__ = [
    # Base
    "GeneticOperator",
    "SelectionOperator",
    "CrossoverOperator",
    "MutationOperator",
    "AdaptationOperator",
    "RandomSource",
    "make_rng",
    "cumulative_index",
    # Selection
    "RouletteWheelSelection",
    "StochasticUniversalSampling",
    "RankSelection",
    "SelectivePressureRankSelection",
    "TournamentSelection",
    "TransformRankingSelection",
    # Crossover
    "SimpleArithmeticCrossover",
    "SingleArithmeticCrossover",
    "WholeArithmeticCrossover",
    "OnePointCrossover",
    "TwoPointCrossover",
    "UniformCrossover",
    # Mutation
    "BoundaryMutation",
    "SinglePointMutation",
    "UniformMutation",
    "SelfAdaptiveMutation",
    "UncorrelatedOneStepFixed",
    "UncorrelatedOneStepBoundary",
    "UncorrelatedNStepFixed",
    "UncorrelatedNStepBoundary",
    "SigmaAdaptingPerGeneration",
    "SigmaAdaptingPerMutation",
    # Adaptation
    "DynamicConstraintAdaptation",
    # Factories
    "make_selection",
    "make_crossover",
    "make_mutation",
    "make_adaptation",
]
