"""
Unit tests for selection operators (Subtask 3.1).

Tests cover:
- Mating pool size and membership for every operator
- Roulette, universal sampling and tournament behaviour
- Rank tables and selective pressure
- Transform ranking side effects and coefficient drift
- Cumulative walk overflow handling
"""

import pytest
import numpy as np

from src.genalgo.core.config import SelectionType, OperatorConfig
from src.genalgo.core.population import Population
from src.genalgo.exceptions import SelectionIndexOverflow
from src.genalgo.operators import (
    make_selection,
    cumulative_index,
    RouletteWheelSelection,
    StochasticUniversalSampling,
    RankSelection,
    SelectivePressureRankSelection,
    TournamentSelection,
    TransformRankingSelection
)


def pool_indices(population):
    """Current-generation index of every mating pool entry."""
    ids = {id(c): i for i, c in enumerate(population.chromosomes)}
    return [ids[id(c)] for c in population.mating_pool]


class TestSelectionContract:
    """Test suite for the shared selection contract."""

    @pytest.mark.parametrize("selection", list(SelectionType))
    def test_pool_size_and_membership(self, selection, scored_population):
        """Test every operator fills exactly matsize valid entries."""
        operator = make_selection(selection, np.random.default_rng(1))

        operator(scored_population)

        indices = pool_indices(scored_population)
        assert len(indices) == scored_population.matsize
        assert all(0 <= i < len(scored_population) for i in indices)

    @pytest.mark.parametrize("selection", list(SelectionType))
    def test_custom_mating_size(self, selection, two_parameters, rng):
        """Test a mating pool larger than the population."""
        pop = Population(two_parameters, popsize=6, matsize=15, tournament_size=3)
        pop.initialize(rng)
        pop.evaluate(lambda p: [p[0] - p[1]])

        make_selection(selection, rng)(pop)

        assert len(pop.mating_pool) == 15

    @pytest.mark.parametrize("selection", list(SelectionType))
    def test_empty_population_rejected(self, selection, two_parameters):
        """Test that selecting from an empty population fails."""
        operator = make_selection(selection, 0)

        with pytest.raises(ValueError):
            operator(Population(two_parameters, popsize=4))

    @pytest.mark.parametrize("selection", list(SelectionType))
    def test_same_seed_same_pool(self, selection, scored_population):
        """Test that selection is reproducible from a seed."""
        first = make_selection(selection, 99)
        first(scored_population)
        pool = pool_indices(scored_population)

        for chromosome in scored_population:
            chromosome.fitness = chromosome.total
        scored_population.clear_mating_pool()
        second = make_selection(selection, 99)
        second(scored_population)

        assert pool_indices(scored_population) == pool

    def test_factory_types(self):
        """Test the factory maps every selection type."""
        assert isinstance(make_selection(SelectionType.RWS), RouletteWheelSelection)
        assert isinstance(make_selection(SelectionType.SUS), StochasticUniversalSampling)
        assert isinstance(make_selection(SelectionType.TNT), TournamentSelection)
        assert isinstance(make_selection("rsp"), SelectivePressureRankSelection)
        assert type(make_selection(SelectionType.RNK)) is RankSelection

        trs = make_selection(SelectionType.TRS, config=OperatorConfig(trs_initial_c=0.5, trs_step=0.2))
        assert isinstance(trs, TransformRankingSelection)
        assert trs.c == 0.5
        assert trs.step == 0.2


class TestRouletteFamily:
    """Test suite for roulette wheel and universal sampling."""

    def test_rws_adjusts_negative_fitness(self, scored_population):
        """Test that roulette selection shifts fitness to non-negative."""
        RouletteWheelSelection(3)(scored_population)

        assert all(c.fitness >= 0 for c in scored_population)

    @pytest.mark.parametrize("operator_class", [RouletteWheelSelection, StochasticUniversalSampling])
    def test_zero_sum_selects_first(self, operator_class, population, fitness_setter):
        """Test that an all-zero fitness vector selects the first chromosome."""
        fitness_setter(population, [0.0] * 10)

        operator_class(5)(population)

        assert pool_indices(population) == [0] * 10

    @pytest.mark.parametrize("operator_class", [RouletteWheelSelection, StochasticUniversalSampling])
    def test_only_weighted_chromosome_selected(self, operator_class, population, fitness_setter):
        """Test that a chromosome holding all the weight takes the whole pool."""
        fitness_setter(population, [0, 0, 0, 7, 0, 0, 0, 0, 0, 0])

        operator_class(5)(population)

        assert pool_indices(population) == [3] * 10

    def test_sus_spreads_pointers(self, population, fitness_setter):
        """Test that equal weights give every chromosome exactly one slot."""
        fitness_setter(population, [1.0] * 10)

        StochasticUniversalSampling(11)(population)

        assert sorted(pool_indices(population)) == list(range(10))


class TestTournament:
    """Test suite for tournament selection."""

    def test_large_tournament_picks_best(self, population, fitness_setter):
        """Test that huge tournaments always return the best chromosome."""
        fitness_setter(population, [1, 2, 3, 4, 50, 6, 7, 8, 9, 10])

        TournamentSelection(tournament_size=300, rng=2)(population)

        assert pool_indices(population) == [4] * 10

    def test_uses_population_tournament_size(self, scored_population):
        """Test the default tournament size comes from the population."""
        operator = TournamentSelection(rng=4)

        operator(scored_population)

        assert operator.tournament_size is None
        assert scored_population.tntsize == 3


class TestRankSelection:
    """Test suite for rank based selection."""

    def test_rank_weights(self, scored_population):
        """Test the linear rank table."""
        operator = RankSelection(1)

        operator(scored_population)

        assert list(operator.weights) == [10, 9, 8, 7, 6, 5, 4, 3, 2, 1]

    def test_rank_table_cached_until_reset(self, scored_population):
        """Test the rank table is built once per run."""
        operator = RankSelection(1)
        operator(scored_population)
        table = operator.weights

        scored_population.clear_mating_pool()
        operator(scored_population)
        assert operator.weights is table

        operator.reset()
        assert operator.weights is None

    def test_rank_favours_best(self, population, fitness_setter):
        """Test the best ranked chromosome is drawn more than the worst."""
        population.matsize = 5000
        fitness_setter(population, [float(v) for v in range(10)])

        RankSelection(8)(population)

        counts = np.bincount(pool_indices(population), minlength=10)
        assert counts[9] > counts[0]
        assert counts[0] > 0

    def test_selective_pressure_weights(self, two_parameters, rng):
        """Test ``2 - SP + 2 (SP - 1) (P - i) / P`` with SP = 2."""
        pop = Population(two_parameters, popsize=4, selective_pressure=2.0)
        pop.initialize(rng)
        pop.evaluate(lambda p: [p[0]])

        operator = SelectivePressureRankSelection(rng=rng)
        operator(pop)

        assert list(operator.weights) == pytest.approx([2.0, 1.5, 1.0, 0.5])

    def test_unit_pressure_is_uniform(self, scored_population):
        """Test that SP = 1 weighs every rank the same."""
        operator = SelectivePressureRankSelection(selective_pressure=1.0, rng=1)

        operator(scored_population)

        assert list(operator.weights) == [1.0] * 10

    def test_pressure_change_rebuilds_table(self, scored_population):
        """Test that a new selective pressure rebuilds the cached table."""
        operator = SelectivePressureRankSelection(selective_pressure=1.0, rng=1)
        operator(scored_population)

        operator.selective_pressure = 2.0
        scored_population.clear_mating_pool()
        operator(scored_population)

        assert operator.weights[0] == pytest.approx(2.0)


class TestTransformRanking:
    """Test suite for transform ranking selection."""

    def test_fitness_rewritten(self, scored_population):
        """Test that fitness becomes non-negative integers following the ranking."""
        order = scored_population.ranked_indices()

        TransformRankingSelection(rng=6)(scored_population)

        values = [scored_population[i].fitness for i in order]
        assert all(v >= 0 and float(v).is_integer() for v in values)
        assert values == sorted(values, reverse=True)
        assert all(c.fitness != c.total for c in scored_population if c.total < 0)

    def test_coefficient_drifts_and_resets(self, scored_population):
        """Test that c grows every call and is restored by reset."""
        operator = TransformRankingSelection(initial_c=0.2, step=0.1, rng=6)

        operator(scored_population)
        scored_population.clear_mating_pool()
        operator(scored_population)

        assert operator.c == pytest.approx(0.4)

        operator.reset()
        assert operator.c == 0.2


class TestCumulativeWalk:
    """Test suite for the cumulative weight walk."""

    def test_first_index_above_target(self):
        """Test locating the first running sum above the target."""
        weights = np.array([1.0, 2.0, 3.0])

        assert cumulative_index(weights, 0.0) == 0
        assert cumulative_index(weights, 0.99) == 0
        assert cumulative_index(weights, 1.0) == 1
        assert cumulative_index(weights, 5.5) == 2

    def test_zero_weights_skipped(self):
        """Test that zero-weight entries are never returned."""
        weights = np.array([0.0, 0.0, 4.0, 0.0])

        assert cumulative_index(weights, 0.0) == 2
        assert cumulative_index(weights, 3.9) == 2

    def test_overflow_raises(self):
        """Test a target at the total sum runs past the end."""
        with pytest.raises(SelectionIndexOverflow) as exc_info:
            cumulative_index(np.array([1.0, 1.0]), 2.0)

        assert exc_info.value.last_index == 1
        assert isinstance(exc_info.value, IndexError)

    def test_spin_clamps_and_counts(self, population, caplog):
        """Test that the operator clamps an overflow to the last index."""
        operator = RouletteWheelSelection(0)

        with caplog.at_level("WARNING", logger="genalgo.operators"):
            index = operator.spin(np.array([1.0, 1.0, 1.0]), 3.0, population)

        assert index == 2
        assert population.selection_overflows == 1
        assert caplog.records
