"""
Mutation operators.

Every operator works on one chromosome in place, visiting each gene (each
bit for SPM) and mutating it with probability ``mutrate``. A rate of zero
leaves the chromosome and the random stream untouched.

The self-adaptive variants move genes by normally distributed steps whose
size (sigma) is stored per gene on the chromosome and inherited through
crossover. They always clamp the new value into the gene bounds and never
let sigma drop below ``MutationInfo.sigma_lowest``.
"""

from abc import abstractmethod
from typing import Optional
import math

from src.genalgo.core.chromosome import Chromosome
from src.genalgo.core.config import MutationInfo
from src.genalgo.operators.base import MutationOperator, RandomSource


class BoundaryMutation(MutationOperator):
    """BDM: replace a gene with its lower or upper bound, 50/50."""

    def __call__(self, chromosome: Chromosome) -> None:
        if self.mutrate == 0.0:
            return

        for i, param in enumerate(chromosome.parameters):
            if self.hit():
                if self.rng.random() < 0.5:
                    chromosome.init_gene(i, param.lower)
                else:
                    chromosome.init_gene(i, param.upper)


class SinglePointMutation(MutationOperator):
    """SPM: flip each bit with probability ``mutrate``."""

    def __call__(self, chromosome: Chromosome) -> None:
        if self.mutrate == 0.0:
            return

        for pos in range(chromosome.size):
            if self.hit():
                chromosome.flip_bit(pos)


class UniformMutation(MutationOperator):
    """UNM: replace a gene with a fresh random encoding."""

    def __call__(self, chromosome: Chromosome) -> None:
        if self.mutrate == 0.0:
            return

        for i in range(chromosome.nbgene):
            if self.hit():
                chromosome.set_gene(i, self.rng)


class SelfAdaptiveMutation(MutationOperator):
    """
    Base class for the evolution-strategy mutations.

    Subclasses choose where the first sigma comes from (``fixed`` base value
    or a fraction of the bound range) and how it evolves.
    """

    from_boundary = False

    def __init__(self, mutrate: float, info: Optional[MutationInfo] = None, rng: RandomSource = None):
        """
        Args:
            mutrate: Per-gene mutation probability
            info: Step size settings
            rng: Random generator, or a seed to build one from
        """
        super().__init__(mutrate, rng)
        self.info = info or MutationInfo()

    def floor(self, sigma: float) -> float:
        return max(sigma, self.info.sigma_lowest)

    def initial_sigma(self, chromosome: Chromosome, i: int) -> float:
        """First step size of gene ``i``, floored."""
        if self.from_boundary:
            param = chromosome.parameters[i]
            return self.floor(param.span * self.info.ratio_boundary)
        return self.floor(self.info.sigma)

    def step(self, chromosome: Chromosome, i: int, sigma: float) -> None:
        """Move gene ``i`` by ``sigma * N(0, 1)`` and clamp it into bounds."""
        param = chromosome.parameters[i]
        value = chromosome.get_value(i)
        chromosome.init_gene(i, param.clamp(value + sigma * self.rng.standard_normal()))

    def __call__(self, chromosome: Chromosome) -> None:
        if self.mutrate == 0.0:
            return

        for i in range(chromosome.nbgene):
            if self.hit():
                self.mutate_gene(chromosome, i)

    @abstractmethod
    def mutate_gene(self, chromosome: Chromosome, i: int) -> None:
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(mutrate={self.mutrate}, sigma={self.info.sigma})"


class UncorrelatedOneStepFixed(SelfAdaptiveMutation):
    """
    One shared learning rate ``tau = 1/sqrt(n)``.

    Sigma is seeded on first use, then evolved as ``sigma * exp(tau N(0,1))``
    on every mutation, including the first.
    """

    def mutate_gene(self, chromosome: Chromosome, i: int) -> None:
        tau = 1.0 / math.sqrt(chromosome.nbgene)

        sigma = chromosome.get_sigma(i)
        if not chromosome.has_sigma(i):
            sigma = self.initial_sigma(chromosome, i)
            chromosome.sigma_update(i, sigma)

        sigma = self.floor(sigma * math.exp(tau * self.rng.standard_normal()))
        chromosome.sigma_update(i, sigma)

        self.step(chromosome, i, sigma)


class UncorrelatedOneStepBoundary(UncorrelatedOneStepFixed):
    """One-step mutation seeded from ``(upper - lower) * ratio_boundary``."""

    from_boundary = True


class UncorrelatedNStepFixed(SelfAdaptiveMutation):
    """
    Two learning rates ``tau1 = 1/sqrt(2n)`` and ``tau2 = 1/sqrt(2 sqrt(n))``.

    The first mutation of a gene only seeds its sigma. Later ones evolve it
    as ``sigma * exp(tau1 N1) * exp(tau2 N2)``.
    """

    def mutate_gene(self, chromosome: Chromosome, i: int) -> None:
        n = chromosome.nbgene
        tau1 = 1.0 / math.sqrt(2.0 * n)
        tau2 = 1.0 / math.sqrt(2.0 * math.sqrt(n))

        if not chromosome.has_sigma(i):
            sigma = self.initial_sigma(chromosome, i)
        else:
            factor1 = math.exp(tau1 * self.rng.standard_normal())
            factor2 = math.exp(tau2 * self.rng.standard_normal())
            sigma = self.floor(chromosome.get_sigma(i) * factor1 * factor2)
        chromosome.sigma_update(i, sigma)

        self.step(chromosome, i, sigma)


class UncorrelatedNStepBoundary(UncorrelatedNStepFixed):
    """N-step mutation seeded from ``(upper - lower) * ratio_boundary``."""

    from_boundary = True


class SigmaAdaptingPerGeneration(SelfAdaptiveMutation):
    """
    Gaussian mutation whose step shrinks blindly with the generation count.

    Sigma restarts from the boundary-derived base on every mutation and goes
    through ``generation // 2`` multiplicative ``exp(N(0,1))`` steps. It is
    not stored on the chromosome.
    """

    from_boundary = True

    def mutate_gene(self, chromosome: Chromosome, i: int) -> None:
        sigma = self.initial_sigma(chromosome, i)
        for _ in range(chromosome.generation // 2):
            sigma = sigma * math.exp(self.rng.standard_normal())
        sigma = self.floor(sigma)

        param = chromosome.parameters[i]
        value = self.rng.normal(chromosome.get_value(i), sigma)
        chromosome.init_gene(i, param.clamp(value))


class SigmaAdaptingPerMutation(SelfAdaptiveMutation):
    """Gaussian mutation with a sigma seeded once from the bound range and inherited after that."""

    from_boundary = True

    def mutate_gene(self, chromosome: Chromosome, i: int) -> None:
        sigma = chromosome.get_sigma(i)
        if not chromosome.has_sigma(i):
            sigma = self.initial_sigma(chromosome, i)
            chromosome.sigma_update(i, sigma)
        sigma = self.floor(sigma)

        param = chromosome.parameters[i]
        value = self.rng.normal(chromosome.get_value(i), sigma)
        chromosome.init_gene(i, param.clamp(value))
