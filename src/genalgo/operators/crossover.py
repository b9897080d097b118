"""
Crossover operators.

Two parents are drawn uniformly (and independently) from the mating pool and
written into two blank offspring. The arithmetic family blends decoded gene
values; the bit-string family swaps raw bits. Every operator finishes by
giving each offspring gene the mean of its parents' step sizes.
"""

from src.genalgo.core.chromosome import Chromosome
from src.genalgo.core.population import Population
from src.genalgo.operators.base import CrossoverOperator


def blend(r: float, other: float, own: float) -> float:
    """``r * other + (1 - r) * own``."""
    return r * other + (1.0 - r) * own


class SimpleArithmeticCrossover(CrossoverOperator):
    """Genes before a random point are copied, the rest are blended."""

    def __call__(self, population: Population, chr1: Chromosome, chr2: Chromosome) -> None:
        parent1, parent2 = self.draw_parents(population)
        pos = int(self.rng.integers(0, chr1.nbgene))
        r = chr1.recombination_ratio(self.rng)

        for i in range(chr1.nbgene):
            v1, v2 = parent1.get_value(i), parent2.get_value(i)
            if i < pos:
                chr1.init_gene(i, v1)
                chr2.init_gene(i, v2)
            else:
                chr1.init_gene(i, blend(r, v2, v1))
                chr2.init_gene(i, blend(r, v1, v2))

        self.transmit_sigma(parent1, parent2, chr1, chr2)


class SingleArithmeticCrossover(CrossoverOperator):
    """Parents are copied and one random gene is blended."""

    def __call__(self, population: Population, chr1: Chromosome, chr2: Chromosome) -> None:
        parent1, parent2 = self.draw_parents(population)
        pos = int(self.rng.integers(0, chr1.nbgene))
        r = chr1.recombination_ratio(self.rng)

        chr1.set_bits(parent1.bits)
        chr2.set_bits(parent2.bits)

        v1, v2 = parent1.get_value(pos), parent2.get_value(pos)
        chr1.init_gene(pos, blend(r, v2, v1))
        chr2.init_gene(pos, blend(r, v1, v2))

        self.transmit_sigma(parent1, parent2, chr1, chr2)


class WholeArithmeticCrossover(CrossoverOperator):
    """Every gene is blended."""

    def __call__(self, population: Population, chr1: Chromosome, chr2: Chromosome) -> None:
        parent1, parent2 = self.draw_parents(population)
        r = chr1.recombination_ratio(self.rng)

        for i in range(chr1.nbgene):
            v1, v2 = parent1.get_value(i), parent2.get_value(i)
            chr1.init_gene(i, blend(r, v2, v1))
            chr2.init_gene(i, blend(r, v1, v2))

        self.transmit_sigma(parent1, parent2, chr1, chr2)


class OnePointCrossover(CrossoverOperator):
    """
    One-point bit crossover.

    With cut ``pos``, offspring 1 takes bits ``0..pos`` of parent 1 and the
    rest of parent 2; offspring 2 takes the complementary pairing.
    """

    def __call__(self, population: Population, chr1: Chromosome, chr2: Chromosome) -> None:
        parent1, parent2 = self.draw_parents(population)
        pos = int(self.rng.integers(0, chr1.size))

        chr1.set_portion(parent1, 0, pos)
        chr2.set_portion(parent2, 0, pos)
        chr1.set_portion(parent2, pos + 1)
        chr2.set_portion(parent1, pos + 1)

        self.transmit_sigma(parent1, parent2, chr1, chr2)


class TwoPointCrossover(CrossoverOperator):
    """Two-point bit crossover over three bands split at two sorted cuts."""

    def __call__(self, population: Population, chr1: Chromosome, chr2: Chromosome) -> None:
        parent1, parent2 = self.draw_parents(population)
        pos1 = int(self.rng.integers(0, chr1.size))
        pos2 = int(self.rng.integers(0, chr1.size))
        low, high = min(pos1, pos2), max(pos1, pos2)

        chr1.set_portion(parent1, 0, low)
        chr2.set_portion(parent2, 0, low)
        chr1.set_portion(parent2, low + 1, high)
        chr2.set_portion(parent1, low + 1, high)
        chr1.set_portion(parent1, high + 1)
        chr2.set_portion(parent2, high + 1)

        self.transmit_sigma(parent1, parent2, chr1, chr2)


class UniformCrossover(CrossoverOperator):
    """A fair coin per bit decides which parent feeds which offspring."""

    def __call__(self, population: Population, chr1: Chromosome, chr2: Chromosome) -> None:
        parent1, parent2 = self.draw_parents(population)
        coins = self.rng.random(chr1.size) < 0.5

        bits1 = []
        bits2 = []
        for keep, b1, b2 in zip(coins, parent1.bits, parent2.bits):
            if keep:
                bits1.append(b1)
                bits2.append(b2)
            else:
                bits1.append(b2)
                bits2.append(b1)

        chr1.set_bits("".join(bits1))
        chr2.set_bits("".join(bits2))

        self.transmit_sigma(parent1, parent2, chr1, chr2)
