"""
Chromosome Representation for the Genetic Algorithm.

This module defines the chromosome structure: one concatenated bit string over
all encoded parameters, plus the per-gene adaptive mutation state (sigma) and
the cached objective, fitness and constraint values.
"""

from typing import List, Dict, Any, Optional, Sequence, Callable
import itertools

import numpy as np

from src.genalgo.core.parameter import Parameter, Number


# sigma values below this are treated as "never set"
SIGMA_UNSET = 1e-11


class Chromosome:
    """
    Candidate solution made of one bit-string gene per parameter.

    Genes are stored back to back in ``bits``; gene ``i`` occupies exactly
    ``parameters[i].bits`` characters. Chromosomes never reference the
    population that owns them.
    """

    def __init__(
        self,
        parameters: Sequence[Parameter],
        recombination: Optional[float] = None,
        generation: int = 0
    ):
        """
        Initialize a blank chromosome (all bits cleared).

        Args:
            parameters: Encoded parameters, one per gene
            recombination: Fixed blend ratio for arithmetic crossover (None draws one per call)
            generation: Generation this chromosome belongs to
        """
        if not parameters:
            raise ValueError("A chromosome needs at least one parameter")

        self.parameters: List[Parameter] = list(parameters)
        self.recombination = recombination
        self.generation = generation

        widths = [p.bits for p in self.parameters]
        self._offsets: List[int] = [0] + list(itertools.accumulate(widths))
        self.bits: str = "0" * self._offsets[-1]

        # Adaptive mutation state
        self.sigma: List[float] = [0.0] * len(self.parameters)
        self.sigma_iterations: List[int] = [0] * len(self.parameters)

        # Cached evaluation
        self.result: List[float] = []
        self.total: float = 0.0
        self.fitness: float = 0.0
        self.constraints: List[float] = []

    @classmethod
    def random(
        cls,
        parameters: Sequence[Parameter],
        rng: np.random.Generator,
        recombination: Optional[float] = None,
        generation: int = 0
    ) -> "Chromosome":
        """Create a chromosome with every gene drawn at random."""
        chromosome = cls(parameters, recombination=recombination, generation=generation)
        chromosome.create(rng)
        return chromosome

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    @property
    def nbgene(self) -> int:
        """Number of genes (parameters)."""
        return len(self.parameters)

    @property
    def size(self) -> int:
        """Total number of bits."""
        return len(self.bits)

    def gene_slice(self, i: int) -> slice:
        """Bit positions occupied by gene ``i``."""
        return slice(self._offsets[i], self._offsets[i + 1])

    def get_gene(self, i: int) -> str:
        return self.bits[self.gene_slice(i)]

    # ------------------------------------------------------------------
    # Gene access
    # ------------------------------------------------------------------

    def create(self, rng: np.random.Generator) -> None:
        """Replace every gene with a random encoding."""
        self.bits = "".join(p.encode(rng=rng) for p in self.parameters)

    def initialize(self) -> None:
        """Encode every gene from its parameter's initial value."""
        missing = [i for i, p in enumerate(self.parameters) if p.initial is None]
        if missing:
            raise ValueError(f"Parameters {missing} have no initial value")
        self.bits = "".join(p.encode(p.initial) for p in self.parameters)

    def init_gene(self, i: int, value: Number) -> None:
        """Re-encode gene ``i`` from a decoded value. Sigma is left untouched."""
        self._replace(self.gene_slice(i), self.parameters[i].encode(value))

    def set_gene(self, i: int, rng: np.random.Generator) -> None:
        """Replace gene ``i`` with a fresh random encoding."""
        self._replace(self.gene_slice(i), self.parameters[i].encode(rng=rng))

    def get_value(self, i: int) -> Number:
        """Decode gene ``i``."""
        return self.parameters[i].decode(self.get_gene(i))

    def get_param(self) -> List[Number]:
        """Decode all genes."""
        return [self.get_value(i) for i in range(self.nbgene)]

    # ------------------------------------------------------------------
    # Bit access
    # ------------------------------------------------------------------

    def get_bit(self, pos: int) -> str:
        return self.bits[pos]

    def flip_bit(self, pos: int) -> None:
        """Invert the bit at ``pos``."""
        if not 0 <= pos < self.size:
            raise IndexError(f"Bit position {pos} out of range for {self.size} bits")
        flipped = "0" if self.bits[pos] == "1" else "1"
        self.bits = self.bits[:pos] + flipped + self.bits[pos + 1:]

    def set_portion(self, other: "Chromosome", start: int, end: Optional[int] = None) -> None:
        """
        Copy bits ``start..end`` (inclusive) from another chromosome.

        With ``end=None`` the copy runs to the end of the string. Ranges
        starting past the last bit copy nothing.
        """
        if other.size != self.size:
            raise ValueError(f"Cannot copy from a {other.size}-bit chromosome into a {self.size}-bit one")
        stop = self.size if end is None else min(end + 1, self.size)
        if start >= stop:
            return
        self._replace(slice(start, stop), other.bits[start:stop])

    def set_bits(self, bits: str) -> None:
        """Replace the whole bit string."""
        if len(bits) != self.size:
            raise ValueError(f"Expected {self.size} bits, got {len(bits)}")
        self.bits = bits

    def _replace(self, where: slice, chunk: str) -> None:
        self.bits = self.bits[:where.start] + chunk + self.bits[where.stop:]

    # ------------------------------------------------------------------
    # Adaptive mutation state
    # ------------------------------------------------------------------

    def get_sigma(self, i: int) -> float:
        return self.sigma[i]

    def sigma_iteration(self, i: int) -> int:
        """Number of times sigma of gene ``i`` was updated."""
        return self.sigma_iterations[i]

    def sigma_update(self, i: int, value: float) -> None:
        """Set the step size of gene ``i`` and count the update."""
        self.sigma_iterations[i] += 1
        self.sigma[i] = value

    def has_sigma(self, i: int) -> bool:
        return self.sigma[i] >= SIGMA_UNSET

    def recombination_ratio(self, rng: np.random.Generator) -> float:
        """Blend coefficient for arithmetic crossover."""
        if self.recombination is not None:
            return self.recombination
        return float(rng.random())

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self, objective: Callable[[List[Number]], Sequence[float]]) -> None:
        """
        Evaluate the decoded parameters and cache the scores.

        The first score is the objective total to maximize; any further
        scores are constraint values (violated when >= 0).
        """
        result = [float(v) for v in objective(self.get_param())]
        if not result:
            raise ValueError("Objective function returned no score")
        self.result = result
        self.total = result[0]
        self.fitness = result[0]
        self.constraints = result[1:]

    def is_feasible(self) -> bool:
        """True when no constraint is violated."""
        return all(c < 0.0 for c in self.constraints)

    # ------------------------------------------------------------------
    # Copy / representation
    # ------------------------------------------------------------------

    def clone(self) -> "Chromosome":
        """Create an independent copy sharing only the (immutable) parameters."""
        chromosome = Chromosome(self.parameters, recombination=self.recombination, generation=self.generation)
        chromosome.bits = self.bits
        chromosome.sigma = list(self.sigma)
        chromosome.sigma_iterations = list(self.sigma_iterations)
        chromosome.result = list(self.result)
        chromosome.total = self.total
        chromosome.fitness = self.fitness
        chromosome.constraints = list(self.constraints)
        return chromosome

    def to_dict(self) -> Dict[str, Any]:
        """Convert chromosome to dictionary representation."""
        return {
            "generation": self.generation,
            "bits": self.bits,
            "params": self.get_param(),
            "sigma": list(self.sigma),
            "fitness": self.fitness,
            "total": self.total,
            "constraints": list(self.constraints)
        }

    def __repr__(self) -> str:
        """String representation of chromosome."""
        return f"Chromosome(genes={self.nbgene}, bits={self.size}, fitness={self.fitness})"
