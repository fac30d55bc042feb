from __future__ import annotations
import logging
from dataclasses import dataclass, field as dc_field
from enum import Enum
from typing import Callable, Iterator, List, NamedTuple, Optional, Tuple
import numpy as np

from circombridge.core.errors import SynthesisError
from circombridge.core.field import PrimeField

logger = logging.getLogger(__name__)

INSTANCE = "instance"
WITNESS = "witness"


class Variable(NamedTuple):
    kind: str
    index: int

    @classmethod
    def one(cls) -> "Variable":
        # instance slot 0 is the constant one, allocated by the system itself
        return cls(INSTANCE, 0)

    @classmethod
    def instance(cls, index: int) -> "Variable":
        return cls(INSTANCE, index)

    @classmethod
    def witness(cls, index: int) -> "Variable":
        return cls(WITNESS, index)


@dataclass
class LinearCombination:
    terms: List[Tuple[int, Variable]] = dc_field(default_factory=list)

    def __iter__(self) -> Iterator[Tuple[int, Variable]]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)


class SynthesisMode(Enum):
    # SETUP never evaluates value closures; PROVE records every assignment
    SETUP = "setup"
    PROVE = "prove"


class ConstraintSystem:
    """
    In-memory rank-one constraint system over a prime field.

    Variables are allocated through value closures, so a circuit can be
    synthesized identically with or without an assignment. Constraints are
    kept in enforcement order; satisfiability is a separate query.
    """

    def __init__(self, field: PrimeField, mode: SynthesisMode = SynthesisMode.PROVE,
                 max_variables: Optional[int] = None):
        self.field = field
        self.mode = mode
        self.max_variables = max_variables
        self.num_instance_variables = 1
        self.num_witness_variables = 0
        self.instance_assignment: List[int] = [field.one] if mode is SynthesisMode.PROVE else []
        self.witness_assignment: List[int] = []
        self.constraints: List[Tuple[LinearCombination, LinearCombination, LinearCombination]] = []

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    @property
    def num_variables(self) -> int:
        return self.num_instance_variables + self.num_witness_variables

    def _reserve(self):
        if self.max_variables is not None and self.num_variables >= self.max_variables:
            raise SynthesisError(f"Variable limit of {self.max_variables} exhausted")

    def _evaluate(self, f: Callable[[], int]) -> int:
        try:
            value = f()
        except (IndexError, KeyError) as exc:
            raise SynthesisError(f"Assignment missing: {exc!r}") from exc
        return self.field.from_int(value)

    def new_input_variable(self, f: Callable[[], int]) -> Variable:
        self._reserve()
        if self.mode is SynthesisMode.PROVE:
            self.instance_assignment.append(self._evaluate(f))
        v = Variable.instance(self.num_instance_variables)
        self.num_instance_variables += 1
        return v

    def new_witness_variable(self, f: Callable[[], int]) -> Variable:
        self._reserve()
        if self.mode is SynthesisMode.PROVE:
            self.witness_assignment.append(self._evaluate(f))
        v = Variable.witness(self.num_witness_variables)
        self.num_witness_variables += 1
        return v

    def _check_allocated(self, lc: LinearCombination):
        for _, var in lc:
            bound = self.num_instance_variables if var.kind == INSTANCE else self.num_witness_variables
            if not 0 <= var.index < bound:
                raise SynthesisError(f"Linear combination references unallocated variable {var}")

    def enforce_r1cs_constraint(self, a: LinearCombination, b: LinearCombination,
                                c: LinearCombination) -> None:
        for lc in (a, b, c):
            self._check_allocated(lc)
        self.constraints.append((a, b, c))

    # ---- satisfiability ----
    def _lc_values(self, k: int, inst: np.ndarray, wit: np.ndarray) -> np.ndarray:
        """Value of the k-th combination (0=A, 1=B, 2=C) of every constraint, mod p."""
        p = self.field.modulus
        out = np.zeros(len(self.constraints), dtype=object)
        for i, trip in enumerate(self.constraints):
            acc = 0
            for coeff, var in trip[k]:
                acc += coeff * (inst[var.index] if var.kind == INSTANCE else wit[var.index])
            out[i] = acc % p
        return out

    def _residual(self) -> np.ndarray:
        if self.mode is not SynthesisMode.PROVE:
            raise SynthesisError("Satisfiability needs an assignment (system is in setup mode)")
        inst = np.array(self.instance_assignment, dtype=object)
        wit = np.array(self.witness_assignment, dtype=object)
        Az, Bz, Cz = (self._lc_values(k, inst, wit) for k in range(3))
        return (Az * Bz - Cz) % self.field.modulus

    def which_is_unsatisfied(self) -> Optional[int]:
        """Position of the first unsatisfied constraint, or None."""
        bad = np.flatnonzero(self._residual() != 0)
        return int(bad[0]) if bad.size else None

    def is_satisfied(self) -> bool:
        return self.which_is_unsatisfied() is None
