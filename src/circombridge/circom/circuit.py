from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from joblib import Parallel, delayed

from circombridge.core.constraint_system import ConstraintSystem, LinearCombination, Variable
from circombridge.core.errors import CircuitConsumedError
from circombridge.core.r1cs_io import R1CS, LC, Constraint

logger = logging.getLogger(__name__)

# below this many constraints the thread pool costs more than it saves
PARALLEL_MIN_CONSTRAINTS = 4096

Triple = Tuple[LinearCombination, LinearCombination, LinearCombination]

def _make_lc(lc_data: LC, num_inputs: int) -> LinearCombination:
    terms = []
    for index, coeff in lc_data:
        if index < num_inputs:
            var = Variable.instance(index)
        else:
            var = Variable.witness(index - num_inputs)
        terms.append((coeff, var))
    return LinearCombination(terms)

def _make_triple(c: Constraint, num_inputs: int) -> Triple:
    a, b, cc = c
    return _make_lc(a, num_inputs), _make_lc(b, num_inputs), _make_lc(cc, num_inputs)

def translate_constraints(r1cs: R1CS, n_jobs: Optional[int] = None,
                          min_parallel: int = PARALLEL_MIN_CONSTRAINTS) -> List[Triple]:
    """
    Map every (A, B, C) of the R1CS onto constraint-system variables.
    Pure per-constraint map: the joblib thread path and the sequential path
    return the same triples in the same order.
    """
    n = r1cs.num_inputs
    if n_jobs in (None, 1) or r1cs.num_constraints < min_parallel:
        return [_make_triple(c, n) for c in r1cs.constraints]
    return Parallel(n_jobs=n_jobs, prefer="threads")(
        delayed(_make_triple)(c, n) for c in r1cs.constraints
    )

@dataclass
class CircomCircuit:
    r1cs: R1CS
    witness: Optional[List[int]] = None
    n_jobs: Optional[int] = None
    _consumed: bool = field(default=False, init=False, repr=False, compare=False)

    def clone(self) -> "CircomCircuit":
        return CircomCircuit(
            r1cs=self.r1cs.clone(),
            witness=list(self.witness) if self.witness is not None else None,
            n_jobs=self.n_jobs,
        )

    def _value(self, i: int) -> int:
        # unwitnessed (setup) circuits are filled with the field's one
        if self.witness is None:
            return self.r1cs.field.one
        return self.witness[self.r1cs.map_wire(i)]

    def get_public_inputs(self) -> Optional[List[int]]:
        if self.witness is None:
            return None
        return [self.witness[self.r1cs.map_wire(i)] for i in range(1, self.r1cs.num_inputs)]

    def generate_constraints(self, cs: ConstraintSystem) -> None:
        """
        Allocate one variable per wire and enforce every constraint, in order.
        The circuit is spent afterwards.
        """
        if self._consumed:
            raise CircuitConsumedError("Circuit constraints were already generated")
        self._consumed = True
        r = self.r1cs

        # the constraint system allocates the constant one itself
        for i in range(1, r.num_inputs):
            cs.new_input_variable(lambda i=i: self._value(i))
        for i in range(r.num_aux):
            cs.new_witness_variable(lambda i=i: self._value(r.num_inputs + i))

        for a, b, c in translate_constraints(r, self.n_jobs):
            cs.enforce_r1cs_constraint(a, b, c)
        logger.debug("synthesized %d constraints over %d inputs and %d aux wires",
                     r.num_constraints, r.num_inputs, r.num_aux)
