from pathlib import Path
import pytest

from circombridge.circom.circuit import CircomCircuit, translate_constraints
from circombridge.core.constraint_system import ConstraintSystem, SynthesisMode, Variable
from circombridge.core.errors import CircuitConsumedError
from circombridge.core.field import PrimeField
from circombridge.core.r1cs_io import R1CS, load_r1cs_json
from circombridge.core.witness_io import load_witness_json

EXAMPLES = Path(__file__).resolve().parent.parent / "circuits" / "examples"

def square_add():
    r = load_r1cs_json(EXAMPLES / "square_add.r1cs.json")
    w = load_witness_json(EXAMPLES / "square_add.witness.json", r.field.modulus)
    return r, w

def test_satisfied():
    r, w = square_add()
    cs = ConstraintSystem(r.field)
    CircomCircuit(r, w).generate_constraints(cs)
    assert cs.num_instance_variables == 3
    assert cs.num_witness_variables == 2
    assert cs.num_constraints == 2
    assert cs.is_satisfied()

def test_bad_witness_reports_position():
    r, w = square_add()
    w[1] = 15
    cs = ConstraintSystem(r.field)
    CircomCircuit(r, w).generate_constraints(cs)
    assert cs.which_is_unsatisfied() == 1

def test_public_inputs():
    r, w = square_add()
    assert CircomCircuit(r).get_public_inputs() is None
    assert CircomCircuit(r, w).get_public_inputs() == [14, 3]

def test_unwitnessed_placeholders_are_one():
    r, _ = square_add()
    cs = ConstraintSystem(r.field)
    CircomCircuit(r).generate_constraints(cs)
    assert cs.instance_assignment == [1, 1, 1]
    assert cs.witness_assignment == [1, 1]

def test_setup_mode_synthesis():
    r, _ = square_add()
    cs = ConstraintSystem(r.field, mode=SynthesisMode.SETUP)
    CircomCircuit(r).generate_constraints(cs)
    assert cs.num_constraints == 2
    assert cs.num_variables == 5

def test_wire_mapping_resolves_witness():
    r, w = square_add()
    # witness provider lays out y and t swapped
    r.wire_mapping = [0, 1, 2, 4, 3]
    external = [w[0], w[1], w[2], w[4], w[3]]
    circom = CircomCircuit(r, external)
    assert circom.get_public_inputs() == [14, 3]
    cs = ConstraintSystem(r.field)
    circom.generate_constraints(cs)
    assert cs.witness_assignment == [5, 9]
    assert cs.is_satisfied()

def test_mapping_and_extraction_commute():
    f = PrimeField(101)
    mapping = [0, 3, 1, 4, 2]
    r = R1CS(f, [], num_inputs=3, num_aux=2, wire_mapping=mapping)
    w = [1, 20, 30, 40, 50]
    mapped = CircomCircuit(r, w).get_public_inputs()
    permuted = [w[mapping[i]] for i in range(len(w))]
    identity = CircomCircuit(R1CS(f, [], num_inputs=3, num_aux=2), permuted).get_public_inputs()
    assert mapped == identity == [40, 20]

def test_translation_indexing():
    r, _ = square_add()
    (a, b, c), (a2, b2, c2) = translate_constraints(r)
    assert list(a) == [(1, Variable.instance(2))]
    assert list(c) == [(1, Variable.witness(1))]
    assert list(a2) == [(1, Variable.witness(1)), (1, Variable.witness(0))]
    assert list(b2) == [(1, Variable.instance(0))]
    assert list(c2) == [(1, Variable.instance(1))]

def test_parallel_translation_matches_sequential():
    r, _ = square_add()
    r.constraints = r.constraints * 50
    seq = translate_constraints(r, n_jobs=1)
    par = translate_constraints(r, n_jobs=4, min_parallel=0)
    assert par == seq
    assert len(par) == 100

def test_generate_consumes_circuit():
    r, w = square_add()
    circom = CircomCircuit(r, w)
    clone = circom.clone()
    circom.generate_constraints(ConstraintSystem(r.field))
    with pytest.raises(CircuitConsumedError):
        circom.generate_constraints(ConstraintSystem(r.field))
    clone.generate_constraints(ConstraintSystem(r.field))

def test_clone_does_not_alias():
    r, w = square_add()
    circom = CircomCircuit(r, w)
    clone = circom.clone()
    clone.r1cs.wire_mapping = [0, 1, 2, 4, 3]
    clone.witness[1] = 0
    assert circom.r1cs.wire_mapping is None
    assert circom.witness[1] == 14
