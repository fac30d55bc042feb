from __future__ import annotations
import copy
import json
import logging
from dataclasses import dataclass, field as dc_field
from pathlib import Path
from typing import List, Tuple, Optional
import numpy as np
from scipy.sparse import csr_matrix

from circombridge.core.field import PrimeField, BN254_PRIME, field_for_prime

logger = logging.getLogger(__name__)

# a sparse linear combination: (wire_index, coefficient) pairs
LC = List[Tuple[int, int]]
Constraint = Tuple[LC, LC, LC]

@dataclass
class R1CS:
    """
    Wire 0 is the constant one. Wires 1..num_inputs are public instance wires,
    num_inputs..num_inputs+num_aux are private witness wires. num_inputs counts
    the constant wire.
    """
    field: PrimeField
    constraints: List[Constraint] = dc_field(default_factory=list)
    num_inputs: int = 1
    num_aux: int = 0
    wire_mapping: Optional[List[int]] = None

    @property
    def num_variables(self) -> int:
        return self.num_inputs + self.num_aux

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    def map_wire(self, i: int) -> int:
        """Index into the external witness vector for internal wire i."""
        if self.wire_mapping is None:
            return i
        return self.wire_mapping[i]

    def clone(self) -> "R1CS":
        return copy.deepcopy(self)

    def validate(self) -> "R1CS":
        n = self.num_variables
        if self.num_inputs < 1:
            raise ValueError("R1CS needs at least the constant-one input wire")
        if self.num_aux < 0:
            raise ValueError(f"Negative aux wire count: {self.num_aux}")
        for i, trip in enumerate(self.constraints):
            for lc in trip:
                for w, _ in lc:
                    if not 0 <= w < n:
                        raise ValueError(f"Constraint {i} references wire {w} outside 0..{n - 1}")
        if self.wire_mapping is not None:
            if len(self.wire_mapping) != n:
                raise ValueError(
                    f"Wire mapping has {len(self.wire_mapping)} entries, expected {n}"
                )
            if len(set(self.wire_mapping)) != n:
                raise ValueError("Wire mapping is not injective")
        return self

def _normalize_constraint_entry(entry, f: PrimeField) -> LC:
    if entry is None:
        return []
    if isinstance(entry, dict):
        return [(int(k), f.from_int(int(v))) for k, v in entry.items()]
    if isinstance(entry, list):
        out = []
        for t in entry:
            if isinstance(t, dict) and "coeff" in t and "var" in t:
                out.append((int(t["var"]), f.from_int(int(t["coeff"]))))
            elif isinstance(t, (list, tuple)) and len(t) == 2:
                c, v = t
                out.append((int(v), f.from_int(int(c))))
            else:
                raise ValueError(f"Unrecognized term format element: {t!r}")
        return out
    raise ValueError(f"Unrecognized term container: {type(entry)}")

def _constraints_from_json(obj, f: PrimeField) -> List[Constraint]:
    cons = obj.get("constraints")
    if cons is None:
        raise ValueError("R1CS JSON missing 'constraints'")
    out = []
    for i, c in enumerate(cons):
        if isinstance(c, list) and len(c) == 3:
            A_raw, B_raw, C_raw = c
        elif isinstance(c, dict) and all(k in c for k in ("A", "B", "C")):
            A_raw, B_raw, C_raw = c["A"], c["B"], c["C"]
        else:
            raise ValueError(f"Constraint {i} unexpected format: {type(c)}")
        out.append((
            _normalize_constraint_entry(A_raw, f),
            _normalize_constraint_entry(B_raw, f),
            _normalize_constraint_entry(C_raw, f),
        ))
    return out

def load_r1cs_json(path: str | Path, field: PrimeField | None = None) -> R1CS:
    """
    Load the output of `snarkjs r1cs export json`.

    Public wires are the outputs followed by the public inputs, so
    num_inputs = 1 + nOutputs + nPubInputs. The optional "map" table becomes
    the wire mapping.
    """
    obj = json.loads(Path(path).read_text())
    if field is None:
        field = field_for_prime(int(obj.get("prime") or BN254_PRIME))
    elif obj.get("prime") is not None and int(obj["prime"]) != field.modulus:
        raise ValueError(f"R1CS prime {obj['prime']} does not match field modulus {field.modulus}")

    constraints = _constraints_from_json(obj, field)
    n_outputs = int(obj.get("nOutputs") or 0)
    n_pub = obj.get("nPubInputs")
    if n_pub is None:
        n_pub = obj.get("nInputs")
    n_pub = int(n_pub or 0)
    num_inputs = 1 + n_outputs + n_pub

    n_vars = int(obj.get("nVars") or 0)
    if n_vars == 0:
        maxv = 0
        for A, B, C in constraints:
            for w, _ in (A + B + C):
                maxv = max(maxv, w)
        n_vars = max(maxv + 1, num_inputs)

    var_map = obj.get("map")
    r = R1CS(
        field=field,
        constraints=constraints,
        num_inputs=num_inputs,
        num_aux=n_vars - num_inputs,
        wire_mapping=[int(x) for x in var_map] if var_map else None,
    )
    logger.debug("loaded %s: %d constraints, %d inputs, %d aux",
                 path, r.num_constraints, r.num_inputs, r.num_aux)
    return r.validate()

def support_patterns(r: R1CS) -> Tuple[csr_matrix, csr_matrix, csr_matrix]:
    """0/1 CSR patterns of the A, B and C matrices."""
    m, n = r.num_constraints, r.num_variables
    def build_from(k):
        rows, cols = [], []
        for i, trip in enumerate(r.constraints):
            for w, _ in trip[k]:
                rows.append(i); cols.append(w)
        M = csr_matrix((np.ones(len(rows), dtype=np.int8),
                        (np.array(rows, dtype=int), np.array(cols, dtype=int))), shape=(m, n))
        M.data[:] = 1
        return M
    return build_from(0), build_from(1), build_from(2)

def summarize_r1cs(r: R1CS):
    A, B, C = support_patterns(r)
    mult_rows = int(((A.getnnz(axis=1) > 0) & (B.getnnz(axis=1) > 0)).sum())
    return {
        "n_constraints": int(r.num_constraints),
        "n_vars": int(r.num_variables),
        "n_inputs": int(r.num_inputs),
        "n_aux": int(r.num_aux),
        "n_public": int(r.num_inputs - 1),
        "prime_bits": int(r.field.bits),
        "multiplicative_rows": mult_rows,
        "linear_rows": int(r.num_constraints - mult_rows),
        "nnz": int(A.nnz + B.nnz + C.nnz),
        "has_wire_mapping": r.wire_mapping is not None,
    }
