from __future__ import annotations
import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from circombridge.circom.circuit import CircomCircuit
from circombridge.circom.witness import WitnessCalculator
from circombridge.core.constraint_system import ConstraintSystem
from circombridge.core.errors import (
    BuilderConsumedError, InputFormatError, UnsatisfiedCircuitError, WitnessError,
)
from circombridge.core.field import PrimeField
from circombridge.core.r1cs_io import R1CS, load_r1cs_json
from circombridge.integrations.snarkjs_adapter import NodeWitnessCalculator

logger = logging.getLogger(__name__)

_DECIMAL = re.compile(r"[+-]?[0-9]+")

def parse_decimal(s: str) -> int:
    """Signed decimal integer literal; no whitespace, underscores or prefixes."""
    if not isinstance(s, str) or not _DECIMAL.fullmatch(s):
        raise InputFormatError(f"Not a decimal integer: {s!r}")
    return int(s)

@dataclass
class CircomConfig:
    r1cs: R1CS
    wtns: WitnessCalculator
    # asks the witness calculator for its own consistency check
    sanity_check: bool = False
    # re-synthesize and check every built circuit; debugging only
    verify_constraints: bool = False
    n_jobs: Optional[int] = None

    @classmethod
    def from_files(cls, wasm: str | Path, r1cs: str | Path, field: PrimeField | None = None,
                   **options) -> "CircomConfig":
        return cls(r1cs=load_r1cs_json(r1cs, field), wtns=NodeWitnessCalculator(wasm), **options)

class CircomBuilder:
    """
    Collects named circuit inputs and turns them into circuits: an empty one
    for key generation (setup) or a witnessed one for proving (build).
    """

    def __init__(self, cfg: CircomConfig):
        self.cfg = cfg
        self.inputs: Dict[str, List[int]] = {}
        self._consumed = False

    def _check_live(self):
        if self._consumed:
            raise BuilderConsumedError("CircomBuilder.build() was already called")

    def push_input(self, name, value) -> None:
        """Append a value to the named input; repeated names build vector inputs."""
        self._check_live()
        if isinstance(value, bool):
            raise InputFormatError(f"Not an integer: {value!r}")
        v = value if isinstance(value, int) else parse_decimal(value)
        self.inputs.setdefault(str(name), []).append(v)

    def load_input_json(self, path: str | Path) -> None:
        """
        Replace all inputs with the contents of an input.json file:
        {"a": "3", "b": ["1", "-2"]}. Nothing changes when the file is rejected.
        """
        self._check_live()
        try:
            raw = json.loads(Path(path).read_text())
        except OSError as exc:
            raise InputFormatError(f"Cannot read input file {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise InputFormatError(f"Input file {path} is not valid JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise InputFormatError(f"Input file {path} must hold a JSON object")

        parsed: Dict[str, List[int]] = {}
        for k, v in raw.items():
            if isinstance(v, str):
                parsed[k] = [parse_decimal(v)]
            elif isinstance(v, list):
                parsed[k] = [parse_decimal(s) for s in v]
            else:
                raise InputFormatError(f"Input {k!r} must be a string or a list of strings")
        self.inputs = parsed

    def setup(self) -> CircomCircuit:
        """Circuit without witness, for generating the trusted setup parameters."""
        self._check_live()
        circom = CircomCircuit(r1cs=self.cfg.r1cs.clone(), n_jobs=self.cfg.n_jobs)
        # no witness yet, so no witness indexing either
        circom.r1cs.wire_mapping = None
        return circom

    def build(self) -> CircomCircuit:
        """Compute the witness for the pushed inputs. The builder is spent afterwards."""
        circom = self.setup()
        self._consumed = True
        inputs, self.inputs = self.inputs, {}

        f = circom.r1cs.field
        try:
            witness = self.cfg.wtns.calculate_witness(inputs, self.cfg.sanity_check)
        except WitnessError:
            raise
        except Exception as exc:
            raise WitnessError(f"Witness calculation failed: {exc!r}") from exc
        if len(witness) < circom.r1cs.num_variables:
            raise WitnessError(
                f"Witness has {len(witness)} values, circuit needs {circom.r1cs.num_variables}"
            )
        circom.witness = [f.from_int(w) for w in witness]
        logger.debug("built circuit with %d witness values", len(circom.witness))

        if self.cfg.verify_constraints:
            self._verify(circom)
        return circom

    @staticmethod
    def _verify(circom: CircomCircuit) -> None:
        cs = ConstraintSystem(circom.r1cs.field)
        circom.clone().generate_constraints(cs)
        bad = cs.which_is_unsatisfied()
        if bad is not None:
            logger.error("Unsatisfied constraint: %d", bad)
            raise UnsatisfiedCircuitError(bad)
