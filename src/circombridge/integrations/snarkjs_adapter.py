from __future__ import annotations
import json
import logging
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Dict, List, Optional

from circombridge.circom.witness import Inputs, check_constant_wire
from circombridge.core.errors import WitnessError
from circombridge.core.witness_io import load_wtns

logger = logging.getLogger(__name__)

def inputs_to_json(inputs: Inputs) -> Dict[str, object]:
    """
    circom input.json shape: decimal strings, one-element lists collapsed to
    scalars. Key order follows the input mapping.
    """
    out: Dict[str, object] = {}
    for name, values in inputs.items():
        strs = [str(int(v)) for v in values]
        out[name] = strs[0] if len(strs) == 1 else strs
    return out

class NodeWitnessCalculator:
    """
    Run a circom-generated witness program under node:

        node <circuit>_js/generate_witness.js circuit.wasm input.json witness.wtns
    """

    def __init__(self, wasm: str | Path, generate_js: str | Path | None = None,
                 node: str = "node", timeout: Optional[float] = None):
        self.wasm = Path(wasm)
        self.generate_js = Path(generate_js) if generate_js else self.wasm.parent / "generate_witness.js"
        self.node = node
        self.timeout = timeout

    def _command(self, input_file: Path, wtns_file: Path) -> List[str]:
        return [self.node, str(self.generate_js), str(self.wasm), str(input_file), str(wtns_file)]

    def calculate_witness(self, inputs: Inputs, sanity_check: bool = False) -> List[int]:
        start = time.time()
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_path = Path(temp_dir)
            input_file = temp_path / "input.json"
            input_file.write_text(json.dumps(inputs_to_json(inputs)))
            wtns_file = temp_path / "witness.wtns"

            cmd = self._command(input_file, wtns_file)
            try:
                result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
            except FileNotFoundError as exc:
                raise WitnessError(f"Cannot run {self.node}: {exc}") from exc
            except subprocess.TimeoutExpired as exc:
                raise WitnessError(f"Witness generation timed out after {self.timeout}s") from exc
            if result.returncode != 0:
                raise WitnessError(f"Witness generation failed: {result.stderr.strip()}")

            try:
                _, witness = load_wtns(wtns_file)
            except (OSError, ValueError) as exc:
                raise WitnessError(f"Cannot read witness output: {exc}") from exc

        if sanity_check:
            check_constant_wire(witness)
        logger.debug("node witness: %d values in %.3fs", len(witness), time.time() - start)
        return witness
