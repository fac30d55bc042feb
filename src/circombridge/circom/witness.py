from __future__ import annotations
import logging
from typing import Callable, Dict, List, Protocol

from circombridge.core.errors import WitnessError

logger = logging.getLogger(__name__)

Inputs = Dict[str, List[int]]


class WitnessCalculator(Protocol):
    """
    Anything that turns named circuit inputs into a full witness vector.
    Index 0 of the result is the constant one. Failures surface as WitnessError.
    """

    def calculate_witness(self, inputs: Inputs, sanity_check: bool = False) -> List[int]:
        ...


def check_constant_wire(witness: List[int]) -> None:
    if not witness:
        raise WitnessError("Witness calculator returned an empty witness")
    if witness[0] != 1:
        raise WitnessError(f"Witness slot 0 must be the constant 1, got {witness[0]}")


class PythonWitnessCalculator:
    """Witness calculator backed by a Python callable fn(inputs) -> list[int]."""

    def __init__(self, fn: Callable[[Inputs], List[int]]):
        self.fn = fn

    def calculate_witness(self, inputs: Inputs, sanity_check: bool = False) -> List[int]:
        try:
            witness = [int(x) for x in self.fn(inputs)]
        except WitnessError:
            raise
        except Exception as exc:
            raise WitnessError(f"Witness calculation failed: {exc!r}") from exc
        if sanity_check:
            check_constant_wire(witness)
        logger.debug("computed witness of %d values", len(witness))
        return witness
