from __future__ import annotations


class CircomBridgeError(Exception):
    """Base class for errors raised by circombridge."""


class InputFormatError(CircomBridgeError, ValueError):
    """Circuit input file is missing, unreadable or has the wrong shape."""


class WitnessError(CircomBridgeError):
    """The witness provider rejected the inputs or failed internally."""


class SynthesisError(CircomBridgeError):
    """The constraint system could not allocate or enforce."""


class BuilderConsumedError(CircomBridgeError, RuntimeError):
    pass


class CircuitConsumedError(CircomBridgeError, RuntimeError):
    pass


class UnsatisfiedCircuitError(CircomBridgeError, AssertionError):
    def __init__(self, index: int):
        super().__init__(f"Unsatisfied constraint: {index}")
        self.index = index
