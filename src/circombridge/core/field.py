from __future__ import annotations
from dataclasses import dataclass

BN254_PRIME = 21888242871839275222246405745257275088548364400416034343698204186575808495617
BLS12_381_PRIME = 52435875175126190479447740508185965837690552500527637822603658699938581184513

@dataclass(frozen=True)
class PrimeField:
    """
    Arithmetic in F_p with elements held as Python ints in [0, p).
    Everything above the field only needs add/mul/one and from_int.
    """
    modulus: int

    @property
    def zero(self) -> int:
        return 0

    @property
    def one(self) -> int:
        return 1 % self.modulus

    @property
    def bits(self) -> int:
        return self.modulus.bit_length()

    def from_int(self, x: int) -> int:
        # signed inputs wrap: -1 -> p - 1
        return int(x) % self.modulus

    def add(self, a: int, b: int) -> int:
        return (a + b) % self.modulus

    def sub(self, a: int, b: int) -> int:
        return (a - b) % self.modulus

    def neg(self, a: int) -> int:
        return (-a) % self.modulus

    def mul(self, a: int, b: int) -> int:
        return (a * b) % self.modulus

    def inv(self, a: int) -> int:
        a = a % self.modulus
        if a == 0:
            raise ZeroDivisionError("No inverse for 0 mod p")
        return pow(a, self.modulus - 2, self.modulus)

BN254 = PrimeField(BN254_PRIME)
BLS12_381 = PrimeField(BLS12_381_PRIME)

def field_for_prime(p: int) -> PrimeField:
    for f in (BN254, BLS12_381):
        if f.modulus == p:
            return f
    return PrimeField(int(p))
