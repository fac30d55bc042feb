import pytest

from circombridge.core.field import BN254, BN254_PRIME, PrimeField, field_for_prime

def test_signed_values_wrap():
    assert BN254.from_int(-1) == BN254_PRIME - 1
    assert BN254.from_int(BN254_PRIME + 5) == 5

def test_arithmetic():
    f = PrimeField(97)
    assert f.add(90, 10) == 3
    assert f.sub(3, 10) == 90
    assert f.neg(1) == 96
    assert f.mul(f.inv(5), 5) == f.one
    with pytest.raises(ZeroDivisionError):
        f.inv(0)

def test_known_fields_are_shared():
    assert field_for_prime(BN254_PRIME) is BN254
    assert field_for_prime(97).modulus == 97
