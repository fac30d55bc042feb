import json
import struct
from pathlib import Path
import pytest

from circombridge.core.field import BN254_PRIME
from circombridge.core.witness_io import load_witness, load_witness_json, load_wtns, parse_wtns

EXAMPLES = Path(__file__).resolve().parent.parent / "circuits" / "examples"

def wtns_bytes(prime, values, n8=32):
    header = struct.pack("<I", n8) + prime.to_bytes(n8, "little") + struct.pack("<I", len(values))
    body = b"".join(v.to_bytes(n8, "little") for v in values)
    out = b"wtns" + struct.pack("<II", 2, 2)
    out += struct.pack("<IQ", 1, len(header)) + header
    out += struct.pack("<IQ", 2, len(body)) + body
    return out

def test_snarkjs_list():
    assert load_witness_json(EXAMPLES / "multiplier2.witness.json", BN254_PRIME) == [1, 33, 3, 11]

def test_values_object_and_hex(tmp_path):
    p = tmp_path / "w.json"
    p.write_text(json.dumps({"values": ["1", "0x10", 7, "-1"]}))
    assert load_witness_json(p, 97) == [1, 16, 7, 96]

def test_rejects_other_types(tmp_path):
    p = tmp_path / "w.json"
    p.write_text(json.dumps([1, 2.5]))
    with pytest.raises(ValueError):
        load_witness_json(p, 97)

def test_wtns_binary(tmp_path):
    p = tmp_path / "w.wtns"
    p.write_bytes(wtns_bytes(BN254_PRIME, [1, 33, 3, 11]))
    prime, values = load_wtns(p)
    assert prime == BN254_PRIME
    assert values == [1, 33, 3, 11]
    assert load_witness(p, BN254_PRIME) == [1, 33, 3, 11]

def test_wtns_prime_mismatch(tmp_path):
    p = tmp_path / "w.wtns"
    p.write_bytes(wtns_bytes(97, [1, 2], n8=8))
    with pytest.raises(ValueError, match="prime"):
        load_witness(p, BN254_PRIME)

def test_wtns_malformed():
    with pytest.raises(ValueError, match="magic"):
        parse_wtns(b"nope" + bytes(20))
    raw = wtns_bytes(97, [1, 2, 3], n8=8)
    with pytest.raises(ValueError, match="Truncated"):
        parse_wtns(raw[:-4])
