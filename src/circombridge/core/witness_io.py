from __future__ import annotations
import json
import struct
from pathlib import Path
from typing import List, Tuple

WTNS_MAGIC = b"wtns"

def load_witness_json(path, p: int) -> List[int]:
    """
    Accept:
      • snarkjs: ["1","..."]
      • alt:     {"values":[...]} / {"witness":[...]} / {"data":[...]}
    Return list[int] reduced mod p.
    """
    obj = json.loads(Path(path).read_text())
    if isinstance(obj, list):
        vals = obj
    else:
        vals = obj.get("values") or obj.get("witness") or obj.get("data") or []
    if not isinstance(vals, list):
        raise ValueError("Witness JSON does not contain an array")
    out = []
    for v in vals:
        if isinstance(v, int) and not isinstance(v, bool):
            out.append(v % p)
        elif isinstance(v, str):
            s = v.strip()
            vv = int(s, 16) if s.startswith(("0x", "0X")) else int(s)
            out.append(vv % p)
        else:
            raise ValueError(f"Unsupported witness value type: {type(v)}")
    return out

def _sections(raw: bytes) -> dict:
    if len(raw) < 12 or raw[0:4] != WTNS_MAGIC:
        raise ValueError("Not a wtns file (bad magic)")
    version, n_sections = struct.unpack("<II", raw[4:12])
    if version > 2:
        raise ValueError(f"Unsupported wtns version {version}")
    out = {}
    pos = 12
    for _ in range(n_sections):
        if pos + 12 > len(raw):
            raise ValueError("Truncated wtns section header")
        s_type = struct.unpack("<I", raw[pos:pos + 4])[0]
        s_size = struct.unpack("<Q", raw[pos + 4:pos + 12])[0]
        pos += 12
        if pos + s_size > len(raw):
            raise ValueError(f"Truncated wtns section {s_type}")
        out[s_type] = raw[pos:pos + s_size]
        pos += s_size
    return out

def parse_wtns(raw: bytes) -> Tuple[int, List[int]]:
    sections = _sections(raw)
    if 1 not in sections or 2 not in sections:
        raise ValueError("wtns file needs a header (1) and a witness (2) section")
    header = sections[1]
    n8 = struct.unpack("<I", header[0:4])[0]
    prime = int.from_bytes(header[4:4 + n8], "little")
    n_witness = struct.unpack("<I", header[4 + n8:8 + n8])[0]
    body = sections[2]
    if len(body) != n8 * n_witness:
        raise ValueError(f"wtns witness section holds {len(body)} bytes, expected {n8 * n_witness}")
    values = [int.from_bytes(body[i * n8:(i + 1) * n8], "little") for i in range(n_witness)]
    return prime, values

def load_wtns(path) -> Tuple[int, List[int]]:
    """Read a binary .wtns file as written by circom's generate_witness.js."""
    return parse_wtns(Path(path).read_bytes())

def load_witness(path, p: int) -> List[int]:
    if Path(path).suffix == ".wtns":
        prime, values = load_wtns(path)
        if prime != p:
            raise ValueError(f"Witness prime {prime} does not match field modulus {p}")
        return values
    return load_witness_json(path, p)
