import json
import logging
import click
from pathlib import Path

from circombridge.circom.builder import CircomBuilder, CircomConfig
from circombridge.circom.circuit import CircomCircuit
from circombridge.core.constraint_system import ConstraintSystem
from circombridge.core.errors import CircomBridgeError
from circombridge.core.r1cs_io import load_r1cs_json, summarize_r1cs
from circombridge.core.witness_io import load_witness

@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """circombridge command line interface"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

def _load(r1cs, witness=None):
    try:
        R = load_r1cs_json(r1cs)
        w = load_witness(witness, R.field.modulus) if witness else None
    except ValueError as exc:
        raise click.ClickException(str(exc))
    if w is not None:
        # exported witnesses are wire-ordered; "map" points at labels
        R.wire_mapping = None
    return R, w

@cli.command(name="info")
@click.option("--r1cs", type=click.Path(exists=True, dir_okay=False), required=True,
              help="Path to snarkjs-exported R1CS JSON")
def info_cmd(r1cs):
    """Parse and summarize an R1CS JSON."""
    R, _ = _load(r1cs)
    click.echo(json.dumps(summarize_r1cs(R), indent=2))

@cli.command(name="public")
@click.option("--r1cs", type=click.Path(exists=True, dir_okay=False), required=True)
@click.option("--witness", type=click.Path(exists=True, dir_okay=False), required=True,
              help="Witness as snarkjs JSON or binary .wtns")
def public_cmd(r1cs, witness):
    """Print the public inputs of a witness, in verifier order."""
    R, w = _load(r1cs, witness)
    if len(w) < R.num_variables:
        raise click.ClickException(f"Witness has {len(w)} values, circuit needs {R.num_variables}")
    circom = CircomCircuit(r1cs=R, witness=w)
    click.echo(json.dumps([str(x) for x in circom.get_public_inputs()], indent=2))

@cli.command(name="check")
@click.option("--r1cs", type=click.Path(exists=True, dir_okay=False), required=True)
@click.option("--witness", type=click.Path(exists=True, dir_okay=False), required=True,
              help="Witness as snarkjs JSON or binary .wtns")
@click.option("--jobs", "n_jobs", default=1, show_default=True, help="Worker threads for constraint translation")
def check_cmd(r1cs, witness, n_jobs):
    """Synthesize the circuit with a witness and check every constraint."""
    R, w = _load(r1cs, witness)
    cs = ConstraintSystem(R.field)
    try:
        CircomCircuit(r1cs=R, witness=w, n_jobs=n_jobs).generate_constraints(cs)
    except CircomBridgeError as exc:
        raise click.ClickException(str(exc))
    bad = cs.which_is_unsatisfied()
    out = {
        "circuit_id": Path(r1cs).stem,
        "n_constraints": cs.num_constraints,
        "satisfied": bad is None,
        "first_unsatisfied": bad,
    }
    click.echo(json.dumps(out, indent=2))
    if bad is not None:
        raise click.ClickException(f"Witness does not satisfy R1CS (first failing row {bad})")

@cli.command(name="witness")
@click.option("--r1cs", type=click.Path(exists=True, dir_okay=False), required=True)
@click.option("--wasm", type=click.Path(exists=True, dir_okay=False), required=True,
              help="circom-generated circuit .wasm (generate_witness.js is expected beside it)")
@click.option("--input", "input_path", type=click.Path(exists=True, dir_okay=False), required=True)
@click.option("--out", "out_path", type=click.Path(dir_okay=False), required=False,
              help="Write the witness JSON here instead of stdout")
@click.option("--check/--no-check", default=False, show_default=True,
              help="Re-synthesize the built circuit and verify it")
@click.option("--jobs", "n_jobs", default=1, show_default=True)
def witness_cmd(r1cs, wasm, input_path, out_path, check, n_jobs):
    """Compute a witness for input.json and export it in snarkjs JSON form."""
    try:
        cfg = CircomConfig.from_files(wasm, r1cs, sanity_check=check,
                                      verify_constraints=check, n_jobs=n_jobs)
        builder = CircomBuilder(cfg)
        builder.load_input_json(input_path)
        circom = builder.build()
    except (CircomBridgeError, ValueError) as exc:
        raise click.ClickException(str(exc))

    s = json.dumps([str(x) for x in circom.witness], indent=2)
    if out_path:
        Path(out_path).write_text(s)
    else:
        click.echo(s)


def main():
    cli()

if __name__ == "__main__":
    main()
