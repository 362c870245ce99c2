"""
CLI for Balance Prover.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import structlog
import typer
from dotenv import load_dotenv

from .commitment import encode_commitment
from .errors import ProofError
from .proof import Proof, ProofEngine, ProofRequest

structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
)

app = typer.Typer(
    name="balance-prover",
    help="Balance proof generator and verifier",
    add_completion=False,
)


def main() -> None:
    """Entry point."""
    load_dotenv()
    app()


@app.command()
def commitment(
    balance: int = typer.Argument(..., min=0, help="Balance to commit to"),
    suffix: str = typer.Argument("", help="Opaque suffix (conventionally the nonce)"),
) -> None:
    """
    Encode a balance commitment.

    Example:
        balance-prover commitment 1000 secret_nonce_123
    """
    try:
        typer.echo(encode_commitment(balance, suffix))
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def generate(
    user_address: str = typer.Argument(..., help="User address"),
    amount: int = typer.Argument(..., min=0, help="Transfer amount"),
    balance_commitment: str = typer.Argument(..., help="Balance commitment"),
    secret_nonce: str = typer.Argument(..., help="Secret nonce"),
    output_file: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file for proof JSON"
    ),
    hex_output: bool = typer.Option(False, "--hex", help="Print only the proof bytes as hex"),
) -> None:
    """
    Generate a balance proof (balance > amount).
    """
    engine = ProofEngine()

    try:
        proof = engine.generate(
            ProofRequest(
                user_address=user_address,
                amount=amount,
                balance_commitment=balance_commitment,
                secret_nonce=secret_nonce,
            )
        )
    except ValueError as e:
        typer.echo(f"Error generating proof: {e}", err=True)
        raise typer.Exit(1)

    if hex_output:
        typer.echo(proof.to_hex())
        return

    proof_json = json.dumps(proof.to_dict(), indent=2)
    if output_file:
        output_file.write_text(proof_json)
        typer.echo(f"{proof}")
        typer.echo(f"Proof saved to {output_file}")
    else:
        typer.echo(proof_json)


@app.command()
def verify(
    proof_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Path to proof JSON file"),
    balance_commitment: str = typer.Argument(..., help="Balance commitment used for the proof"),
    secret_nonce: str = typer.Argument(..., help="Secret nonce used for the proof"),
) -> None:
    """
    Verify a balance proof. Exits with 1 if the proof does not hold.
    """
    try:
        proof = Proof.from_dict(json.loads(proof_file.read_text()))
    except (ValueError, KeyError, TypeError) as e:
        typer.echo(f"Invalid proof file: {e}", err=True)
        raise typer.Exit(1)

    try:
        verified = ProofEngine().verify(proof, balance_commitment, secret_nonce)
    except ProofError as e:
        typer.echo(f"Verification error: {e}", err=True)
        raise typer.Exit(1)

    if not verified:
        typer.echo("FAIL: Proof verification failed", err=True)
        raise typer.Exit(1)

    typer.echo(f"Proof verified successfully: {proof}")


@app.command()
def serve() -> None:
    """Run the HTTP API."""
    from .main import run

    run()


if __name__ == "__main__":
    main()
