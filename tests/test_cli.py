"""
Tests for the balance-prover CLI.
"""

import hashlib
import json

from typer.testing import CliRunner

from balance_prover.cli import app


runner = CliRunner()

COMMITMENT = "00000000000003e8secret_nonce_123"
SECRET = "secret_nonce_123"


def test_commitment_command():
    result = runner.invoke(app, ["commitment", "1000", SECRET])
    assert result.exit_code == 0
    assert result.stdout.strip() == COMMITMENT


def test_generate_hex():
    result = runner.invoke(app, ["generate", "0x1234", "500", COMMITMENT, SECRET, "--hex"])
    assert result.exit_code == 0
    proof_hex = result.stdout.strip()
    assert len(proof_hex) == 64
    bytes.fromhex(proof_hex)


def test_generate_json():
    result = runner.invoke(app, ["generate", "0x1234", "500", COMMITMENT, SECRET])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["public_inputs"]["amount"] == 500
    assert len(data["proof_bytes"]) == 32


def test_generate_insufficient_balance():
    result = runner.invoke(
        app, ["generate", "0x1234", "500", "0000000000000064secret_nonce_123", SECRET]
    )
    assert result.exit_code == 1
    assert "balance 100 <= amount 500" in result.output


def test_generate_then_verify(tmp_path):
    proof_file = tmp_path / "proof.json"
    result = runner.invoke(
        app, ["generate", "0x1234", "500", COMMITMENT, SECRET, "--output", str(proof_file)]
    )
    assert result.exit_code == 0
    assert proof_file.exists()

    result = runner.invoke(app, ["verify", str(proof_file), COMMITMENT, SECRET])
    assert result.exit_code == 0
    assert "Proof verified successfully" in result.stdout

    result = runner.invoke(app, ["verify", str(proof_file), COMMITMENT, "wrong_nonce"])
    assert result.exit_code == 1


def test_verify_invalid_proof_file(tmp_path):
    proof_file = tmp_path / "proof.json"
    proof_file.write_text(json.dumps({"proof_bytes": []}))

    result = runner.invoke(app, ["verify", str(proof_file), COMMITMENT, SECRET])
    assert result.exit_code == 1
    assert "Invalid proof file" in result.output


def test_verify_out_of_range_amount(tmp_path):
    """A tampered amount outside u64 fails cleanly instead of crashing."""
    c_hash = hashlib.sha3_256(COMMITMENT.encode()).hexdigest()
    for amount in (-5, 1 << 64):
        proof_file = tmp_path / f"proof_{amount}.json"
        proof_file.write_text(
            json.dumps(
                {
                    "proof_bytes": [0] * 32,
                    "public_inputs": {"amount": amount, "commitment_hash": c_hash, "user_address": "0x1234"},
                    "commitment_hash": c_hash,
                }
            )
        )

        result = runner.invoke(app, ["verify", str(proof_file), COMMITMENT, SECRET])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Invalid proof file" in result.output
