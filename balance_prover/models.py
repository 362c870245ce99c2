"""
Pydantic models for API requests and responses.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, Field

from .digest import U64_MAX
from .proof import Proof, ProofRequest, PublicInputs


# ============================================================================
# Balance Proof
# ============================================================================

class BalanceProofRequest(BaseModel):
    """Request to generate a balance proof (balance > amount)."""

    user_address: str = Field(..., description="User address (0x...)")
    amount: int = Field(..., ge=0, le=U64_MAX, description="Transfer amount (public)")
    balance_commitment: str = Field(
        ..., description="Balance commitment: 16 hex chars of balance + opaque suffix"
    )
    secret_nonce: str = Field(..., description="Secret nonce mixed into the proof")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_address": "0x1234567890abcdef1234567890abcdef12345678",
                    "amount": 500,
                    "balance_commitment": "00000000000003e8secret_nonce_123",
                    "secret_nonce": "secret_nonce_123",
                }
            ]
        }
    }

    def to_request(self) -> ProofRequest:
        return ProofRequest(
            user_address=self.user_address,
            amount=self.amount,
            balance_commitment=self.balance_commitment,
            secret_nonce=self.secret_nonce,
        )


class PublicInputsModel(BaseModel):
    """Public inputs of a balance proof."""

    amount: int = Field(..., ge=0, le=U64_MAX, description="Transfer amount")
    commitment_hash: str = Field(..., description="SHA3-256 of the commitment (hex)")
    user_address: str = Field(..., description="User address")


class BalanceProofModel(BaseModel):
    """Serialized balance proof."""

    proof_bytes: list[Annotated[int, Field(ge=0, le=255)]] = Field(..., description="Proof bytes (32 bytes)")
    public_inputs: PublicInputsModel
    commitment_hash: str = Field(..., description="SHA3-256 of the commitment (hex)")

    @classmethod
    def from_proof(cls, proof: Proof) -> "BalanceProofModel":
        return cls.model_validate(proof.to_dict())

    def to_proof(self) -> Proof:
        return Proof(
            proof_bytes=bytes(self.proof_bytes),
            public_inputs=PublicInputs(
                amount=self.public_inputs.amount,
                commitment_hash=self.public_inputs.commitment_hash,
                user_address=self.public_inputs.user_address,
            ),
            commitment_hash=self.commitment_hash,
        )


class BalanceProofResponse(BaseModel):
    """Response containing a generated proof."""

    success: bool = Field(..., description="Whether the proof was generated")
    proof: Optional[BalanceProofModel] = Field(None, description="Generated proof")
    message: str = Field(..., description="Result message")


# ============================================================================
# Verify
# ============================================================================

class VerifyProofRequest(BaseModel):
    """Request to verify a balance proof."""

    proof: BalanceProofModel
    balance_commitment: str = Field(..., description="Commitment used to generate the proof")
    secret_nonce: str = Field(..., description="Nonce used to generate the proof")


class VerifyProofResponse(BaseModel):
    """Verification result."""

    success: bool = Field(..., description="Whether the proof could be evaluated")
    verified: bool = Field(..., description="Whether the proof holds")
    message: str = Field(..., description="Result message")


# ============================================================================
# Batch
# ============================================================================

class BatchProofRequest(BaseModel):
    """Request to generate many proofs at once."""

    requests: list[BalanceProofRequest] = Field(..., description="Proof requests")


class BatchProofResponse(BaseModel):
    """Batch result, positionally aligned with the request list."""

    success: bool = Field(..., description="True if at least one proof was generated")
    proofs: list[Optional[BalanceProofModel]] = Field(..., description="Proof or null per request")
    errors: list[Optional[str]] = Field(..., description="Error or null per request")
    message: str = Field(..., description="Summary message")


# ============================================================================
# Listing / Status / Health
# ============================================================================

class StoredProofInfo(BaseModel):
    """Summary of an issued proof."""

    amount: int
    user_address: str
    commitment_hash: str
    proof_hex: str
    proof_size: int

    @classmethod
    def from_proof(cls, proof: Proof) -> "StoredProofInfo":
        return cls(
            amount=proof.public_inputs.amount,
            user_address=proof.public_inputs.user_address,
            commitment_hash=proof.commitment_hash,
            proof_hex=proof.to_hex(),
            proof_size=proof.size(),
        )


class StatusResponse(BaseModel):
    """Service status."""

    status: str = Field(..., description="Service status")
    generated_proofs: int = Field(..., description="Number of proofs issued")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="API version")
