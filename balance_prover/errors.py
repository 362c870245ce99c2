"""
Errors raised by the proof engine.
"""


class ProofError(ValueError):
    """Base error for proof generation and verification."""


class InsufficientBalance(ProofError):
    """Decoded balance does not exceed the requested amount."""

    def __init__(self, balance: int, amount: int):
        self.balance = balance
        self.amount = amount
        super().__init__(f"Invalid proof: balance {balance} <= amount {amount}")


class UnparsableCommitment(ProofError):
    """Neither decoding stage could extract a balance from the commitment."""

    def __init__(self) -> None:
        super().__init__("Cannot extract balance from commitment")
