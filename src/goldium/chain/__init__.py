"""Solana ledger access: JSON-RPC client and transfer transactions."""

from goldium.chain.rpc import RPCError, SolanaRPC
from goldium.chain.transaction import (
    LAMPORTS_PER_SOL,
    TransferTransaction,
    is_valid_address,
    lamports_to_sol,
    sol_to_lamports,
)

__all__ = [
    "RPCError",
    "SolanaRPC",
    "LAMPORTS_PER_SOL",
    "TransferTransaction",
    "is_valid_address",
    "lamports_to_sol",
    "sol_to_lamports",
]
