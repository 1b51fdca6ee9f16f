__all__ = [
    # Configuration
    "RunnerConfig",
    "ConfigError",
    # Runner
    "TransactionRunner",
    "RunStatistics",
    "RunReport",
    "InsufficientBalanceError",
    # Contract
    "CounterContract",
    "PendingTransaction",
    "TxReceipt",
    "TransactionRevertedError",
    "EmptyCallResultError",
    "COUNTER_ABI",
    # RPC
    "RpcClient",
    "RpcError",
    "ReceiptTimeoutError",
    # Identity
    "get_account",
    "get_address",
    "load_private_key",
]

from .chain.abi import COUNTER_ABI
from .chain.rpc import ReceiptTimeoutError, RpcClient, RpcError
from .config import ConfigError, RunnerConfig
from .counter import (
    CounterContract,
    EmptyCallResultError,
    PendingTransaction,
    TransactionRevertedError,
    TxReceipt,
)
from .runner import InsufficientBalanceError, RunReport, RunStatistics, TransactionRunner
from .wallet.eth import get_account, get_address, load_private_key
