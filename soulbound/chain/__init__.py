# Chain execution environment package
from .addresses import (
    Address, ZERO_ADDRESS, BURN_ADDRESS,
    normalize_address, is_zero_address, address_from_int,
)
from .chain import Chain, Contract, Stateful, atomic_entry
from .events import Event, EventLog
from .logger import EventLogger
from .errors import (
    ErrorCategory, ErrorCode, ErrorResponse, ChainError,
    InvalidAddress, InvalidRecipient, IndexOutOfRange, ApprovalToCurrentOwner,
    Unauthorized, NotTokenOwner, NotMinted, TokenAlreadyMinted, UnknownContract,
    TokenLocked, SourceNotConfigured, UnrecognizedSource,
    ReentrantCall, TransferRejected,
)

__all__ = [
    "Address", "ZERO_ADDRESS", "BURN_ADDRESS",
    "normalize_address", "is_zero_address", "address_from_int",
    "Chain", "Contract", "Stateful", "atomic_entry",
    "Event", "EventLog",
    "EventLogger",
    "ErrorCategory", "ErrorCode", "ErrorResponse", "ChainError",
    "InvalidAddress", "InvalidRecipient", "IndexOutOfRange", "ApprovalToCurrentOwner",
    "Unauthorized", "NotTokenOwner", "NotMinted", "TokenAlreadyMinted", "UnknownContract",
    "TokenLocked", "SourceNotConfigured", "UnrecognizedSource",
    "ReentrantCall", "TransferRejected",
]
