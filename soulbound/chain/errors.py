"""Error taxonomy for chain and registry failures.

Every failure raised by a contract is a ChainError subclass. Errors carry a
machine-readable code and category (same vocabulary as ErrorResponse) so
callers such as the scenario runner can render them without string matching.

Usage:
    from soulbound.chain.errors import NotMinted

    try:
        registry.locked(7)
    except NotMinted as e:
        print(e.to_response())
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - VALIDATION: Caller provided bad input
    - PERMISSION: Caller not authorized
    - RESOURCE: Token or contract missing / already exists
    - STATE: Operation forbidden by current state (locked, not configured)
    - EXECUTION: Call-protocol problems (re-entry, rejected receive-hook)
    """

    VALIDATION = "validation"
    PERMISSION = "permission"
    RESOURCE = "resource"
    STATE = "state"
    EXECUTION = "execution"


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    # Validation errors
    INVALID_ADDRESS = "invalid_address"
    INVALID_RECIPIENT = "invalid_recipient"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    APPROVAL_TO_CURRENT_OWNER = "approval_to_current_owner"

    # Permission errors
    NOT_AUTHORIZED = "not_authorized"
    NOT_OWNER = "not_owner"

    # Resource errors
    NOT_MINTED = "not_minted"
    ALREADY_MINTED = "already_minted"
    UNKNOWN_CONTRACT = "unknown_contract"

    # State errors
    TOKEN_LOCKED = "token_locked"
    SOURCE_NOT_CONFIGURED = "source_not_configured"
    UNRECOGNIZED_SOURCE = "unrecognized_source"

    # Execution errors
    REENTRANT_CALL = "reentrant_call"
    TRANSFER_REJECTED = "transfer_rejected"


@dataclass
class ErrorResponse:
    """Standardized error response.

    All error responses include:
    - success: Always False
    - error: Human-readable message
    - code: Machine-readable error code
    - category: Error category (validation, permission, etc.)
    - details: Optional additional context
    """

    success: bool = False  # Always False for errors
    error: str = ""  # Human-readable message
    code: str = ""  # Machine-readable error code
    category: str = ""  # Error category
    details: dict[str, object] | None = None  # Optional additional context

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "category": self.category,
        }
        if self.details:
            result["details"] = self.details
        return result


class ChainError(Exception):
    """Base class for every failure that aborts an atomic unit."""

    code: ErrorCode = ErrorCode.NOT_AUTHORIZED
    category: ErrorCategory = ErrorCategory.EXECUTION

    def __init__(self, message: str, **details: object) -> None:
        self.message = message
        self.details = dict(details)
        super().__init__(message)

    def to_response(self) -> dict[str, object]:
        """Render as an ErrorResponse dict."""
        return ErrorResponse(
            error=self.message,
            code=self.code.value,
            category=self.category.value,
            details=self.details or None,
        ).to_dict()


class InvalidAddress(ChainError, ValueError):
    """Raised when an address argument is malformed or the null sentinel.

    Also a ValueError, so address parsing can be used inside pydantic validators.
    """

    code = ErrorCode.INVALID_ADDRESS
    category = ErrorCategory.VALIDATION


class InvalidRecipient(ChainError):
    """Raised when a token would be sent to the null address."""

    code = ErrorCode.INVALID_RECIPIENT
    category = ErrorCategory.VALIDATION


class IndexOutOfRange(ChainError):
    """Raised by enumeration queries past the end of a list."""

    code = ErrorCode.INDEX_OUT_OF_RANGE
    category = ErrorCategory.VALIDATION


class ApprovalToCurrentOwner(ChainError):
    """Raised when approving a token's owner for that same token."""

    code = ErrorCode.APPROVAL_TO_CURRENT_OWNER
    category = ErrorCategory.VALIDATION


class Unauthorized(ChainError):
    """Raised when the caller lacks owner/approval or admin privilege."""

    code = ErrorCode.NOT_AUTHORIZED
    category = ErrorCategory.PERMISSION


class NotTokenOwner(ChainError):
    """Raised when a transfer names a from-address that does not own the token."""

    code = ErrorCode.NOT_OWNER
    category = ErrorCategory.PERMISSION


class NotMinted(ChainError):
    """Raised for any query or mutation on a token id with no ledger entry."""

    code = ErrorCode.NOT_MINTED
    category = ErrorCategory.RESOURCE

    def __init__(self, token_id: int) -> None:
        self.token_id = token_id
        super().__init__(f"Token {token_id} has not been minted", token_id=token_id)


class TokenAlreadyMinted(ChainError):
    """Raised when minting an id that already has an owner."""

    code = ErrorCode.ALREADY_MINTED
    category = ErrorCategory.RESOURCE

    def __init__(self, token_id: int) -> None:
        self.token_id = token_id
        super().__init__(f"Token {token_id} already exists", token_id=token_id)


class UnknownContract(ChainError):
    """Raised when looking up an address with no deployed contract."""

    code = ErrorCode.UNKNOWN_CONTRACT
    category = ErrorCategory.RESOURCE


class TokenLocked(ChainError):
    """Raised by the transfer gate when a locked token would change owner."""

    code = ErrorCode.TOKEN_LOCKED
    category = ErrorCategory.STATE

    def __init__(self, token_id: int) -> None:
        self.token_id = token_id
        super().__init__(f"Token {token_id} is locked and cannot be transferred", token_id=token_id)


class SourceNotConfigured(ChainError):
    """Raised by the migration bridge before a source ledger has been set."""

    code = ErrorCode.SOURCE_NOT_CONFIGURED
    category = ErrorCategory.STATE


class UnrecognizedSource(ChainError):
    """Raised when the receive-hook caller is not the configured source ledger."""

    code = ErrorCode.UNRECOGNIZED_SOURCE
    category = ErrorCategory.STATE


class ReentrantCall(ChainError):
    """Raised when an entry point is entered while another is still running."""

    code = ErrorCode.REENTRANT_CALL
    category = ErrorCategory.EXECUTION


class TransferRejected(ChainError):
    """Raised when a recipient contract does not acknowledge a safe transfer."""

    code = ErrorCode.TRANSFER_REJECTED
    category = ErrorCategory.EXECUTION
