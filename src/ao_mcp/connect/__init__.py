"""AO network client.

Dry-run queries, signed messages, process spawns and result history against
AO compute and messenger units.
"""

from ao_mcp.connect.client import AOClient
from ao_mcp.connect.errors import (
    AOError,
    InvalidWalletError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
    UnitUnavailableError,
    ValidationError,
)
from ao_mcp.connect.signer import DataItemSigner, create_data_item_signer
from ao_mcp.connect.types import (
    Message,
    MessageReceipt,
    ResultEdge,
    ResultPayload,
    ResultsPage,
    SortOrder,
    Tag,
)

__all__ = [
    # Client
    "AOClient",
    "DataItemSigner",
    "create_data_item_signer",
    # Types
    "Tag",
    "Message",
    "MessageReceipt",
    "ResultPayload",
    "ResultEdge",
    "ResultsPage",
    "SortOrder",
    # Errors
    "AOError",
    "ValidationError",
    "NotFoundError",
    "RateLimitedError",
    "UnitUnavailableError",
    "RequestTimeoutError",
    "InvalidWalletError",
]
