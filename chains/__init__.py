"""
chains/ - Blockchain interaction layer.

Modules:
- providers: JSON-RPC provider management with failover
"""

from chains.providers import (
    RPCProvider,
    RPCResponse,
    RPCStats,
    resolve_rpc_urls,
)

__all__ = [
    "RPCProvider",
    "RPCResponse",
    "RPCStats",
    "resolve_rpc_urls",
]
