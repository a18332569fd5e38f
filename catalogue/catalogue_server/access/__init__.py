"""
Access control: ownership resolution and the authorization gate.
"""

from .acl import AccountAccess, AuthorizationGate
from .ownership import OwnershipChain, OwnershipResolver, build_chain

__all__ = [
    "AccountAccess",
    "AuthorizationGate",
    "OwnershipChain",
    "OwnershipResolver",
    "build_chain",
]
