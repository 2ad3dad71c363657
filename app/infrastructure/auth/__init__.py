"""Infrastructure auth module - caller identity resolution.

Exports:
    CallerIdentity: Verified caller of the direct-call surface
    resolve_caller_identity: Bearer token -> CallerIdentity or None
"""

from infrastructure.auth.identity import CallerIdentity, resolve_caller_identity

__all__ = [
    "CallerIdentity",
    "resolve_caller_identity",
]
