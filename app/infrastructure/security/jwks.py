"""JWKS client management for bearer token verification."""

from typing import Any, Dict, List, Optional

import structlog
from jwt import PyJWKClient

logger = structlog.get_logger()


class JWKSManager:
    """Manage one cached JWKS client per trusted issuer.

    Attributes:
        issuer_config: issuer -> {"jwks_uri", "audience", "algorithms"}
        jwks_clients: Cache of JWKS clients for each issuer
    """

    def __init__(self, issuer_config: Optional[Dict[str, Dict[str, Any]]] = None):
        self.issuer_config: Dict[str, Dict[str, Any]] = issuer_config or {}
        self.jwks_clients: Dict[str, PyJWKClient] = {}

    @property
    def trusted_issuers(self) -> List[str]:
        return list(self.issuer_config)

    def get_issuer_config(self, issuer: str) -> Optional[Dict[str, Any]]:
        return self.issuer_config.get(issuer)

    def get_jwks_client(self, issuer: str) -> Optional[PyJWKClient]:
        """Get or create the JWKS client for ``issuer``.

        Returns:
            The JWKS client, or None if the issuer is not trusted or has no
            ``jwks_uri``
        """
        cfg = self.issuer_config.get(issuer)
        if not cfg:
            logger.warning("issuer_not_configured", issuer=issuer)
            return None

        if issuer not in self.jwks_clients:
            jwks_uri = cfg.get("jwks_uri")
            if not jwks_uri:
                logger.warning("issuer_missing_jwks_uri", issuer=issuer)
                return None
            self.jwks_clients[issuer] = PyJWKClient(
                jwks_uri, cache_jwk_set=True, lifespan=3600, timeout=10
            )
            logger.info("jwks_client_initialized", issuer=issuer)

        return self.jwks_clients[issuer]

    def clear_cache(self, issuer: Optional[str] = None) -> None:
        """Clear JWKS client cache.

        Args:
            issuer: Optional issuer to clear. If None, clears all.
        """
        if issuer:
            self.jwks_clients.pop(issuer, None)
        else:
            self.jwks_clients.clear()
