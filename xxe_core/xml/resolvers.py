"""
Access Policy Resolver
======================

lxml resolver enforcing an external-access protocol policy. Every external
DTD, entity or schema document lxml tries to load passes through ``resolve``;
anything the policy does not allow is refused and recorded.
"""

from typing import List, Optional
import logging

from lxml import etree

from xxe_core.errors import SecurityPolicyError
from xxe_core.xml.utils import is_access_allowed

logger = logging.getLogger(__name__)


class AccessPolicyResolver(etree.Resolver):
    """
    Refuses external resources whose protocol is outside ``policy``.

    Blocked URLs are kept in ``blocked`` because lxml may report a refused
    load as a plain syntax error instead of re-raising our exception.

    Example:
        parser = etree.XMLParser(load_dtd=True, no_network=True)
        resolver = AccessPolicyResolver(policy="")
        parser.resolvers.add(resolver)
    """

    def __init__(self, policy: str = ""):
        super().__init__()
        self.policy = policy
        self.blocked: List[str] = []

    def resolve(self, url, pubid, context) -> Optional[object]:
        if url and is_access_allowed(url, self.policy):
            # Fall through to lxml's default loader
            return None

        self.blocked.append(url or pubid or "")
        logger.warning(f"Blocked external access to {url!r} (policy={self.policy!r})")
        raise SecurityPolicyError(
            f"External access to {url!r} is not allowed by policy {self.policy!r}",
            details={'url': url, 'public_id': pubid, 'policy': self.policy},
        )

    def raise_if_blocked(self) -> None:
        """Raise SecurityPolicyError if any access was refused."""
        if self.blocked:
            raise SecurityPolicyError(
                f"External access blocked: {', '.join(self.blocked)}",
                details={'blocked': list(self.blocked), 'policy': self.policy},
            )
