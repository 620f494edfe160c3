"""
Domain layer.

Credential metadata, the key verification policy and the abstract services
(resolver, parser) the evaluator depends on.
"""

from pgp_expiration.domain.credential import Credential, KeyInfo
from pgp_expiration.domain.policy import KeyPolicy

__all__ = ["Credential", "KeyInfo", "KeyPolicy"]
