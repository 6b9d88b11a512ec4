"""Transaction signing agents.

Provides the two signing variants:
- ExternalSigningAgent: Host-connected wallet, signs via callback
- EmbeddedSigningAgent: In-memory ed25519 key owned by the service
"""

from goldium.signing.base import (
    SignerType,
    SigningAgent,
    SigningCancelledError,
    SigningError,
)
from goldium.signing.embedded import EmbeddedSigningAgent
from goldium.signing.external import ExternalSigningAgent
from goldium.signing.factory import get_signer_info, select_signing_agent

__all__ = [
    "SignerType",
    "SigningAgent",
    "SigningCancelledError",
    "SigningError",
    "EmbeddedSigningAgent",
    "ExternalSigningAgent",
    "get_signer_info",
    "select_signing_agent",
]
