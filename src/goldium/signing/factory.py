"""Signing agent selection.

Exactly one agent is active per exchange: the external wallet when one
is attached and connected, otherwise the embedded key.
"""

import logging
from typing import Optional

from goldium.signing.base import SigningAgent
from goldium.signing.embedded import EmbeddedSigningAgent
from goldium.signing.external import ExternalSigningAgent

logger = logging.getLogger(__name__)


def select_signing_agent(
    external: Optional[ExternalSigningAgent],
    embedded: EmbeddedSigningAgent,
) -> SigningAgent:
    """Pick the agent that signs the current exchange.

    Args:
        external: Host wallet, if one has been attached
        embedded: Service-owned fallback

    Returns:
        The active SigningAgent
    """
    if external is not None and external.is_available:
        return external

    if external is not None:
        logger.debug("External wallet attached but not connected, using embedded wallet")
    return embedded


def get_signer_info(agent: SigningAgent) -> dict:
    """Describe the active agent for status endpoints."""
    return {
        "type": agent.signer_type.value,
        "address": agent.address,
        "available": agent.is_available,
        "class": agent.__class__.__name__,
    }
