"""Probabilistic stand-in for an unreliable downstream provider.

Each call runs a few independent probes; the first probe that succeeds counts
as a delivery. With the defaults (3 probes at 20%) just under half of all
calls deliver.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from .outcomes import Delivered, DeliveryOutcome, Failed

if TYPE_CHECKING:
    from ..types import DeliverFn
    from .channels import Channel

DEFAULT_SUCCESS_PROBABILITY = 0.2
DEFAULT_PROBES = 3


def make_simulator(
    success_probability: float = DEFAULT_SUCCESS_PROBABILITY,
    probes: int = DEFAULT_PROBES,
    rng: random.Random | None = None,
) -> DeliverFn:
    """Build a simulated transport with its own tuning and random source."""
    if not 0.0 <= success_probability <= 1.0:
        raise ValueError(
            f"success_probability must be within [0, 1], got {success_probability}"
        )
    if probes < 1:
        raise ValueError(f"probes must be >= 1, got {probes}")
    source = rng or random.Random()

    def simulate(channel: Channel, message: str, recipient: str) -> DeliveryOutcome:
        for _ in range(probes):
            if source.random() < success_probability:
                return Delivered()
        return Failed(f"{channel.kind().value} sent to {recipient}: {message}")

    return simulate


_default_simulator = make_simulator()


def simulate_delivery(channel: Channel, message: str, recipient: str) -> DeliveryOutcome:
    """Simulated transport with the default tuning and a shared random source."""
    return _default_simulator(channel, message, recipient)
