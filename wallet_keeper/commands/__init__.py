"""
Orchestration modes. Exactly one runs per invocation.
"""
from __future__ import annotations

from wallet_keeper.errors import ConfigurationError

from .continual_funding import continual_funding, funding_pass
from .initial_distribution import initial_distribution
from .reclaim import compute_reclaim_amount, reclaim
from .status import WalletStatus, wallet_status

MODES = ("init_dist", "cont_fund", "reclaim", "status")

__all__ = [
    "MODES",
    "WalletStatus",
    "compute_reclaim_amount",
    "continual_funding",
    "funding_pass",
    "initial_distribution",
    "reclaim",
    "resolve_mode",
    "wallet_status",
]


def resolve_mode(**flags: bool) -> str | None:
    """Return the single selected mode name, None when nothing is selected.

    Raises ConfigurationError when more than one mode is selected.
    """
    unknown = set(flags) - set(MODES)
    if unknown:
        raise ConfigurationError(f"Unknown mode(s): {', '.join(sorted(unknown))}")
    selected = [name for name in MODES if flags.get(name)]
    if len(selected) > 1:
        raise ConfigurationError(
            "Modes are mutually exclusive; selected: " + ", ".join("--" + s.replace("_", "-") for s in selected)
        )
    return selected[0] if selected else None
