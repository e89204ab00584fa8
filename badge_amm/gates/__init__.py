"""Eligibility gates for pool creation, trading and bonuses."""

from badge_amm.gates.gatekeeper import GateKeeper

__all__ = ["GateKeeper"]
