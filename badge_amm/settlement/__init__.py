"""Trade settlement for badge pools."""

from badge_amm.settlement.trade import TradeSettlement

__all__ = ["TradeSettlement"]
