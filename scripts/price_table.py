#!/usr/bin/env python3
"""Print buy and sell prices along a badge bonding curve.

Simulates buys of one unit at a time from an empty pool, optionally injects
a bonus at a given supply, and prints per-unit buy price, sell-back price and
the running reserve.

Usage:
    python scripts/price_table.py --units 10
    python scripts/price_table.py --curve-a 210 --curve-b 2100 --units 20 \\
        --bonus 5000000000000000000 --bonus-at 10
"""

import argparse
import sys
from pathlib import Path

import structlog

sys.path.insert(0, str(Path(__file__).parent.parent))

from badge_amm.config import GateConfig, MarketConfig
from badge_amm.constants import NATIVE_ASSET
from badge_amm.logging_config import configure_logging
from badge_amm.market import BadgeMarket

logger = structlog.get_logger()

CREATOR = "0x00000000000000000000000000000000000c4ea7"
TRADER = "0x0000000000000000000000000000000000007ade"


def build_market(curve_a: int, curve_b: int, protocol_fee: int, creator_fee: int) -> BadgeMarket:
    """Market with curve constraints off so any constants can be tabulated."""
    config = MarketConfig(
        protocol_fee_percent=protocol_fee,
        creator_fee_percent=creator_fee,
        max_trade_amount=1,
        gates=GateConfig(
            enforce_curve_a_constraint=False,
            enforce_curve_b_constraint=False,
            enforce_bonus_funder_allow_list=False,
        ),
    )
    market = BadgeMarket(config=config)
    market.create_pool(CREATOR, NATIVE_ASSET, curve_a, curve_b)
    return market


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Tabulate a badge pool's bonding curve",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--curve-a", type=int, default=210, help="Curve constant A (default: 210)")
    parser.add_argument("--curve-b", type=int, default=2100, help="Curve constant B (default: 2100)")
    parser.add_argument("--units", type=int, default=10, help="Units to buy (default: 10)")
    parser.add_argument("--protocol-fee", type=int, default=5, help="Protocol fee percent")
    parser.add_argument("--creator-fee", type=int, default=5, help="Creator fee percent")
    parser.add_argument("--bonus", type=int, default=0, help="Bonus amount to inject (wei)")
    parser.add_argument(
        "--bonus-at", type=int, default=1, help="Supply at which the bonus is injected"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    configure_logging(verbose=args.verbose)

    if args.units <= 0:
        print("Error: --units must be positive")
        return 1

    market = build_market(args.curve_a, args.curve_b, args.protocol_fee, args.creator_fee)
    pool_id = 1
    # Enough native value for every buy; refunds return the excess
    market.transfers.fund(NATIVE_ASSET, TRADER, 10**40)

    print(f"Curve: (i^2 + {args.curve_a}) / {args.curve_b}, unit scale 1e18")
    print(f"{'supply':>6}  {'buy price':>24}  {'sell back':>24}  {'reserve':>26}")
    print("-" * 86)

    for supply in range(1, args.units + 1):
        if args.bonus and supply - 1 == args.bonus_at:
            market.transfers.fund(NATIVE_ASSET, CREATOR, args.bonus)
            market.add_bonus(CREATOR, pool_id, args.bonus, native_value=args.bonus)
            pool = market.get_pool(pool_id)
            print(f"-- bonus {args.bonus}: coefficients {pool.coef_num}/{pool.coef_den}")

        quote = market.quote_buy(pool_id, 1)
        traded = market.buy(TRADER, pool_id, 1, quote.total_cost, native_value=quote.total_cost)
        sell_back = market.quote_sell(pool_id, 1).price
        print(f"{supply:>6}  {traded.gross:>24}  {sell_back:>24}  {traded.new_reserve:>26}")

    logger.debug("price_table_done", units=args.units, events=len(market.events))
    return 0


if __name__ == "__main__":
    sys.exit(main())
