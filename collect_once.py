import asyncio
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from alphavault.adapters.factory import make_adapter
from alphavault.config import get_settings
from alphavault.core.formatting import format_change, format_number, format_price
from alphavault.core.signals import buy_signals, health_label
from alphavault.jobs.loop import Refresher
from alphavault.state import DashboardState


async def main() -> int:
    settings = get_settings()
    adapter = make_adapter(settings)
    state = DashboardState(source=adapter.source)
    async with adapter:
        await Refresher(adapter, state, settings).refresh_once()
    if state.last_error:
        print(f"Refresh failed: {state.last_error}")
        return 1

    print(f"Source: {state.source}  tokens: {len(state.tokens)}")
    for token in state.tokens[:15]:
        print(
            f"{token.symbol:<6} {format_price(token.price):>12} {format_change(token.change_24h):>8} "
            f"vol={format_number(token.volume_24h):>8} mcap={format_number(token.market_cap):>8} "
            f"liq={format_number(token.liquidity):>8} volat={token.volatility:5.1f}% "
            f"slip={token.slippage:4.2f}% health={token.health_score:5.1f} ({health_label(token.health_score)})"
        )
    signals = buy_signals(state.tokens)
    print(f"Buy signals: {', '.join(t.symbol for t in signals) or 'none'}")
    if state.last_updated:
        print("Snapshot timestamp:", state.last_updated.isoformat())
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
