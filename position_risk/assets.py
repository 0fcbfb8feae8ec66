"""Static asset reference table (GMX V2 markets on Avalanche)."""
from __future__ import annotations

from .models import AssetConfig


class UnsupportedAssetError(ValueError):
    """Raised when an asset symbol is not in the reference table."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Asset {symbol} not supported")
        self.symbol = symbol


SUPPORTED_ASSETS: tuple[AssetConfig, ...] = (
    AssetConfig(
        symbol="AVAX",
        name="Avalanche",
        address="0xB31f66AA3C1e785363F0875A1B74E27b85FD66c7",
        decimals=18,
        price_decimals=8,
        min_leverage=1,
        max_leverage=50,
        default_leverage=5,
    ),
    AssetConfig(
        symbol="BTC",
        name="Bitcoin",
        address="0x50b7545627a5162F82A992c33b87aDc75187B218",
        decimals=8,
        price_decimals=8,
        min_leverage=1,
        max_leverage=50,
        default_leverage=3,
    ),
    AssetConfig(
        symbol="ETH",
        name="Ethereum",
        address="0x49D5c2BdFfac6CE2BFdB6640F4F80f226bc10bAB",
        decimals=18,
        price_decimals=8,
        min_leverage=1,
        max_leverage=50,
        default_leverage=3,
    ),
    AssetConfig(
        symbol="USDC",
        name="USD Coin",
        address="0xB97EF9Ef8734C71904D8002F8b6Bc66Dd9c48a6E",
        decimals=6,
        price_decimals=8,
        min_leverage=1,
        max_leverage=50,
        default_leverage=5,
    ),
)

_BY_SYMBOL: dict[str, AssetConfig] = {a.symbol: a for a in SUPPORTED_ASSETS}


def find_asset(symbol: str) -> AssetConfig | None:
    """Return the asset config for ``symbol``, or None if unknown."""
    return _BY_SYMBOL.get(symbol)


def get_asset(symbol: str) -> AssetConfig:
    """Return the asset config for ``symbol``.

    Raises:
        UnsupportedAssetError: if the symbol is not in the reference table.
    """
    asset = find_asset(symbol)
    if asset is None:
        raise UnsupportedAssetError(symbol)
    return asset


def supported_symbols() -> tuple[str, ...]:
    return tuple(_BY_SYMBOL)
