"""
Alpaca price feed: implements PriceFeed using the alpaca-py SDK.

Latest trade per symbol via StockHistoricalDataClient.get_stock_latest_trade.
Free tier uses IEX data; SIP requires Algo Trader Plus subscription.
"""

import logging
from typing import Sequence

logger = logging.getLogger("papertrade.feed")


class AlpacaPriceFeed:
    """
    Fetch last traded prices from Alpaca Market Data API.

    API keys via constructor (typically from AppConfig, sourced from env vars).
    """

    def __init__(self, api_key: str, api_secret: str, *, feed: str = "iex") -> None:
        if not api_key or not api_secret:
            raise ValueError(
                "Alpaca API key and secret are required. "
                "Set APCA_API_KEY_ID and APCA_API_SECRET_KEY environment variables."
            )
        try:
            from alpaca.data.historical import StockHistoricalDataClient
        except ImportError:
            raise ImportError(
                "alpaca-py is required for AlpacaPriceFeed. "
                "Install with: pip install 'papertrade[data]'"
            )
        self._client = StockHistoricalDataClient(api_key, api_secret)
        self._feed = feed

    def fetch_prices(self, symbols: Sequence[str]) -> dict[str, float] | None:
        """Latest trade price per symbol. Symbols Alpaca does not return are omitted."""
        from alpaca.data.enums import DataFeed
        from alpaca.data.requests import StockLatestTradeRequest

        if not symbols:
            return {}
        request_params = StockLatestTradeRequest(
            symbol_or_symbols=list(symbols),
            feed=DataFeed(self._feed.lower()),
        )
        trades = self._client.get_stock_latest_trade(request_params)
        prices: dict[str, float] = {}
        for symbol in symbols:
            trade = trades.get(symbol)
            if trade is None:
                continue
            prices[symbol] = float(trade.price)
        logger.info("Fetched %d/%d latest trades", len(prices), len(symbols))
        return prices
