"""JSON Schema for the persisted session document (version 1)."""

STATE_VERSION = 1

_NUMBER_OR_NULL = {"type": ["number", "null"]}

_POSITION = {
    "type": "object",
    "required": ["instrument_id", "symbol", "quantity", "avg_price"],
    "properties": {
        "instrument_id": {"type": "string"},
        "symbol": {"type": "string"},
        "quantity": {"type": "integer", "not": {"const": 0}},
        "avg_price": {"type": "number", "exclusiveMinimum": 0},
        "stop_loss": _NUMBER_OR_NULL,
        "take_profit": _NUMBER_OR_NULL,
    },
}

_INSTRUMENT = {
    "type": "object",
    "required": ["id", "symbol", "name", "exchange", "price"],
    "properties": {
        "id": {"type": "string"},
        "symbol": {"type": "string"},
        "name": {"type": "string"},
        "exchange": {"enum": ["NSE", "BSE"]},
        "price": {"type": "number", "exclusiveMinimum": 0},
        "change": {"type": "number"},
        "change_percent": {"type": "number"},
        "open_price": _NUMBER_OR_NULL,
    },
}

_ORDER = {
    "type": "object",
    "required": [
        "id",
        "instrument_id",
        "symbol",
        "order_type",
        "product_type",
        "transaction_type",
        "quantity",
        "price",
        "status",
        "timestamp",
    ],
    "properties": {
        "id": {"type": "string"},
        "instrument_id": {"type": "string"},
        "symbol": {"type": "string"},
        "order_type": {"enum": ["MARKET", "LIMIT"]},
        "product_type": {"enum": ["CNC", "MIS"]},
        "transaction_type": {"enum": ["BUY", "SELL"]},
        "quantity": {"type": "integer", "minimum": 1},
        "price": {"type": "number"},
        "status": {"enum": ["PENDING", "EXECUTED", "CANCELLED", "REJECTED"]},
        "timestamp": {"type": "string"},
        "realized_pnl": _NUMBER_OR_NULL,
        "trigger": {"enum": ["take_profit", "stop_loss", None]},
    },
}

STATE_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["version", "wallet", "watchlist", "orders", "positions", "holdings"],
    "properties": {
        "version": {"const": STATE_VERSION},
        "wallet": {
            "type": "object",
            "required": ["balance", "initial_balance"],
            "properties": {
                "balance": {"type": "number"},
                "initial_balance": {"type": "number"},
            },
        },
        "watchlist": {"type": "array", "items": _INSTRUMENT},
        "orders": {"type": "array", "items": _ORDER},
        "positions": {"type": "array", "items": _POSITION},
        "holdings": {"type": "array", "items": _POSITION},
    },
}
