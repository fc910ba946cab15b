"""
Paper trading dashboard: wallet, positions, orders and auto-exits.
Run from repo root (package installed): streamlit run dashboard/app.py
Or with another config: PAPERTRADE_CONFIG=/path/to/config.yaml streamlit run dashboard/app.py
"""

import streamlit as st

from data_reader import (
    get_positions,
    get_recent_journal_events,
    get_recent_orders,
    get_wallet_summary,
    load_state,
    resolve_paths,
)

st.set_page_config(page_title="Paper Trading Dashboard", layout="wide")
st.title("Paper Trading Dashboard")

try:
    state_path, journal_path = resolve_paths()
except (FileNotFoundError, ValueError) as exc:
    st.error(f"Cannot load config: {exc}")
    st.stop()

state = load_state(state_path)

if state is None:
    st.warning(f"No readable saved session at: `{state_path}`")
    st.caption("Run any papertrade command (e.g. `papertrade status`) to create it.")
    st.stop()

# Refresh
col_refresh, col_auto = st.columns([1, 3])
with col_refresh:
    if st.button("Refresh"):
        st.rerun()
with col_auto:
    auto_refresh = st.checkbox("Auto-refresh every 10s", value=False)

summary = get_wallet_summary(state)
c1, c2, c3, c4, c5 = st.columns(5)
with c1:
    st.metric("Cash", f"₹{summary['balance']:,.2f}")
with c2:
    st.metric("Invested", f"₹{summary['invested']:,.2f}")
with c3:
    st.metric("M2M P&L", f"₹{summary['m2m']:,.2f}")
with c4:
    st.metric("Realized P&L", f"₹{summary['realized']:,.2f}")
with c5:
    st.metric("Total equity", f"₹{summary['equity']:,.2f}")

st.subheader("Positions")
positions = get_positions(state)
if not positions:
    st.caption("Flat: no open positions.")
else:
    st.dataframe(
        [
            {
                "Symbol": p["symbol"],
                "Side": "LONG" if p["quantity"] > 0 else "SHORT",
                "Qty": abs(p["quantity"]),
                "Avg": round(p["avg_price"], 2),
                "LTP": round(p["ltp"], 2),
                "P&L": round(p["pnl"], 2),
                "SL": p["stop_loss"],
                "TP": p["take_profit"],
            }
            for p in positions
        ],
        use_container_width=True,
    )

with st.expander("Recent orders", expanded=True):
    orders = get_recent_orders(state, limit=20)
    if not orders:
        st.caption("No orders yet.")
    else:
        for o in orders:
            pnl_str = f"  P&L {o.realized_pnl:+,.2f}" if o.realized_pnl is not None else ""
            st.text(
                f"{o.timestamp:%Y-%m-%d %H:%M:%S}  {o.transaction_type.value} {o.quantity} "
                f"{o.symbol} @ {o.price:.2f}{pnl_str}"
            )

with st.expander("Auto-exits", expanded=False):
    exits = get_recent_journal_events(journal_path, event_type="auto_exit", limit=200)
    if not exits:
        st.caption("No stop-loss / take-profit exits yet.")
    else:
        for e in exits:
            ts = e.get("ts_utc", "")[:19]
            st.text(f"{ts}  {e.get('trigger')}  {e.get('symbol')} {e.get('qty')} @ {e.get('price')}")

if auto_refresh:
    import time
    time.sleep(10)
    st.rerun()
