from __future__ import annotations

import json
import os
from pathlib import Path

import streamlit as st


def _load_json(path: Path) -> dict | None:
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        return None


def _format_currency(value: float) -> str:
    return f"${value:,.2f}"


def main() -> None:
    st.set_page_config(page_title="Setup Backtest", layout="wide")
    st.title("Setup Backtest: Simulation Report")

    default_report_path = os.getenv("BACKTEST_REPORT_PATH", "reports/backtest_report.json")
    report_path = Path(st.sidebar.text_input("Report path", value=default_report_path))

    report = _load_json(report_path)
    if report is None:
        st.warning(f"No report found at {report_path}")
        return

    summary = report.get("summary", {})
    col_a, col_b, col_c, col_d = st.columns(4)
    col_a.metric("Total P&L", _format_currency(summary.get("total_pnl", 0.0)))
    col_b.metric("Win Rate", f"{summary.get('win_rate', 0.0):.1f}%")
    col_c.metric("Profit Factor", f"{summary.get('profit_factor', 0.0):.2f}")
    col_d.metric("Max Drawdown", _format_currency(summary.get("max_drawdown", 0.0)))

    col_e, col_f, col_g, col_h = st.columns(4)
    col_e.metric("Trades", str(summary.get("total_trades", 0)))
    col_f.metric("Resolved", str(summary.get("resolved_trades", 0)))
    col_g.metric("Open", str(summary.get("open_trades", 0)))
    col_h.metric("No Data", str(summary.get("unavailable_trades", 0)))

    for notice in report.get("notices", []):
        st.error(notice)

    curve = report.get("equity_curve", [])
    if curve:
        st.subheader("Equity Curve")
        st.line_chart([point["cumulative_pnl"] for point in curve])

    insights = report.get("insights", {})
    st.subheader("Insights")
    st.json({
        "top_instrument": insights.get("top_instrument"),
        "direction_win_rates": insights.get("direction_win_rates"),
        "high_confidence_win_rate": insights.get("high_confidence_win_rate"),
        "recorded": report.get("recorded"),
    })
    if insights.get("instruments"):
        st.dataframe(insights["instruments"])

    st.subheader("Trades")
    st.dataframe(report.get("trades", []))


if __name__ == "__main__":
    main()
