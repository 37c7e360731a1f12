import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

import altair as alt
import pandas as pd
import streamlit as st

from portfolio.charts import forecast_bar_chart, performance_line_chart
from portfolio.context import prepare_context
from portfolio.data import (
    PortfolioStore,
    format_currency_0,
    format_currency_columns,
    format_percent,
    format_percent_columns,
)
from portfolio.metrics_overview import compute_overview
from portfolio.metrics_performance import compute_performance
from portfolio.metrics_properties import compute_properties
from portfolio.settings import DEFAULT_FORECAST_YEARS, MAX_FORECAST_YEARS, SORT_KEYS, normalize_settings

alt.data_transformers.disable_max_rows()
logger = logging.getLogger(__name__)


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        .forecast {color: #16a34a;font-size: 1.1rem;font-weight: 600;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header"><div class="card-title">{title}</div></div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_source_summary(store: PortfolioStore, forecast_years: int) -> str:
    source_chip = f"Data: {store.source_name or 'upload'}" if store.source == "upload" else "Data: sample portfolio"
    chips = [source_chip, f"Properties: {len(store)}", f"Horizon: {forecast_years} yrs"]
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def render_page_header(title: str, breadcrumb: str, summary_html: str, export_df: Optional[pd.DataFrame] = None, export_name: str = "export.csv"):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )
    st.markdown(f"<div class='chip-row'>{summary_html}</div>", unsafe_allow_html=True)


def get_store() -> PortfolioStore:
    if "portfolio_store" not in st.session_state:
        st.session_state["portfolio_store"] = PortfolioStore()
    return st.session_state["portfolio_store"]


def handle_upload(store: PortfolioStore, uploaded) -> None:
    # Streamlit reruns the script on every interaction; parse each file once.
    sig = (uploaded.name, uploaded.size)
    if st.session_state.get("_upload_sig") == sig:
        return
    try:
        result = store.load_csv(uploaded.getvalue(), source_name=uploaded.name)
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        logger.warning("Could not parse %s: %s", uploaded.name, exc)
        st.error(f"Could not read {uploaded.name}: {exc}")
        return
    st.session_state["_upload_sig"] = sig
    st.toast(f"{result.message} ({result.count} properties)")


# ---------- UI setup ----------
st.set_page_config(page_title="Real Estate Investment Dashboard", layout="wide")
inject_base_styles()
st.title("Real Estate Investment Dashboard")

store = get_store()

with st.sidebar:
    st.markdown("### Navigate")
    nav_choice = st.radio("Navigate", ["Overview", "Properties", "Performance"], index=0)

    st.markdown("---")
    st.markdown("### Data source")
    uploader_key = f"uploader_{st.session_state.get('_uploader_gen', 0)}"
    uploaded = st.file_uploader(
        "Upload properties CSV",
        type=["csv"],
        key=uploader_key,
        help="Columns by position: address, value, rent (optional: appreciation %, expenses %). The header row is skipped.",
    )
    if uploaded is not None:
        handle_upload(store, uploaded)
    if st.button("Reset to sample data", disabled=store.source == "default"):
        store.reset()
        st.session_state["_upload_sig"] = None
        st.session_state["_uploader_gen"] = st.session_state.get("_uploader_gen", 0) + 1
        st.rerun()

    st.markdown("---")
    with st.expander("Advanced settings", expanded=False):
        forecast_years = st.slider("Forecast horizon (years)", min_value=1, max_value=MAX_FORECAST_YEARS, value=DEFAULT_FORECAST_YEARS)
        address_query = st.text_input("Address search (optional)", "")
        sort_by = st.selectbox("Sort properties by", options=list(SORT_KEYS), index=0)
        descending = st.checkbox("Descending", value=False)

settings = normalize_settings(
    {
        "forecast_years": forecast_years,
        "address_query": address_query,
        "sort_by": sort_by,
        "descending": descending,
    }
)
ctx = prepare_context(settings, store)
summary_html = format_source_summary(store, settings.forecast_years)


# ----- Page renderers -----

def render_overview_page(ctx: Dict[str, Any]):
    payload = compute_overview(settings, ctx)
    kpis = payload["kpis"]
    render_page_header("Overview", "Home / Overview", summary_html)
    with card("Portfolio Summary"):
        cols = st.columns(5)
        cols[0].metric("Total Properties", f"{kpis['total_properties']}")
        cols[1].metric("Total Value", format_currency_0(kpis["total_value"]))
        cols[2].metric("Monthly Rent", format_currency_0(kpis["total_monthly_rent"]))
        cols[3].metric("ROI", format_percent(kpis["roi_pct"]), help="ROI = total monthly rent x 12 / total value.")
        cols[4].metric(
            f"{kpis['forecast_years']}-Year Forecast",
            format_currency_0(kpis["total_forecast"]),
            help="Sum of per-property net cash flow (rent less operating expenses). Appreciation is not included.",
        )


def render_properties_page(ctx: Dict[str, Any]):
    payload = compute_properties(settings, ctx)
    listing = pd.DataFrame(payload["properties"])
    render_page_header("Properties", "Home / Properties", summary_html, export_df=listing, export_name="properties.csv")
    if listing.empty:
        st.info("No properties match the current data and search.")
        return

    years = settings.forecast_years
    with card("Property Listings"):
        display = format_currency_columns(listing, ["value", "monthly_rent", "forecast", "projected_value"])
        display = format_percent_columns(display, ["annual_appreciation_pct", "operating_expense_pct", "roi_pct"])
        for row in display.itertuples(index=False):
            with st.container(border=True):
                c1, c2, c3 = st.columns([4, 3, 3])
                with c1:
                    st.markdown(f"**{row.address}**")
                    st.caption(f"Value: {row.value}")
                    st.caption(f"Appreciation: {row.annual_appreciation_pct}")
                with c2:
                    st.markdown(f"**Rent: {row.monthly_rent}/month**")
                    st.caption(f"Expenses: {row.operating_expense_pct}")
                    st.caption(f"ROI: {row.roi_pct}")
                with c3:
                    st.markdown(f"**{years}-Year Forecast**")
                    st.markdown(f"<div class='forecast'>{row.forecast}</div>", unsafe_allow_html=True)
                    st.caption(f"Projected value: {row.projected_value}")

    if listing["forecast"].notna().any():
        with card(f"{years}-Year Forecast by Property"):
            st.altair_chart(forecast_bar_chart(listing, years), use_container_width=True)


def render_performance_page(ctx: Dict[str, Any]):
    payload = compute_performance(settings, ctx)
    perf = pd.DataFrame(payload["series"])
    render_page_header("Performance", "Home / Performance", summary_html, export_df=perf, export_name="performance.csv")
    with card("Investment Performance"):
        st.altair_chart(performance_line_chart(perf), use_container_width=True)
    totals = payload["totals"]
    cols = st.columns(3)
    cols[0].metric("Revenue (period)", format_currency_0(totals["revenue"]))
    cols[1].metric("Expenses (period)", format_currency_0(totals["expenses"]))
    cols[2].metric("Net income (period)", format_currency_0(totals["net_income"]))


PAGES = {
    "Overview": render_overview_page,
    "Properties": render_properties_page,
    "Performance": render_performance_page,
}
PAGES[nav_choice](ctx)
