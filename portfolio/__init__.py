"""Core (UI-agnostic) portfolio dashboard logic.

This package contains:
- property records, defaults and CSV ingestion (pandas)
- the in-memory data source selector
- forecast / ROI calculations
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
