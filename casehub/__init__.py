"""Core (UI-agnostic) logistics case logic.

This package contains:
- row decoding (XLSX/CSV -> rows of cells) and case record building
- column mapping and cell/date normalization
- view filter normalization and the filter/sort/paginate engine
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
