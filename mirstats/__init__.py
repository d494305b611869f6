"""Core (UI-agnostic) MIR admission statistics logic.

This package contains:
- the record model and metric catalog
- data loading (CSV / JSON / XLSX -> pandas -> records)
- filter normalization
- view shaping: comparison series, evolution pivots, axis domains
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
