"""
Tool catalog access.

Responsibilities:
- Normalise exports of the hosted ``ai_tools`` table into a canonical CSV.
- Load published tool records with safe defaults for missing fields.
- Cache catalog reads for the request layer.
"""
