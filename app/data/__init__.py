"""
Data access layer.

Design rules:
- Views do I/O ONLY through data.service (data.aggregations is pure helpers).
- All backend reads are wrapped to allow graceful fallback to mock data.
- Writes never fall back; failures come back as ActionResult.
- No env var reads here (config-only).
"""
