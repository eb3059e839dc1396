"""
Chain Visualizer Service Layer

RESPONSIBILITY: Outer surfaces around the pure visualizer core.
- client: fetch chain previews from the admin API (httpx)
- server: read-only JSON API over GraphBuilder / OverlayPositioner (FastAPI)
- serialization: views to JSON-ready dicts
"""
