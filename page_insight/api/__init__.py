"""HTTP surface of Page Insight: ``POST /api/analyze`` and ``GET /health``.

``app`` is the instance ``page-insight serve`` hands to uvicorn; tests build
fresh ones with :func:`create_app` so fakes can be placed on ``app.state``.
"""

from page_insight.api.app import app, create_app

__all__ = ["app", "create_app"]
