"""HTTP middleware: request and correlation IDs.

Applied in main app. Import and use from app.main.
"""

from app.middleware.request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
