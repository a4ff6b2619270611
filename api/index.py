"""
Vercel serverless entry point for the edge proxy.

Vercel routes every request under /api/* to this file (see vercel.json) and
serves the ASGI application exported as ``app``. Each invocation forwards the
call to the backend origin resolved from BACKEND_URL / APP_ENV.
"""

from airouter.edge import create_edge_app

app = create_edge_app()
