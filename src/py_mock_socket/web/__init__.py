"""Browser-facing inspector for a simulated network.

This package provides a Flask application that exposes a
``NetworkBridge`` over HTTP, handy when a mock network backs a
development server.  It is an **optional** extra — install with::

    pip install py-mock-socket[web]

The ``create_app`` factory in ``app.py`` serves two endpoints:

- ``GET /api/connections`` — every address with its server and clients.
- ``POST /api/send`` — broadcast a message from the server at a URL.
"""
