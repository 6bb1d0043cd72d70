"""
API package containing the HTTP routes.

``router`` aggregates the domain routers (wishes, users) and is
mounted under ``/api`` by ``main.create_app``.
"""
