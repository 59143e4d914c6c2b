"""Reverse-proxy awareness for the WSGI pipeline."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Trust ``X-Forwarded-*`` headers from ``PROXY_HOPS`` upstream proxies.

    The ``Secure`` refresh cookie and absolute URLs depend on the forwarded
    scheme when TLS terminates at the proxy. Disabled with
    ``USE_PROXYFIX = False``.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXY_HOPS", 1))
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops)  # type: ignore[method-assign]
