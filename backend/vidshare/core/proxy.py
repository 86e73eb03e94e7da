"""WSGI proxy middleware configuration helper."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Trust ``X-Forwarded-*`` headers from a fixed number of upstream hops.

    Parameters
    ----------
    app: flask.Flask
        Application whose WSGI pipeline is wrapped.

    Notes
    -----
    ``USE_PROXYFIX`` (default ``True``) toggles the middleware and
    ``PROXY_TRUSTED_HOPS`` (default ``1``) sets how many proxies are trusted.
    The forwarded scheme matters here because auth cookies are issued with the
    ``Secure`` attribute.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXY_TRUSTED_HOPS", 1))
    app.wsgi_app = ProxyFix(  # type: ignore[method-assign]
        app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops, x_prefix=hops
    )
