"""HTTP relay server."""

from yt2blog.server.app import create_app

__all__ = ["create_app"]
