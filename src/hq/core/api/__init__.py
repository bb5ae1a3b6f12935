"""HTTP handler for the dashboard document."""

from hq.core.api.app import CACHE_CONTROL, create_app, remote_builder

__all__ = ["CACHE_CONTROL", "create_app", "remote_builder"]
