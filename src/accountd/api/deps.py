"""Shared route dependencies."""

from fastapi import Request

from accountd.config import Settings


def get_app_settings(request: Request) -> Settings:
    """The Settings the running app was created with."""
    return request.app.state.settings
