"""Typed REST client for the platform's users, things, reader and adapter services."""

from gui.sdk.client import PlatformSDK

__all__ = ["PlatformSDK"]
