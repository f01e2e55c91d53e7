"""Generative-text backend drivers."""

from .base import AsyncDriver
from .registry import (
    get_async_driver_for_model,
    list_registered_async_drivers,
    register_async_driver,
    unregister_async_driver,
)

__all__ = [
    "AsyncDriver",
    "get_async_driver_for_model",
    "list_registered_async_drivers",
    "register_async_driver",
    "unregister_async_driver",
]
