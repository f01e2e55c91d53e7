"""Async driver registry keyed by provider name.

Model strings take the form ``"provider/model"``, e.g.
``"google/gemini-2.5-flash"``::

    from hubsummary.drivers import register_async_driver, get_async_driver_for_model

    register_async_driver("mock", lambda model=None: MockDriver(model))
    driver = get_async_driver_for_model("mock/anything")
"""

from __future__ import annotations

import logging
from typing import Callable

from .base import AsyncDriver

logger = logging.getLogger("hubsummary.drivers.registry")

# A factory takes an optional model name and returns a driver instance
DriverFactory = Callable[..., AsyncDriver]

_ASYNC_REGISTRY: dict[str, DriverFactory] = {}


def register_async_driver(name: str, factory: DriverFactory, *, overwrite: bool = False) -> None:
    """Register an async driver factory for a provider name.

    Raises:
        ValueError: If *name* is already registered and *overwrite* is False.
    """
    name = name.lower()
    if name in _ASYNC_REGISTRY and not overwrite:
        raise ValueError(f"Async driver '{name}' is already registered. Use overwrite=True to replace it.")
    _ASYNC_REGISTRY[name] = factory
    logger.debug("Registered async driver: %s", name)


def unregister_async_driver(name: str) -> bool:
    """Remove a registration.  Returns True if it existed."""
    return _ASYNC_REGISTRY.pop(name.lower(), None) is not None


def list_registered_async_drivers() -> list[str]:
    return sorted(_ASYNC_REGISTRY.keys())


def get_async_driver_for_model(model_str: str, **kwargs) -> AsyncDriver:
    """Instantiate a driver from a ``provider/model`` string.

    Extra keyword arguments (e.g. ``api_key``) are passed to the factory.

    Raises:
        ValueError: If the string is malformed or the provider is unknown.
    """
    if not model_str or "/" not in model_str:
        raise ValueError(f"Model string must look like 'provider/model', got {model_str!r}")
    provider, model = model_str.split("/", 1)
    provider = provider.strip().lower()
    if provider not in _ASYNC_REGISTRY:
        available = ", ".join(list_registered_async_drivers()) or "(none)"
        raise ValueError(f"Unsupported provider '{provider}'. Available: {available}")
    return _ASYNC_REGISTRY[provider](model=model or None, **kwargs)


def _google_factory(model: str | None = None, api_key: str | None = None) -> AsyncDriver:
    from .google_driver import AsyncGoogleDriver

    if model:
        return AsyncGoogleDriver(api_key=api_key, model=model)
    return AsyncGoogleDriver(api_key=api_key)


register_async_driver("google", _google_factory)
