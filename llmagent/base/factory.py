"""Provider Factory utilities.

Purpose
-------
Centralize creation of provider instances. Adapters are imported lazily using
``importlib`` so that selecting the mock provider never imports the remote
adapter's dependencies, and to keep side effects out of the factory layer.

Timeout and fallback semantics
------------------------------
- No timeouts are introduced here. The factory performs no retries or
  fallbacks; it either returns an instance or raises a clear error.

Scope
-----
Supported providers: ``mock`` and ``openrouter``.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple, Type, TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import AppConfig


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved or initialized.

    Failure modes include:
    - The provider name is not registered in the factory mapping.
    - The provider module cannot be imported or the class is missing.
    - The constructor rejected its arguments.
    """


class ProviderFactory:
    """Create providers based on a canonical name (e.g., ``"openrouter"``)."""

    # Map canonical provider names to import paths and class names
    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "mock": {"module": "llmagent.mock.client", "class": "MockProvider"},
        "openrouter": {"module": "llmagent.openrouter.client", "class": "OpenRouterProvider"},
    }

    @classmethod
    def create(cls, provider: str, **kwargs: Any) -> Any:
        """Create a provider instance.

        Parameters
        ----------
        provider:
            Canonical provider name (case-insensitive).
        **kwargs:
            Constructor keyword arguments.

        Raises
        ------
        UnknownProviderError
            If the provider is unknown, the module fails to import, the class
            is missing, or the constructor rejects its arguments.
        """
        name = (provider or "").lower().strip()
        entry = cls._PROVIDERS.get(name)
        if not entry:
            raise UnknownProviderError(f"Unknown provider '{provider}'")

        module_path, class_name = entry["module"], entry["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{provider}': {exc}"
            ) from exc

        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Class '{class_name}' not found in '{module_path}' for provider '{provider}'"
            ) from exc

        try:
            return klass(**kwargs)
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{provider}' constructor: {exc}"
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return canonical provider names in deterministic order."""
        return tuple(cls._PROVIDERS.keys())


def build_provider(config: "AppConfig") -> Any:
    """Construct the provider selected by a validated :class:`AppConfig`."""
    if config.provider_type == "openrouter":
        return ProviderFactory.create(
            "openrouter",
            api_key=config.openrouter_api_key,
            model=config.openrouter_model,
            base_url=config.openrouter_base_url,
        )
    return ProviderFactory.create(config.provider_type, delay=config.mock_delay_seconds)


__all__ = ["ProviderFactory", "UnknownProviderError", "build_provider"]
