"""Image enhancement interface and implementations.

Enhancers are synchronous ``bytes -> bytes`` transforms. The processing
service runs them with asyncio.to_thread so a CPU-heavy implementation does
not stall the event loop.
"""
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class BaseEnhancer(ABC):
    """Abstract base class for enhancement algorithms."""

    name: str = ""

    @abstractmethod
    def enhance(self, data: bytes) -> bytes:
        """Return the enhanced file contents for ``data``."""


# Enhancer registry - add new algorithms here
ENHANCERS: dict[str, type[BaseEnhancer]] = {}


def register_enhancer(name: str):
    """Decorator to register an enhancer class under ``name``."""
    def decorator(cls):
        cls.name = name
        ENHANCERS[name] = cls
        return cls
    return decorator


@register_enhancer("identity")
class IdentityEnhancer(BaseEnhancer):
    """Placeholder for the AI model: returns the input unchanged."""

    def enhance(self, data: bytes) -> bytes:
        return data


def create_enhancer(name: str) -> BaseEnhancer:
    """Instantiate a registered enhancer by name."""
    cls = ENHANCERS.get(name)
    if cls is None:
        raise ValueError(f"Unknown enhancer: {name} (available: {sorted(ENHANCERS)})")
    logger.info(f"Using enhancer '{name}'")
    return cls()
