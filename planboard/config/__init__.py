from .loader import load_config
from .models import (
    LLMSettings,
    PlanboardConfig,
    ProxyConfig,
    PublisherConfig,
    SessionConfig,
)

__all__ = [
    "LLMSettings",
    "PlanboardConfig",
    "ProxyConfig",
    "PublisherConfig",
    "SessionConfig",
    "load_config",
]
