"""Infrastructure layer: event bus, configuration and external adapters.

The Supabase adapter is not re-exported here so that importing the package
does not require the ``supabase`` SDK to be configured; import it from
:mod:`pe_target_finder.infrastructure.supabase_identity` directly.
"""

from pe_target_finder.infrastructure.config import (
    AppConfig,
    GenerativeConfig,
    IdentityConfig,
    load_config_from_json,
)
from pe_target_finder.infrastructure.event_bus import EventBus, Subscription
from pe_target_finder.infrastructure.generative import (
    ChatModelGenerativeService,
    GenerativeService,
    create_chat_model,
)
from pe_target_finder.infrastructure.identity import (
    IdentityProvider,
    InMemoryIdentityProvider,
)

__all__ = [
    "AppConfig",
    "ChatModelGenerativeService",
    "EventBus",
    "GenerativeConfig",
    "GenerativeService",
    "IdentityConfig",
    "IdentityProvider",
    "InMemoryIdentityProvider",
    "Subscription",
    "create_chat_model",
    "load_config_from_json",
]
