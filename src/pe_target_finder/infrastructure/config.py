"""Configuration dataclasses for PE Target Finder.

Each config is a plain ``dataclass`` with a ``validate()`` method that raises
``ConfigError`` on invalid combinations.  No third-party dependencies -- just
stdlib ``dataclasses``.

Configs are **frozen** so they can be shared between the CLI, the
application shell and the adapters without risking silent mutation.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from typing import Any

from pe_target_finder.domain.exceptions import ConfigError


# ===================================================================== #
#  Generative service configuration                                     #
# ===================================================================== #

_VALID_LLM_PROVIDERS = frozenset({"anthropic", "openai", "mock"})

_DEFAULT_MODELS = {
    "anthropic": "claude-sonnet-4-5-20250929",
    "openai": "gpt-4o",
    "mock": "mock-json",
}


@dataclass(frozen=True)
class GenerativeConfig:
    """Describes the chat model behind the generative service.

    Attributes
    ----------
    provider:
        LLM backend identifier (``"anthropic"``, ``"openai"`` or ``"mock"``).
    model:
        Model name.  Empty means the provider's default.
    temperature:
        Sampling temperature for the single search call.
    max_tokens:
        Maximum tokens per response.
    request_kind:
        The request kind the orchestrator dispatches.
    response_type:
        Requested response shape.  Only ``"json"`` is supported.
    """

    provider: str = "anthropic"
    model: str = ""
    temperature: float = 0.7
    max_tokens: int = 1024
    request_kind: str = "chatgpt_request"
    response_type: str = "json"

    @property
    def resolved_model(self) -> str:
        return self.model or _DEFAULT_MODELS.get(self.provider, "")

    def validate(self) -> None:
        if self.provider not in _VALID_LLM_PROVIDERS:
            raise ConfigError(
                f"provider must be one of {sorted(_VALID_LLM_PROVIDERS)}, "
                f"got '{self.provider}'"
            )
        if not (0.0 <= self.temperature <= 2.0):
            raise ConfigError(
                f"temperature must be in [0, 2], got {self.temperature}"
            )
        if self.max_tokens < 1:
            raise ConfigError(f"max_tokens must be >= 1, got {self.max_tokens}")
        if not self.request_kind:
            raise ConfigError("request_kind must not be empty")
        if self.response_type != "json":
            raise ConfigError(
                f"response_type must be 'json', got '{self.response_type}'"
            )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GenerativeConfig:
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        cfg = cls(**filtered)
        cfg.validate()
        return cfg


# ===================================================================== #
#  Identity configuration                                                #
# ===================================================================== #

_VALID_IDENTITY_PROVIDERS = frozenset({"memory", "supabase"})


@dataclass(frozen=True)
class IdentityConfig:
    """Describes the identity provider behind the session gate.

    Attributes
    ----------
    provider:
        ``"memory"`` (local, in-process) or ``"supabase"``.
    url:
        Supabase project URL.  Required for ``supabase``.
    key:
        Supabase anon key.  Required for ``supabase``.
    """

    provider: str = "memory"
    url: str = ""
    key: str = field(default="", repr=False)

    def validate(self) -> None:
        if self.provider not in _VALID_IDENTITY_PROVIDERS:
            raise ConfigError(
                f"provider must be one of {sorted(_VALID_IDENTITY_PROVIDERS)}, "
                f"got '{self.provider}'"
            )
        if self.provider == "supabase":
            if not self.url:
                raise ConfigError("url is required for provider='supabase'")
            if not self.key:
                raise ConfigError("key is required for provider='supabase'")

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if data["key"]:
            data["key"] = "***"
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IdentityConfig:
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        cfg = cls(**filtered)
        cfg.validate()
        return cfg


# ===================================================================== #
#  Application configuration                                             #
# ===================================================================== #

@dataclass(frozen=True)
class AppConfig:
    """Top-level configuration grouping every section."""

    generative: GenerativeConfig = field(default_factory=GenerativeConfig)
    identity: IdentityConfig = field(default_factory=IdentityConfig)

    def validate(self) -> None:
        self.generative.validate()
        self.identity.validate()

    def to_dict(self) -> dict[str, Any]:
        return {
            "generative": self.generative.to_dict(),
            "identity": self.identity.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AppConfig:
        return cls(
            generative=GenerativeConfig.from_dict(data.get("generative") or {}),
            identity=IdentityConfig.from_dict(data.get("identity") or {}),
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        """Build a config from environment variables.

        Reads ``TARGET_FINDER_LLM_PROVIDER``, ``TARGET_FINDER_LLM_MODEL``,
        ``SUPABASE_URL`` and ``SUPABASE_ANON_KEY``.  A Supabase URL switches
        the identity provider to ``supabase``.
        """
        env = os.environ if environ is None else environ
        supabase_url = env.get("SUPABASE_URL", "")
        cfg = cls(
            generative=GenerativeConfig(
                provider=env.get("TARGET_FINDER_LLM_PROVIDER", "anthropic"),
                model=env.get("TARGET_FINDER_LLM_MODEL", ""),
            ),
            identity=IdentityConfig(
                provider="supabase" if supabase_url else "memory",
                url=supabase_url,
                key=env.get("SUPABASE_ANON_KEY", ""),
            ),
        )
        cfg.validate()
        return cfg


def load_config_from_json(json_str: str) -> AppConfig:
    """Parse a JSON string into an :class:`AppConfig`.

    The JSON is expected to be an object whose top-level keys are section
    names (``generative``, ``identity``).  Missing sections use defaults.
    """
    try:
        raw = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid configuration JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError("Top-level JSON must be an object")
    return AppConfig.from_dict(raw)
