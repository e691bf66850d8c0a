"""Generative service layer for PE Target Finder.

The search orchestrator talks to a :class:`GenerativeService`: something that
takes a request *kind* and a payload carrying a text prompt and a desired
response shape, and returns structured data or fails.  The concrete service
here wraps a LangChain ``BaseChatModel`` and parses its reply with
``JsonOutputParser``.

Usage::

    model = create_chat_model(GenerativeConfig(provider="anthropic"))
    service = ChatModelGenerativeService(model)
    records = await service.request(
        "chatgpt_request", {"prompt": prompt, "response_type": "json"}
    )
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from langchain_core.exceptions import OutputParserException
from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import JsonOutputParser

from pe_target_finder.domain.exceptions import ResponseFormatError, SearchDispatchError
from pe_target_finder.infrastructure.config import GenerativeConfig

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_KIND = "chatgpt_request"


class GenerativeService(ABC):
    """Abstract text-prompt-to-structured-data service."""

    @abstractmethod
    async def request(self, kind: str, payload: Mapping[str, Any]) -> Any:
        """Send *payload* as a request of *kind* and return the parsed reply.

        Parameters
        ----------
        kind:
            Request kind (e.g. ``"chatgpt_request"``).
        payload:
            Must carry ``prompt`` (str) and ``response_type`` (``"json"``).

        Raises
        ------
        SearchDispatchError
            On transport or service failure.
        ResponseFormatError
            When the reply cannot be parsed as JSON.
        """
        ...


class ChatModelGenerativeService(GenerativeService):
    """Generative service backed by a LangChain chat model.

    Parameters
    ----------
    model:
        Any ``BaseChatModel`` (``ChatAnthropic``, ``ChatOpenAI``, a mock).
    kinds:
        Request kinds this service accepts.
    """

    def __init__(
        self,
        model: BaseChatModel,
        kinds: tuple[str, ...] = (DEFAULT_REQUEST_KIND,),
    ) -> None:
        self.model = model
        self.kinds = kinds
        self._chain = model | JsonOutputParser()

    async def request(self, kind: str, payload: Mapping[str, Any]) -> Any:
        if kind not in self.kinds:
            raise SearchDispatchError(
                f"Unsupported request kind {kind!r}; expected one of {list(self.kinds)}",
                kind=kind,
            )
        response_type = payload.get("response_type", "json")
        if response_type != "json":
            raise SearchDispatchError(
                f"Unsupported response_type {response_type!r}", kind=kind
            )
        prompt = payload.get("prompt")
        if not isinstance(prompt, str):
            raise SearchDispatchError("payload.prompt must be a string", kind=kind)

        logger.debug(
            "ChatModelGenerativeService: dispatching %s (%d chars)", kind, len(prompt)
        )
        try:
            return await self._chain.ainvoke(prompt)
        except OutputParserException as exc:
            raise ResponseFormatError(
                f"Model reply is not valid JSON: {exc}", payload_type="text"
            ) from exc
        except SearchDispatchError:
            raise
        except Exception as exc:
            raise SearchDispatchError(
                f"Generative service call failed: {exc}",
                kind=kind,
                details={"error_type": type(exc).__name__},
            ) from exc

    def __repr__(self) -> str:
        return f"ChatModelGenerativeService(model={type(self.model).__name__})"


def create_chat_model(config: GenerativeConfig) -> BaseChatModel:
    """Build the chat model named by *config*.

    Provider packages are imported lazily so that only the selected one needs
    to be installed.
    """
    config.validate()
    logger.info(
        "create_chat_model: provider=%s model=%s", config.provider, config.resolved_model
    )
    if config.provider == "anthropic":
        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(
            model=config.resolved_model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
    if config.provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=config.resolved_model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

    from pe_target_finder.testing.mock_llm import MockJsonChatModel, sample_records

    return MockJsonChatModel(responses=[sample_records()])
