"""Core execution utilities for Turnwire."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from typing import Any

from any_llm import AnyLLM
from any_llm.exceptions import (
    AnyLLMError,
    AuthenticationError,
    ContentFilterError,
    ContextLengthExceededError,
    InvalidRequestError,
    MissingApiKeyError,
    ModelNotFoundError,
    ProviderError,
    RateLimitError,
    UnsupportedParameterError,
    UnsupportedProviderError,
)
from pydantic import ValidationError

from turnwire.core.errors import ErrorKind, TurnwireError

logger = logging.getLogger(__name__)


class TurnCore:
    """Shared execution utilities (provider resolution, client cache, error classification)."""

    def __init__(
        self,
        *,
        provider: str,
        model: str,
        api_key: str | dict[str, str] | None,
        api_base: str | dict[str, str] | None,
        client_args: dict[str, Any],
        verbose: int,
        error_classifier: Callable[[Exception], ErrorKind | None] | None = None,
    ) -> None:
        self._provider = provider
        self._model = model
        self._api_key = api_key
        self._api_base = api_base
        self._client_args = client_args
        self._verbose = verbose
        self._error_classifier = error_classifier
        self._client_cache: dict[str, AnyLLM] = {}

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def model(self) -> str:
        return self._model

    @staticmethod
    def resolve_model_provider(model: str, provider: str | None) -> tuple[str, str]:
        if provider:
            if ":" in model:
                raise TurnwireError(
                    ErrorKind.INVALID_INPUT,
                    "When provider is specified, model must not include a provider prefix.",
                )
            return provider, model

        if ":" not in model:
            raise TurnwireError(ErrorKind.INVALID_INPUT, "Model must be in 'provider:model' format.")

        provider_name, model_id = model.split(":", 1)
        if not provider_name or not model_id:
            raise TurnwireError(ErrorKind.INVALID_INPUT, "Model must be in 'provider:model' format.")
        return provider_name, model_id

    def _resolve_api_key(self, provider: str) -> str | None:
        if isinstance(self._api_key, dict):
            return self._api_key.get(provider)
        return self._api_key

    def _resolve_api_base(self, provider: str) -> str | None:
        if isinstance(self._api_base, dict):
            return self._api_base.get(provider)
        return self._api_base

    def _freeze_cache_key(self, provider: str, api_key: str | None, api_base: str | None) -> str:
        def _freeze(value: Any) -> Any:
            if isinstance(value, (str, int, float, bool)) or value is None:
                return value
            if isinstance(value, (tuple, list)):
                return [_freeze(item) for item in value]
            if isinstance(value, dict):
                return {str(k): _freeze(v) for k, v in sorted(value.items(), key=lambda kv: str(kv[0]))}
            return repr(value)

        payload = {
            "provider": provider,
            "api_key": api_key,
            "api_base": api_base,
            "client_args": _freeze(self._client_args),
        }
        return json.dumps(payload, sort_keys=True, separators=(",", ":"))

    def get_client(self, provider: str) -> AnyLLM:
        api_key = self._resolve_api_key(provider)
        api_base = self._resolve_api_base(provider)
        cache_key = self._freeze_cache_key(provider, api_key, api_base)
        if cache_key not in self._client_cache:
            self._client_cache[cache_key] = AnyLLM.create(
                provider,
                api_key=api_key,
                api_base=api_base,
                **self._client_args,
            )
        return self._client_cache[cache_key]

    def log_error(self, error: TurnwireError, provider: str, model: str) -> None:
        if self._verbose == 0:
            return

        prefix = f"[{provider}:{model}] streaming turn"
        if error.cause:
            logger.warning("%s failed: %s (cause=%r)", prefix, error, error.cause)
        else:
            logger.warning("%s failed: %s", prefix, error)

    def classify_exception(self, exc: Exception) -> ErrorKind:
        """Map a transport exception to an ErrorKind.

        Checked in order: a user classifier, any-llm exception types, the HTTP status the
        exception carries, then its message text.
        """
        if isinstance(exc, TurnwireError):
            return exc.kind
        if self._error_classifier is not None:
            try:
                kind = self._error_classifier(exc)
            except Exception as classifier_exc:
                logger.warning("error_classifier failed: %r", classifier_exc)
            else:
                if isinstance(kind, ErrorKind):
                    return kind
        if isinstance(exc, ValidationError):
            return ErrorKind.INVALID_INPUT
        for types, kind in _ANYLLM_ERROR_KINDS:
            if isinstance(exc, types):
                return kind
        status = _status_code(exc)
        if status is not None:
            return _kind_for_status(status)
        text = f"{type(exc).__name__} {exc!s}".lower()
        for pattern, kind in _TEXT_SIGNATURES:
            if pattern.search(text):
                return kind
        return ErrorKind.UNKNOWN

    def wrap_error(self, exc: Exception, provider: str, model: str) -> TurnwireError:
        if isinstance(exc, TurnwireError):
            return exc
        kind = self.classify_exception(exc)
        return TurnwireError(kind, f"{provider}:{model}: {exc}", cause=exc)


_ANYLLM_ERROR_KINDS: tuple[tuple[tuple[type[Exception], ...], ErrorKind], ...] = (
    ((MissingApiKeyError, AuthenticationError), ErrorKind.CONFIG),
    (
        (
            UnsupportedProviderError,
            UnsupportedParameterError,
            InvalidRequestError,
            ModelNotFoundError,
            ContextLengthExceededError,
        ),
        ErrorKind.INVALID_INPUT,
    ),
    ((RateLimitError, ContentFilterError), ErrorKind.TEMPORARY),
    ((ProviderError, AnyLLMError), ErrorKind.PROVIDER),
)

_TEXT_SIGNATURES: tuple[tuple[re.Pattern[str], ErrorKind], ...] = (
    (re.compile(r"auth|unauthorized|forbidden|permission denied|invalid[_\s-]?api[_\s-]?key"), ErrorKind.CONFIG),
    (re.compile(r"rate[_\s-]?limit|too many requests|quota exceeded|\b429\b"), ErrorKind.TEMPORARY),
    (re.compile(r"invalid request|bad request|validation|model.*not.*found|context.*length"), ErrorKind.INVALID_INPUT),
    (re.compile(r"timeout|timed out|connection error|service unavailable"), ErrorKind.PROVIDER),
)


def _status_code(exc: Exception) -> int | None:
    for source in (exc, getattr(exc, "response", None)):
        status = getattr(source, "status_code", None)
        if isinstance(status, int):
            return status
    return None


def _kind_for_status(status: int) -> ErrorKind:
    if status in {401, 403}:
        return ErrorKind.CONFIG
    if status in {400, 404, 413, 422}:
        return ErrorKind.INVALID_INPUT
    if status in {408, 409, 425, 429}:
        return ErrorKind.TEMPORARY
    if 500 <= status < 600:
        return ErrorKind.PROVIDER
    return ErrorKind.UNKNOWN
