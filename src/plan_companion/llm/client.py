# src/plan_companion/llm/client.py

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import OpenAI

from ..core.ports import ChatMessage

logger = logging.getLogger(__name__)

_BAD_MODELS: dict[str, float] = {}  # model -> retry_at (monotonic)


def _is_auth_error(exc: Exception) -> bool:
    return isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError))


def _is_rate_limit_error(exc: Exception) -> bool:
    return isinstance(exc, openai.RateLimitError)


def _is_connection_error(exc: Exception) -> bool:
    # APITimeoutError subclasses APIConnectionError.
    return isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException))


def _is_not_found_error(exc: Exception) -> bool:
    return isinstance(exc, openai.NotFoundError)


def _make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(
        connect=connect_s,
        read=read_s,
        write=10.0,
        pool=connect_s,
    )


def friendly_llm_error_message(err: Exception) -> str:
    msg = str(err).strip() or "LLM error."
    if "LLM API key is not set" in msg:
        return "AI is not configured (missing API key). Set PLAN_OPENAI_API_KEY or OPENAI_API_KEY."
    if "LLM model list is empty" in msg:
        return "AI is not configured (no models). Set PLAN_LLM_MODELS or OPENAI_MODEL."
    return msg


class OpenAITextProvider:
    """
    OpenAI-compatible text provider.

    Behavior:
    - Tries models in the order from settings (PLAN_LLM_MODELS).
    - 404 (model not available) -> remember for an hour, try next.
    - Rate limit / network issues -> try next.
    - Auth issues -> fail fast (no retries across models).
    - The SDK's own retries are disabled; the caller decides what a failure means.
    - The whole fallback run shares one deadline (llm_timeout_seconds); each
      attempt only gets the time that is left.
    """

    def __init__(self, settings: Any) -> None:
        api_key = getattr(settings, "openai_api_key", None)
        if not api_key or not str(api_key).strip():
            raise RuntimeError("LLM API key is not set. Set PLAN_OPENAI_API_KEY in your .env.")

        self._models: List[str] = [m.strip() for m in (getattr(settings, "llm_models", None) or []) if m.strip()]
        if not self._models:
            raise RuntimeError("LLM model list is empty. Set PLAN_LLM_MODELS in your .env.")

        read_s = float(getattr(settings, "llm_timeout_seconds", 30.0))
        connect_s = float(getattr(settings, "llm_connect_timeout_seconds", 5.0))
        self._read_s = read_s
        self._connect_s = connect_s
        base_url = getattr(settings, "openai_base_url", None) or None

        self._client = OpenAI(
            api_key=str(api_key),
            base_url=base_url,
            timeout=_make_timeout(connect_s=connect_s, read_s=read_s),
            max_retries=0,
        )

    def complete(
            self,
            messages: List[ChatMessage],
            system_prompt: str,
            *,
            json_mode: bool = False,
    ) -> str:
        """
        Return the first choice's text content ("" when the model sent none).

        Raises RuntimeError when every configured model failed.
        """
        last_error: Optional[Exception] = None
        now = time.monotonic()
        deadline = now + self._read_s

        for model in self._models:
            retry_at = _BAD_MODELS.get(model)
            if retry_at is not None and retry_at > now:
                continue

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.info("LLM: deadline reached before model=%s", model)
                raise RuntimeError("LLM network/timeout error. Try again later or change models.") from last_error

            kwargs: Dict[str, Any] = {
                "model": model,
                "messages": [{"role": "system", "content": system_prompt}, *messages],
                "timeout": _make_timeout(connect_s=min(self._connect_s, remaining), read_s=remaining),
            }
            if json_mode:
                kwargs["response_format"] = {"type": "json_object"}

            logger.info("LLM: trying model=%s json_mode=%s", model, json_mode)
            t0 = time.monotonic()
            try:
                res = self._client.chat.completions.create(**kwargs)
            except Exception as e:
                last_error = e

                if _is_auth_error(e):
                    raise RuntimeError("LLM authentication failed. Check your API key.") from e

                if _is_not_found_error(e):
                    _BAD_MODELS[model] = time.monotonic() + 3600.0  # 1 hour
                    logger.info("LLM: model not available (404): %s", model)
                    continue

                if _is_rate_limit_error(e):
                    logger.info("LLM: rate-limited on model=%s, trying next", model)
                    continue

                if _is_connection_error(e):
                    logger.info("LLM: network/timeout error on model=%s, trying next", model)
                    continue

                logger.info("LLM: error on model=%s (%s), trying next", model, e.__class__.__name__)
                continue

            content = ""
            if res.choices:
                content = res.choices[0].message.content or ""
            logger.info("LLM: model=%s answered in %.2fs (%d chars)", model, time.monotonic() - t0, len(content))
            return content

        if last_error is not None:
            if _is_rate_limit_error(last_error):
                raise RuntimeError("LLM is rate-limited. Try again later.") from last_error
            if _is_connection_error(last_error):
                raise RuntimeError("LLM network/timeout error. Try again later or change models.") from last_error
        raise RuntimeError("All LLM models failed.") from last_error
