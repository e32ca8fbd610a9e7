"""
Gemini generateContent REST connector used as the compliance advisor.
POST {GEMINI_API_URL}/{model}:generateContent with the key in x-goog-api-key.

Single attempt per call, bounded by ADVISOR_TIMEOUT. HTTP failures are mapped
onto the AdvisorError family; the response text is returned as-is.
"""
import base64
import logging
from typing import Optional

import requests

from halalscan.config import ADVISOR_TIMEOUT, get_gemini_api_url, get_gemini_model
from halalscan.errors import (
    AdvisorError,
    AdvisorRateLimited,
    AdvisorUnauthorized,
    AdvisorUnknownError,
    AdvisorUnreachable,
)
from halalscan.llm_advisor import AdvisorImage

logger = logging.getLogger(__name__)

_INVALID_KEY_MARKERS = ("API_KEY_INVALID", "API key not valid", "PERMISSION_DENIED")


def _error_for_response(resp: requests.Response) -> AdvisorError:
    status = resp.status_code
    body = (resp.text or "")[:300]
    if status in (401, 403) or (status == 400 and any(m in body for m in _INVALID_KEY_MARKERS)):
        return AdvisorUnauthorized(f"HTTP {status}", status_code=status)
    if status == 429:
        return AdvisorRateLimited(f"HTTP {status}", status_code=status)
    if status >= 500:
        return AdvisorUnreachable(f"HTTP {status}", status_code=status)
    return AdvisorUnknownError(f"HTTP {status}: {body[:120]}", status_code=status)


def _extract_text(data) -> str:
    if not isinstance(data, dict):
        raise AdvisorUnknownError(f"unexpected response type {type(data).__name__}")
    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback")
        reason = feedback.get("blockReason", "no_candidates") if isinstance(feedback, dict) else "no_candidates"
        raise AdvisorUnknownError(f"empty response ({reason})")
    if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
        raise AdvisorUnknownError("malformed candidates")
    content = candidates[0].get("content") or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise AdvisorUnknownError("malformed candidate content")
    text = "".join(str(p.get("text") or "") for p in parts if isinstance(p, dict)).strip()
    if not text:
        raise AdvisorUnknownError("empty response text")
    return text


class GeminiAdvisor:
    def __init__(
        self,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: int = ADVISOR_TIMEOUT,
    ):
        self._api_url = (api_url or get_gemini_api_url()).rstrip("/")
        self._model = model or get_gemini_model()
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    def _build_payload(self, prompt: str, image: Optional[AdvisorImage]) -> dict:
        parts: list[dict] = [{"text": prompt}]
        if image is not None:
            parts.append({
                "inline_data": {
                    "mime_type": image.mime_type,
                    "data": base64.b64encode(image.data).decode("ascii"),
                }
            })
        return {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {"temperature": 0.2},
        }

    def assess(
        self,
        prompt: str,
        image: Optional[AdvisorImage],
        language: str,
        credential: str,
        model: Optional[str] = None,
    ) -> str:
        """
        Return the narrative for an already-built prompt. The target language is
        embedded in the prompt; it is only logged here.
        """
        key = (credential or "").strip()
        if not key:
            raise AdvisorUnauthorized("missing credential")
        try:
            # HTTP header values must be latin-1
            key.encode("latin-1")
        except UnicodeEncodeError as e:
            raise AdvisorUnauthorized("credential contains non latin-1 characters") from e
        model_name = (model or self._model).strip()
        url = f"{self._api_url}/{model_name}:generateContent"
        try:
            resp = requests.post(
                url,
                json=self._build_payload(prompt, image),
                headers={"x-goog-api-key": key},
                timeout=self._timeout,
            )
        except requests.Timeout as e:
            logger.warning("ADVISOR timeout model=%s timeout=%ss", model_name, self._timeout)
            raise AdvisorUnreachable(f"timed out: {e}") from e
        except requests.RequestException as e:
            logger.warning("ADVISOR request failed model=%s error=%s", model_name, type(e).__name__)
            raise AdvisorUnreachable(f"{type(e).__name__}: {e}") from e

        if resp.status_code != 200:
            err = _error_for_response(resp)
            logger.warning(
                "ADVISOR http_error model=%s status=%s kind=%s",
                model_name, resp.status_code, err.kind,
            )
            raise err
        try:
            data = resp.json()
        except ValueError as e:
            raise AdvisorUnknownError("response not JSON") from e
        text = _extract_text(data)
        logger.info(
            "ADVISOR ok model=%s language=%s image=%s chars=%d",
            model_name, language, image is not None, len(text),
        )
        return text
