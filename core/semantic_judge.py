# core/semantic_judge.py
import json
from typing import Any, Dict, Optional, Protocol
import httpx
from config.settings import settings
from core.entities import JudgeResult
from util.errors import OracleUnavailableError
from util.functions import clamp, clip_words
import logging
from util.timing import timed

logger = logging.getLogger(__name__)


class SemanticJudge(Protocol):
    async def judge(self, text_a: str, text_b: str) -> JudgeResult:
        """May raise OracleUnavailableError; callers fail soft."""
        ...


async def _post_json(
    url: str, headers: Dict[str, str], payload: Dict[str, Any], timeout: float = 60.0
) -> Dict[str, Any]:
    """
    Make a JSON POST to `url`. Raises for non-2xx. Returns parsed JSON dict or {} on parse failure.
    """
    async with httpx.AsyncClient(timeout=timeout) as client:
        r = await client.post(url, headers=headers, json=payload)
        r.raise_for_status()
        try:
            return r.json()
        except Exception:
            return {}


def _user_prompt(text_a: str, text_b: str, max_words: int) -> str:
    return (
        f"TEXT A:\n{clip_words(text_a, max_words)}\n\n"
        f"TEXT B:\n{clip_words(text_b, max_words)}\n\n"
        "Return JSON only."
    )


def _reply_text(data: Dict[str, Any]) -> str:
    content = data.get("content") or []
    if content and isinstance(content, list):
        node = content[0]
        if isinstance(node, dict) and node.get("type") == "text":
            return node.get("text") or ""
    return ""


def _strip_fences(raw: str) -> str:
    raw = (raw or "").strip()
    if raw.startswith("```"):
        raw = raw.strip("`")
        if raw.startswith("json"):
            raw = raw[4:].strip()
    return raw


def parse_judgement(raw: str) -> Optional[JudgeResult]:
    """
    Pull the judge's JSON object out of the reply. Returns None when no usable
    object is present; a missing or non-numeric score also counts as unusable.
    """
    raw = _strip_fences(raw)
    start, end = raw.find("{"), raw.rfind("}")
    if start < 0 or end <= start:
        return None
    try:
        parsed = json.loads(raw[start : end + 1])
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None
    try:
        score = float(parsed["semanticSimilarity"])
    except (KeyError, TypeError, ValueError):
        return None

    def _strings(key: str) -> list[str]:
        val = parsed.get(key) or []
        return [str(x) for x in val] if isinstance(val, list) else []

    return JudgeResult(
        semantic_similarity=clamp(score),
        is_plagiarism=bool(parsed.get("isPlagiarism", False)),
        reasoning=str(parsed.get("reasoning", "")).strip(),
        paraphrased_sections=_strings("paraphrasedSections"),
        shared_concepts=_strings("sharedConcepts"),
    )


class AnthropicSemanticJudge:
    """
    Document-level paraphrase judge backed by the Anthropic Messages API.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str = settings.ANTHROPIC_MODEL,
        api_url: str = settings.ANTHROPIC_API_URL,
        timeout: float = settings.JUDGE_TIMEOUT_SECONDS,
        max_words: int = settings.JUDGE_MAX_WORDS,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._api_url = api_url
        self._timeout = timeout
        self._max_words = max_words

    async def judge(self, text_a: str, text_b: str) -> JudgeResult:
        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": settings.ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        payload = {
            "model": self._model,
            "max_tokens": 500,
            "system": settings.SEMANTIC_JUDGE_SYSTEM_PROMPT,
            "messages": [
                {
                    "role": "user",
                    "content": _user_prompt(text_a, text_b, self._max_words),
                }
            ],
            "temperature": 0.0,
        }
        try:
            with timed(logger, "ai.judge", model=self._model):
                data = await _post_json(
                    self._api_url, headers, payload, timeout=self._timeout
                )
        except httpx.HTTPError as e:
            logger.warning("ai.judge.http_error type=%s", type(e).__name__)
            raise OracleUnavailableError("Semantic judge request failed") from e

        result = parse_judgement(_reply_text(data))
        if result is None:
            logger.warning("ai.judge.unparseable")
            raise OracleUnavailableError("Semantic judge returned no usable JSON")

        logger.info(
            "ai.judge.result score=%.2f plagiarism=%s",
            result.semantic_similarity,
            result.is_plagiarism,
        )
        return result
