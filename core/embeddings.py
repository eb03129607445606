# core/embeddings.py
import asyncio
from functools import lru_cache
from typing import Dict, List, Optional, Protocol, Sequence, Tuple
import numpy as np
from sentence_transformers import SentenceTransformer
from config.settings import settings
from repository.embedding_cache_repository import EmbeddingCacheRepository
from util.functions import clamp
from util.timing import timed
from util.types import ReasonCode
import logging

logger = logging.getLogger(__name__)

Vector = List[float]


class Embedder(Protocol):
    async def embed(self, text: str) -> Optional[Vector]:
        """Return an embedding, or None when unavailable. Must not raise."""
        ...


@lru_cache(maxsize=2)
def _load_model(name: str) -> SentenceTransformer:
    """
    Lazy-load the sentence embedding model, once per process.

    Model is kept CPU-friendly; adjust EMBEDDING_MODEL_NAME for a larger one.
    """
    with timed(logger, "embed.model.load", model=name):
        model = SentenceTransformer(name, device="cpu")
    return model


class SentenceTransformerEmbedder:
    def __init__(self, model_name: str = settings.EMBEDDING_MODEL_NAME) -> None:
        self._model_name = model_name
        self._load_failed = False

    def _model(self) -> Optional[SentenceTransformer]:
        if self._load_failed:
            return None
        try:
            return _load_model(self._model_name)
        except Exception:
            # Stay in lexical-only mode for the life of this embedder
            logger.error("embed.model.unavailable model=%s", self._model_name, exc_info=True)
            self._load_failed = True
            return None

    async def embed(self, text: str) -> Optional[Vector]:
        if not text or not text.strip():
            return None
        model = self._model()
        if model is None:
            return None
        try:
            vecs = model.encode(
                [text], convert_to_numpy=True, normalize_embeddings=True
            )
        except Exception:
            logger.warning("embed.encode.error chars=%d", len(text), exc_info=True)
            return None
        return vecs.astype(np.float32, copy=False)[0].tolist()


class NullEmbedder:
    """Embeddings disabled: every comparison runs lexical-only."""

    async def embed(self, text: str) -> Optional[Vector]:
        return None


class CachedEmbedder:
    """
    Read-through Redis cache in front of another embedder.
    Cache errors fall through to the wrapped embedder.
    """

    def __init__(self, inner: Embedder, cache: EmbeddingCacheRepository) -> None:
        self._inner = inner
        self._cache = cache

    async def embed(self, text: str) -> Optional[Vector]:
        try:
            hit = await self._cache.get(text)
        except Exception:
            logger.warning("embed.cache.get.error", exc_info=True)
            hit = None
        if hit is not None:
            return hit

        vec = await self._inner.embed(text)
        if vec is not None:
            try:
                await self._cache.put(text, vec)
            except Exception:
                logger.warning("embed.cache.put.error", exc_info=True)
        return vec


class EmbeddingMemo:
    """
    Per-evaluation memo so each sentence is embedded at most once per run.
    Concurrent callers asking for the same text await one shared in-flight call.
    Owned by a single run; never shared across evaluations.
    """

    def __init__(self, embedder: Embedder) -> None:
        self._embedder = embedder
        self._pending: Dict[str, "asyncio.Task[Optional[Vector]]"] = {}
        self.failures = 0

    async def get(self, text: str) -> Optional[Vector]:
        task = self._pending.get(text)
        if task is None:
            task = asyncio.ensure_future(self._embed(text))
            self._pending[text] = task
        # Cancelling one waiter leaves the shared call running
        return await asyncio.shield(task)

    async def _embed(self, text: str) -> Optional[Vector]:
        try:
            vec = await self._embedder.embed(text)
        except Exception:
            # Contract says embedders never raise; a broken one degrades this text only
            logger.warning("embed.oracle.raised", exc_info=True)
            vec = None
        if vec is None:
            self.failures += 1
        return vec


def cosine_with_reason(
    a: Optional[Sequence[float]], b: Optional[Sequence[float]]
) -> Tuple[float, Optional[ReasonCode]]:
    """
    Cosine similarity clamped to [0, 1] plus the reason when it is a 0 sentinel.
    Dot product and both squared norms come from one Gram-matrix product.
    """
    if a is None or b is None:
        return 0.0, "embedding_unavailable"
    u = np.asarray(a, dtype=np.float64)
    v = np.asarray(b, dtype=np.float64)
    if u.ndim != 1 or u.shape != v.shape or u.size == 0:
        return 0.0, "dimension_mismatch"
    stacked = np.vstack((u, v))
    gram = stacked @ stacked.T
    dot, sq_u, sq_v = float(gram[0, 1]), float(gram[0, 0]), float(gram[1, 1])
    if sq_u <= 0.0 or sq_v <= 0.0:
        return 0.0, "zero_norm"
    sim = dot / (np.sqrt(sq_u) * np.sqrt(sq_v))
    if not np.isfinite(sim):
        return 0.0, "zero_norm"
    return clamp(float(sim)), None


def cosine_similarity(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    return cosine_with_reason(a, b)[0]
