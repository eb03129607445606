# repository/embedding_cache_repository.py
from typing import List, Optional
import mmh3
import numpy as np
from redis.asyncio import Redis
from config.cache import get_redis
from config.settings import settings
from repository.namespaces import EMBEDDINGS


class EmbeddingCacheRepository:
    """
    Redis-backed float32 vectors keyed by (model name, 128-bit MurmurHash of the text).

    TTL is refreshed on every hit so frequently compared sentences stay warm.
    """

    def __init__(
        self,
        model_name: str = settings.EMBEDDING_MODEL_NAME,
        ttl_seconds: int = settings.EMBEDDING_CACHE_TTL_SECONDS,
    ) -> None:
        self._model = model_name
        self._ttl = int(ttl_seconds)

    @staticmethod
    async def _client() -> Redis:
        return await get_redis()

    def _key(self, text: str) -> str:
        digest = mmh3.hash128(text, signed=False)
        return f"{EMBEDDINGS}:{self._model}:{digest:032x}"

    async def get(self, text: str) -> Optional[List[float]]:
        r = await self._client()
        key = self._key(text)
        raw = await r.get(key)
        if raw is None:
            return None
        await r.expire(key, self._ttl)
        return np.frombuffer(raw, dtype=np.float32).tolist()

    async def put(self, text: str, vector: List[float]) -> None:
        r = await self._client()
        payload = np.asarray(vector, dtype=np.float32).tobytes()
        await r.set(self._key(text), payload, ex=self._ttl)
