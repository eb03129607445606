# controller/controller_dependencies.py
from functools import lru_cache
from config.cache import cache_enabled
from config.settings import settings
from core.detection_engine import PlagiarismEngine
from core.embeddings import CachedEmbedder, Embedder, NullEmbedder, SentenceTransformerEmbedder
from repository.embedding_cache_repository import EmbeddingCacheRepository
from service.plagiarism_service import PlagiarismService
from fastapi import File, HTTPException, Request, UploadFile


@lru_cache(maxsize=1)
def get_embedder() -> Embedder:
    # One per process; the model-load latch lives on the instance
    if not settings.EMBEDDINGS_ENABLED:
        return NullEmbedder()
    _embedder: Embedder = SentenceTransformerEmbedder(settings.EMBEDDING_MODEL_NAME)
    if cache_enabled():
        _embedder = CachedEmbedder(_embedder, EmbeddingCacheRepository())
    return _embedder


def get_plagiarism_service() -> PlagiarismService:
    _engine = PlagiarismEngine(get_embedder(), concurrency=settings.COMPARE_CONCURRENCY)
    _service = PlagiarismService(_engine)
    return _service


async def enforce_max_upload_size(
    request: Request, file: UploadFile = File(...)
) -> UploadFile:
    # Fast pre-check via Content-Length if present
    MAX_BYTES = settings.MAX_FILE_MB * 1024 * 1024
    cl = request.headers.get("content-length")
    if cl and int(cl) > MAX_BYTES:
        # JSON envelope for 413
        raise HTTPException(
            status_code=413,
            detail={
                "ok": False,
                "error": "file_too_large",
                "maxMb": settings.MAX_FILE_MB,
            },
        )

    # Hard cap while reading initial bytes (works even if no Content-Length)
    blob = await file.read(MAX_BYTES + 1)
    if len(blob) > MAX_BYTES:
        raise HTTPException(
            status_code=413,
            detail={
                "ok": False,
                "error": "file_too_large",
                "maxMb": settings.MAX_FILE_MB,
            },
        )

    # Reset so downstream can re-read file stream
    await file.seek(0)
    return file
