# core/semantic.py
from typing import Optional
from core.embeddings import Embedder, EmbeddingMemo, cosine_with_reason
from core.entities import JudgeOutcome, SemanticOutcome
from core.semantic_judge import SemanticJudge
from util.errors import OracleUnavailableError
import logging

logger = logging.getLogger(__name__)


class SemanticComparator:
    """
    Uniform semantic similarity over the two oracles.

    - Sentence pairs: cosine of embeddings, degrading to the lexical ratio the
      caller already computed when either embedding is unavailable.
    - Document pairs: the judge when one is configured, else the same
      embedding path over the whole texts.
    """

    def __init__(self, embedder: Embedder, judge: Optional[SemanticJudge] = None) -> None:
        self.embedder = embedder
        self.judge = judge

    def memo(self) -> EmbeddingMemo:
        return EmbeddingMemo(self.embedder)

    async def similarity(
        self, a: str, b: str, memo: EmbeddingMemo, lexical_ratio: float
    ) -> SemanticOutcome:
        u = await memo.get(a)
        v = await memo.get(b)
        score, reason = cosine_with_reason(u, v)
        if reason is not None:
            return SemanticOutcome(score=lexical_ratio, method="lexical_fallback", reason=reason)
        return SemanticOutcome(score=score, method="embedding")

    async def judge_documents(self, a: str, b: str) -> JudgeOutcome:
        """Never raises: any judge failure becomes {score: 0, error: True}."""
        if self.judge is None:
            return JudgeOutcome(
                score=0.0, is_plagiarism=False, error=True, reason="judge_not_configured"
            )
        try:
            result = await self.judge.judge(a, b)
        except OracleUnavailableError as e:
            logger.warning("semantic.judge.unavailable msg=%s", e.message)
            return JudgeOutcome(
                score=0.0, is_plagiarism=False, error=True, reason="judge_unavailable"
            )
        except Exception:
            logger.error("semantic.judge.failed", exc_info=True)
            return JudgeOutcome(
                score=0.0, is_plagiarism=False, error=True, reason="judge_unavailable"
            )
        return JudgeOutcome(
            score=result.semantic_similarity,
            is_plagiarism=result.is_plagiarism,
            result=result,
        )
