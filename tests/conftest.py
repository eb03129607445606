# tests/conftest.py
"""
Shared fixtures: deterministic oracle stubs and sample documents.
"""

import asyncio
from typing import List, Optional

import pytest

from core.embeddings import NullEmbedder
from core.entities import JudgeResult
from core.detection_engine import PlagiarismEngine
from model.match import Match, MatchConfidence, MatchType, SegmentSpan
from util.errors import OracleUnavailableError


class LetterCountEmbedder:
    """Bag-of-letters vectors: identical text gives identical vectors."""

    def __init__(self) -> None:
        self.calls: List[str] = []

    async def embed(self, text: str) -> Optional[List[float]]:
        self.calls.append(text)
        vec = [0.0] * 26
        for ch in text.lower():
            if "a" <= ch <= "z":
                vec[ord(ch) - ord("a")] += 1.0
        return vec


class YieldingEmbedder(LetterCountEmbedder):
    """Suspends before answering, like a real model or cache round trip."""

    def __init__(self, available: bool = True) -> None:
        super().__init__()
        self.available = available

    async def embed(self, text: str) -> Optional[List[float]]:
        await asyncio.sleep(0)
        vec = await super().embed(text)
        return vec if self.available else None


class FixedJudge:
    def __init__(self, score: float = 0.9, is_plagiarism: bool = True) -> None:
        self.score = score
        self.is_plagiarism = is_plagiarism
        self.calls = 0

    async def judge(self, text_a: str, text_b: str) -> JudgeResult:
        self.calls += 1
        return JudgeResult(
            semantic_similarity=self.score,
            is_plagiarism=self.is_plagiarism,
            reasoning="Same argument, reworded.",
            shared_concepts=["photosynthesis"],
        )


class FailingJudge:
    def __init__(self) -> None:
        self.calls = 0

    async def judge(self, text_a: str, text_b: str) -> JudgeResult:
        self.calls += 1
        raise OracleUnavailableError("judge down")


@pytest.fixture
def letter_embedder():
    return LetterCountEmbedder()


@pytest.fixture
def engine(letter_embedder):
    return PlagiarismEngine(letter_embedder, concurrency=2)


@pytest.fixture
def lexical_engine():
    return PlagiarismEngine(NullEmbedder(), concurrency=2)


@pytest.fixture
def essay():
    return (
        "Photosynthesis converts light energy into chemical energy inside plant cells. "
        "Chlorophyll absorbs mostly blue and red light from the sun. "
        "The process releases oxygen as a byproduct into the atmosphere."
    )


@pytest.fixture
def unrelated_essay():
    return (
        "Medieval castles were built with thick stone walls for defense. "
        "Moats and drawbridges kept invading armies away from the gates. "
        "Many towers still stand across the countryside of Europe today."
    )


@pytest.fixture
def make_match():
    def _make(
        similarity: float = 90.0,
        kind: MatchType = MatchType.near_duplicate,
        source_id: str = "s1",
        start: int = 0,
        end: int = 10,
        text: str = "original sentence",
        matched: str = "matched sentence",
        submitted_on=None,
        author_id: Optional[str] = None,
    ) -> Match:
        return Match(
            originalSegment=SegmentSpan(text=text, startOffset=start, endOffset=end),
            matchedSegment=SegmentSpan(text=matched, startOffset=0, endOffset=len(matched)),
            sourceId=source_id,
            authorId=author_id,
            submittedOn=submitted_on,
            similarity=similarity,
            lexicalSimilarity=similarity / 100,
            semanticSimilarity=similarity / 100,
            semanticMethod="embedding",
            type=kind,
            confidence=MatchConfidence.high,
            isDirect=kind == MatchType.exact_copy,
            isParaphrase=kind == MatchType.paraphrase,
        )

    return _make
