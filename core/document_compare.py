# core/document_compare.py
"""
Whole-document comparison of a submission against one candidate.

Five methods run once per pair: exact (Dice on normalized text), lexical,
n-gram, structural and semantic. Semantic only runs when a cheaper signal
clears the gate.
"""

from dataclasses import dataclass
from typing import List, Sequence
from core.embeddings import EmbeddingMemo
from core.entities import Fingerprint, Segment
from core.fingerprint import fingerprint, fingerprint_overlap, same_text
from core.lexical import (
    lexical_similarity,
    ngram_similarity,
    string_ratio,
    structural_similarity,
)
from core.scoring import weighted_score
from core.segmenter import segment
from core.semantic import SemanticComparator
from model.report import DocumentComparison, DocumentMetric, SentencePair
from model.submission import Candidate
from model.thresholds import DetectionThresholds
from util.functions import pct
from util.types import DocumentMethod
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedDocument:
    """Submission-side work shared by every candidate comparison in one run."""

    text: str
    sentences: List[Segment]
    fingerprint: Fingerprint


def prepare_document(text: str, t: DetectionThresholds) -> PreparedDocument:
    return PreparedDocument(
        text=text,
        sentences=segment(text, t.minSentenceChars, t.minSentenceWords),
        fingerprint=fingerprint(text),
    )


def _metric(method, score: float, flagged: bool, **kw) -> DocumentMetric:
    return DocumentMetric(method=method, score=round(score, 4), isPlagiarism=flagged, **kw)


def _scored(
    method: DocumentMethod, score: float, t: DetectionThresholds, **kw
) -> DocumentMetric:
    return _metric(method, score, score >= t.methodThresholds.for_method(method), **kw)


def matching_sentences(
    a: Sequence[Segment], b: Sequence[Segment], t: DetectionThresholds
) -> List[SentencePair]:
    pairs: List[tuple] = []
    for s1 in a:
        for s2 in b:
            sim = string_ratio(s1.text, s2.text)
            if sim >= t.documentSentenceMatch:
                pairs.append((-sim, s1.index, s2.index, s1.text, s2.text))
    pairs.sort(key=lambda p: (p[0], p[1], p[2]))
    return [
        SentencePair(
            sentence1=text1,
            sentence2=text2,
            similarity=round(-neg, 3),
            index1=i1,
            index2=i2,
        )
        for neg, i1, i2, text1, text2 in pairs[: t.documentMatchesReported]
    ]


async def _semantic_metric(
    doc: PreparedDocument,
    other_text: str,
    exact_score: float,
    comparator: SemanticComparator,
    memo: EmbeddingMemo,
    t: DetectionThresholds,
) -> DocumentMetric:
    if comparator.judge is not None:
        outcome = await comparator.judge_documents(doc.text, other_text)
        if outcome.error:
            return _metric(
                "semantic_similarity",
                0.0,
                False,
                error=True,
                reason=outcome.reason,
                details={"method": "judge"},
            )
        details = {"method": "judge"}
        if outcome.result is not None:
            details.update(
                {
                    "reasoning": outcome.result.reasoning,
                    "paraphrasedSections": outcome.result.paraphrased_sections,
                    "sharedConcepts": outcome.result.shared_concepts,
                }
            )
        flagged = outcome.is_plagiarism or outcome.score >= t.methodThresholds.semantic
        return _metric("semantic_similarity", outcome.score, flagged, details=details)

    semantic = await comparator.similarity(doc.text, other_text, memo, exact_score)
    return _scored(
        "semantic_similarity",
        semantic.score,
        t,
        reason=semantic.reason,
        details={"method": semantic.method},
    )


async def compare_document(
    doc: PreparedDocument,
    candidate: Candidate,
    candidate_index: int,
    comparator: SemanticComparator,
    memo: EmbeddingMemo,
    t: DetectionThresholds,
) -> DocumentComparison:
    other = candidate.text
    other_fp = fingerprint(other)
    identical = same_text(doc.text, other, doc.fingerprint, other_fp)

    exact = 1.0 if identical else string_ratio(doc.text, other)
    lexical = lexical_similarity(doc.text, other)
    ngram, phrases = ngram_similarity(doc.text, other, n=t.ngramSize)
    other_sentences = segment(other, t.minSentenceChars, t.minSentenceWords)
    structural = structural_similarity(doc.sentences, other_sentences)

    metrics = [
        _scored("exact_match", exact, t),
        _scored(
            "lexical_similarity",
            lexical.score,
            t,
            details={
                "jaccard": round(lexical.jaccard, 3),
                "overlap": round(lexical.overlap, 3),
                "commonWords": lexical.common_words,
                "uniqueWords1": lexical.unique_words_a,
                "uniqueWords2": lexical.unique_words_b,
            },
        ),
        _scored(
            "ngram_similarity",
            ngram,
            t,
            details={"matchingPhrases": phrases},
        ),
        _scored(
            "structural_similarity",
            structural.score,
            t,
            details={
                "avgSentenceLength1": round(structural.avg_sentence_length_a, 1),
                "avgSentenceLength2": round(structural.avg_sentence_length_b, 1),
                "totalSentences1": structural.sentences_a,
                "totalSentences2": structural.sentences_b,
            },
        ),
    ]

    if max(exact, lexical.score, ngram) > t.semanticGate:
        metrics.append(await _semantic_metric(doc, other, exact, comparator, memo, t))
    else:
        metrics.append(
            _metric("semantic_similarity", 0.0, False, reason="below_semantic_gate")
        )

    score = weighted_score(metrics, t.weights)
    source_id = candidate.sourceId or f"submission_{candidate_index}"
    logger.debug("compare.document source=%s score=%.3f", source_id, score)

    return DocumentComparison(
        sourceId=source_id,
        authorId=candidate.authorId,
        submittedOn=candidate.submittedOn,
        overallScore=round(score, 4),
        percentageMatch=pct(score),
        metrics=metrics,
        matchingSentences=(
            matching_sentences(doc.sentences, other_sentences, t)
            if score >= t.reportDocument
            else []
        ),
        isSuspicious=score >= t.suspiciousDocument,
        fingerprintOverlap=round(fingerprint_overlap(doc.fingerprint, other_fp), 4),
        identicalText=identical,
    )
