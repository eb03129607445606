# core/detection_engine.py
import asyncio
from datetime import datetime
from itertools import chain
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar
from pydantic import ValidationError
from config.settings import settings
from core.citations import detect_citations
from core.document_compare import compare_document, prepare_document
from core.embeddings import Embedder, EmbeddingMemo
from core.matcher import collect_matches, match_candidate
from core.scoring import (
    NO_COMPARISON_VERDICT,
    count_type,
    document_summary,
    document_verdict,
    failed_verdict,
    recommendation,
    sentence_score,
    sentence_verdict,
)
from core.segmenter import segment
from core.semantic import SemanticComparator
from core.semantic_judge import SemanticJudge
from core.stylometry import analyze_style, detect_style_shifts
from core.views import build_timeline, build_visualization
from model.api import AnalyzeStyleResponse
from model.match import MatchConfidence, MatchType
from model.report import (
    CitationStats,
    DetectionMethods,
    DocumentComparisonReport,
    DocumentVerdict,
    Report,
    ReportWarning,
    SentenceLevelStats,
    StyleAnalysis,
    StyleStats,
    Summary,
)
from model.submission import Candidate
from model.thresholds import DEFAULT_THRESHOLDS, DetectionThresholds
from util.errors import MalformedInputError
from util.timing import timed
from util.types import CandidateOrigin
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")

FIRST_SUBMISSION = "First submission for this assignment. No peer plagiarism check possible."
NO_PREVIOUS_SUBMISSIONS = "No previous submissions to compare against. This is the first submission."


def validate_candidate(item: Any, index: int, origin: CandidateOrigin) -> Candidate:
    """
    Raises MalformedInputError for anything that is not a candidate with
    non-blank text. A missing sourceId becomes "submission_<index>"
    ("reference_<index>" for reference sources).
    """
    prefix = "submission" if origin == "peer" else "reference"
    fallback_id = f"{prefix}_{index}"
    try:
        cand = item if isinstance(item, Candidate) else Candidate.model_validate(item)
    except ValidationError as e:
        source_id = item.get("sourceId") if isinstance(item, dict) else None
        raise MalformedInputError(
            f"Candidate {index} is not a valid document ({e.error_count()} error(s))",
            source_id=source_id if isinstance(source_id, str) else fallback_id,
        ) from e
    source_id = cand.sourceId or fallback_id
    if not cand.text.strip():
        raise MalformedInputError(f"Candidate {index} has no text", source_id=source_id)
    return cand.model_copy(update={"sourceId": source_id, "origin": origin})


def resolve_candidates(
    raw: Sequence[Any], origin: CandidateOrigin
) -> Tuple[List[Candidate], List[ReportWarning]]:
    valid: List[Candidate] = []
    warnings: List[ReportWarning] = []
    for i, item in enumerate(raw or []):
        try:
            valid.append(validate_candidate(item, i, origin))
        except MalformedInputError as e:
            logger.warning("check.candidate.skipped index=%d origin=%s", i, origin)
            warnings.append(
                ReportWarning(code=e.code, message=e.message, sourceId=e.source_id)
            )
    return valid, warnings


class PlagiarismEngine:
    """
    Multi-method similarity engine. Oracles are injected; thresholds are
    passed per call. Each call owns its intermediate state, so one engine
    can serve concurrent evaluations.
    """

    def __init__(
        self,
        embedder: Embedder,
        judge: Optional[SemanticJudge] = None,
        concurrency: int = settings.COMPARE_CONCURRENCY,
    ) -> None:
        self._embedder = embedder
        self._judge = judge
        self._concurrency = max(1, int(concurrency))

    async def _bounded(self, jobs: Sequence[Callable[[], Awaitable[T]]]) -> List[T]:
        """
        Run jobs concurrently, at most `concurrency` at a time; results keep
        job order. Pending jobs are cancelled if one fails or the caller
        abandons the run.
        """
        sem = asyncio.Semaphore(self._concurrency)

        async def run(job: Callable[[], Awaitable[T]]) -> T:
            async with sem:
                return await job()

        tasks = [asyncio.create_task(run(job)) for job in jobs]
        try:
            return list(await asyncio.gather(*tasks))
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

    # ---------------- Sentence level ----------------

    async def check(
        self,
        text: str,
        candidates: Sequence[Any],
        *,
        reference_sources: Sequence[Any] = (),
        check_internet: bool = False,
        submitted_on: Optional[datetime] = None,
        thresholds: Optional[DetectionThresholds] = None,
    ) -> Report:
        """
        Never raises: an empty submission or an unexpected failure returns
        `checked=False, error=True` with the reason in `message`.
        """
        t = thresholds or DEFAULT_THRESHOLDS
        try:
            return await self._check(
                text, candidates, reference_sources, check_internet, submitted_on, t
            )
        except MalformedInputError as e:
            logger.warning("check.rejected code=%s", e.code)
            return Report(
                checked=False, error=True, message=e.message, verdict=failed_verdict(e.message)
            )
        except Exception as e:
            logger.error("check.failed", exc_info=True)
            message = f"Plagiarism detection failed: {e}"
            return Report(
                checked=False, error=True, message=message, verdict=failed_verdict(message)
            )

    async def _check(
        self,
        text: str,
        candidates: Sequence[Any],
        reference_sources: Sequence[Any],
        check_internet: bool,
        submitted_on: Optional[datetime],
        t: DetectionThresholds,
    ) -> Report:
        if not isinstance(text, str) or not text.strip():
            raise MalformedInputError("Submission text is empty")

        peers, warnings = resolve_candidates(candidates, "peer")
        corpus = list(peers)
        if check_internet:
            refs, ref_warnings = resolve_candidates(reference_sources, "internet")
            corpus.extend(refs)
            warnings.extend(ref_warnings)

        if not corpus:
            logger.info("check.no_comparisons skipped=%d", len(warnings))
            return Report(
                noComparisons=True,
                message=FIRST_SUBMISSION,
                overallScore=0.0,
                verdict=NO_COMPARISON_VERDICT,
                warnings=warnings,
            )

        citations = detect_citations(text, t.citationRatio)
        with timed(logger, "check.style", level=logging.DEBUG):
            overall_style = analyze_style(text)
            style = detect_style_shifts(text, t)

        sentences = segment(text, t.minSentenceChars, t.minSentenceWords)
        comparator = SemanticComparator(self._embedder, self._judge)
        memo = comparator.memo()

        def job(index: int, cand: Candidate):
            async def _run():
                cand_sentences = segment(cand.text, t.minSentenceChars, t.minSentenceWords)
                return await match_candidate(
                    sentences, cand, index, cand_sentences, comparator, memo, t
                )

            return _run

        with timed(
            logger, "check.match", level=logging.DEBUG, sentences=len(sentences), sources=len(corpus)
        ):
            ranked = await self._bounded([job(i, c) for i, c in enumerate(corpus)])
        matches = collect_matches(list(chain.from_iterable(ranked)))

        if memo.failures:
            warnings.append(
                ReportWarning(
                    code="embedding_unavailable",
                    message=f"Embeddings unavailable for {memo.failures} sentence(s); lexical similarity used",
                )
            )

        exact = count_type(matches, MatchType.exact_copy)
        paraphrases = count_type(matches, MatchType.paraphrase)
        score = sentence_score(matches, citations, style.shifts, t.scoring)
        verdict = sentence_verdict(score, exact, paraphrases, len(style.shifts), t.scoring)
        high_confidence = sum(
            1
            for m in matches
            if m.confidence in (MatchConfidence.very_high, MatchConfidence.high)
        )
        logger.info(
            "check.matches total=%d exact=%d paraphrase=%d score=%.1f tier=%s",
            len(matches),
            exact,
            paraphrases,
            score,
            verdict.tier.value,
        )

        return Report(
            overallScore=score,
            verdict=verdict,
            detectionMethods=DetectionMethods(
                sentenceLevel=SentenceLevelStats(
                    total=len(matches),
                    exactCopies=exact,
                    paraphrases=paraphrases,
                    nearDuplicates=count_type(matches, MatchType.near_duplicate),
                    similarContent=count_type(matches, MatchType.similar_content),
                ),
                citations=CitationStats(
                    detected=citations.citations.total > 0,
                    properlyFormatted=citations.properlyFormatted,
                    total=citations.citations.total,
                ),
                styleAnalysis=StyleStats(
                    consistent=style.consistent,
                    shiftsDetected=len(style.shifts),
                    sufficientData=style.sufficientData,
                ),
            ),
            sentenceMatches=matches[: t.sentenceMatchesReported],
            citations=citations,
            styleAnalysis=StyleAnalysis(
                overallStyle=overall_style,
                shifts=style.shifts,
                consistent=style.consistent,
                sufficientData=style.sufficientData,
            ),
            timeline=build_timeline(submitted_on, matches),
            visualization=build_visualization(sentences, matches, t.highlightRangesReported),
            summary=Summary(
                totalComparisons=len(corpus),
                matchesFound=len(matches),
                highConfidenceMatches=high_confidence,
                recommendation=recommendation(verdict.tier),
            ),
            warnings=warnings,
        )

    # ---------------- Document level ----------------

    async def compare_documents(
        self,
        text: str,
        candidates: Sequence[Any],
        *,
        thresholds: Optional[DetectionThresholds] = None,
        judge: Optional[SemanticJudge] = None,
    ) -> DocumentComparisonReport:
        """
        Whole-document comparison. `judge` overrides the engine's judge for
        this call only. Never raises.
        """
        t = thresholds or DEFAULT_THRESHOLDS
        try:
            return await self._compare_documents(text, candidates, t, judge or self._judge)
        except MalformedInputError as e:
            logger.warning("compare.rejected code=%s", e.code)
            return DocumentComparisonReport(
                checked=False,
                error=True,
                message=e.message,
                verdict=DocumentVerdict(**failed_verdict(e.message).model_dump()),
            )
        except Exception as e:
            logger.error("compare.failed", exc_info=True)
            message = f"Plagiarism detection failed: {e}"
            return DocumentComparisonReport(
                checked=False,
                error=True,
                message=message,
                verdict=DocumentVerdict(**failed_verdict(message).model_dump()),
            )

    async def _compare_documents(
        self,
        text: str,
        candidates: Sequence[Any],
        t: DetectionThresholds,
        judge: Optional[SemanticJudge],
    ) -> DocumentComparisonReport:
        if not isinstance(text, str) or not text.strip():
            raise MalformedInputError("Submission text is empty")

        corpus, warnings = resolve_candidates(candidates, "peer")
        if not corpus:
            return DocumentComparisonReport(
                noComparisons=True,
                message=NO_PREVIOUS_SUBMISSIONS,
                verdict=DocumentVerdict(**NO_COMPARISON_VERDICT.model_dump()),
                warnings=warnings,
            )

        doc = prepare_document(text, t)
        comparator = SemanticComparator(self._embedder, judge)
        memo: EmbeddingMemo = comparator.memo()

        def job(index: int, cand: Candidate):
            async def _run():
                return await compare_document(doc, cand, index, comparator, memo, t)

            return _run

        with timed(logger, "compare.documents", level=logging.DEBUG, sources=len(corpus)):
            comparisons = await self._bounded([job(i, c) for i, c in enumerate(corpus)])

        for comp in comparisons:
            for metric in comp.metrics:
                if metric.error:
                    warnings.append(
                        ReportWarning(
                            code=metric.reason or "judge_unavailable",
                            message="Semantic judge unavailable; score excludes the semantic method",
                            sourceId=comp.sourceId,
                        )
                    )
        if memo.failures:
            warnings.append(
                ReportWarning(
                    code="embedding_unavailable",
                    message="Embeddings unavailable; semantic score fell back to lexical similarity",
                )
            )

        ordered = sorted(
            enumerate(comparisons), key=lambda pair: (-pair[1].overallScore, pair[0])
        )
        reported = [c for _, c in ordered if c.overallScore >= t.reportDocument]

        highest = reported[0].overallScore if reported else 0.0
        verdict = document_verdict(
            highest, reported[0].metrics if reported else [], t.scoring
        )
        logger.info(
            "compare.result sources=%d reported=%d highest=%.3f tier=%s",
            len(corpus),
            len(reported),
            highest,
            verdict.tier.value,
        )

        return DocumentComparisonReport(
            totalComparisons=len(corpus),
            suspiciousMatches=sum(1 for c in reported if c.isSuspicious),
            highestSimilarity=highest,
            verdict=verdict,
            detailedResults=reported[: t.documentMatchesReported],
            summary=document_summary(reported, verdict),
            warnings=warnings,
        )

    # ---------------- Style only ----------------

    def analyze_style(
        self, text: str, thresholds: Optional[DetectionThresholds] = None
    ) -> AnalyzeStyleResponse:
        t = thresholds or DEFAULT_THRESHOLDS
        return AnalyzeStyleResponse(
            overallStyle=analyze_style(text),
            styleShifts=detect_style_shifts(text, t),
            citations=detect_citations(text, t.citationRatio),
        )
