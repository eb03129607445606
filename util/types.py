# util/types.py
from typing import Literal


# Flow: reason codes attached to sentinel values (0 / None) so callers can
# tell "zero similarity" from "could not compute".
ReasonCode = Literal[
    "malformed_input",
    "embedding_unavailable",
    "dimension_mismatch",
    "zero_norm",
    "judge_unavailable",
    "judge_not_configured",
    "below_semantic_gate",
]

CandidateOrigin = Literal["peer", "internet"]

SemanticMethod = Literal["embedding", "lexical_fallback", "judge"]

DocumentMethod = Literal[
    "exact_match",
    "lexical_similarity",
    "semantic_similarity",
    "structural_similarity",
    "ngram_similarity",
]
