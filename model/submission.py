# model/submission.py
from datetime import datetime
from pydantic import BaseModel
from util.types import CandidateOrigin


class Candidate(BaseModel):
    """
    One prior submission or public reference text, fully resolved by the caller.
    `sourceId` falls back to "submission_<index>" when absent.
    """

    text: str
    sourceId: str | None = None
    submittedOn: datetime | None = None
    authorId: str | None = None
    origin: CandidateOrigin = "peer"


class SubmissionMetadata(BaseModel):
    submittedOn: datetime | None = None
    authorId: str | None = None
