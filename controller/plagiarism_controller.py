# controller/plagiarism_controller.py
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from model.api import CheckRequest, CompareDocumentsRequest
from model.report import DocumentComparisonReport, Report
from service.plagiarism_service import PlagiarismService
from util.constants import InternalURIs
from controller.controller_dependencies import (
    enforce_max_upload_size,
    get_plagiarism_service,
)

plagiarism_router = APIRouter()


@plagiarism_router.post(
    InternalURIs.CHECK,
    response_model=Report,
    status_code=status.HTTP_200_OK,
)
async def check_submission(
    payload: CheckRequest,
    service: PlagiarismService = Depends(get_plagiarism_service),
) -> Report:
    return await service.check(payload)


@plagiarism_router.post(
    InternalURIs.CHECK_FILE,
    response_model=Report,
    dependencies=[Depends(enforce_max_upload_size)],
)
async def check_submission_file(
    file: UploadFile = File(...),
    candidates: str = Form("[]"),
    referenceSources: str = Form("[]"),
    checkInternet: bool = Form(False),
    submittedOn: Optional[datetime] = Form(None),
    thresholds: Optional[str] = Form(None),
    service: PlagiarismService = Depends(get_plagiarism_service),
) -> Report:
    return await service.check_file(
        file,
        candidates,
        check_internet=checkInternet,
        reference_sources_json=referenceSources,
        submitted_on=submittedOn,
        thresholds_json=thresholds,
    )


@plagiarism_router.post(
    InternalURIs.COMPARE_DOCUMENTS,
    response_model=DocumentComparisonReport,
)
async def compare_documents(
    payload: CompareDocumentsRequest,
    service: PlagiarismService = Depends(get_plagiarism_service),
) -> DocumentComparisonReport:
    return await service.compare_documents(payload)
