# controller/style_controller.py
from fastapi import APIRouter, Depends
from model.api import AnalyzeStyleRequest, AnalyzeStyleResponse
from service.plagiarism_service import PlagiarismService
from util.constants import InternalURIs
from controller.controller_dependencies import get_plagiarism_service

style_router = APIRouter()


@style_router.post(InternalURIs.ANALYZE_STYLE, response_model=AnalyzeStyleResponse)
async def analyze_style(
    payload: AnalyzeStyleRequest,
    service: PlagiarismService = Depends(get_plagiarism_service),
) -> AnalyzeStyleResponse:
    return service.analyze_style(payload)
