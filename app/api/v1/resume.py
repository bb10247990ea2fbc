import asyncio
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import Response

from app.core.config import settings
from app.core.rate_limit import rate_limit
from app.schemas.analysis import (
    JOB_DESCRIPTION_MAX_CHARS,
    AnalysisResult,
    AnalyzeTextRequest,
    ApplySuggestionRequest,
    ApplySuggestionResponse,
    ExportFormat,
    ExportRequest,
    RegenerateSuggestionsRequest,
    RegenerateSuggestionsResponse,
)
from app.services.analysis_service import EmptyResumeTextError, ResumeAnalyzer
from app.services.export_service import MEDIA_TYPES, download_filename, export_resume
from app.services.extraction_service import ExtractionError, extract_resume_text
from app.services.suggestion_applicator import apply_suggestion, record_applied

router = APIRouter()
logger = logging.getLogger(__name__)


def get_analyzer(request: Request) -> ResumeAnalyzer:
    analyzer = getattr(request.app.state, "analyzer", None)
    if analyzer is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analyzer is not ready. Please try again shortly.",
        )
    return analyzer


async def _read_upload(file: UploadFile) -> bytes:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


def _validate_job_description(job_description: str) -> str:
    if not job_description or not job_description.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Job description is required")
    if len(job_description) > JOB_DESCRIPTION_MAX_CHARS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Job description too long (max {JOB_DESCRIPTION_MAX_CHARS:,} characters)",
        )
    return job_description


async def _run_analysis(
    analyzer: ResumeAnalyzer,
    resume_text: str,
    job_description: str,
    *,
    operation: str,
) -> AnalysisResult:
    try:
        return await asyncio.to_thread(analyzer.analyze, resume_text, job_description, operation=operation)
    except EmptyResumeTextError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc


@router.post("/analyze", response_model=AnalysisResult)
@rate_limit()
async def analyze_upload(
    request: Request,
    resume: UploadFile = File(...),
    job_description: str = Form(default="", alias="jobDescription"),
    analyzer: ResumeAnalyzer = Depends(get_analyzer),
):
    _ = request
    filename = resume.filename or "resume"
    try:
        logger.info(
            "resume_upload_received filename=%s content_type=%s job_description_chars=%s",
            filename,
            resume.content_type,
            len(job_description),
        )
        _validate_job_description(job_description)
        content = await _read_upload(resume)
        try:
            extracted = await asyncio.to_thread(
                extract_resume_text,
                filename=filename,
                content_type=resume.content_type,
                content=content,
            )
        except ExtractionError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    finally:
        await resume.close()

    if not extracted.text:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Could not extract text from resume file",
        )

    return await _run_analysis(analyzer, extracted.text, job_description, operation="analyze")


@router.post("/re-analyze", response_model=AnalysisResult)
@rate_limit()
async def re_analyze(
    request: Request,
    payload: AnalyzeTextRequest,
    analyzer: ResumeAnalyzer = Depends(get_analyzer),
):
    _ = request
    return await _run_analysis(analyzer, payload.resume_text, payload.job_description, operation="re_analyze")


@router.post("/regenerate-suggestions", response_model=RegenerateSuggestionsResponse)
@rate_limit()
async def regenerate_suggestions(
    request: Request,
    payload: RegenerateSuggestionsRequest,
    analyzer: ResumeAnalyzer = Depends(get_analyzer),
):
    _ = request
    analysis = await _run_analysis(
        analyzer,
        payload.resume_text,
        payload.job_description,
        operation="regenerate_suggestions",
    )
    suggestions = list(analysis.suggestions)
    preferences = payload.preferences
    if preferences is not None:
        if preferences.focus:
            suggestions = [item for item in suggestions if item.category == preferences.focus]
        if preferences.impact:
            suggestions = [item for item in suggestions if item.impact == preferences.impact]

    logger.info(
        "suggestions_regenerated total=%s filtered=%s",
        len(analysis.suggestions),
        len(suggestions),
    )
    return RegenerateSuggestionsResponse(
        suggestions=suggestions,
        contextual_insights=analysis.contextual_insights,
    )


@router.post("/apply-suggestion", response_model=ApplySuggestionResponse)
async def apply_suggestion_route(payload: ApplySuggestionRequest):
    suggestion = payload.suggestion
    updated = apply_suggestion(payload.resume_text, suggestion)
    logger.info(
        "suggestion_applied id=%s type=%s changed=%s length=%s",
        suggestion.id,
        suggestion.type,
        updated != payload.resume_text,
        len(updated),
    )
    return ApplySuggestionResponse(
        updated_resume=updated,
        applied_suggestion=suggestion,
        applied_suggestion_ids=record_applied(payload.applied_suggestion_ids, suggestion.id),
    )


@router.post("/download/{fmt}")
@rate_limit()
async def download_resume(request: Request, fmt: ExportFormat, payload: ExportRequest):
    _ = request
    if not payload.resume_text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Resume text is required")
    content = await asyncio.to_thread(export_resume, payload.resume_text, fmt)
    filename = download_filename(payload.file_name, fmt)
    return Response(
        content=content,
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
