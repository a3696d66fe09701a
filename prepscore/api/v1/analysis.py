from fastapi import APIRouter, File, HTTPException, UploadFile

from prepscore.core.config import settings
from prepscore.core.errors import PrepscoreError
from prepscore.schemas.api import ATSScoreRequest, EvaluateAnswerRequest, SkillMatchRequest
from prepscore.schemas.interview import AnswerEvaluation
from prepscore.schemas.match import ATSReport, SkillMatchReport
from prepscore.schemas.resume import ParsedResume, ResumeFormat
from prepscore.services import analysis_service

router = APIRouter()

_READ_CHUNK_BYTES = 1024 * 64


async def _read_upload(file: UploadFile) -> tuple[bytes, str]:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(_READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks), file.content_type or ""


def _raise_http_error(exc: PrepscoreError) -> None:
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


@router.post("/resume/detect-format", response_model=ResumeFormat)
async def resume_detect_format(file: UploadFile = File(...)):
    content, mime_type = await _read_upload(file)
    try:
        return analysis_service.detect_format(content, mime_type)
    except PrepscoreError as exc:
        _raise_http_error(exc)


@router.post("/resume/extract", response_model=ParsedResume)
async def resume_extract(file: UploadFile = File(...)):
    content, mime_type = await _read_upload(file)
    try:
        return analysis_service.extract(content, mime_type)
    except PrepscoreError as exc:
        _raise_http_error(exc)


@router.post("/ats/score", response_model=ATSReport)
async def ats_score(payload: ATSScoreRequest):
    try:
        return analysis_service.ats_score(payload.parsed, payload.job_description_text, payload.role_hint)
    except PrepscoreError as exc:
        _raise_http_error(exc)


@router.post("/skills/match", response_model=SkillMatchReport)
async def skills_match(payload: SkillMatchRequest):
    if payload.parsed is None and payload.candidate_skills is None:
        raise HTTPException(status_code=422, detail="Provide either parsed or candidate_skills.")
    candidates = payload.parsed if payload.parsed is not None else payload.candidate_skills
    try:
        return analysis_service.skill_match(
            payload.required,
            payload.preferred,
            candidates,
            payload.preferred_weight,
            required_levels=payload.required_levels,
            candidate_levels=payload.candidate_levels,
        )
    except PrepscoreError as exc:
        _raise_http_error(exc)


@router.post("/interview/evaluate", response_model=AnswerEvaluation)
async def interview_evaluate(payload: EvaluateAnswerRequest):
    try:
        return analysis_service.evaluate_answer(payload.question, payload.answer_text, payload.interview_type)
    except PrepscoreError as exc:
        _raise_http_error(exc)
