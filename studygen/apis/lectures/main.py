from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from studygen.apis.deps import LectureFinderConfigs, Orchestrator
from studygen.core.config import settings
from studygen.modules.lectures.finder import find_lecture
from .schemas import FindLectureRequest, FindLectureResponse

router = APIRouter()


@router.post(
    f"/{settings.app.version}/doubts/find-lecture",
    response_model=FindLectureResponse,
    status_code=status.HTTP_200_OK,
    tags=["doubts"],
)
async def find_lecture_for_doubt(
    req: FindLectureRequest,
    orchestrator: Orchestrator,
    configs: LectureFinderConfigs,
) -> FindLectureResponse:
    try:
        match = await find_lecture(orchestrator, configs, req.question, req.chapters)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if match is None:
        return FindLectureResponse()
    return FindLectureResponse(
        lecture=match.chapter, source=match.source, produced_by=match.produced_by
    )
