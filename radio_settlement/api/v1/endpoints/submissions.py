"""
Radio submission endpoints: queue a song for a station and accept it for airplay.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Request, Query
from sqlalchemy import select
from sqlalchemy.orm import Session
import time
from radio_settlement.api.deps import get_db
from radio_settlement.models.db import RadioSubmission, RadioStation, Song, SubmissionStatus
from radio_settlement.models.schemas.base import ResponseBase
from radio_settlement.models.schemas.submissions import SubmissionCreate, SubmissionRead, SettlementSummaryRead
from radio_settlement.services.errors import (
    NotFoundError,
    PlaylistConflictError,
    SubmissionStateError,
)
from radio_settlement.services.settlement import process_radio_submission
from radio_settlement.utils import get_logger, log_business_event, log_performance, utc_now, week_start

router = APIRouter()
logger = get_logger(__name__)

@router.post(
    "/",
    response_model=ResponseBase,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a song to a radio station",
    description="Create a pending submission for the current (or given) week"
)
async def create_submission(
    submission: SubmissionCreate,
    request: Request,
    db: Session = Depends(get_db)
) -> ResponseBase:
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID", "unknown")

    logger.info(
        "Radio submission started",
        song_id=submission.song_id,
        station_id=submission.station_id,
        week_submitted=submission.week_submitted.isoformat() if submission.week_submitted else None,
        request_id=request_id
    )

    song = db.get(Song, submission.song_id)
    if song is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Song {submission.song_id} not found"
        )

    station = db.get(RadioStation, submission.station_id)
    if station is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Station {submission.station_id} not found"
        )

    existing = db.execute(
        select(RadioSubmission).where(
            RadioSubmission.song_id == song.id,
            RadioSubmission.station_id == station.id,
            RadioSubmission.status == SubmissionStatus.PENDING,
        )
    ).scalars().first()
    if existing is not None:
        logger.warning(
            "Radio submission rejected: pending submission exists",
            existing_submission_id=existing.id,
            song_id=song.id,
            station_id=station.id,
            request_id=request_id
        )
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Song {song.id} already has pending submission {existing.id} for this station"
        )

    row = RadioSubmission(
        song_id=song.id,
        station_id=station.id,
        week_submitted=submission.week_submitted or week_start(utc_now()),
        status=SubmissionStatus.PENDING,
        submitted_at=utc_now(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)

    log_business_event(
        event_type="radio_submission_created",
        details={
            "submission_id": row.id,
            "song_id": song.id,
            "station_id": station.id,
            "station_name": station.name,
            "week_submitted": row.week_submitted.isoformat() if row.week_submitted else None,
        },
        request_id=request_id
    )
    log_performance(
        operation="create_radio_submission",
        duration_ms=(time.time() - start_time) * 1000,
    )

    return ResponseBase(
        success=True,
        message="Submission queued for review",
        data=SubmissionRead.model_validate(row).model_dump(mode="json")
    )

@router.get(
    "/",
    response_model=List[SubmissionRead],
    summary="List radio submissions"
)
async def list_submissions(
    status_filter: Optional[SubmissionStatus] = Query(None, alias="status"),
    station_id: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
) -> List[SubmissionRead]:
    stmt = select(RadioSubmission)
    if status_filter is not None:
        stmt = stmt.where(RadioSubmission.status == status_filter)
    if station_id:
        stmt = stmt.where(RadioSubmission.station_id == station_id)
    stmt = stmt.order_by(RadioSubmission.submitted_at.desc(), RadioSubmission.id).offset(offset).limit(limit)
    rows = db.execute(stmt).scalars().all()
    return [SubmissionRead.model_validate(r) for r in rows]

@router.get(
    "/{submission_id}",
    response_model=SubmissionRead,
    summary="Get a radio submission"
)
async def get_submission(submission_id: str, db: Session = Depends(get_db)) -> SubmissionRead:
    row = db.get(RadioSubmission, submission_id)
    if row is None:
        raise HTTPException(status_code=404, detail=f"Radio submission {submission_id} not found")
    return SubmissionRead.model_validate(row)

@router.post(
    "/{submission_id}/accept",
    response_model=SettlementSummaryRead,
    summary="Accept a submission and settle its radio play",
    description="Atomically accepts the submission, schedules the play, and credits song and band"
)
async def accept_submission(
    submission_id: str,
    request: Request,
    db: Session = Depends(get_db)
) -> SettlementSummaryRead:
    request_id = request.headers.get("X-Request-ID", "unknown")

    try:
        summary = process_radio_submission(db, submission_id)
    except NotFoundError as e:
        logger.warning("Settlement failed: missing record", submission_id=submission_id, error=str(e), request_id=request_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SubmissionStateError as e:
        logger.warning("Settlement refused: submission not pending", submission_id=submission_id, status=e.status, request_id=request_id)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except PlaylistConflictError as e:
        logger.error("Settlement failed: playlist contention", submission_id=submission_id, error=str(e), request_id=request_id)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Playlist is busy, retry shortly")
    except Exception as e:
        logger.error(
            "Settlement failed with unexpected error",
            submission_id=submission_id,
            error=str(e),
            request_id=request_id,
            exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="This submission could not be processed"
        )

    return SettlementSummaryRead.model_validate(summary)
