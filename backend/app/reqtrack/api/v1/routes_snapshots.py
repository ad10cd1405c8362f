"""ReqTrack - API Snapshot Routes

接口响应结构快照：保存时与上一次快照对比，检测破坏性变更。
"""
import json
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from reqtrack.database.config import get_db
from reqtrack.database.models import ApiSnapshot
from reqtrack.governance import detect_api_changes
from reqtrack.models.snapshot_schemas import (
    ApiSnapshotCompareResponse,
    ApiSnapshotCreate,
    ApiSnapshotSaveResponse,
)
from reqtrack.services import metrics_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api-snapshots", tags=["api-snapshots"])


@router.post("", response_model=ApiSnapshotSaveResponse, response_model_exclude_none=True)
def save_snapshot(
    req: ApiSnapshotCreate,
    db: Session = Depends(get_db)
):
    """保存快照（与上一次快照对比）"""
    previous = metrics_service.latest_snapshots(db, req.endpoint, 1)

    snapshot = ApiSnapshot(
        endpoint=req.endpoint,
        response_structure=json.dumps(req.response_structure),
    )
    db.add(snapshot)
    db.commit()
    db.refresh(snapshot)

    if previous:
        changes = detect_api_changes(
            json.loads(previous[0].response_structure),
            req.response_structure,
        )
        if changes.has_breaking_changes:
            logger.warning(
                f"Breaking changes on {req.endpoint}: removed={changes.removed_fields}"
            )
            return ApiSnapshotSaveResponse(
                id=snapshot.id,
                warning="Breaking changes detected",
                changes=changes,
            )

    return ApiSnapshotSaveResponse(id=snapshot.id, message="API snapshot saved")


@router.get(
    "/{endpoint:path}/compare",
    response_model=ApiSnapshotCompareResponse,
    response_model_exclude_none=True,
)
def compare_snapshots(
    endpoint: str,
    db: Session = Depends(get_db)
):
    """对比最近两次快照"""
    snapshots = metrics_service.latest_snapshots(db, endpoint, 2)
    if len(snapshots) < 2:
        return ApiSnapshotCompareResponse(message="Not enough snapshots to compare")

    current = json.loads(snapshots[0].response_structure)
    previous = json.loads(snapshots[1].response_structure)
    changes = detect_api_changes(previous, current)

    return ApiSnapshotCompareResponse(
        has_changes=changes.has_breaking_changes,
        changes=changes,
    )
