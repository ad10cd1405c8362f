"""ReqTrack - Code Change API Routes

代码变更记录 API 路由
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from reqtrack.database.config import get_db
from reqtrack.database.models import CodeChange, Requirement
from reqtrack.models.code_change_schemas import CodeChangeCreate, CodeChangeCreateResponse
from reqtrack.services.impact_service import analyze_impact

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/code-changes", tags=["code-changes"])


@router.post("", response_model=CodeChangeCreateResponse)
def create_code_change(
    req: CodeChangeCreate,
    db: Session = Depends(get_db)
):
    """记录代码变更并返回影响分析"""
    if not db.query(Requirement).filter(Requirement.id == req.requirement_id).first():
        raise HTTPException(status_code=404, detail="Requirement not found")

    change = CodeChange(
        requirement_id=req.requirement_id,
        file_path=req.file_path,
        change_type=req.change_type,
        description=req.description,
        commit_hash=req.commit_hash,
    )
    db.add(change)
    db.commit()
    db.refresh(change)
    logger.info(f"代码变更已记录: id={change.id} requirement_id={req.requirement_id}")

    impact = analyze_impact(req.requirement_id, req.file_path, req.change_type)
    return CodeChangeCreateResponse(id=change.id, impact=impact)
