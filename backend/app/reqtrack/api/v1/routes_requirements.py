"""ReqTrack - Requirement API Routes

需求管理 API 路由
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from reqtrack.database.config import get_db
from reqtrack.database.models import (
    CodeChange,
    ReleaseAssessment,
    Requirement,
    Test,
)
from reqtrack.governance import (
    ReleaseChecklist,
    RiskAssessment,
    assess_risk,
    evaluate_release,
    get_policy,
)
from reqtrack.models.code_change_schemas import CodeChangeResponse
from reqtrack.models.requirement_schemas import (
    ReleaseAssessmentResponse,
    RequirementCreate,
    RequirementListResponse,
    RequirementResponse,
    RequirementUpdate,
)
from reqtrack.models.test_schemas import (
    AffectedTestsResponse,
    GeneratedTest,
    GenerateTestsResponse,
    TestResponse,
)
from reqtrack.services import metrics_service
from reqtrack.services.generation.generator import synthesize_tests
from reqtrack.services.requirement_service import RequirementService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/requirements", tags=["requirements"])


def _get_requirement_or_404(db: Session, requirement_id: int) -> Requirement:
    requirement = db.query(Requirement).filter(Requirement.id == requirement_id).first()
    if not requirement:
        raise HTTPException(status_code=404, detail="Requirement not found")
    return requirement


@router.post("", response_model=RequirementResponse, status_code=201)
def create_requirement(
    req: RequirementCreate,
    db: Session = Depends(get_db)
):
    """创建需求"""
    requirement = Requirement(
        title=req.title,
        description=req.description,
        user_story=req.user_story,
        acceptance_criteria=req.acceptance_criteria,
        status=req.status,
    )
    db.add(requirement)
    db.commit()
    db.refresh(requirement)
    logger.info(f"需求已创建: id={requirement.id}")
    return requirement


@router.get("", response_model=RequirementListResponse)
def list_requirements(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """需求列表（分页、搜索、筛选）"""
    query = db.query(Requirement)

    if status:
        query = query.filter(Requirement.status == status)

    # 搜索（标题、描述或用户故事）
    if search:
        query = query.filter(
            (Requirement.title.contains(search)) |
            (Requirement.description.contains(search)) |
            (Requirement.user_story.contains(search))
        )

    total = query.count()

    offset = (page - 1) * page_size
    items = (
        query.order_by(Requirement.created_at.desc(), Requirement.id.desc())
        .offset(offset)
        .limit(page_size)
        .all()
    )

    return RequirementListResponse(
        total=total,
        items=items,
        page=page,
        page_size=page_size
    )


@router.post("/preview-tests", response_model=list[GeneratedTest])
def preview_tests(req: RequirementCreate):
    """预览推导出的测试（不落库）"""
    return synthesize_tests(req)


@router.get("/{requirement_id}", response_model=RequirementResponse)
def get_requirement(
    requirement_id: int,
    db: Session = Depends(get_db)
):
    """需求详情"""
    return _get_requirement_or_404(db, requirement_id)


@router.put("/{requirement_id}", response_model=RequirementResponse)
def update_requirement(
    requirement_id: int,
    req: RequirementUpdate,
    db: Session = Depends(get_db)
):
    """更新需求"""
    requirement = _get_requirement_or_404(db, requirement_id)

    for field, value in req.model_dump(exclude_unset=True).items():
        if field in ("title", "status") and value is None:
            continue
        setattr(requirement, field, value)

    db.commit()
    db.refresh(requirement)
    return requirement


@router.delete("/{requirement_id}", status_code=204)
def delete_requirement(
    requirement_id: int,
    db: Session = Depends(get_db)
):
    """删除需求（级联删除测试、执行结果、代码变更与评估记录）"""
    if not RequirementService(db).delete_requirement(requirement_id):
        raise HTTPException(status_code=404, detail="Requirement not found")
    return None


@router.get("/{requirement_id}/tests", response_model=list[TestResponse])
def list_requirement_tests(
    requirement_id: int,
    db: Session = Depends(get_db)
):
    """需求下的测试列表"""
    _get_requirement_or_404(db, requirement_id)
    return (
        db.query(Test)
        .filter(Test.requirement_id == requirement_id)
        .order_by(Test.created_at.desc(), Test.id.desc())
        .all()
    )


@router.post("/{requirement_id}/generate-tests", response_model=GenerateTestsResponse)
def generate_tests(
    requirement_id: int,
    db: Session = Depends(get_db)
):
    """根据需求文本重新生成测试"""
    requirement = _get_requirement_or_404(db, requirement_id)
    created = RequirementService(db).regenerate_tests(requirement)
    if not created:
        return GenerateTestsResponse(message="No tests generated", count=0)
    return GenerateTestsResponse(message="Tests generated", count=len(created))


def _assess(db: Session, requirement_id: int) -> tuple[int, RiskAssessment]:
    total = metrics_service.count_tests(db, requirement_id)
    failed = metrics_service.count_failed_tests(db, requirement_id)
    return total, assess_risk(total, failed)


@router.get("/{requirement_id}/risk-assessment", response_model=RiskAssessment)
def risk_assessment(
    requirement_id: int,
    db: Session = Depends(get_db)
):
    """风险评估（只读，不写入评估记录）"""
    _get_requirement_or_404(db, requirement_id)
    _, assessment = _assess(db, requirement_id)
    return assessment


@router.post(
    "/{requirement_id}/assessments",
    response_model=ReleaseAssessmentResponse,
    status_code=201,
)
def record_assessment(
    requirement_id: int,
    db: Session = Depends(get_db)
):
    """执行风险评估并记录结果"""
    _get_requirement_or_404(db, requirement_id)
    total, assessment = _assess(db, requirement_id)

    record = ReleaseAssessment(
        requirement_id=requirement_id,
        risk_level=assessment.risk_level.value,
        test_coverage=float(total),
        recommendation=assessment.recommendation,
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info(f"风险评估已记录: requirement_id={requirement_id} level={record.risk_level}")
    return record


@router.get("/{requirement_id}/assessments", response_model=list[ReleaseAssessmentResponse])
def list_assessments(
    requirement_id: int,
    db: Session = Depends(get_db)
):
    """历史风险评估记录"""
    _get_requirement_or_404(db, requirement_id)
    return (
        db.query(ReleaseAssessment)
        .filter(ReleaseAssessment.requirement_id == requirement_id)
        .order_by(ReleaseAssessment.created_at.desc(), ReleaseAssessment.id.desc())
        .all()
    )


@router.get("/{requirement_id}/release-checklist", response_model=ReleaseChecklist)
def release_checklist(
    requirement_id: int,
    db: Session = Depends(get_db)
):
    """发布检查清单"""
    requirement = _get_requirement_or_404(db, requirement_id)
    policy = get_policy()

    failed = metrics_service.count_failed_tests(db, requirement_id)
    changes = metrics_service.count_recent_changes(
        db, requirement_id, policy.release.recent_change_days
    )
    return evaluate_release(failed, changes, requirement.status, policy)


@router.get("/{requirement_id}/affected-tests", response_model=AffectedTestsResponse)
def affected_tests(
    requirement_id: int,
    db: Session = Depends(get_db)
):
    """近期代码变更影响到的测试"""
    _get_requirement_or_404(db, requirement_id)
    days = get_policy().release.recent_change_days

    if metrics_service.count_recent_changes(db, requirement_id, days) == 0:
        return AffectedTestsResponse(affected_tests=[])

    tests = (
        db.query(Test)
        .filter(Test.requirement_id == requirement_id)
        .order_by(Test.created_at.desc(), Test.id.desc())
        .all()
    )
    return AffectedTestsResponse(affected_tests=tests)


@router.get("/{requirement_id}/code-changes", response_model=list[CodeChangeResponse])
def list_code_changes(
    requirement_id: int,
    db: Session = Depends(get_db)
):
    """需求关联的代码变更"""
    _get_requirement_or_404(db, requirement_id)
    return (
        db.query(CodeChange)
        .filter(CodeChange.requirement_id == requirement_id)
        .order_by(CodeChange.created_at.desc(), CodeChange.id.desc())
        .all()
    )
