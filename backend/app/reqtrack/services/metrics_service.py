"""ReqTrack - Metrics Service

为派生指标提供聚合查询
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from reqtrack.database.models import (
    ApiSnapshot,
    CodeChange,
    Test,
    TestResult,
    TestResultStatus,
)


def count_tests(db: Session, requirement_id: int) -> int:
    """需求下的测试总数"""
    return db.query(func.count(Test.id)).filter(Test.requirement_id == requirement_id).scalar() or 0


def count_failed_tests(db: Session, requirement_id: int) -> int:
    """需求下至少失败过一次的测试数"""
    return (
        db.query(func.count(distinct(TestResult.test_id)))
        .join(Test, Test.id == TestResult.test_id)
        .filter(
            Test.requirement_id == requirement_id,
            TestResult.status == TestResultStatus.FAILED.value,
        )
        .scalar()
        or 0
    )


def recent_change_cutoff(days: int, now: Optional[datetime] = None) -> datetime:
    """近期窗口起点（相对当前时间）"""
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=days)


def count_recent_changes(
    db: Session,
    requirement_id: int,
    days: int,
    now: Optional[datetime] = None,
) -> int:
    """窗口内的代码变更数"""
    cutoff = recent_change_cutoff(days, now)
    return (
        db.query(func.count(CodeChange.id))
        .filter(
            CodeChange.requirement_id == requirement_id,
            CodeChange.created_at > cutoff,
        )
        .scalar()
        or 0
    )


def recent_statuses(db: Session, test_id: int, limit: int) -> list[str]:
    """最近的执行结果状态，最新在前"""
    rows = (
        db.query(TestResult.status)
        .filter(TestResult.test_id == test_id)
        .order_by(TestResult.created_at.desc(), TestResult.id.desc())
        .limit(limit)
        .all()
    )
    return [row.status for row in rows]


def latest_snapshots(db: Session, endpoint: str, limit: int) -> list[ApiSnapshot]:
    """同一接口最新的快照，最新在前"""
    return (
        db.query(ApiSnapshot)
        .filter(ApiSnapshot.endpoint == endpoint)
        .order_by(ApiSnapshot.created_at.desc(), ApiSnapshot.id.desc())
        .limit(limit)
        .all()
    )
