"""ReqTrack - Database Models

SQLAlchemy 数据模型定义
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum as PyEnum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)

from reqtrack.database.config import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# 枚举类型
# ============================================================

class RequirementStatus(str, PyEnum):
    """需求状态（常用值，状态字段本身不做限制）"""
    NEW = "new"
    DRAFT = "draft"
    ACTIVE = "active"
    APPROVED = "approved"
    RELEASED = "released"
    ARCHIVED = "archived"


class TestResultStatus(str, PyEnum):
    """测试结果状态"""
    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    ERROR = "error"


class RiskLevel(str, PyEnum):
    """风险等级"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ============================================================
# 数据模型
# ============================================================
# 外键不依赖数据库级联，子记录由 services.requirement_service 按顺序删除

class Requirement(Base):
    """需求模型"""
    __tablename__ = "requirements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    user_story = Column(Text, nullable=True)
    acceptance_criteria = Column(Text, nullable=True)  # 按行分隔的验收标准
    status = Column(String(50), nullable=False, default=RequirementStatus.DRAFT.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)


class Test(Base):
    """测试用例模型"""
    __tablename__ = "tests"
    __test__ = False

    id = Column(Integer, primary_key=True, autoincrement=True)
    requirement_id = Column(Integer, ForeignKey("requirements.id"), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(50), nullable=True)  # functional/negative/acceptance/...
    status = Column(String(50), nullable=False, default="pending")
    ai_generated = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class TestResult(Base):
    """测试执行结果（只追加）"""
    __tablename__ = "test_results"
    __test__ = False

    id = Column(Integer, primary_key=True, autoincrement=True)
    test_id = Column(Integer, ForeignKey("tests.id"), nullable=False, index=True)
    status = Column(String(50), nullable=False)
    log_output = Column(Text, nullable=True)
    error_message = Column(Text, nullable=True)
    execution_time = Column(Integer, nullable=True)  # 毫秒
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class CodeChange(Base):
    """代码变更记录（只追加）"""
    __tablename__ = "code_changes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    requirement_id = Column(Integer, ForeignKey("requirements.id"), nullable=True, index=True)
    file_path = Column(String(512), nullable=True)
    change_type = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    commit_hash = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class ReleaseAssessment(Base):
    """发布风险评估记录"""
    __tablename__ = "release_assessments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    requirement_id = Column(Integer, ForeignKey("requirements.id"), nullable=True, index=True)
    risk_level = Column(String(20), nullable=False)
    test_coverage = Column(Float, nullable=True)
    business_impact = Column(Text, nullable=True)
    recommendation = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class ApiSnapshot(Base):
    """接口响应结构快照（只追加）"""
    __tablename__ = "api_snapshots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    endpoint = Column(String(512), nullable=False, index=True)
    response_structure = Column(Text, nullable=True)  # JSON 序列化
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
