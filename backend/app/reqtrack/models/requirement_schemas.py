"""ReqTrack - Requirement Schemas

需求管理相关的 Pydantic 数据模型
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


def _serialize_dt(dt: datetime | None):
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat().replace("+00:00", "Z")


# ============================================================
# Request Schemas
# ============================================================

class RequirementCreate(BaseModel):
    """创建需求请求"""
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    user_story: Optional[str] = None
    acceptance_criteria: Optional[str] = Field(None, description="验收标准，每行一条")
    status: str = Field(default="draft", min_length=1, max_length=50)


class RequirementUpdate(BaseModel):
    """更新需求请求"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    user_story: Optional[str] = None
    acceptance_criteria: Optional[str] = None
    status: Optional[str] = Field(None, min_length=1, max_length=50)


# ============================================================
# Response Schemas
# ============================================================

class RequirementResponse(BaseModel):
    """需求响应"""
    id: int
    title: str
    description: Optional[str]
    user_story: Optional[str]
    acceptance_criteria: Optional[str]
    status: str
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_dt(self, dt: datetime | None, _info):
        return _serialize_dt(dt)

    model_config = ConfigDict(from_attributes=True)


class RequirementListResponse(BaseModel):
    """需求列表响应"""
    total: int
    items: list[RequirementResponse]
    page: int
    page_size: int


class ReleaseAssessmentResponse(BaseModel):
    """风险评估记录响应"""
    id: int
    requirement_id: Optional[int]
    risk_level: str
    test_coverage: Optional[float]
    business_impact: Optional[str]
    recommendation: Optional[str]
    created_at: datetime

    @field_serializer("created_at")
    def serialize_dt(self, dt: datetime | None, _info):
        return _serialize_dt(dt)

    model_config = ConfigDict(from_attributes=True)
