"""ReqTrack - Code Change Schemas

代码变更记录相关的 Pydantic 数据模型
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from reqtrack.models.requirement_schemas import _serialize_dt


class CodeChangeCreate(BaseModel):
    """记录代码变更请求"""
    requirement_id: int
    file_path: Optional[str] = Field(None, max_length=512)
    change_type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    commit_hash: Optional[str] = Field(None, max_length=64)


class ImpactAnalysis(BaseModel):
    """变更影响分析"""
    affected_tests: list[int] = Field(default_factory=list)
    risk_areas: list[Optional[str]] = Field(default_factory=list)
    recommendation: str


class CodeChangeCreateResponse(BaseModel):
    """记录代码变更响应"""
    id: int
    impact: ImpactAnalysis


class CodeChangeResponse(BaseModel):
    """代码变更响应"""
    id: int
    requirement_id: Optional[int]
    file_path: Optional[str]
    change_type: Optional[str]
    description: Optional[str]
    commit_hash: Optional[str]
    created_at: datetime

    @field_serializer("created_at")
    def serialize_dt(self, dt: datetime | None, _info):
        return _serialize_dt(dt)

    model_config = ConfigDict(from_attributes=True)
