"""ReqTrack - API Snapshot Schemas

接口结构快照相关的 Pydantic 数据模型
"""
from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from reqtrack.governance.snapshot_diff import ApiChanges


class ApiSnapshotCreate(BaseModel):
    """保存快照请求

    response_structure 可以是任意 JSON 值；字符串按 JSON 文本解析。
    """
    endpoint: str = Field(..., min_length=1, max_length=512)
    response_structure: Any = Field(...)

    @field_validator("response_structure", mode="before")
    @classmethod
    def _parse_structure(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return json.loads(value)
            except json.JSONDecodeError as e:
                raise ValueError(f"response_structure is not valid JSON: {e.msg}") from e
        return value


class ApiSnapshotSaveResponse(BaseModel):
    """保存快照响应

    有破坏性变更时返回 warning + changes，否则返回 message。
    """
    id: int
    message: Optional[str] = None
    warning: Optional[str] = None
    changes: Optional[ApiChanges] = None


class ApiSnapshotCompareResponse(BaseModel):
    """快照对比响应"""
    message: Optional[str] = None
    has_changes: Optional[bool] = None
    changes: Optional[ApiChanges] = None
