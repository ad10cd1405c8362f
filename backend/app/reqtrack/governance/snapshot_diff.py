"""ReqTrack - Snapshot Diff

对比同一接口前后两次响应结构快照，识别破坏性变更。
只比较顶层字段；删除字段为破坏性变更，新增字段不是。
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApiChanges(BaseModel):
    """结构变更"""
    model_config = ConfigDict(extra="forbid")

    has_breaking_changes: bool = False
    removed_fields: list[str] = Field(default_factory=list)
    added_fields: list[str] = Field(default_factory=list)


def detect_api_changes(previous: Any, current: Any) -> ApiChanges:
    """生成结构 diff

    Args:
        previous: 上一次快照（较旧）
        current: 当前快照（最新）

    Returns:
        结构变更；任一输入不是对象时返回空变更
    """
    removed: list[str] = []
    added: list[str] = []

    if isinstance(previous, dict) and isinstance(current, dict):
        removed = [key for key in previous if key not in current]
        added = [key for key in current if key not in previous]

    return ApiChanges(
        has_breaking_changes=bool(removed),
        removed_fields=removed,
        added_fields=added,
    )
