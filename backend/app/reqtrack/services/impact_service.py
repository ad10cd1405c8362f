"""ReqTrack - Impact Service

代码变更影响分析（占位实现，不做真实 diff 分析）
"""
from __future__ import annotations

from typing import Optional

from reqtrack.models.code_change_schemas import ImpactAnalysis

DEFAULT_RECOMMENDATION = "Review related tests"


def analyze_impact(
    requirement_id: Optional[int],
    file_path: Optional[str],
    change_type: Optional[str],
) -> ImpactAnalysis:
    """返回固定结构：变更文件即风险区域"""
    return ImpactAnalysis(
        affected_tests=[],
        risk_areas=[file_path],
        recommendation=DEFAULT_RECOMMENDATION,
    )
