"""ReqTrack - Release Gate (发布检查)

基于失败测试数、近期代码变更数与需求状态生成发布检查清单。

规则：
1. 无失败测试且无近期变更 → low
2. 有失败测试 → high
3. 仅有近期变更 → medium
需求是否为新功能只体现在清单中，不影响风险等级。
建议文案只区分 low 与非 low。
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from reqtrack.database.models import RiskLevel
from reqtrack.governance.policy_loader import RiskPolicy, get_policy

logger = logging.getLogger(__name__)

ACCEPTABLE = "This release is acceptable"
RISKY = "This release is risky"


class ChecklistItems(BaseModel):
    """检查项（True 表示该项通过）"""
    model_config = ConfigDict(extra="forbid")

    no_failed_tests: bool
    no_recent_changes: bool
    not_new_feature: bool


class ReleaseChecklist(BaseModel):
    """发布检查结果"""
    model_config = ConfigDict(extra="forbid")

    checklist: ChecklistItems
    risk_level: RiskLevel
    recommendation: str


def evaluate_release(
    failed_count: int,
    recent_change_count: int,
    status: str | None,
    policy: RiskPolicy | None = None,
) -> ReleaseChecklist:
    """评估发布检查清单

    Args:
        failed_count: 失败测试数
        recent_change_count: 近期窗口内的代码变更数
        status: 需求状态
        policy: 策略配置（可选，默认从文件加载）
    """
    if policy is None:
        policy = get_policy()

    has_failed_tests = failed_count > 0
    has_recent_changes = recent_change_count > 0
    is_new_feature = status in policy.release.new_feature_statuses

    if not has_failed_tests and not has_recent_changes:
        risk_level = RiskLevel.LOW
    elif has_failed_tests:
        risk_level = RiskLevel.HIGH
    else:
        risk_level = RiskLevel.MEDIUM

    logger.debug(
        f"Release gate: failed={failed_count} changes={recent_change_count} "
        f"status={status} -> {risk_level.value}"
    )

    return ReleaseChecklist(
        checklist=ChecklistItems(
            no_failed_tests=not has_failed_tests,
            no_recent_changes=not has_recent_changes,
            not_new_feature=not is_new_feature,
        ),
        risk_level=risk_level,
        recommendation=ACCEPTABLE if risk_level == RiskLevel.LOW else RISKY,
    )
