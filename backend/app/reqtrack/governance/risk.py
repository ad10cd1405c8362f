"""ReqTrack - Risk Scorer

根据测试总数与失败数计算需求的风险等级。

规则：
1. 无测试 → high
2. 失败率 > high 阈值 → high
3. 失败率 > medium 阈值 → medium
4. 其他 → low
阈值为严格边界：失败率恰好等于阈值时不升级。
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from reqtrack.database.models import RiskLevel
from reqtrack.governance.policy_loader import (
    UNKNOWN_RISK_RECOMMENDATION,
    RiskPolicy,
    get_policy,
)


class RiskAssessment(BaseModel):
    """风险评估结果"""
    model_config = ConfigDict(extra="forbid")

    risk_level: RiskLevel
    test_coverage: int
    failed_tests: int
    recommendation: str


def calculate_risk_level(
    total_tests: int,
    failed_tests: int,
    policy: RiskPolicy | None = None,
) -> RiskLevel:
    """计算风险等级

    Args:
        total_tests: 测试总数
        failed_tests: 失败测试数
        policy: 策略配置（可选，默认从文件加载）
    """
    if policy is None:
        policy = get_policy()

    if total_tests == 0:
        return RiskLevel.HIGH

    failure_rate = failed_tests / total_tests
    if failure_rate > policy.risk_thresholds.high:
        return RiskLevel.HIGH
    if failure_rate > policy.risk_thresholds.medium:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def get_recommendation(risk_level: str, policy: RiskPolicy | None = None) -> str:
    """风险等级对应的建议文案"""
    if policy is None:
        policy = get_policy()
    key = risk_level.value if isinstance(risk_level, RiskLevel) else risk_level
    return policy.recommendations.model_dump().get(key, UNKNOWN_RISK_RECOMMENDATION)


def assess_risk(
    total_tests: int,
    failed_tests: int,
    policy: RiskPolicy | None = None,
) -> RiskAssessment:
    """计算风险等级并附带建议"""
    if policy is None:
        policy = get_policy()
    level = calculate_risk_level(total_tests, failed_tests, policy)
    return RiskAssessment(
        risk_level=level,
        test_coverage=total_tests,
        failed_tests=failed_tests,
        recommendation=get_recommendation(level, policy),
    )
