"""ReqTrack - Flakiness Classifier

基于最近若干次执行结果判断测试是否不稳定（flaky）。
"""

from __future__ import annotations

from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict

from reqtrack.database.models import TestResultStatus
from reqtrack.governance.policy_loader import RiskPolicy, get_policy

NOT_ENOUGH_RUNS = "Not enough test runs"


class FlakinessResult(BaseModel):
    """Flaky 判定结果

    数据不足时只有 is_flaky 与 reason。
    """
    model_config = ConfigDict(extra="forbid")

    is_flaky: bool
    reason: Optional[str] = None
    pass_count: Optional[int] = None
    fail_count: Optional[int] = None
    total_runs: Optional[int] = None


def classify_flakiness(
    statuses: Sequence[str],
    policy: RiskPolicy | None = None,
) -> FlakinessResult:
    """判定测试是否 flaky

    结果中同时出现 passed 与 failed 即视为不稳定，与比例无关。

    Args:
        statuses: 最近的结果状态，最新在前
        policy: 策略配置（可选，默认从文件加载）
    """
    if policy is None:
        policy = get_policy()
    rule = policy.flakiness

    recent = list(statuses)[: rule.window]
    if len(recent) < rule.min_history:
        return FlakinessResult(is_flaky=False, reason=NOT_ENOUGH_RUNS)

    pass_count = sum(1 for s in recent if s == TestResultStatus.PASSED.value)
    fail_count = sum(1 for s in recent if s == TestResultStatus.FAILED.value)
    is_flaky = pass_count > 0 and fail_count > 0 and len(recent) >= rule.min_runs

    return FlakinessResult(
        is_flaky=is_flaky,
        pass_count=pass_count,
        fail_count=fail_count,
        total_runs=len(recent),
    )
