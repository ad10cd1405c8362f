"""ReqTrack - Governance Layer

发布治理：基于测试结果与变更记录的派生指标。

核心组件：
- risk: 风险等级（失败率）
- flakiness: 不稳定测试判定
- gate: 发布检查清单
- snapshot_diff: 接口结构破坏性变更检测
- policy_loader: 风险策略配置加载
"""

from reqtrack.governance.flakiness import (
    FlakinessResult,
    classify_flakiness,
)
from reqtrack.governance.gate import (
    ChecklistItems,
    ReleaseChecklist,
    evaluate_release,
)
from reqtrack.governance.policy_loader import (
    RiskPolicy,
    get_policy,
    load_policy,
    clear_policy_cache,
)
from reqtrack.governance.risk import (
    RiskAssessment,
    assess_risk,
    calculate_risk_level,
    get_recommendation,
)
from reqtrack.governance.snapshot_diff import (
    ApiChanges,
    detect_api_changes,
)

__all__ = [
    # Flakiness
    "FlakinessResult",
    "classify_flakiness",
    # Release gate
    "ChecklistItems",
    "ReleaseChecklist",
    "evaluate_release",
    # Policy
    "RiskPolicy",
    "get_policy",
    "load_policy",
    "clear_policy_cache",
    # Risk
    "RiskAssessment",
    "assess_risk",
    "calculate_risk_level",
    "get_recommendation",
    # Snapshot diff
    "ApiChanges",
    "detect_api_changes",
]
