"""ReqTrack - Risk Policy Loader

加载和验证风险策略配置文件 (risk_policy.yaml)。

Features:
- Pydantic schema 验证
- YAML 加载
- 默认值回退
- 环境变量路径覆盖
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

logger = logging.getLogger(__name__)

# 默认策略文件路径（相对于此模块）
DEFAULT_POLICY_PATH = Path(__file__).parent / "risk_policy.yaml"

# 环境变量覆盖
ENV_POLICY_PATH = "RT_POLICY_PATH"

UNKNOWN_RISK_RECOMMENDATION = "Unable to assess risk."


class RiskThresholds(BaseModel):
    """失败率阈值（严格大于）"""
    high: float = Field(default=0.3, ge=0, le=1, description="高风险失败率下限（不含）")
    medium: float = Field(default=0.1, ge=0, le=1, description="中风险失败率下限（不含）")

    @model_validator(mode="after")
    def _check_order(self) -> "RiskThresholds":
        if self.high < self.medium:
            raise ValueError("risk_thresholds.high must be >= risk_thresholds.medium")
        return self


class FlakinessRule(BaseModel):
    """不稳定测试判定规则"""
    window: int = Field(default=5, ge=1, description="参与判定的最近结果数")
    min_history: int = Field(default=2, ge=1, description="少于此数量直接判定为数据不足")
    min_runs: int = Field(default=3, ge=1, description="判定为 flaky 的最少结果数")

    @model_validator(mode="after")
    def _check_counts(self) -> "FlakinessRule":
        if self.min_runs < self.min_history:
            raise ValueError("flakiness.min_runs must be >= flakiness.min_history")
        if self.window < self.min_runs:
            raise ValueError("flakiness.window must be >= flakiness.min_runs")
        return self


class ReleaseRule(BaseModel):
    """发布检查规则"""
    recent_change_days: int = Field(default=7, ge=1, description="近期变更窗口（天）")
    new_feature_statuses: list[str] = Field(
        default_factory=lambda: ["new", "draft"],
        description="视为新功能的需求状态"
    )


class Recommendations(BaseModel):
    """各风险等级的建议文案（未配置的等级保留默认文案）"""
    high: str = "Do not release. High risk of failure. Review and fix failing tests."
    medium: str = (
        "Release with caution. Some tests are failing. Monitor closely after release."
    )
    low: str = "Safe to release. Test coverage is good and failure rate is low."


class RiskPolicy(BaseModel):
    """风险策略主模型"""
    version: str = Field(default="1.0", description="配置版本")
    risk_thresholds: RiskThresholds = Field(
        default_factory=RiskThresholds,
        description="失败率阈值"
    )
    recommendations: Recommendations = Field(
        default_factory=Recommendations,
        description="各风险等级的建议文案"
    )
    flakiness: FlakinessRule = Field(
        default_factory=FlakinessRule,
        description="不稳定测试判定规则"
    )
    release: ReleaseRule = Field(
        default_factory=ReleaseRule,
        description="发布检查规则"
    )


def load_policy(path: Optional[Path] = None) -> RiskPolicy:
    """加载策略配置

    优先级:
    1. 显式传入的 path
    2. 环境变量 RT_POLICY_PATH
    3. 默认路径 (governance/risk_policy.yaml)
    4. 内置默认值

    Args:
        path: 策略文件路径（可选）

    Returns:
        RiskPolicy: 策略配置对象
    """
    if path is None:
        env_path = os.environ.get(ENV_POLICY_PATH)
        path = Path(env_path) if env_path else DEFAULT_POLICY_PATH

    if not path.exists():
        logger.info(f"Policy file not found at {path}, using defaults")
        return RiskPolicy()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        policy = RiskPolicy.model_validate(data or {})
    except (yaml.YAMLError, ValidationError, OSError) as e:
        logger.warning(f"Failed to load policy from {path}: {e}, using defaults")
        return RiskPolicy()

    logger.info(f"Policy loaded from {path}")
    return policy


def get_default_policy() -> RiskPolicy:
    """获取默认策略（不加载文件）

    用于测试或需要纯默认值的场景。
    """
    return RiskPolicy()


# 全局缓存
_cached_policy: Optional[RiskPolicy] = None


def get_policy(force_reload: bool = False) -> RiskPolicy:
    """获取策略配置（带缓存）"""
    global _cached_policy
    if _cached_policy is None or force_reload:
        _cached_policy = load_policy()
    return _cached_policy


def clear_policy_cache() -> None:
    """清除策略缓存（用于测试）"""
    global _cached_policy
    _cached_policy = None
