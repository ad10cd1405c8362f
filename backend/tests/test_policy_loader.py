"""Tests for Risk Policy Loader

验证策略配置的加载、验证和默认值行为。
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from reqtrack.database.models import RiskLevel
from reqtrack.governance.policy_loader import (
    DEFAULT_POLICY_PATH,
    ENV_POLICY_PATH,
    FlakinessRule,
    RiskPolicy,
    RiskThresholds,
    clear_policy_cache,
    get_default_policy,
    get_policy,
    load_policy,
)
from reqtrack.governance.risk import assess_risk, get_recommendation


class TestRiskPolicy:
    """RiskPolicy schema 测试"""

    def test_default_values(self):
        policy = RiskPolicy()
        assert policy.version == "1.0"
        assert policy.risk_thresholds.high == 0.3
        assert policy.risk_thresholds.medium == 0.1
        assert policy.flakiness.window == 5
        assert policy.flakiness.min_history == 2
        assert policy.flakiness.min_runs == 3
        assert policy.release.recent_change_days == 7
        assert policy.release.new_feature_statuses == ["new", "draft"]
        assert set(policy.recommendations.model_dump()) == {"high", "medium", "low"}

    def test_thresholds_must_be_ordered(self):
        with pytest.raises(ValidationError):
            RiskThresholds(high=0.1, medium=0.3)

    def test_min_runs_not_below_min_history(self):
        with pytest.raises(ValidationError):
            FlakinessRule(min_history=3, min_runs=2)

    def test_window_not_below_min_runs(self):
        with pytest.raises(ValidationError):
            FlakinessRule(window=2, min_history=2, min_runs=3)


class TestLoadPolicy:
    """load_policy 函数测试"""

    def test_bundled_file_matches_defaults(self):
        assert DEFAULT_POLICY_PATH.exists()
        assert load_policy(DEFAULT_POLICY_PATH) == get_default_policy()

    def test_load_from_yaml(self, tmp_path: Path):
        path = tmp_path / "policy.yaml"
        path.write_text(
            """
version: "2.0"
risk_thresholds:
  high: 0.5
  medium: 0.2
flakiness:
  window: 8
release:
  recent_change_days: 14
""",
            encoding="utf-8",
        )
        policy = load_policy(path)
        assert policy.version == "2.0"
        assert policy.risk_thresholds.high == 0.5
        assert policy.flakiness.window == 8
        assert policy.flakiness.min_runs == 3
        assert policy.release.recent_change_days == 14

    def test_partial_recommendations_keep_defaults(self, tmp_path: Path):
        """只覆盖一个等级的文案，其余等级保留默认文案"""
        path = tmp_path / "policy.yaml"
        path.write_text("recommendations:\n  high: Stop.\n", encoding="utf-8")
        policy = load_policy(path)
        defaults = get_default_policy().recommendations
        assert policy.recommendations.high == "Stop."
        assert policy.recommendations.medium == defaults.medium
        assert policy.recommendations.low == defaults.low

        result = assess_risk(10, 0, policy)
        assert result.risk_level == RiskLevel.LOW
        assert result.recommendation.startswith("Safe to release.")
        assert get_recommendation("high", policy) == "Stop."

    def test_window_below_min_runs_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "flaky.yaml"
        path.write_text("flakiness:\n  window: 2\n  min_history: 2\n  min_runs: 3\n", encoding="utf-8")
        assert load_policy(path).flakiness == FlakinessRule()

    def test_missing_file_uses_defaults(self, tmp_path: Path):
        assert load_policy(tmp_path / "nope.yaml") == RiskPolicy()

    def test_invalid_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "broken.yaml"
        path.write_text("risk_thresholds: [unclosed", encoding="utf-8")
        assert load_policy(path) == RiskPolicy()

    def test_invalid_values_use_defaults(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("risk_thresholds:\n  high: 0.05\n  medium: 0.5\n", encoding="utf-8")
        assert load_policy(path) == RiskPolicy()

    def test_empty_file_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_policy(path) == RiskPolicy()

    def test_env_path_override(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("version: env\n", encoding="utf-8")
        monkeypatch.setenv(ENV_POLICY_PATH, str(path))
        assert load_policy().version == "env"


class TestPolicyCache:
    """get_policy 缓存测试"""

    def test_cached_instance(self):
        assert get_policy() is get_policy()

    def test_force_reload_and_clear(self, tmp_path: Path, monkeypatch):
        first = get_policy()
        path = tmp_path / "p.yaml"
        path.write_text("version: reloaded\n", encoding="utf-8")
        monkeypatch.setenv(ENV_POLICY_PATH, str(path))
        assert get_policy() is first
        assert get_policy(force_reload=True).version == "reloaded"
        clear_policy_cache()
        assert get_policy().version == "reloaded"
