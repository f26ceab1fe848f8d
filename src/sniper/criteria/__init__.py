"""Acceptance policy -- ordered, short-circuiting rules over token snapshots."""

from sniper.criteria.evaluator import CriteriaEvaluator
from sniper.criteria.rules import EvaluationContext, Rule, build_rules

__all__ = ["CriteriaEvaluator", "EvaluationContext", "Rule", "build_rules"]
