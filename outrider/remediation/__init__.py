"""
Automatic fixes for whitespace findings.
"""

from outrider.remediation.engine import RemediationEngine, FixResult, RemediationPlan
from outrider.remediation.fixers import (
    BaseFixer,
    fix_description,
    fixable_rules,
    get_fixer,
    is_fixable,
    register_fixer,
)

__all__ = [
    "RemediationEngine",
    "FixResult",
    "RemediationPlan",
    "BaseFixer",
    "fix_description",
    "fixable_rules",
    "get_fixer",
    "is_fixable",
    "register_fixer",
]
