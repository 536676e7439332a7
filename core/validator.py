#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
PromptValidator - platform rule checking for structured prompts.

Rules are applied in a fixed order. Each rule may escalate the verdict
status but never lowers it:

1. Length: content longer than the platform maximum -> warning.
2. Forbidden phrases: case-insensitive substring hit -> error (terminal).
3. Required elements: each missing element -> warning.
4. Inline parameters (`name:value` tokens): violations of known parameter
   constraints -> warning. Parameter issues are advisory only. Multi-word
   allowed values are matched in underscore form (`sampler:Euler_a`).

Usage:
    from core.validator import PromptValidator
    from core.types import PlatformId

    verdict = PromptValidator().validate(prompt, PlatformId.MIDJOURNEY)
    print(verdict.status, verdict.summary_message)

Classes:
    PromptValidator: Rule engine driven by core.rule_tables.
"""

import re
from typing import List, Optional, Tuple, Union

from config.logging_config import get_logger

from .rule_tables import ParameterConstraint, PlatformProfile, get_platform_profile
from .types import PlatformId, StructuredPrompt, ValidationStatus, ValidationVerdict

logger = get_logger(__name__)

PARAMETER_RE = re.compile(r"\b([a-z0-9_]+):(\S+)", re.IGNORECASE)


class _VerdictBuilder:
    """Accumulates messages while keeping the status monotonic"""

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.status = ValidationStatus.VALID
        self.warnings: List[str] = []
        self.errors: List[str] = []

    def warn(self, message: str, strict_applies: bool = False):
        if self.strict and strict_applies:
            self.error(message)
            return
        self.warnings.append(message)
        self.status = self.status.escalate(ValidationStatus.WARNING)

    def error(self, message: str):
        self.errors.append(message)
        self.status = self.status.escalate(ValidationStatus.ERROR)

    def build(self, platform: PlatformId) -> ValidationVerdict:
        return ValidationVerdict(
            status=self.status,
            warnings=tuple(self.warnings),
            errors=tuple(self.errors),
            summary_message=summarize(self.status, len(self.warnings), len(self.errors), platform),
        )


def summarize(status: ValidationStatus, warning_count: int, error_count: int,
              platform: Union[str, PlatformId]) -> str:
    """Deterministic summary line for a verdict."""
    name = platform.value if isinstance(platform, PlatformId) else platform
    if status is ValidationStatus.ERROR:
        return f"Prompt validation failed with {error_count} errors for {name}"
    if status is ValidationStatus.WARNING:
        return f"Prompt validated with {warning_count} warnings for {name}"
    return f"Prompt successfully validated for {name}"


class PromptValidator:
    """
    Validates prompts against platform profiles.

    Args:
        strict_validation: Report length and required-element findings as
            errors instead of warnings.
    """

    def __init__(self, strict_validation: bool = False):
        self.strict_validation = strict_validation

    def validate(
        self,
        prompt: StructuredPrompt,
        platform: Union[str, PlatformId, None],
    ) -> ValidationVerdict:
        """
        Validate one prompt. Unknown platforms use the custom profile.

        Returns:
            ValidationVerdict; an ``error`` status is a result, not an exception.
        """
        profile = get_platform_profile(platform)
        content = prompt.content or ""
        verdict = _VerdictBuilder(strict=self.strict_validation)

        self._check_length(content, profile, verdict)
        self._check_forbidden(content, profile, verdict)
        self._check_required(content, profile, verdict)
        self._check_parameters(content, profile, verdict)

        result = verdict.build(profile.id)
        logger.debug(
            f"Validated prompt for {profile.id.value}: {result.status.value} "
            f"({len(result.warnings)} warnings, {len(result.errors)} errors)"
        )
        return result

    # ==================== RULES ====================

    def _check_length(self, content: str, profile: PlatformProfile, verdict: _VerdictBuilder):
        if len(content) > profile.max_content_length:
            verdict.warn(
                f"Prompt exceeds maximum length of {profile.max_content_length} characters",
                strict_applies=True,
            )

    def _check_forbidden(self, content: str, profile: PlatformProfile, verdict: _VerdictBuilder):
        lowered = content.lower()
        for phrase in profile.forbidden_phrases:
            if phrase.lower() in lowered:
                verdict.error(f'Prompt contains forbidden content: "{phrase}"')

    def _check_required(self, content: str, profile: PlatformProfile, verdict: _VerdictBuilder):
        lowered = content.lower()
        for element in profile.required_elements:
            if element.lower() not in lowered:
                verdict.warn(
                    f'Prompt may be missing required element: "{element}"',
                    strict_applies=True,
                )

    def _check_parameters(self, content: str, profile: PlatformProfile, verdict: _VerdictBuilder):
        if not profile.parameter_constraints or ":" not in content:
            return

        for match in PARAMETER_RE.finditer(content):
            name = match.group(1).lower()
            constraint = profile.parameter_constraints.get(name)
            if constraint is None:
                continue
            for message in check_parameter(name, match.group(2), constraint):
                verdict.warn(message)


def check_parameter(name: str, value: str, constraint: ParameterConstraint) -> List[str]:
    """Constraint violations of one `name:value` token (empty list when valid)."""
    problems = []

    if constraint.pattern is not None and not constraint.pattern.match(value):
        expected = ", ".join(constraint.examples) or constraint.pattern.pattern
        problems.append(f'Parameter "{name}" has invalid format. Expected format: {expected}')

    if constraint.numeric_range is not None:
        number = _to_number(value)
        low, high = constraint.numeric_range
        if number is None or number < low or number > high:
            problems.append(
                f'Parameter "{name}" is out of range. Expected range: {_fmt(low)} to {_fmt(high)}'
            )

    if constraint.allowed_values:
        allowed = {_token_form(v) for v in constraint.allowed_values}
        if _token_form(value) not in allowed:
            problems.append(
                f'Parameter "{name}" has invalid value. '
                f'Valid values: {", ".join(constraint.allowed_values)}'
            )

    return problems


def _token_form(value: str) -> str:
    # tokens cannot hold spaces, multi-word values are written with underscores
    return value.replace(" ", "_").lower()


def _to_number(value: str) -> Optional[float]:
    try:
        return float(value)
    except ValueError:
        return None


def _fmt(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else str(number)
