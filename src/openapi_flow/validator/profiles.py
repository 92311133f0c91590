"""Strictness profiles.

A profile decides which checks run and whether their findings fail the run:

=========  ==============  =====================  ==================================
profile    graph checks    graph checks fatal     quality checks
=========  ==============  =====================  ==================================
core       no              n/a                    no
relaxed    yes             no (warnings)          yes (warnings)
strict     yes             yes                    yes, fatal with ``strict_quality``
=========  ==============  =====================  ==================================

Schema failures and orphan states are fatal under every profile.
"""

from __future__ import annotations

from dataclasses import dataclass

from openapi_flow.exceptions import InvalidUsageError
from openapi_flow.models import ValidationProfile


@dataclass(frozen=True)
class ProfileConfig:
    run_advanced: bool
    fail_advanced: bool
    run_quality: bool
    quality_can_fail: bool

    def quality_is_fatal(self, strict_quality: bool) -> bool:
        return self.run_quality and self.quality_can_fail and strict_quality


PROFILES: dict[ValidationProfile, ProfileConfig] = {
    ValidationProfile.CORE: ProfileConfig(
        run_advanced=False, fail_advanced=False, run_quality=False, quality_can_fail=False
    ),
    ValidationProfile.RELAXED: ProfileConfig(
        run_advanced=True, fail_advanced=False, run_quality=True, quality_can_fail=False
    ),
    ValidationProfile.STRICT: ProfileConfig(
        run_advanced=True, fail_advanced=True, run_quality=True, quality_can_fail=True
    ),
}


def parse_profile(value: str | ValidationProfile) -> ValidationProfile:
    """Convert a user-supplied profile name.

    Raises:
        InvalidUsageError: If *value* is not a known profile.
    """
    try:
        return ValidationProfile(value)
    except ValueError:
        names = ", ".join(p.value for p in ValidationProfile)
        raise InvalidUsageError(f"Invalid profile '{value}'. Use {names}.") from None


def get_profile_config(profile: ValidationProfile) -> ProfileConfig:
    return PROFILES[profile]
