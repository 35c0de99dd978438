# ==============================================
# Match Factor Status
# ==============================================
#
# PURPOSE:
#   Three-tier classification of a (usually averaged) match factor
#   against two nested, inclusive bands from ValidationConfig.
#
# ENUMS:
# ------
# - MatchFactorStatus: CRITICAL, WARNING, OPTIMAL
#
# RULES (applied in order):
# -------------------------
#   RULE 1: outside the warn band                → CRITICAL
#   RULE 2: inside warn but outside optimal band → WARNING
#   RULE 3: inside the optimal band              → OPTIMAL
#
#   Defaults: warn = [0.1, 2.0], optimal = [0.5, 1.5]
#
# CLASSES:
# --------
# - Interpretation (dataclass)
#     Status plus a plain-language message and recommendation for
#     the five operating regions of a match factor.
#
# ==============================================

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from smartzprod.calculation.numeric import round2
from smartzprod.config import ValidationConfig


class MatchFactorStatus(Enum):
    """Status tier of a match factor."""
    CRITICAL = "Critical"
    WARNING = "Warning"
    OPTIMAL = "Optimal"


def classify_match_factor(
    value: float,
    config: Optional[ValidationConfig] = None,
) -> MatchFactorStatus:
    """
    Classify a match factor into Critical / Warning / Optimal.

    Args:
        value: Match factor (typically the average over several records)
        config: Bands to classify against; defaults when omitted

    Returns:
        The MatchFactorStatus tier
    """
    config = config or ValidationConfig()

    if not config.match_factor_warn.contains(value):
        return MatchFactorStatus.CRITICAL
    if not config.match_factor_optimal.contains(value):
        return MatchFactorStatus.WARNING
    return MatchFactorStatus.OPTIMAL


@dataclass(frozen=True)
class Interpretation:
    """What a match factor means for the fleet on the ground."""
    status: MatchFactorStatus
    match_factor: float
    message: str
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "matchFactor": self.match_factor,
            "message": self.message,
            "recommendation": self.recommendation,
        }


def interpret_match_factor(
    value: float,
    config: Optional[ValidationConfig] = None,
) -> Interpretation:
    """
    Explain a match factor in operational terms.

    Below 1.0 the haulers wait on the loader; above 1.0 the loader
    waits on the haulers.

    Args:
        value: Match factor
        config: Bands used for the status tier

    Returns:
        Interpretation with status, message and recommendation
    """
    if value < 0.5:
        message = "Too many haulers (excess capacity)"
        recommendation = "Reduce the number of haulers or reassign them to another excavator"
    elif value <= 1.0:
        message = "Good balance (optimal)"
        recommendation = "Keep the current configuration"
    elif value <= 1.5:
        message = "Slight hauler shortage (still acceptable)"
        recommendation = "Monitor and consider adding a hauler if productivity drops"
    elif value <= 2.0:
        message = "Hauler shortage (excavator waiting)"
        recommendation = "Add haulers to improve efficiency"
    else:
        message = "Severe hauler shortage (critical)"
        recommendation = "Add haulers immediately, the excavator is idle too long"

    return Interpretation(
        status=classify_match_factor(value, config),
        match_factor=round2(value),
        message=message,
        recommendation=recommendation,
    )
