"""
Condition/confidence verdict for a VIN analysis.

A coarse 0-100 signal from recall count and service-record presence.
It is not the purchase verdict; the analysis layer folds it into its own
risk score.
"""

from carintel.schemas.analysis import MaintenanceEvent, Recall, Verdict

RECALL_PENALTY = 15
SERVICE_RECORD_BONUS = 10


def recommend(score: int) -> str:
    if score > 75:
        return "GREAT"
    if score > 50:
        return "FAIR"
    return "CAUTION"


def has_service_records(maintenance: list[MaintenanceEvent]) -> bool:
    """True when at least one real (non-sentinel) record was scraped."""
    return any(not event.is_error for event in maintenance)


def generate_verdict(
    recalls: list[Recall],
    maintenance: list[MaintenanceEvent],
    recalls_degraded: bool = False,
) -> Verdict:
    score = 100
    alerts = []

    if recalls:
        score -= len(recalls) * RECALL_PENALTY
        alerts.append(f"{len(recalls)} Open Recalls")
    if recalls_degraded:
        alerts.append("Recall check unavailable")

    if has_service_records(maintenance):
        score += SERVICE_RECORD_BONUS

    score = max(0, min(100, score))
    return Verdict(score=score, alerts=alerts, recommendation=recommend(score))
