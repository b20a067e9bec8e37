"""Output formatters for scan results."""

import json

from herdcast.geo.models import ScanResult
from herdcast.utils.constants import RISK_LEVELS


class OperatorFormatter:
    """Markdown briefing for field coordinators."""

    def format(self, result: ScanResult) -> str:
        s = result.scenario
        lines = [
            f"**HERD MOVEMENT BRIEFING: {'Risks Detected' if result.assessment.alerts else 'Monitor'}**",
            f"**Run:** {result.run_id} | **Time:** {result.timestamp.strftime('%Y-%m-%d %H:%M')} UTC",
            f"**Day:** {result.day} | **Horizon:** {result.forecast_days} days | "
            f"**Data:** {result.metadata.get('data_mode', 'mock')}",
            "",
            "**SCENARIO:**",
            f"- Rainfall anomaly: {s.rainfall_anomaly:+.2f}",
            f"- Drought severity: {s.drought_severity:.2f}",
            f"- Flood extent: {s.flood_extent:.2f}",
            f"- Seasonal shift: {s.seasonal_shift:+.0f} days",
            "",
            "**HERDS:**",
        ]

        for h in result.herds:
            band = (h.movement_band or "n/a").upper()
            csi = f"{h.csi:.2f}" if h.csi is not None else "n/a"
            lines.append(
                f"- **{h.id}** ({h.lat:.2f}N, {h.lng:.2f}E) | CSI {csi} [{band}] | conf {h.confidence:.0%}"
            )
            if h.decision_reason:
                lines.append(f"   → {h.decision_reason}")
        lines.append("")

        alerts = result.assessment.alerts
        if alerts:
            lines.append("**CONVERGENCE RISKS:**")
            for i, a in enumerate(alerts, 1):
                level = RISK_LEVELS[a.risk_level]["label"]
                lines.append(
                    f"{i}. [{level}] **{a.location}** in {a.days_away}d: {' & '.join(a.herd_ids)}"
                )
                lines.append(f"   → {a.reason}")
                for action in a.suggested_actions:
                    lines.append(f"   **Action:** {action.description} ({action.impact_estimate})")
                lines.append("")
        else:
            lines.append("**No convergence risks in the forecast window.**")
            lines.append("")

        lines.extend([
            "---",
            f"**Summary:** {result.summary}",
            f"*Scan: {result.duration_seconds:.2f}s*",
        ])

        return "\n".join(lines)


class AnalystFormatter:
    """JSON with full details."""

    def format(self, result: ScanResult) -> dict:
        return result.to_dict()

    def to_json(self, result: ScanResult) -> str:
        return json.dumps(self.format(result), indent=2, default=str)


def format_output(result: ScanResult, audience: str = "operator") -> str:
    if audience == "analyst":
        return AnalystFormatter().to_json(result)
    return OperatorFormatter().format(result)
