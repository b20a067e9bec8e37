import pytest

from herdcast.core.risk import (
    RiskDetectionEngine,
    classify_severity,
    dedupe_alerts,
)
from herdcast.data_sources.snapshot import EnvironmentSnapshot
from herdcast.geo.models import Alert, AlertTriggers, DayScenario
from herdcast.utils.config import RiskConfig
from tests.conftest import FixedLayers, make_herd

BOR = (6.25, 31.55)
AKOBO = (7.78, 33.0)
QUIET = (5.75, 30.3)  # far from villages, farms and conflict zones


def triggers(**kwargs):
    base = dict(
        herd_convergence=True, resource_scarcity=False, near_village=False,
        near_farmland=False, historical_conflict=False, event_backed_conflict=False,
    )
    base.update(kwargs)
    return AlertTriggers(**base)


def alert(a, b, level, days, alert_id=None):
    return Alert(
        id=alert_id or f"alert-{a}-{b}-d{days}-{level}",
        herd_ids=(a, b),
        lat=6.5, lng=31.5,
        days_away=days,
        risk_level=level,
        risk_category="resource_tension",
        reason="",
        location="",
        distance_km=1.0,
        triggers=triggers(resource_scarcity=True, near_village=True),
        threshold_profile={},
    )


def test_no_herds_no_alerts(scarce_layers):
    result = RiskDetectionEngine(layers=scarce_layers).detect_risks([], 0, DayScenario())
    assert result.alerts == []
    assert result.risk_zones == []
    assert result.alternative_routes == []
    assert result.suggested_actions == []


def test_distant_herds_never_alert(scarce_layers):
    herds = [make_herd("H1", [BOR, BOR, BOR]), make_herd("H2", [AKOBO, AKOBO, AKOBO])]
    result = RiskDetectionEngine(layers=scarce_layers).detect_risks(herds, 0, DayScenario())
    assert result.alerts == []


def test_colocated_herds_with_scarcity_near_settlement(scarce_layers):
    herds = [make_herd("H1", [BOR, BOR, BOR]), make_herd("H2", [BOR, BOR, BOR])]
    result = RiskDetectionEngine(layers=scarce_layers).detect_risks(herds, 0, DayScenario())

    assert len(result.alerts) == 1
    a = result.alerts[0]
    assert a.risk_level != "low"
    assert a.risk_level == "high"
    assert a.days_away == 1
    assert a.id == "alert-H1-H2-d1"
    assert a.triggers.resource_scarcity and a.triggers.near_village and a.triggers.near_farmland
    assert a.risk_category == "community_protection"
    assert a.location == "Near Bor"
    assert a.reason.startswith("H1 & H2 converging (0km apart)")
    assert "low resource availability" in a.reason
    assert a.threshold_profile == {"region": "bor", "season": "dry"}


def test_each_alert_has_redirect_and_delay(scarce_layers):
    herds = [make_herd("H1", [BOR, BOR, BOR]), make_herd("H2", [BOR, BOR, BOR])]
    a = RiskDetectionEngine(layers=scarce_layers).detect_risks(herds, 0, DayScenario()).alerts[0]

    redirect, delay = a.suggested_actions
    assert redirect.herd_id == "H1" and redirect.type == "redirect"
    assert redirect.impact_estimate == "Lower conflict probability by ~40%"
    assert redirect.direction is not None
    assert redirect.target_lat is not None and redirect.target_lng is not None
    assert delay.herd_id == "H2" and delay.type == "delay"
    assert delay.delay_days == 1
    assert delay.impact_estimate == "Lower conflict probability by ~30%"


def test_plentiful_resources_in_empty_country_do_not_alert(lush_layers):
    herds = [make_herd("H1", [QUIET, QUIET]), make_herd("H2", [QUIET, QUIET])]
    result = RiskDetectionEngine(layers=lush_layers).detect_risks(herds, 0, DayScenario())
    assert result.alerts == []


def test_min_triggers_is_configurable():
    layers = FixedLayers(vegetation=0.1, water=0.1)
    herds = [make_herd("H1", [QUIET, QUIET]), make_herd("H2", [QUIET, QUIET])]
    strict = RiskDetectionEngine(layers=layers).detect_risks(herds, 0, DayScenario())
    loose = RiskDetectionEngine(layers=layers, config=RiskConfig(min_triggers=1)).detect_risks(herds, 0, DayScenario())
    assert strict.alerts == []
    assert len(loose.alerts) == 1
    assert loose.alerts[0].risk_category == "resource_tension"


def test_alerts_capped_and_sorted(scarce_layers):
    herds = [make_herd(f"H{i}", [BOR, BOR, BOR, BOR]) for i in range(1, 6)]
    result = RiskDetectionEngine(layers=scarce_layers).detect_risks(herds, 0, DayScenario())

    assert len(result.alerts) == 6
    keys = [(a.risk_level, a.days_away) for a in result.alerts]
    assert keys == sorted(keys, key=lambda k: ({"high": 0, "medium": 1, "low": 2}[k[0]], k[1]))
    pairs = [a.pair_key for a in result.alerts]
    assert len(pairs) == len(set(pairs))

    kept_ids = {a.id for a in result.alerts}
    assert {z.alert_id for z in result.risk_zones} == kept_ids
    assert all(z.radius_km == 15 for z in result.risk_zones)
    assert all(r.alert_id in kept_ids for r in result.alternative_routes)
    route_keys = [r.key for r in result.alternative_routes]
    action_keys = [a.key for a in result.suggested_actions]
    assert len(route_keys) == len(set(route_keys))
    assert len(action_keys) == len(set(action_keys))


def test_pair_keeps_soonest_alert(scarce_layers):
    herds = [make_herd("H1", [BOR, BOR, BOR, BOR]), make_herd("H2", [BOR, BOR, BOR, BOR])]
    result = RiskDetectionEngine(layers=scarce_layers).detect_risks(herds, 0, DayScenario())
    assert [a.days_away for a in result.alerts] == [1]


def test_dedupe_prefers_severity_then_soonest():
    alerts = [
        alert("A", "B", "low", 1),
        alert("B", "A", "medium", 3),
        alert("A", "B", "medium", 2),
        alert("C", "D", "high", 4),
    ]
    kept = dedupe_alerts(alerts, 6)
    assert [(a.pair_key, a.risk_level, a.days_away) for a in kept] == [
        (("C", "D"), "high", 4),
        (("A", "B"), "medium", 2),
    ]


def test_dedupe_caps_results():
    alerts = [alert(f"A{i}", f"B{i}", "low", i % 3 + 1) for i in range(10)]
    kept = dedupe_alerts(alerts, 6)
    assert len(kept) == 6
    assert [a.days_away for a in kept] == sorted(a.days_away for a in kept)


@pytest.mark.parametrize("dist,count,level", [
    (0, 4, "high"), (10, 3, "high"), (10, 2, "medium"), (17, 3, "medium"), (20, 4, "low"), (34, 2, "low"),
])
def test_classify_severity(dist, count, level):
    assert classify_severity(dist, 35, count) == level


def test_event_backed_history_from_snapshot():
    layers = FixedLayers(vegetation=0.1, water=0.1)
    snapshot = EnvironmentSnapshot.from_records(
        [], conflict_cells=[{"lat": QUIET[0], "lng": QUIET[1], "incidents_per_month": 8}]
    )
    herds = [make_herd("H1", [QUIET, QUIET]), make_herd("H2", [QUIET, QUIET])]
    result = RiskDetectionEngine(layers=layers, snapshot=snapshot).detect_risks(herds, 0, DayScenario())

    assert len(result.alerts) == 1
    t = result.alerts[0].triggers
    assert t.historical_conflict and t.event_backed_conflict
    assert "recent recorded conflict activity" in result.alerts[0].reason


def test_alternative_grazing_prefers_distance_from_hotspot(lush_layers):
    engine = RiskDetectionEngine(layers=lush_layers)
    target = engine.find_alternative_grazing(6.5, 31.5, 6.5, 31.8, DayScenario())
    assert target.direction in ("west", "northwest", "southwest")
    assert target.lng == pytest.approx(31.2)
