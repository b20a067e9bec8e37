"""Main entry point for herdcast."""

import json
import sys

from loguru import logger

USAGE = """Usage: python main.py [simulate|risks|report|grid|csi] [day] [forecast_days|step|preset] [options]

Options (scenario modifiers):
  --rainfall=<-1..1>   rainfall anomaly
  --drought=<0..1>     drought severity
  --flood=<0..1>       flood extent
  --shift=<days>       seasonal shift
"""

SCENARIO_OPTIONS = {
    "rainfall": "rainfall_anomaly",
    "drought": "drought_severity",
    "flood": "flood_extent",
    "shift": "seasonal_shift",
}


def parse_args(argv: list) -> tuple:
    """Split argv into positionals and a DayScenario kwargs dict."""
    positionals = []
    scenario = {}
    for arg in argv:
        if arg.startswith("--"):
            key, _, value = arg[2:].partition("=")
            if key not in SCENARIO_OPTIONS or not value:
                raise ValueError(f"Unknown option: {arg}")
            scenario[SCENARIO_OPTIONS[key]] = float(value)
        else:
            positionals.append(arg)
    return positionals, scenario


def main():
    """Run the application."""
    if len(sys.argv) < 2:
        print(USAGE)
        sys.exit(1)

    from herdcast.utils.logger import setup_logging
    setup_logging()

    cmd = sys.argv[1]
    try:
        args, scenario_kwargs = parse_args(sys.argv[2:])
        day = int(args[0]) if args and cmd != "csi" else 0
    except ValueError as e:
        print(f"{e}\n\n{USAGE}")
        sys.exit(1)

    from herdcast.geo.models import DayScenario
    scenario = DayScenario(day=day, **scenario_kwargs)

    if cmd in ("simulate", "risks", "report"):
        from herdcast.core import CorridorScanner, format_output
        forecast_days = int(args[1]) if len(args) > 1 else None
        scanner = CorridorScanner()

        if cmd == "simulate":
            herds = scanner.simulator.simulate(
                day, forecast_days or scanner.settings.simulation.default_forecast_days, scenario
            )
            print(json.dumps([h.to_dict() for h in herds], indent=2))
            return

        result = scanner.execute_scan(day=day, forecast_days=forecast_days, scenario=scenario)
        print(format_output(result, "analyst" if cmd == "report" else "operator"))

    elif cmd == "grid":
        from herdcast.core.grid import generate_environment_grid, summarize_grid
        from herdcast.core.scanner import CorridorScanner
        step = float(args[1]) if len(args) > 1 else 0.3
        scanner = CorridorScanner()
        df = generate_environment_grid(scenario, step=step, provider=scanner.provider)
        print(json.dumps(summarize_grid(df), indent=2))
        print(df.sort_values("csi").head(10).to_string(index=False))

    elif cmd == "csi":
        from herdcast.core.csi import PRESETS, assess
        name = args[0] if args else "balanced"
        if name not in PRESETS:
            print(f"Unknown preset: {name} (choose from {', '.join(PRESETS)})")
            sys.exit(1)
        a = assess(PRESETS[name])
        print(json.dumps({
            "preset": name,
            "measurement": a.measurement.to_dict(),
            "indices": a.indices.to_dict(),
            "csi": round(a.csi, 4),
            "band": a.likelihood.band,
            "path_cost": round(a.cost, 4),
        }, indent=2))

    else:
        logger.error(f"Unknown command: {cmd}")
        print(USAGE)
        sys.exit(1)


if __name__ == "__main__":
    main()
