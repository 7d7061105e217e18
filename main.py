# main.py
import argparse
import json
import sys

from taxi_sim.app.build import build
from taxi_sim.io.config import load_scenario
from taxi_sim.io.recorder import MemorySink


def run(scenario: str, *, until_s: float | None = None, quiet: bool = False) -> dict:
    model = load_scenario(scenario)
    app = build(model, use_logging=not quiet, sinks=[MemorySink()] if quiet else None)
    if not app.ctx.network.nodes:
        raise SystemExit(f"{scenario}: scenario has no nodes")
    app.run(None if until_s is None else until_s * 1000.0)
    return app.summary()


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Run one taxi delivery shift headless.")
    p.add_argument("scenario", help="scenario JSON file")
    p.add_argument("--until", type=float, default=None, help="stop after this many seconds")
    p.add_argument("--quiet", action="store_true", help="no JSON logs, summary only")
    args = p.parse_args(argv)

    summary = run(args.scenario, until_s=args.until, quiet=args.quiet)
    json.dump(summary, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
