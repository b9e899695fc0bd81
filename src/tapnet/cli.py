import argparse
import logging
from collections.abc import Sequence

from pydantic import ValidationError

from tapnet.app.build import build
from tapnet.config.models import NetworkSourceModel, ScenarioModel, load_scenario
from tapnet.domain.errors import TapnetError

logger = logging.getLogger(__name__)


def _scenario_from_args(args: argparse.Namespace) -> ScenarioModel:
    if args.config:
        model = load_scenario(args.config)
        if args.network:
            model = model.model_copy(update={"network": NetworkSourceModel(file=args.network)})
        return model
    return ScenarioModel.model_validate(
        {
            "name": "cli",
            "run_id": args.run_id,
            "network": {"file": args.network},
            "reference": {"x": args.ref_x, "y": args.ref_y},
            "geodesy": {"kind": args.geodesy},
            "sweep": {"start_m": args.start, "end_m": args.end, "step_m": args.step},
            "output": {
                "directory": args.out_dir,
                "prefix": args.prefix,
                "write_tree": args.write_tree,
                "records": args.records,
            },
            "log": {"level": args.log_level.upper()},
        }
    )


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Locate fault positions along a tapped line at a sweep of distances"
    )
    parser.add_argument("network", nargs="?", help="GeoJSON file with the line network")
    parser.add_argument("--config", help="JSON scenario file (overrides the options below)")
    parser.add_argument("--ref-x", type=float, help="Reference longitude / easting")
    parser.add_argument("--ref-y", type=float, help="Reference latitude / northing")
    parser.add_argument("--start", type=float, default=0.0, help="First distance in meters")
    parser.add_argument("--end", type=float, default=1000.0, help="Last distance in meters")
    parser.add_argument("--step", type=float, default=100.0, help="Distance increment in meters")
    parser.add_argument(
        "--geodesy",
        choices=["spherical", "planar"],
        default="spherical",
        help="Distance model (default: spherical, lon/lat degrees)",
    )
    parser.add_argument("--out-dir", default=".", help="Directory for output files")
    parser.add_argument("--prefix", default="fault-locations", help="Output file prefix")
    parser.add_argument(
        "--write-tree",
        action="store_true",
        help="Also write the oriented tree as GeoJSON",
    )
    parser.add_argument("--records", help="Append located points to this JSONL file")
    parser.add_argument("--run-id", default="local", help="Run identifier for logs")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    args = parser.parse_args(argv)

    if not args.config:
        if not args.network:
            parser.error("a network file is required unless --config is given")
        if args.ref_x is None or args.ref_y is None:
            parser.error("--ref-x and --ref-y are required unless --config is given")

    try:
        scenario = _scenario_from_args(args)
    except (ValidationError, OSError, ValueError) as exc:
        parser.error(f"invalid configuration: {exc}")

    try:
        app = build(scenario)
    except (TapnetError, OSError) as exc:
        logger.error("Network rejected: %s", exc)
        raise SystemExit(2) from exc

    result = app.run()
    logger.info(
        "Located points at %d of %d distance(s)", len(result.non_empty), len(result.located)
    )


if __name__ == "__main__":
    main()
