"""Heat Diffusion Simulator — CLI entry point.

Runs the implicit heat solvers for every configured material side by side
and renders the resulting temperature-rise fields.

Usage
-----
    python main.py --dimension 1d
    python main.py --dimension 2d --nodes 51 --tmax 32
    python main.py --dimension 1d --config config/default_config.yaml --no-plots
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def setup_logging(level: str = "INFO") -> None:
    """Configure structured logging."""
    fmt = "%(name)s [%(levelname)s] %(message)s"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt,
        stream=sys.stdout,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="heatsim",
        description="Implicit 1-D/2-D heat diffusion simulator (material comparison grid)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python main.py --dimension 1d\n"
            "  python main.py --dimension 2d --nodes 51\n"
            "  python main.py --dimension 1d --tmax 32 --source 60\n"
        ),
    )
    parser.add_argument(
        "--dimension",
        choices=["1d", "2d"],
        default="1d",
        help="Simulate the 1-D bar or the 2-D plate (default: 1d)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a config YAML (default: built-in defaults)",
    )
    parser.add_argument("--length", type=float, default=None, help="Domain length L [m]")
    parser.add_argument("--tmax", type=float, default=None, help="Simulated time tmax [s]")
    parser.add_argument("--u0", type=float, default=None, help="Initial temperature [°C]")
    parser.add_argument("--source", type=float, default=None, help="Source amplitude f")
    parser.add_argument(
        "--nodes",
        type=int,
        default=None,
        help="Nodes per axis (default: from config, 1001 in 1-D / 101 in 2-D)",
    )
    parser.add_argument(
        "--materials",
        type=str,
        default=None,
        help="Comma-separated material keys (default: all configured materials)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="output",
        help="Output directory for plots (default: output/)",
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        default=False,
        help="Skip rendering",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main simulation entry point."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    logger = logging.getLogger("heatsim")
    logger.info("=" * 60)
    logger.info("  Heat Diffusion Simulator — %s", args.dimension.upper())
    logger.info("=" * 60)

    from heat_model.constants import (
        default_config,
        load_config,
        log_assumptions,
        log_platform_info,
        override_domain,
    )
    from heat_model.materials import get_material
    from simulation.runner import SimulationRunner

    try:
        config = load_config(args.config) if args.config else default_config()

        config = override_domain(
            config,
            length_m=args.length,
            max_time_s=args.tmax,
            initial_temperature_C=args.u0,
            source_amplitude=args.source,
        )

        materials = None
        if args.materials:
            materials = [
                get_material(key, config.materials) for key in args.materials.split(",") if key.strip()
            ]

        runner = SimulationRunner(config, args.dimension, materials=materials, nodes=args.nodes)
    except (FileNotFoundError, KeyError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    log_platform_info()
    log_assumptions(config)

    results = runner.run()

    saved: list[Path] = []
    if not args.no_plots:
        from visualization.plotter import generate_all_plots

        logger.info("Generating plots → %s/", args.output)
        saved = generate_all_plots(results, output_dir=args.output)

    # Summary
    logger.info("=" * 60)
    logger.info("  SIMULATION COMPLETE")
    logger.info("=" * 60)
    logger.info(
        "  t = %.3f s (%d steps), wall time %.2f s",
        results.times[-1],
        results.metadata["num_steps"],
        results.metadata.get("wall_time_s", 0.0),
    )
    digests = results.metadata.get("field_digests", {})
    for name in results.material_names:
        rise = results.final_rise(name)
        logger.info(
            "  %-12s max ΔT = %.4f K, mean ΔT = %.4f K, sha256=%s",
            name,
            rise.max(),
            rise.mean(),
            digests.get(name, "-")[:16],
        )
    for p in saved:
        logger.info("    → %s", p)
    logger.info("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
