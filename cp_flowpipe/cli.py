"""
CP_Flowpipe Command Line Interface.

This module provides a CLI for inspecting and querying flowpipes described in
YAML files (see cp_flowpipe.config).

Usage:
    cp_flowpipe info flowpipe.yaml
    cp_flowpipe query flowpipe.yaml --time 1.0 --interval 0.5 2.5 --shift 10
    cp_flowpipe plot flowpipe.yaml --vars 1 2 --output flowpipe.png
"""

from __future__ import annotations

import argparse
import json
import logging
import sys


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cp_flowpipe",
        description="CP_Flowpipe: query and transform reachability flowpipes",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # info command
    info_parser = subparsers.add_parser(
        "info",
        help="Display flowpipe information",
    )
    info_parser.add_argument(
        "flowpipe",
        help="Path to flowpipe YAML file",
    )

    # query command
    query_parser = subparsers.add_parser(
        "query",
        help="Evaluate time, interval, projection and support function queries",
    )
    query_parser.add_argument(
        "flowpipe",
        help="Path to flowpipe YAML file (may contain a 'query' section)",
    )
    query_parser.add_argument(
        "--query",
        help="Path to a separate query YAML file",
    )
    query_parser.add_argument(
        "--time", "-t",
        type=float,
        help="Time point to look up",
    )
    query_parser.add_argument(
        "--interval",
        type=float,
        nargs=2,
        metavar=("START", "END"),
        help="Time interval to look up",
    )
    query_parser.add_argument(
        "--shift",
        type=float,
        help="Lazy time shift applied before the queries",
    )
    query_parser.add_argument(
        "--vars",
        type=int,
        nargs="+",
        help="Variables to project onto (1-based, 0 = time)",
    )
    query_parser.add_argument(
        "--direction",
        type=float,
        nargs="+",
        help="Direction for the support function",
    )

    # plot command
    plot_parser = subparsers.add_parser(
        "plot",
        help="Plot the projection of a flowpipe onto two variables",
    )
    plot_parser.add_argument(
        "flowpipe",
        help="Path to flowpipe YAML file",
    )
    plot_parser.add_argument(
        "--vars",
        type=int,
        nargs=2,
        default=[1, 2],
        help="Two variables to plot (1-based, 0 = time; default: 1 2)",
    )
    plot_parser.add_argument(
        "--output", "-o",
        default="flowpipe.png",
        help="Output image file (default: flowpipe.png)",
    )

    return parser


def cmd_info(args) -> int:
    """Display flowpipe information."""
    from cp_flowpipe.config import FlowpipeSpec

    try:
        spec = FlowpipeSpec.from_yaml(args.flowpipe)
        fp = spec.build()

        print(f"Flowpipe: {args.flowpipe}")
        print(f"  Type: {type(fp).__name__}")
        print(f"  Reach-sets: {len(fp)}")
        if not fp.is_empty():
            print(f"  Time span: [{fp.tstart}, {fp.tend}]")
            print(f"  Dimension: {fp.dim}")

        if spec.is_hybrid:
            print("\nLocations:")
            for k, F in enumerate(fp.Fk):
                rep = F.setrep.__name__ if F.setrep is not None else "-"
                print(f"  {k}: {len(F)} reach-sets of {rep}")
        elif fp.setrep is not None:
            print(f"  Set representation: {fp.setrep.__name__}")

        if fp.ext:
            print("\nExtension:")
            for key, value in fp.ext.items():
                print(f"  {key}: {value}")

        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ValueError, TypeError) as e:
        print(f"Error loading flowpipe: {e}", file=sys.stderr)
        return 1


def cmd_query(args) -> int:
    """Evaluate queries against a flowpipe."""
    from cp_flowpipe.config import FlowpipeQuery, FlowpipeSpec

    try:
        fp = FlowpipeSpec.from_yaml(args.flowpipe).build()
        query = FlowpipeQuery.from_yaml(args.query or args.flowpipe)

        # command line arguments take precedence over the YAML query section
        overrides = {
            "time": args.time,
            "interval": args.interval,
            "shift": args.shift,
            "vars": args.vars,
            "direction": args.direction,
        }
        data = {k: getattr(query, k) for k in overrides}
        data.update({k: v for k, v in overrides.items() if v is not None})
        query = FlowpipeQuery.from_dict(data)

        result = query.run(fp)
        print(json.dumps(result, indent=2))
        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ValueError, TypeError) as e:
        # DomainError and PreconditionError are ValueErrors
        print(f"Error during query: {e}", file=sys.stderr)
        return 1


def cmd_plot(args) -> int:
    """Plot a flowpipe projection to an image file."""
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    from cp_flowpipe.config import FlowpipeSpec
    from cp_flowpipe.plotting import plot_flowpipe

    try:
        fp = FlowpipeSpec.from_yaml(args.flowpipe).build()
        fig, ax = plt.subplots()
        plot_flowpipe(fp, ax, vars=args.vars)
        fig.savefig(args.output)
        plt.close(fig)
        print(f"Plot saved to: {args.output}")
        return 0

    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ValueError, TypeError) as e:
        print(f"Error during plotting: {e}", file=sys.stderr)
        return 1


def main(argv=None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "info":
        return cmd_info(args)
    elif args.command == "query":
        return cmd_query(args)
    elif args.command == "plot":
        return cmd_plot(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
