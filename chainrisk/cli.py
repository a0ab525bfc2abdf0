"""
ChainRisk command line interface.

Runs engine queries against a graph dataset (a JSON document with
``nodes`` and ``edges``) and prints the result as JSON on stdout. Logs go
to stderr.

Usage:
    chainrisk stats data/battery.json
    chainrisk trace data/battery.json rm_li_cl --max-depth 6 --threshold 5
    chainrisk trace data/battery.json oem --upstream
    chainrisk paths data/battery.json rm_li_cl oem --max-paths 50
    chainrisk crisis data/battery.json --material lithium
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from chainrisk import __version__
from chainrisk.config import get_settings
from chainrisk.engine import (
    CrisisSession,
    GraphIndex,
    ImpactScorer,
    ImpactTracer,
    PathFinder,
    supply_chain_stats,
)
from chainrisk.models import Graph, TraceOptions
from chainrisk.utils.logging import analysis_context, configure_logging, get_logger

logger = get_logger(__name__)


def load_graph(path: Path) -> Graph:
    """Read and validate a graph dataset."""
    return Graph.model_validate_json(path.read_text(encoding="utf-8"))


def _trace_options(args: argparse.Namespace) -> TraceOptions:
    overrides = {}
    if args.max_depth is not None:
        overrides["max_depth"] = args.max_depth
    if args.threshold is not None:
        overrides["weight_threshold"] = args.threshold
    return TraceOptions.from_settings().model_copy(update=overrides)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def run_stats(index: GraphIndex, args: argparse.Namespace) -> tuple[dict, int]:
    payload = supply_chain_stats(index.graph).model_dump(mode="json")
    payload["skipped_edges"] = [warning.message for warning in index.warnings]
    return payload, 0


def run_trace(index: GraphIndex, args: argparse.Namespace) -> tuple[dict, int]:
    tracer = ImpactTracer()
    options = _trace_options(args)
    if args.upstream:
        result = tracer.trace_upstream(index, args.node_ids[0], options)
    else:
        result = tracer.trace_downstream(index, args.node_ids, options)

    payload = {
        "direction": "upstream" if args.upstream else "downstream",
        "affected_nodes": sorted(result.affected_nodes),
        "affected_edges": sorted(result.affected_edges),
        "depth": result.depth,
        "critical_paths": result.critical_paths,
        "total_impact": round(result.total_impact, 4),
        "impact_by_tier": ImpactScorer().breakdown(index, result.affected_nodes),
    }
    return payload, 0 if result.affected_nodes else 1


def run_paths(index: GraphIndex, args: argparse.Namespace) -> tuple[dict, int]:
    settings = get_settings()
    finder = PathFinder(
        max_paths=args.max_paths or settings.path_max_paths,
        max_depth=settings.path_max_depth if args.max_depth is None else args.max_depth,
        alternative_count=settings.alternative_path_count,
    )
    highlight = finder.highlight(index, args.source_id, args.target_id)

    payload = highlight.model_dump(mode="json")
    payload["alternatives"] = finder.find_alternative_paths(
        index, args.source_id, args.target_id
    )
    return payload, 0 if highlight.is_active else 1


def run_crisis(index: GraphIndex, args: argparse.Namespace) -> tuple[dict, int]:
    crisis = CrisisSession(index, options=_trace_options(args))
    if args.material:
        session = crisis.start_material(args.material, args.label)
    else:
        session = crisis.start(args.source, args.label or f"{args.source}_disruption")

    payload = {
        "status": session.status.value,
        "label": session.label,
        "source_ids": list(session.source_ids),
        **session.impact_stats(),
        "affected_node_ids": sorted(session.affected_node_ids),
    }
    return payload, 0 if session.is_active else 1


COMMANDS = {
    "stats": run_stats,
    "trace": run_trace,
    "paths": run_paths,
    "crisis": run_crisis,
}


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chainrisk",
        description="Supply chain impact and path analysis.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Results are printed as JSON; exit code 1 means nothing was found.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL (e.g. debug).")
    subparsers = parser.add_subparsers(dest="command", required=True)

    stats = subparsers.add_parser("stats", help="Node and edge counts per tier and kind.")
    stats.add_argument("dataset", type=Path)

    trace = subparsers.add_parser("trace", help="Trace disruption impact from nodes.")
    trace.add_argument("dataset", type=Path)
    trace.add_argument("node_ids", nargs="+", help="Source ids (or the target id with --upstream).")
    trace.add_argument("--upstream", action="store_true", help="Trace dependencies of one node.")
    trace.add_argument("--max-depth", type=int, default=None)
    trace.add_argument("--threshold", type=float, default=None, help="Minimum edge weight.")

    paths = subparsers.add_parser("paths", help="Highlight paths between two nodes.")
    paths.add_argument("dataset", type=Path)
    paths.add_argument("source_id")
    paths.add_argument("target_id")
    paths.add_argument("--max-paths", type=int, default=None)
    paths.add_argument("--max-depth", type=int, default=None)

    crisis = subparsers.add_parser("crisis", help="Run a crisis simulation.")
    crisis.add_argument("dataset", type=Path)
    seed = crisis.add_mutually_exclusive_group(required=True)
    seed.add_argument("--source", help="Disrupted node id.")
    seed.add_argument("--material", help="Disrupted raw material (e.g. lithium).")
    crisis.add_argument("--label", default=None)
    crisis.add_argument("--max-depth", type=int, default=None)
    crisis.add_argument("--threshold", type=float, default=None)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    CLI entry point.

    Returns:
        Exit code (0 = result found, 1 = bad dataset or empty result)
    """
    args = build_parser().parse_args(argv)
    configure_logging(log_level=args.log_level, stream=sys.stderr)

    try:
        graph = load_graph(args.dataset)
    except FileNotFoundError:
        print(f"Dataset not found: {args.dataset}", file=sys.stderr)
        return 1
    except ValidationError as exc:
        print(f"Invalid dataset {args.dataset}:\n{exc}", file=sys.stderr)
        return 1

    with analysis_context(command=args.command, dataset=args.dataset.name):
        index = GraphIndex.build(graph)
        payload, exit_code = COMMANDS[args.command](index, args)
        logger.info("cli_command_completed", exit_code=exit_code)

    print(json.dumps(payload, indent=2))
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
