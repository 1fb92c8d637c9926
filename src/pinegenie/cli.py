from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pinegenie.builder.errors import GraphError
from pinegenie.builder.graph import StrategyGraph
from pinegenie.builder.loader import load_strategy_graph
from pinegenie.canonical import dumps
from pinegenie.feedback.config import FeedbackConfig, config_from_env, load_feedback_config
from pinegenie.feedback.errors import FeedbackError
from pinegenie.feedback.report import findings_frame, summarize_findings, write_findings
from pinegenie.feedback.system import FeedbackSystem
from pinegenie.feedback.types import ChangeType, EducationalContext, StrategyChange, UserLevel
from pinegenie.patterns.catalog import DEFAULT_CATALOG
from pinegenie.patterns.errors import PatternCatalogError
from pinegenie.patterns.matcher import PatternMatcher
from pinegenie.patterns.parser import load_pattern_catalog

LOGGER = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pinegenie", description="Strategy feedback tools")
    parser.add_argument("--config", dest="config_path", default=None, help="Feedback config YAML")
    parser.add_argument("--verbose", action="store_true")

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="Validate a strategy graph")
    validate_parser.add_argument("strategy")

    suggest_parser = subparsers.add_parser("suggest", help="Contextual next-step suggestions")
    suggest_parser.add_argument("strategy")
    suggest_parser.add_argument("--node", dest="node_id", default=None)

    practices_parser = subparsers.add_parser("practices", help="Best-practice recommendations")
    practices_parser.add_argument("strategy")

    improve_parser = subparsers.add_parser("improve", help="Improvement suggestions")
    improve_parser.add_argument("strategy")

    analyze_parser = subparsers.add_parser("analyze", help="Whole-strategy analysis")
    analyze_parser.add_argument("strategy")

    impact_parser = subparsers.add_parser("impact", help="Estimate the impact of an edit")
    impact_parser.add_argument("strategy")
    impact_parser.add_argument(
        "--change-type",
        dest="change_type",
        required=True,
        choices=[item.value for item in ChangeType],
    )
    impact_parser.add_argument("--node-id", dest="node_id", default=None)
    impact_parser.add_argument("--edge-id", dest="edge_id", default=None)
    impact_parser.add_argument("--new-value", dest="new_value", default=None)

    tips_parser = subparsers.add_parser("tips", help="Educational tips")
    tips_parser.add_argument("strategy")
    tips_parser.add_argument(
        "--level",
        choices=[item.value for item in UserLevel],
        default=UserLevel.BEGINNER.value,
    )
    tips_parser.add_argument("--focus", default=None)
    tips_parser.add_argument("--node", dest="node_id", default=None)

    match_parser = subparsers.add_parser("match", help="Match a request against strategy patterns")
    match_parser.add_argument("text")
    match_parser.add_argument("--patterns", dest="patterns_path", default=None)
    match_parser.add_argument("--min-confidence", dest="min_confidence", type=float, default=0.3)

    report_parser = subparsers.add_parser("report", help="Export validation findings")
    report_parser.add_argument("strategy")
    report_parser.add_argument("--out", dest="out_path", required=True)

    return parser


def _load_config(config_path: str | None) -> FeedbackConfig:
    if config_path:
        return load_feedback_config(Path(config_path))
    return config_from_env()


def _selected(graph: StrategyGraph, node_id: str | None):
    if node_id is None:
        return None
    node = graph.get_node(node_id)
    if node is None:
        raise GraphError(f"node_not_found:{node_id}")
    return node


def _run(args: argparse.Namespace) -> int:
    if args.command == "match":
        catalog = DEFAULT_CATALOG
        if args.patterns_path:
            catalog = load_pattern_catalog(Path(args.patterns_path))
        matcher = PatternMatcher(catalog=catalog, min_confidence=args.min_confidence)
        print(dumps(matcher.match_text(args.text)))
        return 0

    system = FeedbackSystem(_load_config(args.config_path))
    graph = load_strategy_graph(Path(args.strategy))
    nodes, edges = graph.nodes, graph.edges

    if args.command == "validate":
        feedback = system.validate_strategy(nodes, edges)
        print(dumps(feedback))
        return 0 if feedback.is_valid else 1

    if args.command == "suggest":
        selected = _selected(graph, args.node_id)
        print(dumps(system.get_contextual_suggestions(selected, nodes, edges)))
        return 0

    if args.command == "practices":
        print(dumps(system.get_best_practice_recommendations(nodes, edges)))
        return 0

    if args.command == "improve":
        print(dumps(system.generate_improvements(nodes, edges)))
        return 0

    if args.command == "analyze":
        print(dumps(system.analyze_strategy(nodes, edges)))
        return 0

    if args.command == "impact":
        change = StrategyChange(
            type=args.change_type,
            node_id=args.node_id,
            edge_id=args.edge_id,
            new_value=args.new_value,
        )
        print(dumps(system.analyze_performance_impact(change, nodes, edges)))
        return 0

    if args.command == "tips":
        context = EducationalContext(
            current_nodes=nodes,
            selected_node=_selected(graph, args.node_id),
            user_level=args.level,
            focus_area=args.focus,
        )
        print(dumps(system.get_educational_tips(context)))
        return 0

    if args.command == "report":
        frame = findings_frame(system.validate_strategy(nodes, edges))
        out_path = write_findings(frame, Path(args.out_path))
        print(dumps({"out": str(out_path), "counts": summarize_findings(frame)}))
        return 0

    return 2


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        code = _run(args)
    except (GraphError, PatternCatalogError, FeedbackError) as exc:
        LOGGER.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc
    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
