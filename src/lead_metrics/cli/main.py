"""Main CLI entry point."""

import argparse
import json
import logging
import os
import sys
import time
from pathlib import Path
from typing import Callable, Optional

import yaml

from lead_metrics.errors import ConfigurationError, LeadMetricsError

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_CONFIG = 2


def configure_logging(level: Optional[str] = None) -> None:
    """Log to stderr; level from --log-level, else LOG_LEVEL, else WARNING."""
    resolved = (level or os.getenv("LOG_LEVEL", "WARNING")).upper()
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lead-metrics",
        description="Team workload and product metrics from an Airtable base",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML (default: $LEAD_METRICS_CONFIG); env vars override it",
    )
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        metavar="JSON_PATH",
        help="Read tables from a local JSON snapshot instead of the API",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="DEBUG, INFO, WARNING (default: $LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # workload
    workload_parser = subparsers.add_parser("workload", help="Leads per employee of a department")
    workload_parser.add_argument(
        "--department",
        type=str,
        default=None,
        help="Department name (default: target_department from settings)",
    )
    workload_parser.add_argument("--json", action="store_true", help="Emit JSON state document")
    workload_parser.add_argument(
        "--watch",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Refresh every N seconds until interrupted",
    )

    # assignments
    assign_parser = subparsers.add_parser("assignments", help="Assigned vs unassigned leads")
    assign_parser.add_argument("--json", action="store_true", help="Emit JSON state document")

    # product
    product_parser = subparsers.add_parser("product", help="Show one product record")
    product_parser.add_argument("record_id", help="Product record id (e.g. recXXXXXXXXXXXXXX)")
    product_parser.add_argument(
        "--image",
        type=int,
        default=0,
        help="Index of the image to show as primary (default: 0)",
    )
    product_parser.add_argument("--json", action="store_true", help="Emit JSON state document")

    # config
    subparsers.add_parser("config", help="Show effective settings (credential masked)")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Parse args and dispatch to subcommands. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    from lead_metrics.config import Settings

    try:
        settings = Settings.load(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: could not load settings: {e}", file=sys.stderr)
        return EXIT_CONFIG

    if args.command == "config":
        print(json.dumps(settings.masked(), indent=2))
        return 0

    handlers = {
        "workload": _run_workload,
        "assignments": _run_assignments,
        "product": _run_product,
    }
    return handlers[args.command](args, settings)


def _connector(args: argparse.Namespace):
    """Snapshot connector when --snapshot is given; None lets pipelines build the API connector."""
    if args.snapshot is None:
        return None
    from lead_metrics.connectors.registry import ConnectorRegistry

    return ConnectorRegistry.get("snapshot", args.snapshot)


def _emit(args: argparse.Namespace, run: Callable[[], object], render: Callable[[object], str]) -> int:
    """Run one pipeline and print its result; errors are stringified only here."""
    from lead_metrics.models.state import DashboardState

    try:
        result = run()
    except LeadMetricsError as e:
        logger.error("%s", e)
        if args.json:
            print(DashboardState.failed(e).model_dump_json(indent=2))
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG if isinstance(e, ConfigurationError) else EXIT_ERROR

    if args.json:
        print(DashboardState.ready(result).model_dump_json(indent=2))
    else:
        print(render(result))
    return 0


def _run_workload(args: argparse.Namespace, settings) -> int:
    """Run workload command, optionally refreshing on an interval."""
    from lead_metrics.pipeline import run_workload

    def run():
        return run_workload(settings, _connector(args), department=args.department)

    if not args.watch:
        return _emit(args, run, _render_workload)

    from lead_metrics.models.state import DashboardState

    code = 0
    try:
        while True:
            if args.json:
                print(DashboardState.loading().model_dump_json(indent=2))
            else:
                print("Refreshing...")
            code = _emit(args, run, _render_workload)
            time.sleep(args.watch)
    except KeyboardInterrupt:
        pass
    return code


def _run_assignments(args: argparse.Namespace, settings) -> int:
    """Run assignments command."""
    from lead_metrics.pipeline import run_assignment_split

    return _emit(
        args,
        lambda: run_assignment_split(settings, _connector(args)),
        _render_assignments,
    )


def _run_product(args: argparse.Namespace, settings) -> int:
    """Run product command. --image selects the primary image without re-fetching."""
    from lead_metrics.models.product import ProductView
    from lead_metrics.pipeline import run_product_detail

    def run():
        product = run_product_detail(settings, args.record_id, _connector(args))
        view = ProductView(product=product)
        if product.images and args.image:
            try:
                view = view.select(args.image)
            except IndexError as e:
                logger.warning("%s; showing first image", e)
        return _product_payload(view)

    return _emit(args, run, _render_product)


def _product_payload(view) -> dict:
    product = view.product
    margin = product.margin_percent
    return {
        "product": product.model_dump(mode="json"),
        "formatted": product.formatted(),
        "margin_percent": str(margin) if margin is not None else None,
        "selected_image": view.selected,
        "main_image_url": view.main_image_url,
    }


def _render_workload(report) -> str:
    """Plain-text workload table."""
    lines = [f"Team workload: {report.department}"]
    if not report.summaries:
        lines.append("  No team data available")
    for s in report.summaries:
        lines.append(f"  {s.display_name}: {s.total} total leads")
        for key, count in s.counts.items():
            lines.append(f"    {key:<10} {count:>4}  ({s.share(key):.1f}%)")
        if s.uncategorized:
            lines.append(f"    {'other':<10} {s.uncategorized:>4}")
    lines.append(f"Leads: {report.lead_count} fetched, {report.unattributed} unattributed")
    return "\n".join(lines)


def _render_assignments(split) -> str:
    return f"Assigned leads: {split.assigned}\nUnassigned leads: {split.unassigned}"


def _render_product(payload: dict) -> str:
    product = payload["product"]
    formatted = payload["formatted"]
    lines = [
        product["name"],
        product.get("description") or "No description available.",
        f"  Product cost:    {formatted['cost_price']}",
        f"  Selling price:   {formatted['selling_price']}",
        f"  Profit per sale: {formatted['profit_per_sale']}",
    ]
    if payload["margin_percent"] is not None:
        lines.append(f"  Margin:          {payload['margin_percent']}%")
    lines.append(f"  Image: {payload['main_image_url']}")
    for i, image in enumerate(product["images"]):
        marker = "*" if i == payload["selected_image"] else " "
        lines.append(f"   {marker} [{i}] {image['url']}")
    return "\n".join(lines)


if __name__ == "__main__":
    sys.exit(main())
