#!/usr/bin/env python3
"""Build the schema overview of SPARQL endpoints and export it as JSON.

Usage:
    python scripts/export_overview.py https://sparql.uniprot.org/sparql/
    python scripts/export_overview.py ENDPOINT1,ENDPOINT2 --metadata -o overview.json
    python scripts/export_overview.py ENDPOINT --legacy --no-layout

Options:
    --metadata    Also include ontology/SHACL/VoID metadata classes
    --legacy      Single-select overview with straight parallel edges
    --no-layout   Keep the initial cluster positions (skip the spring layout)
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from schemamap.graph.layout import SpringLayout
from schemamap.overview import NoEndpointError, SchemaOverview

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def format_summary(overview: SchemaOverview) -> str:
    """Format the build outcome as human-readable text."""
    report = overview.last_report
    lines = ["=== Schema Overview ===", ""]
    for info in overview.endpoints.values():
        status = f"{len(info.rows)} rows" if info.rows is not None else f"failed ({info.error})"
        lines.append(f"  {info.url}: {status}")
    if report is None:
        return "\n".join(lines)

    lines.extend([
        "",
        f"  Classes: {report.node_count}",
        f"  Predicates: {report.edge_count}",
        f"  Clusters: {report.cluster_count}",
        "",
        "  Clusters:",
    ])
    for cluster in overview.graph.cluster_filter_items():
        lines.append(f"    {cluster.label}: {cluster.member_count}")
    lines.extend(["", "  Top predicates:"])
    for usage in overview.graph.predicate_filter_items()[:10]:
        lines.append(f"    {usage.label}: {usage.count}")
    return "\n".join(lines)


async def main() -> int:
    parser = argparse.ArgumentParser(description="Export a SPARQL schema overview")
    parser.add_argument("endpoints", help="Comma separated SPARQL endpoint URLs")
    parser.add_argument("-o", "--output", type=Path, help="Output JSON file (default: stdout)")
    parser.add_argument("--metadata", action="store_true", help="Include metadata classes")
    parser.add_argument("--legacy", action="store_true", help="Single-select, straight edges")
    parser.add_argument("--no-layout", action="store_true", help="Skip the spring layout")
    args = parser.parse_args()

    try:
        overview = SchemaOverview(
            endpoints=args.endpoints,
            show_metadata=args.metadata,
            rich=not args.legacy,
            layout=None if args.no_layout else SpringLayout(),
        )
    except NoEndpointError as e:
        logger.error(str(e))
        return 2

    try:
        report = await overview.load()
    finally:
        await overview.client.close()

    print(format_summary(overview), file=sys.stderr)
    if report is None or not report.usable:
        logger.warning("No usable data, nothing exported")
        return 1

    payload = json.dumps(overview.snapshot(), indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(payload, encoding="utf-8")
        logger.info(f"Wrote {args.output}")
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
