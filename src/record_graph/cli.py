"""
Command-line interface for Record Graph
"""
import argparse
import json
import logging
import os
import sys

from . import __version__
from .config import Settings
from .exceptions import RecordGraphError
from .graph import build_graph
from .inference import table_entries
from .layout import run_layout
from .page import DEFAULT_TITLE, render_visualizer_html
from .render import render_svg
from .viewport import ViewState
from .wizard import SetupWizard
from .xanoscript import graph_data_script, visualizer_script


def setup_logging(verbose=False):
    """Console logging; WARNING by default, DEBUG with --verbose."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    # requests/urllib3 are noisy at DEBUG
    logging.getLogger('urllib3').setLevel(logging.INFO if verbose else logging.WARNING)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="record-graph",
        description="Record Graph - Interactive record graph visualizer for Xano workspaces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  record-graph setup                              # Connect, choose tables, deploy
  record-graph build graph-data.json              # Offline interactive page
  record-graph build graph-data.json --format svg # Static snapshot
  record-graph export --tables users,orders       # XanoScript for manual deploy
  record-graph init                               # Write example graph-data.json

Environment: XANO_BASE_URL, XANO_API_KEY, XANO_RATE_LIMIT, XANO_API_GROUP,
XANO_PER_PAGE (a .env file in the working directory is read too).
        """
    )

    parser.add_argument(
        "command",
        choices=["setup", "build", "export", "init"],
        help="Command to execute"
    )

    parser.add_argument(
        "data",
        nargs="?",
        help="graph-data JSON file (build, export)"
    )

    parser.add_argument("--base-url", help="Xano instance URL (default: $XANO_BASE_URL)")
    parser.add_argument("--api-key", help="Metadata API key (default: $XANO_API_KEY)")
    parser.add_argument("--rate-limit", type=float, help="Seconds to wait before each API call")
    parser.add_argument("--api-group", help="API group to deploy into (default: Visualizer)")

    parser.add_argument(
        "--output",
        help="Output file (build) or directory (export, init)"
    )

    parser.add_argument(
        "--format",
        choices=["html", "svg"],
        default="html",
        help="build output: interactive page or static snapshot (default: html)"
    )

    parser.add_argument("--width", type=int, default=1440, help="Snapshot width (default: 1440)")
    parser.add_argument("--height", type=int, default=900, help="Snapshot height (default: 900)")
    parser.add_argument("--title", default=DEFAULT_TITLE, help="Page title")
    parser.add_argument("--tables", help="Comma-separated table names (export)")

    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    commands = {
        "setup": run_setup,
        "build": build_output,
        "export": export_scripts,
        "init": init_project,
    }

    try:
        commands[args.command](args)
    except RecordGraphError as e:
        print(f"\n❌ Error: {e}")
        sys.exit(1)
    except (OSError, ValueError) as e:
        print(f"\n❌ Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nAborted.")
        sys.exit(130)


def load_data(path):
    if not path:
        raise RecordGraphError("A graph-data JSON file is required")
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise RecordGraphError(f"{path} must contain a JSON object of tables")
    return data


def run_setup(args):
    """Run the interactive setup wizard"""
    settings = Settings.from_env().override(
        base_url=args.base_url,
        api_key=args.api_key,
        rate_limit=args.rate_limit,
        api_group=args.api_group,
    )
    SetupWizard(settings).run()


def build_output(args):
    """Render a graph-data file to a standalone page or SVG snapshot"""
    print("🔨 Building record graph...")
    data = load_data(args.data)

    if args.format == "svg":
        graph = run_layout(build_graph(data), args.width, args.height)
        state = ViewState(graph, args.width, args.height)
        state.fit_all()
        state.finish_animation()
        content = render_svg(state)
        stats = graph.stats()
        print(f"  {stats['tables']} tables, {stats['records']} records, "
              f"{stats['relationships']} relationships")
    else:
        content = render_visualizer_html(data, title=args.title)

    output_path = args.output or f"record_graph.{args.format}"
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(content)

    print(f"\n✅ Generated: {output_path}")
    print(f"\n🌐 Open in browser: file://{os.path.abspath(output_path)}")


def export_scripts(args):
    """Write the XanoScript for both endpoints for manual deployment"""
    if args.tables:
        tables = [t.strip() for t in args.tables.split(",") if t.strip()]
    else:
        tables = table_entries(load_data(args.data))
    if not tables:
        raise RecordGraphError("No tables to export (use --tables or a graph-data file)")

    per_page = Settings.from_env().per_page
    out_dir = args.output or "."
    os.makedirs(out_dir, exist_ok=True)

    scripts = {
        "graph-data.xs": graph_data_script(tables, per_page),
        "visualizer.xs": visualizer_script(render_visualizer_html(title=args.title)),
    }
    for name, script in scripts.items():
        path = os.path.join(out_dir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(script)
        print(f"  ✓ XanoScript saved to {path}")

    print("\n  To deploy manually:")
    print("    1. Open your Xano workspace")
    print('    2. Go to the "Visualizer" API group (or create one)')
    print("    3. Add a new GET endpoint for each file")
    print("    4. Switch to the XanoScript editor")
    print("    5. Paste the file contents")
    print("    6. Save & publish")


def init_project(args):
    """Write an example graph-data file"""
    print("🚀 Writing example graph data...")
    from .examples import create_example_data
    path = create_example_data(os.path.join(args.output or ".", "graph-data.json"))

    print("\n✨ Done!")
    print("\nNext steps:")
    print(f"  1. Run: record-graph build {path}")
    print("  2. Open record_graph.html in your browser")
    print("  3. Run: record-graph setup  to deploy against a live workspace")


if __name__ == "__main__":
    main()
