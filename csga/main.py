"""
Main application entry point and CLI handling.
"""

import argparse
import os
import sys

from .config import CSGAConfig, GREEN, RED, RESET
from .engine import evaluate_project
from .errors import CSGAError
from .report_generators import (
    format_text_report, generate_html_report, generate_json_report,
    generate_markdown_report, write_report,
)
from .utils import progress, set_quiet
from .workspace_resolver import resolve_project_root

EXIT_OK = 0
EXIT_BELOW_THRESHOLD = 1
EXIT_USAGE_ERROR = 2

DEFAULT_HTML_REPORT = "csga-report.html"

# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def build_parser():
    parser = argparse.ArgumentParser(
        prog="csga",
        description="CSGA - Julia code quality scoring (Security, Clean Code, Green Code, Automation)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python csga_main.py                          # Evaluate the current directory
  python csga_main.py ../MyPackage.jl          # Evaluate another project
  python csga_main.py --json                   # Output as JSON
  python csga_main.py --markdown -o report.md  # Write a Markdown report
  python csga_main.py --html-report            # Also write csga-report.html
  python csga_main.py --fail-under 80          # Exit 1 if the score is below 80"""
    )
    parser.add_argument('directory', nargs='?', default=None,
                        help='Project directory to evaluate (defaults to current directory)')
    output = parser.add_mutually_exclusive_group()
    output.add_argument('--json', action='store_true',
                        help='Output results in JSON format')
    output.add_argument('--markdown', action='store_true',
                        help='Output results in Markdown format')
    parser.add_argument('-o', '--output', default=None,
                        help='Write the report to this file instead of stdout')
    parser.add_argument('--html-report', nargs='?', const=DEFAULT_HTML_REPORT, default=None,
                        metavar='PATH',
                        help=f'Also generate an HTML report (default: ./{DEFAULT_HTML_REPORT})')
    parser.add_argument('--config', default=None,
                        help='Path to a JSON config file (defaults to <directory>/.csga-config.json)')
    parser.add_argument('--no-runtime-probes', action='store_true',
                        help='Skip runtime efficiency probes (scored as passing)')
    parser.add_argument('--parallel', action='store_true',
                        help='Evaluate pillars concurrently')
    parser.add_argument('--search-parents', action='store_true',
                        help='Evaluate the nearest ancestor holding Project.toml')
    parser.add_argument('--fail-under', type=float, default=None, metavar='SCORE',
                        help='Exit with status 1 when the overall score is below SCORE')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Suppress progress messages')
    return parser


def main(argv=None):
    """Main entry point for CSGA. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    set_quiet(args.quiet)

    directory = os.path.abspath(args.directory if args.directory else os.getcwd())
    if not os.path.isdir(directory):
        print(f"{RED}Error: project directory not found: {directory}{RESET}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    overrides = {}
    if args.no_runtime_probes:
        overrides["runtime_probes"] = False
    if args.parallel:
        overrides["parallel"] = True
    if args.search_parents:
        overrides["search_parents"] = True

    try:
        project_root = resolve_project_root(directory, search_parents=args.search_parents)
        config = CSGAConfig.load(project_root, config_path=args.config, overrides=overrides)
        progress(f"Evaluating {project_root}...")
        score = evaluate_project(project_root, config)
    except CSGAError as e:
        print(f"{RED}Error: {e}{RESET}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    if args.json:
        report = generate_json_report(score)
    elif args.markdown:
        report = generate_markdown_report(score)
    else:
        report = format_text_report(score)

    if args.output:
        write_report(report, args.output)
        progress(f"Report written to {args.output}")
    else:
        print(report)

    if args.html_report:
        out_path = generate_html_report(score, args.html_report, config.to_dict())
        if out_path:
            progress(f"{GREEN}HTML report generated at: {out_path}{RESET}")

    if args.fail_under is not None and score.overall_score < args.fail_under:
        return EXIT_BELOW_THRESHOLD
    return EXIT_OK
