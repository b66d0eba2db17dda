from __future__ import annotations

"""Command-line interface for uiflowcheck."""

import argparse
import asyncio
import json
import logging
import sys

from dotenv import load_dotenv

from uiflowcheck.config import UIFlowConfig, get_default_config
from uiflowcheck.models.schemas import CheckStatus, ValidatorResult
from uiflowcheck.navigation import NavigationValidator, format_console, generate_fix_suggestions, generate_markdown
from uiflowcheck.runner import VALIDATORS, ValidationSuite, create_validator, format_suite
from uiflowcheck.validators import ConsistencyValidator
from uiflowcheck.validators.standards import load_standards

logger = logging.getLogger(__name__)

# command name -> registered validator name
VALIDATOR_COMMANDS = {
    "iframes": "iframe-src",
    "index-data": "index-data",
    "templates": "template-variables",
    "structure": "structure",
    "trace": "traceability",
}


def load_config(args: argparse.Namespace) -> UIFlowConfig:
    """Config file (explicit or discovered) with the -w override applied."""
    config = UIFlowConfig.from_file(args.config) if args.config else get_default_config()
    if args.workdir:
        config.project_dir = args.workdir
    return config


def print_result(result: ValidatorResult, as_json: bool = False) -> None:
    """Print a validator result grouped by category."""
    if as_json:
        print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
        return

    marks = {CheckStatus.PASSED: "+", CheckStatus.FAILED: "x", CheckStatus.WARNING: "!"}
    print(f"{result.validator}")
    print("-" * 50)
    category = None
    for check in result.checks:
        if check.category != category:
            category = check.category
            print(f"\n{category}")
        print(f"  [{marks[check.status]}] {check.message}")
    print("\n" + "=" * 50)
    print(f"{'PASSED' if result.success else 'FAILED'}: {result.summary}")


async def run_navigation(args: argparse.Namespace) -> int:
    """Clickable coverage validation."""
    config = load_config(args)
    validator = NavigationValidator(config, module=args.module)
    report = await validator.scan()

    if args.json:
        print(json.dumps(report.model_dump(mode="json"), indent=2, ensure_ascii=False))
    else:
        print(f"Navigation validation: {validator.files.project_dir}")
        if args.module:
            print(f"Module: {args.module.upper()}")
        print("-" * 50)
        print(format_console(report, verbose=args.verbose))

    if args.fix:
        print()
        print(generate_fix_suggestions(report))

    if args.report:
        await validator.files.write_text(config.report_name, generate_markdown(report))
        print(f"\nReport saved: {validator.files.resolve(config.report_name)}")

    return 0 if report.passed else 1


async def run_validator(args: argparse.Namespace) -> int:
    """Run a single registered validator."""
    config = load_config(args)
    validator = create_validator(VALIDATOR_COMMANDS[args.command], config)
    result = await validator.validate()
    print_result(result, as_json=args.json)
    return 0 if result.success else 1


async def run_consistency(args: argparse.Namespace) -> int:
    """Consistency check, optionally against an explicit standards file."""
    config = load_config(args)
    standards, source = load_standards(config.project_dir, args.standards or config.standards_path)
    if not args.json:
        print(f"Standards: {source or 'built-in'}")
    result = await ConsistencyValidator(config, standards=standards).validate()
    result.details["standards_source"] = source or "built-in"
    print_result(result, as_json=args.json)
    return 0 if result.success else 1


async def run_all(args: argparse.Namespace) -> int:
    """Run the validation suite."""
    config = load_config(args)
    result = await ValidationSuite(config).run(only=args.only, skip=args.skip)
    if args.json:
        print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
    else:
        print(format_suite(result))
    return 0 if result.success else 1


async def run_mermaid(args: argparse.Namespace) -> int:
    """Export the navigation graph as a Mermaid flowchart."""
    from uiflowcheck.flow import export_flow

    config = load_config(args)
    document, bare = await export_flow(config, args.output)
    print(f"Flow diagram saved: {document}")
    print(f"Mermaid source saved: {bare}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="uiflowcheck - validation for generated UI flow prototypes",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--workdir", "-w",
        default=None,
        help="UI flow project directory (default: from config, else current)",
    )
    parser.add_argument(
        "--config",
        help="JSON config file (default: uiflow.json, .uiflow.json, ~/.config/uiflowcheck/config.json)",
    )
    parser.add_argument(
        "--verbose-log", "-v",
        dest="debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # navigation command
    nav_parser = subparsers.add_parser("navigation", help="Validate clickable element coverage")
    nav_parser.add_argument("--fix", action="store_true", help="Show fix suggestions")
    nav_parser.add_argument("--report", action="store_true", help="Write a Markdown report")
    nav_parser.add_argument("--verbose", action="store_true", help="Show every screen")
    nav_parser.add_argument("--module", help="Only scan one module (e.g. AUTH)")
    nav_parser.add_argument("--json", action="store_true", help="Print the report as JSON")

    helps = {
        "iframes": "Validate iframe src targets and screen counts",
        "index-data": "Validate index.html totals, coverage and legend",
        "templates": "Find unreplaced {{VARIABLE}} placeholders",
        "structure": "Validate screen files and overview pages",
        "trace": "Validate SRS -> SDD -> RTM -> UI flow traceability",
    }
    for command, help_text in helps.items():
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument("--json", action="store_true", help="Print the result as JSON")

    consistency_parser = subparsers.add_parser("consistency", help="Validate against reference standards")
    consistency_parser.add_argument("--standards", help="Path to standards.json")
    consistency_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    all_parser = subparsers.add_parser("all", help="Run the validation suite in parallel")
    all_parser.add_argument(
        "--only",
        nargs="*",
        choices=sorted(VALIDATORS),
        help="Validators to run (default: structure navigation consistency iframe-src index-data template-variables)",
    )
    all_parser.add_argument("--skip", nargs="*", choices=sorted(VALIDATORS), help="Validators to skip")
    all_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    mermaid_parser = subparsers.add_parser("mermaid", help="Export the navigation flow as Mermaid")
    mermaid_parser.add_argument("--output", "-o", help="Output path (default: docs/flow-diagram.md)")

    subparsers.add_parser("mcp", help="Run as MCP server")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    handlers = {
        "navigation": run_navigation,
        "consistency": run_consistency,
        "all": run_all,
        "mermaid": run_mermaid,
    }
    handlers.update({command: run_validator for command in VALIDATOR_COMMANDS})

    if args.command == "mcp":
        from uiflowcheck.mcp_server import main as mcp_main
        mcp_main(args.workdir)
        return
    if args.command not in handlers:
        parser.print_help()
        sys.exit(1)

    try:
        code = asyncio.run(handlers[args.command](args))
    except Exception as e:
        logging.exception("%s failed", args.command)
        print(f"\nError: {e}", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
