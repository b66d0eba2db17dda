from __future__ import annotations

"""MCP server for uiflowcheck - exposes the UI flow validators as tools."""

import asyncio
import json
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from uiflowcheck.config import UIFlowConfig, get_default_config
from uiflowcheck.flow import export_flow
from uiflowcheck.navigation import NavigationValidator, generate_fix_suggestions
from uiflowcheck.runner import VALIDATORS, ValidationSuite, create_validator

# Default project directory for tool calls without one
_project_dir: str | None = None


def get_config(args: dict[str, Any]) -> UIFlowConfig:
    """Default config with the per-call or server-wide project directory."""
    config = get_default_config()
    project_dir = args.get("project_dir") or _project_dir
    if project_dir:
        config.project_dir = project_dir
    return config


# Create MCP server
server = Server("uiflowcheck")

PROJECT_DIR_PROPERTY = {
    "type": "string",
    "description": "UI flow project directory (default: server working directory)",
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available MCP tools."""
    return [
        Tool(
            name="validate_navigation",
            description="Check that every clickable element in every screen has a valid target",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_dir": PROJECT_DIR_PROPERTY,
                    "module": {
                        "type": "string",
                        "description": "Only scan one module (e.g. AUTH)",
                    },
                    "fix": {
                        "type": "boolean",
                        "description": "Include fix suggestions",
                    },
                },
            },
        ),
        Tool(
            name="run_validator",
            description="Run a single validator and return its checks",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_dir": PROJECT_DIR_PROPERTY,
                    "validator": {
                        "type": "string",
                        "enum": sorted(VALIDATORS),
                        "description": "Validator name",
                    },
                },
                "required": ["validator"],
            },
        ),
        Tool(
            name="run_all",
            description="Run the validation suite in parallel",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_dir": PROJECT_DIR_PROPERTY,
                    "only": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Validators to run (default suite when omitted)",
                    },
                },
            },
        ),
        Tool(
            name="generate_flow",
            description="Write a Mermaid flowchart of screen navigation",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_dir": PROJECT_DIR_PROPERTY,
                    "output": {
                        "type": "string",
                        "description": "Output path (default: docs/flow-diagram.md)",
                    },
                },
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "validate_navigation":
            result = await _handle_validate_navigation(arguments)
        elif name == "run_validator":
            result = await _handle_run_validator(arguments)
        elif name == "run_all":
            result = await _handle_run_all(arguments)
        elif name == "generate_flow":
            result = await _handle_generate_flow(arguments)
        else:
            result = f"Unknown tool: {name}"

        return [TextContent(type="text", text=str(result))]

    except Exception as e:
        return [TextContent(type="text", text=f"Error: {e}")]


async def _handle_validate_navigation(args: dict[str, Any]) -> str:
    """Handle validate_navigation tool call."""
    validator = NavigationValidator(get_config(args), module=args.get("module"))
    report = await validator.scan()

    data = report.model_dump(mode="json")
    if args.get("fix"):
        data["fix_suggestions"] = generate_fix_suggestions(report)
    return json.dumps(data, indent=2, ensure_ascii=False)


async def _handle_run_validator(args: dict[str, Any]) -> str:
    """Handle run_validator tool call."""
    validator = create_validator(args["validator"], get_config(args))
    result = await validator.validate()
    return json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False)


async def _handle_run_all(args: dict[str, Any]) -> str:
    """Handle run_all tool call."""
    result = await ValidationSuite(get_config(args)).run(only=args.get("only"))
    return json.dumps(result.model_dump(mode="json"), indent=2)


async def _handle_generate_flow(args: dict[str, Any]) -> str:
    """Handle generate_flow tool call."""
    document, bare = await export_flow(get_config(args), args.get("output"))
    return json.dumps({"document": str(document), "mermaid": str(bare)})


async def run_server() -> None:
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main(project_dir: str | None = None) -> None:
    """Entry point for MCP server."""
    global _project_dir

    _project_dir = project_dir
    asyncio.run(run_server())


if __name__ == "__main__":
    import sys

    main(sys.argv[1] if len(sys.argv) > 1 else None)
