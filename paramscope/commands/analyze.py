"""Whole-project endpoint analysis.

Usage: paramscope analyze
"""

import sys
from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from paramscope.config_runtime import load_runtime_config
from paramscope.indexer.orchestrator import AnalysisOrchestrator
from paramscope.pipeline.ui import console, print_error, print_header, print_success, print_warning
from paramscope.utils.error_handler import handle_exceptions
from paramscope.utils.exit_codes import ExitCodes
from paramscope.utils.helpers import normalize_path, save_json_file


@click.command("analyze")
@click.option("--root", default=".", type=click.Path(exists=True, file_okay=False), help="Root of the Rails project")
@click.option("--routes", type=click.Path(), help="Routes table (output of `rails routes`), overrides paths.routes_table")
@click.option("--output-json", type=click.Path(), help="Where to write the JSON report, overrides paths.endpoints_json")
@handle_exceptions
def analyze(root, routes, output_json):
    """Resolve request parameters and response fields of every routed endpoint.

    Parses controllers, concerns and helpers, merges them into one model,
    then resolves each route of the routes table through inheritance,
    included concerns, action hooks and the action's call graph.

    \b
    INPUT:
      app/controllers/**/*.rb     Controllers and concerns
      app/helpers/**/*.rb         Helper modules
      app/views/**/*.jbuilder     Response templates (optional)
      routes.txt                  `rails routes` output

    \b
    EXAMPLES:
      rails routes > routes.txt && paramscope analyze
      paramscope analyze --root ../shop --routes ../shop/tmp/routes.txt
      paramscope analyze --output-json endpoints.json

    \b
    EXIT CODES:
      0  every file classified and every endpoint resolved
      1  some files or endpoints failed (details printed)
      3  routes table missing
    """
    root_path = Path(root).resolve()
    config = load_runtime_config(str(root_path))
    if routes:
        config["paths"]["routes_table"] = str(Path(routes).resolve())

    routes_path = root_path / config["paths"]["routes_table"]
    if not routes_path.exists():
        print_error(f"Routes table not found: {escape(str(routes_path))}")
        console.print("Generate it with: [cmd]rails routes > routes.txt[/cmd]")
        sys.exit(ExitCodes.TASK_INCOMPLETE)

    orchestrator = AnalysisOrchestrator(root_path, config)
    result = orchestrator.analyze()
    requests = orchestrator.load_requests()
    reports = orchestrator.resolve(requests, result)

    print_header("ENDPOINTS")
    table = Table(show_lines=False)
    table.add_column("Verb", style="cmd")
    table.add_column("URI", style="path")
    table.add_column("Controller#Action")
    table.add_column("Params", style="param")
    table.add_column("Response fields", style="dim")
    for report in reports:
        if report.ok:
            params = escape(", ".join(report.params))
        else:
            params = f"[error]{escape(report.error)}[/error]"
        table.add_row(
            report.request.method.value,
            escape(report.request.uri),
            escape(report.request.endpoint),
            params,
            escape(", ".join(report.fields)),
        )
    console.print(table)

    if result.errors:
        print_header("FAILED FILES")
        failed = Table()
        failed.add_column("File", style="path")
        failed.add_column("Error", style="error")
        for error in result.errors:
            failed.add_row(escape(error.path), escape(error.message))
        console.print(failed)

    output_path = Path(output_json) if output_json else root_path / config["paths"]["endpoints_json"]
    save_json_file(
        {
            "endpoints": [report.to_dict() for report in reports],
            "failed_files": [{"path": e.path, "message": e.message} for e in result.errors],
            "summary": {
                "files": result.files_analyzed,
                "failed_files": result.failed_files,
                **result.registry.get_stats(),
                "endpoints": len(reports),
                "unresolved_endpoints": sum(1 for r in reports if not r.ok),
            },
        },
        output_path,
    )

    unresolved = sum(1 for r in reports if not r.ok)
    console.print(
        f"\n{result.files_analyzed} files, {result.failed_files} failed; "
        f"{len(reports)} endpoints, {unresolved} unresolved"
    )
    console.print(f"Report written to [path]{escape(normalize_path(output_path, root_path))}[/path]")

    if result.errors or unresolved:
        print_warning(ExitCodes.get_description(ExitCodes.PARTIAL))
        sys.exit(ExitCodes.PARTIAL)
    print_success(ExitCodes.get_description(ExitCodes.SUCCESS))
