"""Resolve a single endpoint.

Usage: paramscope endpoint users#show
"""

import sys
from pathlib import Path

import click
from rich.markup import escape

from paramscope.graph.resolver import MethodResolver
from paramscope.indexer.exceptions import ResolutionError
from paramscope.indexer.orchestrator import AnalysisOrchestrator
from paramscope.pipeline.ui import console, print_error, print_header
from paramscope.routes import Request, RequestMethod
from paramscope.utils.error_handler import handle_exceptions
from paramscope.utils.exit_codes import ExitCodes


@click.command("endpoint")
@click.argument("target")
@click.option("--root", default=".", type=click.Path(exists=True, file_okay=False), help="Root of the Rails project")
@handle_exceptions
def endpoint(target, root):
    """Print the parameters one controller action reads.

    TARGET is given in route form, CONTROLLER#ACTION, e.g. `admin/users#show`.
    No routes table is needed.
    """
    controller, sep, action = target.partition("#")
    if not sep or not controller or not action:
        raise click.BadParameter("expected CONTROLLER#ACTION", param_hint="TARGET")

    orchestrator = AnalysisOrchestrator(Path(root).resolve())
    result = orchestrator.analyze()

    request = Request(method=RequestMethod.GET, prefix="", uri=target, controller=controller, action=action)
    try:
        params = sorted(request.params(result.registry))
    except ResolutionError as e:
        print_error(escape(str(e)))
        sys.exit(ExitCodes.PARTIAL)

    resolver = MethodResolver(result.registry, result.registry.get_controller(request.controller_class_name))
    print_header(escape(f"{request.controller_class_name}#{action}"))
    hooks = resolver.action_hooks()
    if hooks:
        console.print(f"hooks: {escape(', '.join(str(h) for h in hooks))}")
    if params:
        for param in params:
            console.print(f"  [param]{escape(param)}[/param]")
    else:
        console.print("[dim]no request parameters[/dim]")

    view = result.views.get((controller, action))
    if view is not None and view.fields:
        console.print(f"response fields: {escape(', '.join(view.fields))}")
