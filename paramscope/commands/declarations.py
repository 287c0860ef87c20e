"""Print the declaration model.

Usage: paramscope declarations
"""

import sys
from pathlib import Path

import click
from rich.markup import escape
from rich.tree import Tree

from paramscope.indexer.orchestrator import AnalysisOrchestrator
from paramscope.pipeline.ui import console, print_header, print_warning
from paramscope.utils.error_handler import handle_exceptions
from paramscope.utils.exit_codes import ExitCodes


def _method_label(method) -> str:
    label = f"[cmd]{escape(method.name)}[/cmd]({escape(', '.join(method.args))})"
    if method.params:
        label += f"  params: [param]{escape(', '.join(sorted(method.params)))}[/param]"
    if method.headers:
        label += f"  headers: [header]{escape(', '.join(key for key, _ in method.headers))}[/header]"
    calls = list(dict.fromkeys(method.called_names()))
    if calls:
        label += f"  [dim]calls: {escape(', '.join(calls))}[/dim]"
    return label


@click.command("declarations")
@click.option("--root", default=".", type=click.Path(exists=True, file_okay=False), help="Root of the Rails project")
@handle_exceptions
def declarations(root):
    """Show the controllers, concerns and helpers recovered from the project.

    Useful to check how a file was classified before resolving endpoints:
    ancestors, includes and hooks of every controller, and for every method
    the parameters it reads directly and the methods it calls.
    """
    orchestrator = AnalysisOrchestrator(Path(root).resolve())
    result = orchestrator.analyze()
    registry = result.registry

    print_header("CONTROLLERS")
    for name, controller in sorted(registry.controllers.items()):
        node = Tree(f"[bold]{escape(name)}[/bold] < {escape(controller.parent_name)}")
        if controller.includes:
            node.add(f"includes: {escape(', '.join(controller.includes))}")
        for hook in controller.action_hooks:
            node.add(f"hook: {escape(str(hook))}")
        for method in controller.methods:
            node.add(_method_label(method))
        console.print(node)

    print_header("CONCERNS")
    for name, concern in sorted(registry.concerns.items()):
        node = Tree(f"[bold]{escape(name)}[/bold]")
        for hook in concern.action_hooks:
            node.add(f"hook: {escape(str(hook))}")
        for method in concern.methods:
            node.add(_method_label(method))
        console.print(node)

    print_header("HELPERS")
    for name, helper in sorted(registry.helpers.items()):
        node = Tree(f"[bold]{escape(name or '(top level)')}[/bold]")
        for method in helper.methods:
            node.add(_method_label(method))
        console.print(node)

    if result.errors:
        for error in result.errors:
            print_warning(f"{escape(error.path)}: {escape(error.message)}")
        sys.exit(ExitCodes.PARTIAL)
