"""paramscope CLI - Main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

import click
from rich.table import Table

from paramscope import __version__
from paramscope.pipeline.ui import console


class VerboseGroup(click.Group):
    """Help system that lists registered commands by category."""

    def format_commands(self, ctx, formatter):
        """Override to suppress default command listing (we use categorized format in format_help)."""
        pass

    COMMAND_CATEGORIES = {
        "ANALYSIS": {
            "title": "ANALYSIS",
            "description": "Whole-project endpoint analysis",
            "commands": ["analyze"],
        },
        "INSPECTION": {
            "title": "INSPECTION",
            "description": "Look at the declaration model and single endpoints",
            "commands": ["declarations", "endpoint"],
        },
    }

    def format_help(self, ctx, formatter):
        """Generate Rich-styled categorized help."""
        super().format_help(ctx, formatter)

        registered = {
            name: cmd
            for name, cmd in self.commands.items()
            if not name.startswith("_") and not getattr(cmd, "hidden", False)
        }

        console.print()
        console.rule("[bold]COMMANDS[/bold]")

        for _category_id, category_data in self.COMMAND_CATEGORIES.items():
            console.print(f"\n[bold cyan]{category_data['title']}[/bold cyan]")
            console.print(f"[dim]{category_data['description']}[/dim]")

            table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
            table.add_column("Command", style="cmd", width=18)
            table.add_column("Description", style="white")

            for cmd_name in category_data["commands"]:
                if cmd_name not in registered:
                    continue
                first_line = (registered[cmd_name].help or "").split("\n")[0].strip()
                table.add_row(cmd_name, first_line)

            console.print(table)

        console.print()
        console.rule()
        console.print("For detailed options: [cmd]paramscope <command> --help[/cmd]")


@click.group(cls=VerboseGroup)
@click.version_option(version=__version__, prog_name="paramscope")
@click.help_option("-h", "--help")
def cli():
    """paramscope - Request parameters of every Rails endpoint, without running Rails

    \b
    QUICK START:
      rails routes > routes.txt
      paramscope analyze            # Every routed endpoint
      paramscope endpoint users#show

    \b
    For detailed options: paramscope <command> --help"""
    pass


from paramscope.commands.analyze import analyze
from paramscope.commands.declarations import declarations
from paramscope.commands.endpoint import endpoint

cli.add_command(analyze)
cli.add_command(declarations)
cli.add_command(endpoint)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
