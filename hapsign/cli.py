import argparse
import sys
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme
from rich_argparse import RichHelpFormatter
from hapsign.arguments import add_decrypt_arguments, add_generate_arguments
from hapsign.src.constants.cli_constants import (
    __version__,
    get_banner_text,
    APP_DESCRIPTION,
)


class HapSignHelpFormatter(RichHelpFormatter):
    """Custom formatter for the hapsign CLI that enhances the output with rich styling."""

    def __init__(self, prog):
        super().__init__(prog, max_help_position=30, width=100)
        self.console = Console(
            theme=Theme(
                {
                    "argument": "green",
                    "title": "bold magenta",
                }
            )
        )

    def start_section(self, heading):
        heading_text = Text(heading, style="title")
        super().start_section(str(heading_text))


def display_banner():
    """Display a banner for hapsign."""
    console = Console()
    version_info = Text(f"v{__version__}", style="blue")
    tagline = Text(APP_DESCRIPTION, style="italic")

    panel = Panel.fit(
        Text.assemble(get_banner_text(), "\n", tagline, "\n", version_info),
        border_style="green",
        padding=(1, 2),
    )
    console.print(panel)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if "-h" in argv or "--help" in argv:
        display_banner()

    # OHOS_BASE_SDK_HOME may live in a project-local .env
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="hapsign",
        description=f"hapsign: {APP_DESCRIPTION}",
        formatter_class=HapSignHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"hapsign {__version__}"
    )
    add_generate_arguments(parser)
    args = parser.parse_args(argv)

    from hapsign.commands.generate import run_generate_command

    return run_generate_command(args)


def decrypt_main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    parser = argparse.ArgumentParser(
        prog="hapsign-decrypt",
        description="Recover a signing password encrypted by hapsign",
        formatter_class=HapSignHelpFormatter,
    )
    add_decrypt_arguments(parser)
    args = parser.parse_args(argv)

    from hapsign.commands.decrypt import run_decrypt_command

    return run_decrypt_command(args)


if __name__ == "__main__":
    sys.exit(main())
