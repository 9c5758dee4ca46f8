from pathlib import Path
import sys

from rich.markup import escape

from hapsign.logger import get_console, get_error_console
from hapsign.src.core.errors import HapSignError
from hapsign.src.core.pipeline import SigningConfigPipeline
from hapsign.src.core.signing_invoker import ProfileSigner
from hapsign.src.utils.config_loader import get_java_path, get_sdk_home


def resolve_project_dir(project_dir) -> Path:
    """Fall back to the working directory when no project was given."""
    if project_dir is None:
        get_console().log(
            "[yellow]No project directory provided. Using the current directory."
        )
        return Path.cwd()
    return Path(project_dir)


def main(parsed_args) -> int:
    """Run the signing config pipeline and map failures to an exit code."""
    error_console = get_error_console()
    project_dir = resolve_project_dir(parsed_args.project_dir)

    try:
        pipeline = SigningConfigPipeline(
            project_dir=project_dir,
            sdk_home=get_sdk_home(),
            signer=ProfileSigner(java_path=get_java_path()),
        )
        pipeline.run()
    except (HapSignError, ValueError) as e:
        error_console.print(f"[red]Error:[/] {escape(str(e))}", soft_wrap=True)
        return 1
    return 0


def run_generate_command(args):
    """Entry point for the generate command from CLI"""
    return main(parsed_args=args)


if __name__ == "__main__":
    from hapsign.cli import main as cli_main

    sys.exit(cli_main())
