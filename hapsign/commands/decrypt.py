from pathlib import Path
import sys

from rich.markup import escape

from hapsign.logger import get_error_console
from hapsign.src.core.config_writer import MATERIAL_DIR
from hapsign.src.core.credential_protector import decrypt_password
from hapsign.src.core.errors import HapSignError


def resolve_material_dir(signatures_dir: Path) -> Path:
    """Accept the signatures directory (parent of certpath) or material/ itself."""
    signatures_dir = Path(signatures_dir)
    if (signatures_dir / MATERIAL_DIR).is_dir():
        return signatures_dir / MATERIAL_DIR
    return signatures_dir


def run_decrypt_command(args) -> int:
    """Print the plaintext for a password encrypted against a material directory.

    Used by build scripts that need the store/key password for ``sign-app``.
    Only the plaintext goes to stdout so the output can be captured directly.
    """
    try:
        plaintext = decrypt_password(
            args.encrypted_password, resolve_material_dir(args.signatures_dir)
        )
    except (HapSignError, ValueError) as e:
        get_error_console().print(f"[red]Error:[/] {escape(str(e))}", soft_wrap=True)
        return 1

    sys.stdout.write(plaintext + "\n")
    return 0
