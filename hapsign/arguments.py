from pathlib import Path


def add_generate_arguments(parser):
    """Add the project directory argument to an existing parser."""
    parser.add_argument(
        "project_dir",
        type=Path,
        nargs="?",
        default=None,
        help="Path to the project to configure [default: current directory]",
    )


def add_decrypt_arguments(parser):
    """Add arguments for recovering a password from a signatures directory."""
    parser.add_argument(
        "signatures_dir",
        type=Path,
        help="Path to the project's signatures directory (the directory holding certpath)",
    )
    parser.add_argument(
        "encrypted_password",
        help="Encrypted storePassword or keyPassword from build-profile.json5",
    )
