from pathlib import Path
from typing import List, Union
import subprocess

from hapsign.logger import get_console
from hapsign.src.core.errors import SigningFailed
from hapsign.src.core.toolchain import ToolchainPaths

SIGN_ALG = "SHA256withECDSA"
KEY_ALIAS = "openharmony application profile release"
SIGN_MODE = "localSign"

# Unlocks the SDK's bundled OpenHarmony.p12 for the signing tool only. Not
# related to the encrypted passwords written into build-profile.json5.
KEYSTORE_PASSWORD = "123456"
KEY_PASSWORD = "123456"


class ProfileSigner:
    """Runs hap-sign-tool's ``sign-profile`` to turn a profile template into a .p7b"""

    def __init__(self, java_path: str = "java"):
        self.console = get_console()
        self.java_path = java_path

    def build_command(
        self,
        toolchain: ToolchainPaths,
        in_file: Union[str, Path],
        out_file: Union[str, Path],
    ) -> List[str]:
        return [
            self.java_path,
            "-jar",
            str(toolchain.sign_tool),
            "sign-profile",
            "-keyAlias",
            KEY_ALIAS,
            "-signAlg",
            SIGN_ALG,
            "-mode",
            SIGN_MODE,
            "-profileCertFile",
            str(toolchain.profile_cert),
            "-inFile",
            str(in_file),
            "-keystoreFile",
            str(toolchain.keystore),
            "-outFile",
            str(out_file),
            "-keyPwd",
            KEY_PASSWORD,
            "-keystorePwd",
            KEYSTORE_PASSWORD,
        ]

    def sign_profile(
        self,
        toolchain: ToolchainPaths,
        in_file: Union[str, Path],
        out_file: Union[str, Path],
    ) -> Path:
        """Sign ``in_file`` and return the path of the generated profile.

        Blocks until the tool exits; there is no timeout.
        """
        cmd = self.build_command(toolchain, in_file, out_file)
        self.console.log(f"[cyan]Running sign-profile:[/] {toolchain.sign_tool}")

        try:
            result = subprocess.run(cmd, check=True, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise SigningFailed(cmd, None, stderr=str(e))
        except subprocess.CalledProcessError as e:
            self.console.log(f"[red]sign-profile exited with {e.returncode}")
            raise SigningFailed(cmd, e.returncode, e.stdout, e.stderr)

        if result.stdout:
            self.console.log(f"[green]sign-profile output:[/]\n{result.stdout}")
        return Path(out_file)
