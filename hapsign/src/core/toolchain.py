from dataclasses import dataclass
from pathlib import Path
from typing import Union

from hapsign.src.core.errors import MissingInputFile, MissingRequiredField
from hapsign.src.utils.documents import get_path, load_json5

BUILD_PROFILE_NAME = "build-profile.json5"

SIGN_TOOL_NAME = "hap-sign-tool.jar"
KEYSTORE_NAME = "OpenHarmony.p12"
PROFILE_CERT_NAME = "OpenHarmonyProfileRelease.pem"
# Spelled as shipped in the SDK
PROFILE_TEMPLATE_NAME = "UnsgnedReleasedProfileTemplate.json"


@dataclass(frozen=True)
class ToolchainPaths:
    """Version-scoped signing resources inside an SDK installation"""

    sign_tool: Path
    keystore: Path
    profile_cert: Path
    profile_template: Path

    @classmethod
    def resolve(cls, sdk_home: Union[str, Path], api_version) -> "ToolchainPaths":
        lib_dir = Path(sdk_home) / str(api_version) / "toolchains" / "lib"
        return cls(
            sign_tool=lib_dir / SIGN_TOOL_NAME,
            keystore=lib_dir / KEYSTORE_NAME,
            profile_cert=lib_dir / PROFILE_CERT_NAME,
            profile_template=lib_dir / PROFILE_TEMPLATE_NAME,
        )

    def validate(self) -> None:
        """Fail on the first resource missing from the SDK"""
        for description, path in (
            ("Signing tool", self.sign_tool),
            ("Keystore", self.keystore),
            ("Profile certificate", self.profile_cert),
            ("Unsigned profile template", self.profile_template),
        ):
            if not path.exists():
                raise MissingInputFile(path, description)


def read_api_version(project_dir: Union[str, Path]) -> str:
    """Read ``app.products[0].compileSdkVersion`` from the project's build profile"""
    build_profile_path = Path(project_dir) / BUILD_PROFILE_NAME
    build_profile = load_json5(build_profile_path, "Build profile")

    version = get_path(build_profile, "app", "products", 0, "compileSdkVersion")
    if version is None or version == "":
        raise MissingRequiredField(
            BUILD_PROFILE_NAME, "app.products[0].compileSdkVersion"
        )
    return str(version)
