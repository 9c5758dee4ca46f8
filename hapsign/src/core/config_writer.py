from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

import json5

from hapsign.logger import get_console
from hapsign.src.core.errors import ConfigParseError, ConfigWriteFailed
from hapsign.src.core.signing_invoker import KEY_ALIAS, SIGN_ALG
from hapsign.src.core.toolchain import KEYSTORE_NAME, PROFILE_CERT_NAME

SIGNATURES_DIR = "signatures"
MATERIAL_DIR = "material"
PROFILE_ARTIFACT_NAME = "app1-profile.p7b"


@dataclass
class SigningConfigEntry:
    """One entry of ``app.signingConfigs`` in build-profile.json5"""

    certpath: str
    store_password: str  # encrypted
    key_alias: str
    key_password: str  # encrypted
    profile: str
    sign_alg: str
    store_file: str
    name: str = "default"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "material": {
                "certpath": self.certpath,
                "storePassword": self.store_password,
                "keyAlias": self.key_alias,
                "keyPassword": self.key_password,
                "profile": self.profile,
                "signAlg": self.sign_alg,
                "storeFile": self.store_file,
            },
        }


def default_signing_entry(store_password: str, key_password: str) -> SigningConfigEntry:
    """Entry pointing at the files staged under ./signatures"""
    prefix = f"./{SIGNATURES_DIR}"
    return SigningConfigEntry(
        certpath=f"{prefix}/{PROFILE_CERT_NAME}",
        store_password=store_password,
        key_alias=KEY_ALIAS,
        key_password=key_password,
        profile=f"{prefix}/{PROFILE_ARTIFACT_NAME}",
        sign_alg=SIGN_ALG,
        store_file=f"{prefix}/{KEYSTORE_NAME}",
    )


def load_build_profile(build_profile_path: Union[str, Path]) -> Dict[str, Any]:
    """Load the build profile, or an ``{"app": {}}`` skeleton when it doesn't exist"""
    build_profile_path = Path(build_profile_path)
    if not build_profile_path.exists():
        return {"app": {}}

    try:
        with open(build_profile_path, encoding="utf-8") as f:
            build_profile = json5.load(f)
    except ValueError as e:
        raise ConfigParseError(build_profile_path, str(e))
    except OSError as e:
        raise ConfigParseError(build_profile_path, f"could not read file: {e}")

    if not isinstance(build_profile, dict):
        raise ConfigParseError(build_profile_path, "top-level value is not an object")
    app = build_profile.setdefault("app", {})
    if not isinstance(app, dict):
        raise ConfigParseError(build_profile_path, "'app' is not an object")
    return build_profile


def write_signing_config(
    build_profile_path: Union[str, Path], entry: SigningConfigEntry
) -> Dict[str, Any]:
    """Replace ``app.signingConfigs`` with ``[entry]``, leaving everything else as is.

    Existing signing configs, including non-default ones, are dropped.
    """
    console = get_console()
    build_profile_path = Path(build_profile_path)
    console.log("[yellow]Updating build profile...")

    build_profile = load_build_profile(build_profile_path)
    build_profile["app"]["signingConfigs"] = [entry.to_dict()]

    try:
        build_profile_path.write_text(
            json5.dumps(build_profile, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
    except OSError as e:
        raise ConfigWriteFailed(build_profile_path, str(e))

    console.log(f"[green]Build profile updated:[/] {build_profile_path}")
    return build_profile
