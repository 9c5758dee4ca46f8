from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union
import shutil

from hapsign.logger import get_console
from hapsign.src.core import credential_protector
from hapsign.src.core.cert_extractor import SELECTION_INDEX
from hapsign.src.core.config_writer import (
    MATERIAL_DIR,
    PROFILE_ARTIFACT_NAME,
    SIGNATURES_DIR,
    default_signing_entry,
    write_signing_config,
)
from hapsign.src.core.errors import ConfigWriteFailed
from hapsign.src.core.profile_template import APP_MANIFEST, modify_profile_template
from hapsign.src.core.signing_invoker import (
    KEY_PASSWORD,
    KEYSTORE_PASSWORD,
    ProfileSigner,
)
from hapsign.src.core.toolchain import (
    BUILD_PROFILE_NAME,
    KEYSTORE_NAME,
    PROFILE_CERT_NAME,
    PROFILE_TEMPLATE_NAME,
    ToolchainPaths,
    read_api_version,
)


class PipelineStage(Enum):
    RESOLVE_VERSION = "resolve_version"
    STAGE_PATHS = "stage_paths"
    COPY_MATERIAL = "copy_material"
    MUTATE_TEMPLATE = "mutate_template"
    INVOKE_SIGNING = "invoke_signing"
    ROTATE_KEY_MATERIAL = "rotate_key_material"
    PROTECT_CREDENTIALS = "protect_credentials"
    PERSIST_CONFIG = "persist_config"
    DONE = "done"


@dataclass
class PipelineResult:
    api_version: str
    signatures_dir: Path
    profile_artifact: Path
    material_dir: Path
    build_profile: Path


def copy_files_to_project(signatures_dir: Path, toolchain: ToolchainPaths) -> None:
    """Stage the SDK keystore, certificate bundle and template, overwriting old copies"""
    console = get_console()
    console.log("[yellow]Copying files to project directory...")
    try:
        signatures_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(toolchain.keystore, signatures_dir / KEYSTORE_NAME)
        shutil.copyfile(toolchain.profile_cert, signatures_dir / PROFILE_CERT_NAME)
        shutil.copyfile(
            toolchain.profile_template, signatures_dir / PROFILE_TEMPLATE_NAME
        )
    except OSError as e:
        raise ConfigWriteFailed(signatures_dir, str(e))
    console.log(f"[green]Files copied to:[/] {signatures_dir}")


class SigningConfigPipeline:
    """Generates signatures/ and the default signing config for one project.

    Stages run strictly in ``PipelineStage`` order. The first error stops the
    run; files already written stay on disk, and re-running starts over.
    Running two pipelines against the same project at once is not supported.
    """

    def __init__(
        self,
        project_dir: Union[str, Path],
        sdk_home: Union[str, Path],
        signer: Optional[ProfileSigner] = None,
        selection_index: int = SELECTION_INDEX,
    ):
        self.console = get_console()
        self.project_dir = Path(project_dir)
        self.sdk_home = Path(sdk_home)
        self.signer = signer or ProfileSigner()
        self.selection_index = selection_index
        self.stage: Optional[PipelineStage] = None

        self.signatures_dir = self.project_dir / SIGNATURES_DIR
        self.material_dir = self.signatures_dir / MATERIAL_DIR
        self.build_profile_path = self.project_dir / BUILD_PROFILE_NAME
        self.app_json_path = self.project_dir / "AppScope" / APP_MANIFEST
        self.template_path = self.signatures_dir / PROFILE_TEMPLATE_NAME
        self.cert_path = self.signatures_dir / PROFILE_CERT_NAME
        self.profile_artifact = self.signatures_dir / PROFILE_ARTIFACT_NAME

    def _enter(self, stage: PipelineStage) -> None:
        self.stage = stage

    def run(self) -> PipelineResult:
        self.console.log("[bold]Starting signing configuration generation...")

        self._enter(PipelineStage.RESOLVE_VERSION)
        api_version = read_api_version(self.project_dir)
        self.console.log(f"[blue]Using API version:[/] {api_version}")

        self._enter(PipelineStage.STAGE_PATHS)
        toolchain = ToolchainPaths.resolve(self.sdk_home, api_version)
        toolchain.validate()

        self._enter(PipelineStage.COPY_MATERIAL)
        copy_files_to_project(self.signatures_dir, toolchain)

        self._enter(PipelineStage.MUTATE_TEMPLATE)
        modify_profile_template(
            self.app_json_path, self.template_path, self.cert_path, self.selection_index
        )

        self._enter(PipelineStage.INVOKE_SIGNING)
        self.console.log("[yellow]Generating P7b file...")
        self.signer.sign_profile(toolchain, self.template_path, self.profile_artifact)
        self.console.log(f"[green]Generated:[/] {self.profile_artifact}")

        self._enter(PipelineStage.ROTATE_KEY_MATERIAL)
        self.console.log("[yellow]Preparing material directory...")
        if credential_protector.rotate_material(self.material_dir):
            self.console.log("[yellow]Existing material directory removed.")

        self._enter(PipelineStage.PROTECT_CREDENTIALS)
        store_password = credential_protector.encrypt_password(
            KEYSTORE_PASSWORD, self.material_dir
        )
        key_password = credential_protector.encrypt_password(
            KEY_PASSWORD, self.material_dir
        )

        self._enter(PipelineStage.PERSIST_CONFIG)
        write_signing_config(
            self.build_profile_path, default_signing_entry(store_password, key_password)
        )

        self._enter(PipelineStage.DONE)
        self.console.log("[bold green]Signing configuration generated successfully.")
        return PipelineResult(
            api_version=api_version,
            signatures_dir=self.signatures_dir,
            profile_artifact=self.profile_artifact,
            material_dir=self.material_dir,
            build_profile=self.build_profile_path,
        )
