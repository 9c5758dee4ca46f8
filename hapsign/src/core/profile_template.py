import copy
import json
from pathlib import Path
from typing import Any, Dict, Union

from hapsign.logger import get_console
from hapsign.src.core.cert_extractor import SELECTION_INDEX, read_certificate
from hapsign.src.core.errors import ConfigWriteFailed, MissingRequiredField
from hapsign.src.utils.documents import load_json, load_json5

APP_MANIFEST = "app.json5"


def validate_documents(manifest: Dict[str, Any], template: Dict[str, Any]) -> str:
    """Check the fields the mutation needs and return the bundle name"""
    app = manifest.get("app") if isinstance(manifest, dict) else None
    if not isinstance(app, dict) or not app.get("bundleName"):
        raise MissingRequiredField(APP_MANIFEST, "app.bundleName")

    if not isinstance(template, dict) or not isinstance(
        template.get("bundle-info"), dict
    ):
        raise MissingRequiredField("profile template", "bundle-info")
    return app["bundleName"]


def mutate_template(
    manifest: Dict[str, Any], template: Dict[str, Any], certificate: str
) -> Dict[str, Any]:
    """Bind a profile template to the app's bundle name and a distribution certificate.

    Returns a copy; only ``bundle-info.bundle-name`` and
    ``bundle-info.distribution-certificate`` differ from ``template``.
    """
    bundle_name = validate_documents(manifest, template)

    mutated = copy.deepcopy(template)
    mutated["bundle-info"]["bundle-name"] = bundle_name
    mutated["bundle-info"]["distribution-certificate"] = certificate
    return mutated


def write_template(template_path: Union[str, Path], template: Dict[str, Any]) -> None:
    template_path = Path(template_path)
    try:
        template_path.write_text(
            json.dumps(template, indent=2, ensure_ascii=False), encoding="utf-8"
        )
    except OSError as e:
        raise ConfigWriteFailed(template_path, str(e))


def modify_profile_template(
    app_json_path: Union[str, Path],
    template_path: Union[str, Path],
    cert_path: Union[str, Path],
    selection_index: int = SELECTION_INDEX,
) -> Dict[str, Any]:
    """Rewrite the staged profile template in place and return the new document"""
    console = get_console()
    console.log("[yellow]Modifying profile template...")

    manifest = load_json5(app_json_path, "App manifest")
    template = load_json(template_path, "Profile template")
    validate_documents(manifest, template)
    certificate = read_certificate(cert_path, selection_index)

    mutated = mutate_template(manifest, template, certificate)
    write_template(template_path, mutated)

    console.log(
        f"[green]Profile template bound to:[/] {mutated['bundle-info']['bundle-name']}"
    )
    return mutated
