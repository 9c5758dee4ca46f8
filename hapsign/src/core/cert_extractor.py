from pathlib import Path
from typing import List, Optional, Union

from hapsign.src.core.errors import (
    InsufficientCertificates,
    MissingInputFile,
    ParseError,
)

END_CERTIFICATE = "-----END CERTIFICATE-----"

# Position of the profile-signing certificate in the SDK's release bundle.
# Relies on the SDK shipping the chain in a fixed order; nothing in the
# certificates themselves is checked.
SELECTION_INDEX = 2


def split_certificates(pem_text: str) -> List[str]:
    """Split a PEM bundle into individually terminated certificate blocks"""
    certificates = []
    for body in pem_text.split(END_CERTIFICATE):
        body = body.strip()
        if not body:
            continue
        certificates.append(f"{body}\n{END_CERTIFICATE}\n")
    return certificates


def select_certificate(
    pem_text: str,
    selection_index: int = SELECTION_INDEX,
    source: Optional[Union[str, Path]] = None,
) -> str:
    """Return the certificate at ``selection_index`` (zero-based) from a PEM bundle"""
    certificates = split_certificates(pem_text)
    if len(certificates) <= selection_index:
        raise InsufficientCertificates(source, len(certificates), selection_index + 1)
    return certificates[selection_index]


def read_certificate(
    cert_path: Union[str, Path], selection_index: int = SELECTION_INDEX
) -> str:
    cert_path = Path(cert_path)
    if not cert_path.exists():
        raise MissingInputFile(cert_path, "Certificate bundle")
    try:
        pem_text = cert_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(cert_path, f"could not read certificate bundle: {e}")
    return select_certificate(pem_text, selection_index, source=cert_path)
