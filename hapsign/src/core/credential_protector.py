"""Password protection for signing configs.

Passwords written into ``build-profile.json5`` are encrypted with a work key
that lives, sealed, inside the project's ``signatures/material`` directory:

    material/
        fd/0/<name>   16 random bytes  \
        fd/1/<name>   16 random bytes   > root key components
        fd/2/<name>   16 random bytes  /
        ac/<name>     16 byte salt
        ce/<name>     work key sealed with the root key

The root key is PBKDF2-HMAC-SHA256 over the XOR of the three components.
Anyone holding the material directory can recover the passwords, so the
directory is regenerated on every run and never shared between projects.
"""

import os
import secrets
import shutil
import struct
from pathlib import Path
from typing import List, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from hapsign.src.core.errors import MaterialGenerationFailed

COMPONENT_DIR = "fd"
SALT_DIR = "ac"
WORK_KEY_DIR = "ce"
COMPONENT_COUNT = 3
COMPONENT_SIZE = 16
SALT_SIZE = 16
KEY_SIZE = 16  # AES-128
NONCE_SIZE = 12
PBKDF2_ITERATIONS = 10000


def _random_name() -> str:
    return secrets.token_hex(8)


def _write_random_file(directory: Path, data: bytes) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / _random_name()).write_bytes(data)


def _read_single_file(directory: Path) -> bytes:
    if not directory.is_dir():
        raise MaterialGenerationFailed(directory, "directory is missing")
    files = sorted(p for p in directory.iterdir() if p.is_file())
    if len(files) != 1:
        raise MaterialGenerationFailed(
            directory, f"expected exactly one file, found {len(files)}"
        )
    try:
        return files[0].read_bytes()
    except OSError as e:
        raise MaterialGenerationFailed(files[0], str(e))


def _xor(parts: List[bytes]) -> bytes:
    result = bytearray(len(parts[0]))
    for part in parts:
        if len(part) != len(result):
            raise ValueError("Root key components differ in length")
        for i, b in enumerate(part):
            result[i] ^= b
    return bytes(result)


def _derive_root_key(material_dir: Path) -> bytes:
    components = [
        _read_single_file(material_dir / COMPONENT_DIR / str(i))
        for i in range(COMPONENT_COUNT)
    ]
    salt = _read_single_file(material_dir / SALT_DIR)
    try:
        secret = _xor(components)
    except ValueError as e:
        raise MaterialGenerationFailed(material_dir, str(e))

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )
    return kdf.derive(secret)


def _seal(key: bytes, plaintext: bytes) -> bytes:
    nonce = os.urandom(NONCE_SIZE)
    return nonce + AESGCM(key).encrypt(nonce, plaintext, None)


def _load_work_key(material_dir: Path) -> bytes:
    material_dir = Path(material_dir)
    if not material_dir.is_dir():
        raise MaterialGenerationFailed(material_dir, "material directory does not exist")

    root_key = _derive_root_key(material_dir)
    sealed = _read_single_file(material_dir / WORK_KEY_DIR)
    nonce, ciphertext = sealed[:NONCE_SIZE], sealed[NONCE_SIZE:]
    try:
        return AESGCM(root_key).decrypt(nonce, ciphertext, None)
    except InvalidTag:
        raise MaterialGenerationFailed(
            material_dir / WORK_KEY_DIR, "work key does not match root key material"
        )


def create_material(material_dir: Union[str, Path]) -> None:
    """Generate fresh root key components, salt and a sealed work key.

    Any material already in the directory is replaced.
    """
    material_dir = Path(material_dir)
    try:
        for name in (COMPONENT_DIR, SALT_DIR, WORK_KEY_DIR):
            if (material_dir / name).exists():
                shutil.rmtree(material_dir / name)
        for i in range(COMPONENT_COUNT):
            _write_random_file(
                material_dir / COMPONENT_DIR / str(i), os.urandom(COMPONENT_SIZE)
            )
        _write_random_file(material_dir / SALT_DIR, os.urandom(SALT_SIZE))

        root_key = _derive_root_key(material_dir)
        _write_random_file(
            material_dir / WORK_KEY_DIR, _seal(root_key, os.urandom(KEY_SIZE))
        )
    except OSError as e:
        raise MaterialGenerationFailed(material_dir, str(e))


def rotate_material(material_dir: Union[str, Path]) -> bool:
    """Discard any existing material and create a new set.

    Returns True when old material was removed.
    """
    material_dir = Path(material_dir)
    removed = False
    if material_dir.exists():
        try:
            shutil.rmtree(material_dir)
        except OSError as e:
            raise MaterialGenerationFailed(material_dir, f"could not remove: {e}")
        removed = True
    create_material(material_dir)
    return removed


def encrypt_password(plaintext: str, material_dir: Union[str, Path]) -> str:
    """Encrypt ``plaintext`` with the work key stored in ``material_dir``.

    The result is hex: 4-byte big-endian nonce length, nonce, ciphertext+tag.
    A new nonce is drawn on every call.
    """
    work_key = _load_work_key(Path(material_dir))
    nonce = os.urandom(NONCE_SIZE)
    ciphertext = AESGCM(work_key).encrypt(nonce, plaintext.encode("utf-8"), None)
    return (struct.pack(">I", len(nonce)) + nonce + ciphertext).hex()


def decrypt_password(encrypted: str, material_dir: Union[str, Path]) -> str:
    try:
        blob = bytes.fromhex(encrypted)
    except ValueError:
        raise ValueError("Encrypted password is not valid hex")
    if len(blob) < 4:
        raise ValueError("Encrypted password is truncated")

    (nonce_len,) = struct.unpack(">I", blob[:4])
    nonce = blob[4 : 4 + nonce_len]
    ciphertext = blob[4 + nonce_len :]
    if len(nonce) != nonce_len or not ciphertext:
        raise ValueError("Encrypted password is truncated")

    work_key = _load_work_key(Path(material_dir))
    try:
        plaintext = AESGCM(work_key).decrypt(nonce, ciphertext, None)
    except InvalidTag:
        raise ValueError("Encrypted password does not match this material directory")
    return plaintext.decode("utf-8")
