"""
Credential Models

A deploy target is authenticated with a password, a private key file, or
inline private key material. The kind is decided once, when the deploy
configuration is built, and never re-sniffed afterwards.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from buildship.constants import PRIVATE_KEY_HEADERS


@dataclass(frozen=True)
class Password:
    """Plaintext password credential."""

    secret: str

    def __repr__(self) -> str:
        return "Password(***)"


@dataclass(frozen=True)
class KeyPath:
    """Private key stored on the local filesystem."""

    path: Path

    def __repr__(self) -> str:
        return f"KeyPath({self.path})"


@dataclass(frozen=True)
class KeyMaterial:
    """Private key passed inline as PEM/OpenSSH text."""

    text: str

    def __repr__(self) -> str:
        return "KeyMaterial(***)"


@dataclass(frozen=True)
class InvalidKey:
    """Private key value that is neither an existing file nor key material."""

    value: str

    def __repr__(self) -> str:
        return "InvalidKey(***)"


Credential = Union[Password, KeyPath, KeyMaterial]


def is_private_key_content(value: str) -> bool:
    """Check whether a string starts with a recognised private key header."""
    return value.startswith(PRIVATE_KEY_HEADERS)


def resolve_private_key(value: Union[str, os.PathLike]) -> Union[KeyPath, KeyMaterial, InvalidKey]:
    """
    Classify a private key setting.

    Args:
        value: Filesystem path or inline key text

    Returns:
        KeyPath, KeyMaterial, or InvalidKey when neither applies
    """
    if not isinstance(value, (str, os.PathLike)):
        return InvalidKey(repr(value))
    raw = os.fspath(value)
    if is_private_key_content(raw):
        return KeyMaterial(raw)
    # os.path.exists swallows "name too long" errors for odd inline values
    expanded = os.path.expanduser(raw)
    if os.path.exists(expanded):
        return KeyPath(Path(expanded))
    return InvalidKey(raw)


def resolve_credentials(
    password: Optional[str], private_key: Optional[Union[str, os.PathLike]]
) -> tuple:
    """
    Build the credential tuple for a deploy target.

    Both kinds may be present; the transport picks whichever authenticates.

    Returns:
        Tuple of Password / KeyPath / KeyMaterial / InvalidKey entries
    """
    credentials = []
    if password:
        credentials.append(Password(password))
    if private_key:
        credentials.append(resolve_private_key(private_key))
    return tuple(credentials)
