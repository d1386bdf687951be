"""Data item signing with Arweave JWK wallets."""

from __future__ import annotations

import hashlib
from collections.abc import Mapping, Sequence
from typing import Any

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ao_mcp.connect.data_item import (
    ID_LENGTH,
    OWNER_LENGTH,
    DataItem,
    b64url_decode,
    b64url_encode,
)
from ao_mcp.connect.errors import InvalidWalletError, ValidationError
from ao_mcp.connect.types import Tag

_JWK_FIELDS = ("n", "e", "d", "p", "q", "dp", "dq", "qi")
_PSS_SALT_LENGTH = 32


def _jwk_int(jwk: Mapping[str, Any], key: str) -> int:
    value = jwk.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidWalletError(f"wallet JWK is missing field '{key}'")
    try:
        return int.from_bytes(b64url_decode(value), "big")
    except ValueError as exc:
        raise InvalidWalletError(f"wallet JWK field '{key}' is not base64url") from exc


def _decode_target(target: str) -> bytes:
    # DataItem reads b"" as untargeted, so only a full id is accepted.
    try:
        raw = b64url_decode(target)
    except ValueError as exc:
        raise ValidationError(f"invalid target process id {target!r}: not base64url") from exc
    if len(raw) != ID_LENGTH:
        raise ValidationError(
            f"invalid target process id {target!r}: decodes to {len(raw)} bytes, "
            f"expected {ID_LENGTH}"
        )
    return raw


class DataItemSigner:
    """Signs ANS-104 data items with an RSA-4096 private key.

    Instances are created per call from wallet key material and are not meant
    to be cached.
    """

    signature_type = 1

    def __init__(self, private_key: rsa.RSAPrivateKey) -> None:
        modulus = private_key.public_key().public_numbers().n
        owner = modulus.to_bytes((modulus.bit_length() + 7) // 8, "big")
        if len(owner) != OWNER_LENGTH:
            raise InvalidWalletError(
                f"wallet key must be a 4096-bit RSA key, got {modulus.bit_length()} bits"
            )
        self._private_key = private_key
        self._owner = owner

    @property
    def owner(self) -> bytes:
        return self._owner

    @property
    def address(self) -> str:
        """Arweave wallet address derived from the owner modulus."""
        return b64url_encode(hashlib.sha256(self._owner).digest())

    def sign(self, message: bytes) -> bytes:
        return self._private_key.sign(
            message,
            padding.PSS(
                mgf=padding.MGF1(hashes.SHA256()),
                salt_length=_PSS_SALT_LENGTH,
            ),
            hashes.SHA256(),
        )

    def sign_data_item(
        self,
        *,
        data: bytes | str,
        tags: Sequence[Tag],
        target: str | None = None,
        anchor: bytes | None = None,
    ) -> DataItem:
        """Build and sign a data item.

        Args:
            data: Item payload; strings are UTF-8 encoded
            tags: Tags in wire order
            target: Optional base64url id of the receiving process
            anchor: Optional 32-byte anchor

        Returns:
            The signed DataItem
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        item = DataItem(
            owner=self._owner,
            data=data,
            tags=list(tags),
            target=_decode_target(target) if target is not None else b"",
            anchor=anchor or b"",
            signature_type=self.signature_type,
        )
        item.signature = self.sign(item.signature_data())
        return item


def create_data_item_signer(jwk: Mapping[str, Any]) -> DataItemSigner:
    """Derive a signer from an Arweave JWK wallet.

    Raises:
        InvalidWalletError: If the JWK is not a complete RSA private key
    """
    if not isinstance(jwk, Mapping):
        raise InvalidWalletError("wallet JWK must be a JSON object")
    kty = jwk.get("kty", "RSA")
    if kty != "RSA":
        raise InvalidWalletError(f"wallet JWK must be an RSA key, got kty={kty!r}")

    n, e, d, p, q, dp, dq, qi = (_jwk_int(jwk, key) for key in _JWK_FIELDS)
    try:
        private_key = rsa.RSAPrivateNumbers(
            p=p,
            q=q,
            d=d,
            dmp1=dp,
            dmq1=dq,
            iqmp=qi,
            public_numbers=rsa.RSAPublicNumbers(e=e, n=n),
        ).private_key()
    except ValueError as exc:
        raise InvalidWalletError(f"wallet JWK is not a valid RSA key: {exc!s}") from exc
    return DataItemSigner(private_key)
