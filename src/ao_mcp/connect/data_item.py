"""ANS-104 data item encoding.

Binary layout (all integers little-endian)::

    signature type   2 bytes   (1 = Arweave RSA-PSS)
    signature      512 bytes
    owner          512 bytes   (RSA modulus)
    target        1 + 32 bytes (presence flag, then id when present)
    anchor        1 + 32 bytes
    tag count        8 bytes
    tag bytes len    8 bytes
    tags             Avro array of {name: bytes, value: bytes}
    data             remaining bytes

The signature covers the SHA-384 deep hash of the item fields; the item id is
base64url(SHA-256(signature)).
"""

from __future__ import annotations

import base64
import hashlib
import struct
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Union

from ao_mcp.connect.types import Tag

SIGNATURE_TYPE_ARWEAVE = 1
SIGNATURE_LENGTH = 512
OWNER_LENGTH = 512
ID_LENGTH = 32

DeepHashChunk = Union[bytes, Sequence["DeepHashChunk"]]


def b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def b64url_decode(value: str) -> bytes:
    """Decode unpadded base64url.

    Raises:
        ValueError: If ``value`` contains characters outside the alphabet
    """
    padding = "=" * (-len(value) % 4)
    return base64.b64decode(value + padding, altchars=b"-_", validate=True)


def _zigzag_varint(value: int) -> bytes:
    encoded = (value << 1) ^ (value >> 63)
    out = bytearray()
    while encoded & ~0x7F:
        out.append((encoded & 0x7F) | 0x80)
        encoded >>= 7
    out.append(encoded)
    return bytes(out)


def _avro_bytes(raw: bytes) -> bytes:
    return _zigzag_varint(len(raw)) + raw


def encode_tags(tags: Sequence[Tag]) -> bytes:
    """Serialize tags as an Avro array of ``{name: bytes, value: bytes}``.

    An empty tag list serializes to zero bytes.
    """
    if not tags:
        return b""
    out = bytearray(_zigzag_varint(len(tags)))
    for tag in tags:
        out += _avro_bytes(tag.name.encode("utf-8"))
        out += _avro_bytes(tag.value.encode("utf-8"))
    out += _zigzag_varint(0)
    return bytes(out)


def deep_hash(chunk: DeepHashChunk) -> bytes:
    """Arweave deep hash (SHA-384) of a blob or nested list of blobs."""
    if isinstance(chunk, (bytes, bytearray)):
        tag = b"blob" + str(len(chunk)).encode("ascii")
        tagged = hashlib.sha384(tag).digest() + hashlib.sha384(chunk).digest()
        return hashlib.sha384(tagged).digest()

    acc = hashlib.sha384(b"list" + str(len(chunk)).encode("ascii")).digest()
    for item in chunk:
        acc = hashlib.sha384(acc + deep_hash(item)).digest()
    return acc


@dataclass
class DataItem:
    """An unsigned or signed ANS-104 data item."""

    owner: bytes
    data: bytes = b""
    tags: list[Tag] = field(default_factory=list)
    target: bytes = b""
    anchor: bytes = b""
    signature: bytes = b""
    signature_type: int = SIGNATURE_TYPE_ARWEAVE

    def __post_init__(self) -> None:
        if len(self.owner) != OWNER_LENGTH:
            raise ValueError(f"owner must be {OWNER_LENGTH} bytes, got {len(self.owner)}")
        if self.target and len(self.target) != ID_LENGTH:
            raise ValueError(f"target must be {ID_LENGTH} bytes, got {len(self.target)}")
        if self.anchor and len(self.anchor) != ID_LENGTH:
            raise ValueError(f"anchor must be {ID_LENGTH} bytes, got {len(self.anchor)}")

    def signature_data(self) -> bytes:
        """Message digest that the owner's key signs."""
        return deep_hash(
            [
                b"dataitem",
                b"1",
                str(self.signature_type).encode("ascii"),
                self.owner,
                self.target,
                self.anchor,
                encode_tags(self.tags),
                self.data,
            ]
        )

    @property
    def is_signed(self) -> bool:
        return len(self.signature) == SIGNATURE_LENGTH

    @property
    def id(self) -> str:
        if not self.is_signed:
            raise ValueError("data item is not signed")
        return b64url_encode(hashlib.sha256(self.signature).digest())

    def to_bytes(self) -> bytes:
        if not self.is_signed:
            raise ValueError("data item is not signed")
        tag_bytes = encode_tags(self.tags)
        parts = [
            struct.pack("<H", self.signature_type),
            self.signature,
            self.owner,
            b"\x01" + self.target if self.target else b"\x00",
            b"\x01" + self.anchor if self.anchor else b"\x00",
            struct.pack("<Q", len(self.tags)),
            struct.pack("<Q", len(tag_bytes)),
            tag_bytes,
            self.data,
        ]
        return b"".join(parts)
