"""Utility helpers to build and parse EMV-style TLV payloads."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable, Iterator

TagMap = dict[str, str]

# Top-level tags whose value is itself a TLV sequence.
CONTAINER_TAGS: Final = frozenset({"38", "62", "64"})
# Children of a container that nest one level deeper (38 -> 01 beneficiary info).
NESTED_CONTAINERS: Final[dict[str, frozenset[str]]] = {"38": frozenset({"01"})}

_HEADER_LEN = 4


@dataclass(frozen=True)
class TLVItem:
    tag: str
    value: str

    def serialize(self) -> str:
        return build_field(self.tag, self.value)


def build_field(tag: str, value: str) -> str:
    """Serialize one field; empty values produce no output at all."""

    if not value:
        return ""
    return f"{tag}{len(value):02d}{value}"


def build_tlv(items: Iterable[TLVItem]) -> str:
    """Serialize iterable of TLV items into EMV string."""

    return "".join(item.serialize() for item in items)


def _parse_length(raw: str) -> int:
    # "+1" reads as 1; a negative length would move the cursor backwards, so it reads as 0.
    raw = raw.removeprefix("+")
    if raw.isascii() and raw.isdigit():
        return int(raw)
    return 0


def parse_tlv(payload: str) -> Iterator[TLVItem]:
    """Parse TLV payload string into TLV items.

    Parsing is lenient: a trailing fragment shorter than a tag+length header, or a
    field whose declared length runs past the end of the input, ends the scan
    without raising. A non-numeric length reads as zero.
    """

    idx = 0
    total = len(payload)
    while total - idx >= _HEADER_LEN:
        tag = payload[idx : idx + 2]
        length = _parse_length(payload[idx + 2 : idx + 4])
        value_start = idx + _HEADER_LEN
        value_end = value_start + length
        if value_end > total:
            break
        yield TLVItem(tag=tag, value=payload[value_start:value_end])
        idx = value_end


def _decode_children(parent: str, data: str) -> TagMap:
    fields: TagMap = {}
    deeper = NESTED_CONTAINERS.get(parent, frozenset())
    for item in parse_tlv(data):
        fields[item.tag] = item.value
        if item.tag in deeper:
            for sub_tag, sub_value in _decode_children(f"{parent}_{item.tag}", item.value).items():
                fields[f"{item.tag}_{sub_tag}"] = sub_value
    return fields


def decode_tlv(raw: str) -> TagMap:
    """Decode a payload into a flat tag map.

    Children of container tags are merged under ``"<parent>_<child>"`` keys, e.g.
    ``38_00`` for the GUID and ``38_01_00`` for the bank BIN inside the beneficiary
    block. Duplicate tags overwrite earlier ones.
    """

    tag_map: TagMap = {}
    for item in parse_tlv(raw):
        tag_map[item.tag] = item.value
        if item.tag in CONTAINER_TAGS:
            for sub_tag, sub_value in _decode_children(item.tag, item.value).items():
                tag_map[f"{item.tag}_{sub_tag}"] = sub_value
    return tag_map


def get_tag_value(tag_map: TagMap, tag: str) -> str | None:
    return tag_map.get(tag)
