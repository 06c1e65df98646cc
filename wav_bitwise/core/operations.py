"""Byte-wise bitwise operations and their operand ranges.

WHY: The CLI, GUI, and pipeline must agree on which operations exist,
which names and flags select them, and which operands are legal. A single
catalog keeps all three in sync.

HOW: OperationTag enumerates the six transforms. OPERATIONS maps each
canonical name to an OperationTemplate (tag, legal operand range, label).
_ALIASES maps every accepted spelling to its canonical name. Transforms
are applied through a 256-entry translation table, so every byte is
mapped independently with no cross-byte state.

RULES:
- Shifts accept operands 0-7; AND/OR/XOR accept 0-255; NOT ignores it
- Name lookup is case-insensitive and accepts the CLI short/long flags
- Unknown names raise UnknownOperationError
- make_operation() does NOT range-check; validator.validate_operation does
- apply_operation() writes into the given buffer, it never reallocates it
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Union

from wav_bitwise.errors import UnknownOperationError

ByteBuffer = Union[bytearray, memoryview]


class OperationTag(str, enum.Enum):
    """The six supported byte transforms."""

    RIGHT_SHIFT = "right"
    LEFT_SHIFT = "left"
    NOT = "not"
    AND = "and"
    OR = "or"
    XOR = "xor"


SHIFT_RANGE: Tuple[int, int] = (0, 7)
MASK_RANGE: Tuple[int, int] = (0, 255)


@dataclass(frozen=True)
class OperationTemplate:
    """Catalog entry describing one operation.

    Attributes:
        tag: Which transform this is.
        operand_range: Inclusive (low, high) bounds, or None when the
            operand is ignored.
        label: Short description for usage text and the GUI.
    """

    tag: OperationTag
    operand_range: Optional[Tuple[int, int]]
    label: str

    @property
    def name(self) -> str:
        return self.tag.value

    @property
    def takes_operand(self) -> bool:
        return self.operand_range is not None

    def build(self, value: int = 0) -> OperationSpec:
        """Create an OperationSpec for this template.

        NOT ignores its operand, so the stored value is always 0.
        """
        if not self.takes_operand:
            value = 0
        return OperationSpec(tag=self.tag, value=int(value))


@dataclass(frozen=True)
class OperationSpec:
    """A chosen operation plus its operand, ready to validate and run."""

    tag: OperationTag
    value: int = 0

    @property
    def template(self) -> OperationTemplate:
        return OPERATIONS[self.tag.value]

    @property
    def operand_range(self) -> Optional[Tuple[int, int]]:
        return self.template.operand_range

    def describe(self) -> str:
        if self.template.takes_operand:
            return "{} {}".format(self.tag.value, self.value)
        return self.tag.value


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

OPERATIONS: Dict[str, OperationTemplate] = {
    "right": OperationTemplate(OperationTag.RIGHT_SHIFT, SHIFT_RANGE, "Right shift by value"),
    "left": OperationTemplate(OperationTag.LEFT_SHIFT, SHIFT_RANGE, "Left shift by value"),
    "not": OperationTemplate(OperationTag.NOT, None, "Bitwise NOT (value ignored)"),
    "and": OperationTemplate(OperationTag.AND, MASK_RANGE, "Bitwise AND with value"),
    "or": OperationTemplate(OperationTag.OR, MASK_RANGE, "Bitwise OR with value"),
    "xor": OperationTemplate(OperationTag.XOR, MASK_RANGE, "Bitwise XOR with value"),
}

_ALIASES: Dict[str, str] = {
    "-r": "right",
    "--right": "right",
    "-l": "left",
    "--left": "left",
    "-n": "not",
    "--not": "not",
    "-a": "and",
    "--and": "and",
    "-o": "or",
    "--or": "or",
    "-z": "xor",
    "-x": "xor",
    "--xor": "xor",
}


def lookup_operation(name: str) -> OperationTemplate:
    """Find the catalog entry for a name, alias, or CLI flag.

    Raises:
        UnknownOperationError: if nothing matches.
    """
    key = name.strip().lower()
    key = _ALIASES.get(key, key)
    try:
        return OPERATIONS[key]
    except KeyError:
        raise UnknownOperationError(
            "Unknown operation '{}'. Available: {}".format(
                name, ", ".join(OPERATIONS)
            )
        ) from None


def make_operation(name: str, value: int = 0) -> OperationSpec:
    """Build an OperationSpec from a user-supplied name and operand."""
    return lookup_operation(name).build(value)


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------

_BYTE_FUNCS: Dict[OperationTag, Callable[[int, int], int]] = {
    OperationTag.RIGHT_SHIFT: lambda b, n: b >> n,
    OperationTag.LEFT_SHIFT: lambda b, n: (b << n) & 0xFF,
    OperationTag.NOT: lambda b, _: ~b & 0xFF,
    OperationTag.AND: lambda b, v: b & v,
    OperationTag.OR: lambda b, v: b | v,
    OperationTag.XOR: lambda b, v: b ^ v,
}


def translation_table(spec: OperationSpec) -> bytes:
    """Return the 256-byte lookup table mapping each byte value."""
    func = _BYTE_FUNCS[spec.tag]
    return bytes(func(b, spec.value) for b in range(256))


def apply_operation(window: ByteBuffer, spec: OperationSpec, table: Optional[bytes] = None) -> None:
    """Transform every byte of ``window`` in place.

    ``table`` lets a caller that processes many windows build the lookup
    table once.
    """
    if table is None:
        table = translation_table(spec)
    window[:] = bytes(window).translate(table)


def transform_bytes(data: bytes, spec: OperationSpec) -> bytes:
    """Return a transformed copy of ``data``."""
    return bytes(data).translate(translation_table(spec))
