"""Unit tests for the operation catalog and byte transforms.

WHY: The catalog is shared by the CLI flags, the GUI menu, and the
validator. A wrong alias or range would silently select the wrong
transform or accept an operand the pipeline cannot honor.

HOW: Tests cover name/alias lookup, template ranges, OperationSpec
construction, every transform against hand-computed values, and the
self-inverse properties of NOT and XOR over all 256 byte values.

RULES:
- Transforms are checked on the full 0-255 domain where practical
- In-place application must keep the caller's buffer object
"""

import pytest

from wav_bitwise.core.operations import (
    MASK_RANGE,
    OPERATIONS,
    SHIFT_RANGE,
    OperationSpec,
    OperationTag,
    apply_operation,
    lookup_operation,
    make_operation,
    transform_bytes,
    translation_table,
)
from wav_bitwise.errors import ErrorKind, UnknownOperationError

ALL_BYTES = bytes(range(256))


class TestCatalog:
    """OPERATIONS and lookup_operation()."""

    def test_six_operations(self):
        assert list(OPERATIONS) == ["right", "left", "not", "and", "or", "xor"]

    @pytest.mark.parametrize(
        "name,tag",
        [
            ("right", OperationTag.RIGHT_SHIFT),
            ("-r", OperationTag.RIGHT_SHIFT),
            ("--right", OperationTag.RIGHT_SHIFT),
            ("left", OperationTag.LEFT_SHIFT),
            ("-l", OperationTag.LEFT_SHIFT),
            ("not", OperationTag.NOT),
            ("-n", OperationTag.NOT),
            ("and", OperationTag.AND),
            ("-a", OperationTag.AND),
            ("or", OperationTag.OR),
            ("-o", OperationTag.OR),
            ("xor", OperationTag.XOR),
            ("-z", OperationTag.XOR),
            ("-x", OperationTag.XOR),
            ("--xor", OperationTag.XOR),
            ("XOR", OperationTag.XOR),
            ("  and ", OperationTag.AND),
        ],
    )
    def test_names_and_aliases(self, name, tag):
        assert lookup_operation(name).tag == tag

    def test_unknown_operation(self):
        with pytest.raises(UnknownOperationError) as excinfo:
            lookup_operation("nand")
        assert excinfo.value.kind == ErrorKind.UNKNOWN_OPERATION
        assert "nand" in str(excinfo.value)

    def test_ranges(self):
        assert OPERATIONS["right"].operand_range == SHIFT_RANGE == (0, 7)
        assert OPERATIONS["left"].operand_range == SHIFT_RANGE
        assert OPERATIONS["not"].operand_range is None
        for name in ("and", "or", "xor"):
            assert OPERATIONS[name].operand_range == MASK_RANGE == (0, 255)


class TestOperationSpec:
    """make_operation() and OperationSpec helpers."""

    def test_make_operation_keeps_value(self):
        spec = make_operation("-a", 0x0F)
        assert spec == OperationSpec(tag=OperationTag.AND, value=0x0F)

    def test_not_ignores_operand(self):
        assert make_operation("not", 42).value == 0

    def test_out_of_range_value_is_not_rejected_here(self):
        # Range checks belong to the validator
        assert make_operation("right", 99).value == 99

    def test_describe(self):
        assert make_operation("xor", 255).describe() == "xor 255"
        assert make_operation("not").describe() == "not"

    def test_spec_is_immutable(self):
        spec = make_operation("or", 1)
        with pytest.raises(Exception):
            spec.value = 2


class TestTransforms:
    """Per-byte results of each operation."""

    def test_right_shift(self):
        spec = make_operation("right", 4)
        assert transform_bytes(bytes([0x0F, 0xF0, 0x55]), spec) == bytes([0x00, 0x0F, 0x05])

    def test_left_shift_masks_to_byte(self):
        spec = make_operation("left", 4)
        assert transform_bytes(bytes([0x0F, 0xF0, 0x55]), spec) == bytes([0xF0, 0x00, 0x50])

    def test_not(self):
        spec = make_operation("not")
        assert transform_bytes(bytes([0x00, 0xFF, 0x0F]), spec) == bytes([0xFF, 0x00, 0xF0])

    def test_and(self):
        spec = make_operation("and", 0xF0)
        assert transform_bytes(bytes([0x0F, 0xF0, 0x55]), spec) == bytes([0x00, 0xF0, 0x50])

    def test_or(self):
        spec = make_operation("or", 0x0F)
        assert transform_bytes(bytes([0x0F, 0xF0, 0x55]), spec) == bytes([0x0F, 0xFF, 0x5F])

    def test_xor(self):
        spec = make_operation("xor", 0xFF)
        assert transform_bytes(bytes([0x0F, 0xF0, 0x55]), spec) == bytes([0xF0, 0x0F, 0xAA])

    def test_zero_shift_is_identity(self):
        assert transform_bytes(ALL_BYTES, make_operation("right", 0)) == ALL_BYTES
        assert transform_bytes(ALL_BYTES, make_operation("left", 0)) == ALL_BYTES

    def test_table_matches_formula(self):
        table = translation_table(make_operation("left", 3))
        assert len(table) == 256
        assert all(table[b] == (b << 3) & 0xFF for b in range(256))

    def test_not_is_self_inverse(self):
        spec = make_operation("not")
        assert transform_bytes(transform_bytes(ALL_BYTES, spec), spec) == ALL_BYTES

    @pytest.mark.parametrize("value", [0, 1, 0x55, 0x80, 0xFF])
    def test_xor_is_self_inverse(self, value):
        spec = make_operation("xor", value)
        assert transform_bytes(transform_bytes(ALL_BYTES, spec), spec) == ALL_BYTES


class TestApplyInPlace:
    """apply_operation() mutates the given buffer."""

    def test_bytearray_mutated_in_place(self):
        window = bytearray([0x0F, 0xF0, 0x55])
        original_id = id(window)
        apply_operation(window, make_operation("xor", 0xFF))
        assert id(window) == original_id
        assert window == bytearray([0xF0, 0x0F, 0xAA])

    def test_memoryview_slice_only_touches_slice(self):
        window = bytearray([0x01, 0x02, 0x03, 0x04])
        view = memoryview(window)[:2]
        apply_operation(view, make_operation("or", 0x80))
        assert window == bytearray([0x81, 0x82, 0x03, 0x04])
