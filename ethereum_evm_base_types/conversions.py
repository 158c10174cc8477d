"""Common conversion methods."""

from re import sub
from typing import List, SupportsBytes, TypeAlias

BytesConvertible: TypeAlias = str | bytes | SupportsBytes | List[int]
FixedSizeBytesConvertible: TypeAlias = str | bytes | SupportsBytes | List[int] | int
NumberConvertible: TypeAlias = str | bytes | SupportsBytes | int


def to_bytes(input_bytes: BytesConvertible) -> bytes:
    """Convert multiple types into bytes."""
    if input_bytes is None:
        raise ValueError("Cannot convert `None` input to bytes")

    if (
        isinstance(input_bytes, SupportsBytes)
        or isinstance(input_bytes, bytes)
        or isinstance(input_bytes, list)
    ):
        return bytes(input_bytes)

    if isinstance(input_bytes, str):
        input_bytes = sub(r"\s+", "", input_bytes)
        if input_bytes.startswith(("0x", "0X")):
            input_bytes = input_bytes[2:]
        if len(input_bytes) % 2 == 1:
            input_bytes = "0" + input_bytes
        return bytes.fromhex(input_bytes)

    raise ValueError(f"invalid type for `bytes`: {type(input_bytes).__name__}")


def to_fixed_size_bytes(
    input_bytes: FixedSizeBytesConvertible,
    size: int,
    *,
    left_padding: bool = True,
) -> bytes:
    """
    Convert multiple types into fixed-size bytes.

    :param input_bytes: The input data to convert.
    :param size: The size of the output bytes.
    :param left_padding: Whether to allow left-padding of short inputs using zeros. Integer
        inputs are always padded.
    """
    if isinstance(input_bytes, int):
        if input_bytes < 0:
            raise ValueError(f"negative value cannot be converted to bytes: {input_bytes}")
        if input_bytes.bit_length() > size * 8:
            raise ValueError(f"input is too large for {size} bytes: {hex(input_bytes)}")
        return int.to_bytes(input_bytes, length=size, byteorder="big")
    input_bytes = to_bytes(input_bytes)
    if len(input_bytes) > size:
        raise ValueError(f"input is too large for fixed size bytes: {len(input_bytes)} > {size}")
    if len(input_bytes) < size:
        if left_padding:
            return bytes(input_bytes).rjust(size, b"\x00")
        raise ValueError(f"input is too small for fixed size bytes: {len(input_bytes)} < {size}")
    return input_bytes


def to_number(input_number: NumberConvertible) -> int:
    """Convert multiple types into a number."""
    if isinstance(input_number, bool):
        raise ValueError("invalid type for `number`: bool")
    if isinstance(input_number, int):
        return input_number
    if isinstance(input_number, str):
        return int(input_number.strip().replace("_", ""), 0)
    if isinstance(input_number, bytes) or isinstance(input_number, SupportsBytes):
        return int.from_bytes(input_number, byteorder="big")
    raise ValueError(f"invalid type for `number`: {type(input_number).__name__}")
