"""Basic type primitives used to define other types."""

from decimal import MAX_EMAX, MIN_EMIN, Decimal, InvalidOperation, localcontext
from typing import Annotated, Any, ClassVar, SupportsBytes, Type, TypeVar

from Crypto.Hash import keccak
from pydantic import BeforeValidator, Field, GetCoreSchemaHandler
from pydantic_core.core_schema import (
    PlainValidatorFunctionSchema,
    no_info_plain_validator_function,
    to_string_ser_schema,
)

from .conversions import (
    BytesConvertible,
    FixedSizeBytesConvertible,
    NumberConvertible,
    to_bytes,
    to_fixed_size_bytes,
    to_number,
)

N = TypeVar("N", bound="Number")

UINT64_MAX = 2**64 - 1
UINT256_MAX = 2**256 - 1


def parse_hex_string(value: Any) -> Any:
    """Convert `0x`-prefixed strings into integers, leaving other values untouched."""
    if isinstance(value, str) and value.strip().lower().startswith("0x"):
        return to_number(value)
    return value


Uint64 = Annotated[int, BeforeValidator(parse_hex_string), Field(ge=0, le=UINT64_MAX)]
"""
Unsigned 64-bit integer, used for gas, block and rate-limit values. Hex strings, as kept by
the configuration providers, are accepted.
"""


class ToStringSchema:
    """
    Type converter to add a simple pydantic schema that correctly
    parses and serializes the type.
    """

    @staticmethod
    def __get_pydantic_core_schema__(
        source_type: Any, handler: GetCoreSchemaHandler
    ) -> PlainValidatorFunctionSchema:
        """Call the class constructor without info and appends the serialization schema."""
        return no_info_plain_validator_function(
            source_type,
            serialization=to_string_ser_schema(when_used="json-unless-none"),
        )


class Number(int, ToStringSchema):
    """Class that helps represent unsigned numbers."""

    def __new__(cls, input_number: NumberConvertible | N):
        """Create a new Number object."""
        value = to_number(input_number)
        if value < 0:
            raise ValueError(f"{cls.__name__} cannot be negative: {value}")
        return super(Number, cls).__new__(cls, value)

    def __str__(self) -> str:
        """Return the string representation of the number."""
        return str(int(self))

    def hex(self) -> str:
        """Return the hexadecimal representation of the number."""
        return hex(self)


class HexNumber(Number):
    """Class that helps represent an hexadecimal number."""

    def __str__(self) -> str:
        """Return the string representation of the number."""
        return self.hex()


class Wei(HexNumber):
    """
    Class that represents a 256-bit amount of wei that can be parsed from strings.

    Plain integers (decimal or `0x`-prefixed) are parsed exactly; a value followed by a
    unit (e.g. `1.5 ether`) or written as a power (`10**18`) is scaled accordingly. Scaling
    uses decimal arithmetic, and amounts that do not resolve to a whole number of wei are
    rejected.
    """

    def __new__(cls, input_number: NumberConvertible | N):
        """Create a new Wei object."""
        if isinstance(input_number, str):
            value = cls._parse(input_number)
        else:
            value = to_number(input_number)
        if value < 0 or value > UINT256_MAX:
            raise ValueError(f"Value {value} does not fit in 256 bits")
        return super(Number, cls).__new__(cls, value)

    @classmethod
    def _parse(cls, input_str: str) -> int:
        words = input_str.split()
        if not 1 <= len(words) <= 2:
            raise ValueError(f"Invalid wei amount: {input_str!r}")
        value_str = words[0]
        multiplier = 1
        if len(words) > 1:
            multiplier = cls._get_multiplier(words[1].lower())
        if "**" in value_str:
            base, exp = (int(part) for part in value_str.split("**", 1))
            if exp < 0:
                raise ValueError(f"Negative exponent in wei amount: {input_str!r}")
            if abs(base) > 1 and exp > 256:
                raise ValueError(f"Value {input_str!r} does not fit in 256 bits")
            return base**exp * multiplier
        try:
            return to_number(value_str) * multiplier
        except ValueError:
            pass
        try:
            amount = Decimal(value_str)
        except InvalidOperation as e:
            raise ValueError(f"Invalid wei amount: {input_str!r}") from e
        if not amount.is_finite():
            raise ValueError(f"Wei amount must be finite: {input_str!r}")
        if amount and amount.adjusted() > 78:
            raise ValueError(f"Value {input_str!r} does not fit in 256 bits")
        with localcontext() as ctx:
            # multipliers have at most 19 digits, so this precision keeps the product exact
            ctx.prec = len(amount.as_tuple().digits) + 19
            ctx.Emin, ctx.Emax = MIN_EMIN, MAX_EMAX
            amount *= multiplier
            if amount != amount.to_integral_value():
                raise ValueError(f"Wei amount {input_str!r} is not a whole number of wei")
        return int(amount)

    @staticmethod
    def _get_multiplier(unit: str) -> int:
        """Return the multiplier for the given unit of wei, handling synonyms."""
        match unit:
            case "wei":
                return 1
            case "kwei" | "babbage" | "femtoether":
                return 10**3
            case "mwei" | "lovelace" | "picoether":
                return 10**6
            case "gwei" | "shannon" | "nanoether" | "nano":
                return 10**9
            case "szabo" | "microether" | "micro":
                return 10**12
            case "finney" | "milliether" | "milli":
                return 10**15
            case "ether" | "eth":
                return 10**18
            case _:
                raise ValueError(f"Invalid unit {unit}")


class Bytes(bytes, ToStringSchema):
    """Class that helps represent bytes of variable length."""

    def __new__(cls, input_bytes: BytesConvertible = b""):
        """Create a new Bytes object."""
        if type(input_bytes) is cls:
            return input_bytes
        return super(Bytes, cls).__new__(cls, to_bytes(input_bytes))

    def __hash__(self) -> int:
        """Return the hash of the bytes."""
        return super(Bytes, self).__hash__()

    def __str__(self) -> str:
        """Return the hexadecimal representation of the bytes."""
        return self.hex()

    def hex(self, *args, **kwargs) -> str:
        """Return the hexadecimal representation of the bytes."""
        return "0x" + super().hex(*args, **kwargs)

    def keccak256(self) -> "Hash":
        """Return the keccak256 hash of the bytes."""
        k = keccak.new(digest_bits=256)
        return Hash(k.update(bytes(self)).digest())


T = TypeVar("T", bound="FixedSizeBytes")


class FixedSizeBytes(Bytes):
    """Class that helps represent bytes of fixed length."""

    byte_length: ClassVar[int]
    _sized_: ClassVar[Type["FixedSizeBytes"]]

    def __class_getitem__(cls, length: int) -> Type["FixedSizeBytes"]:
        """Create a new FixedSizeBytes class with the given length."""

        class Sized(cls):  # type: ignore
            byte_length = length

        Sized._sized_ = Sized
        return Sized

    def __new__(cls, input_bytes: FixedSizeBytesConvertible | T):
        """Create a new FixedSizeBytes object."""
        if type(input_bytes) is cls:
            return input_bytes
        return super(FixedSizeBytes, cls).__new__(
            cls, to_fixed_size_bytes(input_bytes, cls.byte_length)
        )

    def __hash__(self) -> int:
        """Return the hash of the bytes."""
        return super(FixedSizeBytes, self).__hash__()

    def __eq__(self, other: object) -> bool:
        """Compare two FixedSizeBytes objects to be equal."""
        if other is None:
            return False
        if not isinstance(other, FixedSizeBytes):
            if not isinstance(other, (str, int, bytes, SupportsBytes)):
                return NotImplemented
            try:
                other = self._sized_(other)
            except ValueError:
                return False
        return super().__eq__(other)

    def __ne__(self, other: object) -> bool:
        """Compare two FixedSizeBytes objects to be not equal."""
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result


class Address(FixedSizeBytes[20]):  # type: ignore
    """
    Class that represents a 20-byte Ethereum address.

    Mixed-case hex input is treated as an EIP-55 checksummed address and rejected when the
    checksum does not match.
    """

    def __new__(cls, input_bytes: "FixedSizeBytesConvertible | Address"):
        """Create a new Address object, validating mixed-case checksums."""
        instance = super(Address, cls).__new__(cls, input_bytes)
        if isinstance(input_bytes, str):
            digits = input_bytes.strip()
            if digits.startswith(("0x", "0X")):
                digits = digits[2:]
            if len(digits) == 40 and digits != digits.lower() and digits != digits.upper():
                if "0x" + digits != instance.checksum():
                    raise ValueError(f"Invalid EIP-55 checksum for address {input_bytes}")
        return instance

    def checksum(self) -> str:
        """Return the EIP-55 mixed-case representation of the address."""
        lower = bytes(self).hex()
        digest = Bytes(lower.encode()).keccak256().hex()[2:]
        return "0x" + "".join(
            c.upper() if c.isalpha() and int(digest[i], 16) >= 8 else c
            for i, c in enumerate(lower)
        )


class Hash(FixedSizeBytes[32]):  # type: ignore
    """Class that represents 32-byte hashes, such as the block prevrandao."""

    pass
