"""Shared type definitions for swapflow models."""

from eth_utils import to_checksum_address

# Maximum uint256 value
UINT256_MAX = 2**256 - 1

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an Ethereum address to lowercase.

    Args:
        address: An Ethereum address (with or without 0x prefix)
        validate: If True, raises ValueError for invalid addresses.

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is not a valid Ethereum address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid Ethereum address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def checksum_address(address: str) -> str:
    """Validate an address and return its EIP-55 checksummed form.

    Raises:
        ValueError: If the address is not 0x + 40 hex chars
    """
    return to_checksum_address(normalize_address(address, validate=True))


def is_zero_address(address: str) -> bool:
    """True for the null address returned by factories for missing pools."""
    return normalize_address(address) == ZERO_ADDRESS


def same_address(a: str, b: str) -> bool:
    """Case-insensitive address comparison."""
    return normalize_address(a) == normalize_address(b)
