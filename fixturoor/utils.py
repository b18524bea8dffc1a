"""Hex helpers shared by the artifact and client code."""


def to_hex(value, length: int = 0) -> str:
    """Convert a bytes or int value to hex string with 0x prefix."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    elif isinstance(value, int):
        if length > 0:
            return "0x" + format(value, f'0{length * 2}x')
        return hex(value)
    return str(value)


def from_hex(value: str) -> bytes:
    """Decode a hex string, with or without the 0x prefix."""
    if value.startswith("0x"):
        value = value[2:]
    return bytes.fromhex(value)
