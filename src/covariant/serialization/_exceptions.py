__all__ = ["CannotSerializeError", "WrongFormatError"]

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class WrongFormatError(Exception):
    reason: str
    position: int

    def __str__(self):
        return f"Malformed serialized tensor at byte {self.position}: {self.reason}"


@dataclass(frozen=True, slots=True)
class CannotSerializeError(Exception):
    value: object
    reason: str

    def __str__(self):
        return f"Cannot serialize {self.value!r}: {self.reason}"
