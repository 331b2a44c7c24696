"""
Symbol Tables
=============

Defines and labels discovered while collecting symbols.

Defines are bound once, from a ``NAME = literal`` line, and never change.

Labels are discovered with only a name and the index of the token-line that
owns them. Their address is filled in exactly once, by the encoder, when
its program counter reaches that line. The LabelTable is index-addressed:
collection hands out a stable slot per label, and encoding writes the
address into that slot.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from asm6502.errors import AssemblerError, DuplicateSymbolError, SourceLocation
from asm6502.assembler.literals import ByteValue, Width


@dataclass(frozen=True)
class Define:
    """
    Named compile-time constant.

    Attributes:
        name: Constant name
        width: Declared width of the right-hand literal
        value: Decoded value
        location: Where the constant was defined
    """
    name: str
    width: Width
    value: ByteValue
    location: Optional[SourceLocation] = None


@dataclass
class Label:
    """
    Label table entry.

    Attributes:
        name: Label name, without the trailing ':'
        line_index: Index of the token-line the label is bound to
        location: Where the label was declared
        address: Program counter at the owning line, once encoded
    """
    name: str
    line_index: int
    location: Optional[SourceLocation] = None
    address: Optional[int] = None

    @property
    def is_resolved(self) -> bool:
        return self.address is not None


class LabelTable:
    """
    Index-addressed label table.

    Usage:
        table = LabelTable()
        slot = table.declare("LOOP", line_index=3)
        ...
        for slot in table.slots_at_line(3):
            table.resolve(slot, pc)
        table.address_of("LOOP")
    """

    def __init__(self) -> None:
        self._labels: list[Label] = []
        self._slots_by_name: dict[str, int] = {}
        self._slots_by_line: dict[int, list[int]] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._slots_by_name

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[Label]:
        return iter(self._labels)

    def declare(
        self,
        name: str,
        line_index: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> int:
        """
        Declare a label bound to a token-line.

        Returns:
            The label's slot in the table

        Raises:
            DuplicateSymbolError: If the name is already declared
        """
        if name in self._slots_by_name:
            original = self._labels[self._slots_by_name[name]]
            raise DuplicateSymbolError(
                name,
                location=location,
                original_location=original.location,
                source_line=source_line,
            )

        slot = len(self._labels)
        self._labels.append(Label(name, line_index, location))
        self._slots_by_name[name] = slot
        self._slots_by_line.setdefault(line_index, []).append(slot)
        return slot

    def slots_at_line(self, line_index: int) -> list[int]:
        """Slots of all labels bound to a token-line, in declaration order."""
        return self._slots_by_line.get(line_index, [])

    def resolve(self, slot: int, address: int) -> Label:
        """Assign the address of the label in a slot. Allowed once."""
        label = self._labels[slot]
        if label.is_resolved:
            raise AssemblerError(
                f"label '{label.name}' already resolved to ${label.address:04X}",
                location=label.location,
            )
        label.address = address & 0xFFFF
        return label

    def get(self, name: str) -> Optional[Label]:
        slot = self._slots_by_name.get(name)
        return None if slot is None else self._labels[slot]

    def address_of(self, name: str) -> int:
        """
        Get the resolved address of a label.

        Raises:
            KeyError: If the label is unknown
            AssemblerError: If the label has not been resolved yet
        """
        label = self._labels[self._slots_by_name[name]]
        if label.address is None:
            raise AssemblerError(
                f"label '{name}' has no address",
                location=label.location,
            )
        return label.address

    def addresses(self) -> dict[str, int]:
        """Mapping of resolved label names to addresses."""
        return {
            label.name: label.address
            for label in self._labels
            if label.address is not None
        }
