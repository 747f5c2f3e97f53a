"""Enum conversion utilities"""

from enum import Enum
from typing import Any, List, Type, TypeVar

E = TypeVar("E", bound=Enum)


class EnumHelper:
    """
    Parse config strings into Enum members and back.

    Config files use member names ("PULSE") or, for value-backed enums,
    their values ("candle"); both are accepted, case-insensitively.
    """

    @staticmethod
    def to_enum(enum_class: Type[E], value: Any) -> E:
        """
        Convert a member, member name or member value into an enum instance

        Raises:
            ValueError: if nothing in enum_class matches
        """
        if isinstance(value, enum_class):
            return value
        if isinstance(value, str):
            key = value.strip()
            try:
                return enum_class[key.upper()]
            except KeyError:
                pass
            for member in enum_class:
                if isinstance(member.value, str) and member.value.lower() == key.lower():
                    return member
        raise ValueError(
            f"Invalid {enum_class.__name__} '{value}'. "
            f"Valid: {EnumHelper.list_names(enum_class)}"
        )

    @staticmethod
    def list_names(enum_class: Type[E]) -> List[str]:
        return [member.name for member in enum_class]
