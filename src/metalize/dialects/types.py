import re
from typing import Iterable, Optional
from ..domain.models import TypeDetails

# base(args) with nothing after the closing paren, e.g. "numeric(16,3)"
_TYPE_STRING_PATTERN = re.compile(r"^\s*(?P<base>[^()]+?)\s*\((?P<args>[^()]*)\)\s*$")

class TypeDescriptorParser:
    """
    Decomposes a catalog column type into a TypeDetails.

    Each dialect declares which base types carry a length (character and
    binary families) and which carry precision/scale (exact numerics).
    Anything else, including types the dialect adds later, comes back as
    the bare type name.
    """
    def __init__(self, length_types: Iterable[str], exact_numeric_types: Iterable[str]):
        self.length_types = frozenset(t.lower() for t in length_types)
        self.exact_numeric_types = frozenset(t.lower() for t in exact_numeric_types)

    def parse(
        self,
        data_type: Optional[str] = None,
        length: Optional[int] = None,
        precision: Optional[int] = None,
        scale: Optional[int] = None,
        column_type: Optional[str] = None,
    ) -> TypeDetails:
        """
        Uses the separate catalog fields when the catalog reports a base type,
        otherwise falls back to decomposing the combined column_type string.
        """
        if data_type is None:
            if column_type is None:
                raise ValueError("Either data_type or column_type is required")
            return self.parse_type_string(column_type)

        base = data_type.lower()
        # Length wins: the two modifier families never legitimately coexist
        if length is not None and base in self.length_types:
            return TypeDetails(type=data_type, length=int(length))
        if precision is not None and base in self.exact_numeric_types:
            return TypeDetails(
                type=data_type,
                precision=int(precision),
                scale=int(scale) if scale is not None else 0,
            )
        return TypeDetails(type=data_type)

    def parse_type_string(self, column_type: str) -> TypeDetails:
        match = _TYPE_STRING_PATTERN.match(column_type)
        if not match:
            return TypeDetails(type=column_type.strip())

        base = match.group("base")
        args = [arg.strip() for arg in match.group("args").split(",")]
        if not all(arg.isdigit() for arg in args):
            return TypeDetails(type=column_type.strip())

        if base.lower() in self.length_types and len(args) == 1:
            return TypeDetails(type=base, length=int(args[0]))
        if base.lower() in self.exact_numeric_types and len(args) in (1, 2):
            return TypeDetails(
                type=base,
                precision=int(args[0]),
                scale=int(args[1]) if len(args) == 2 else 0,
            )
        return TypeDetails(type=column_type.strip())
