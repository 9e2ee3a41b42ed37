from typing import NamedTuple, Optional

class ObjectName(NamedTuple):
    """Schema-qualified catalog object name."""
    schema: str
    name: str

    @property
    def qualified(self) -> str:
        return f"{self.schema}.{self.name}"

def split_object_name(name: str, default_schema: str) -> ObjectName:
    """
    Splits 'schema.object' on the first dot. A bare name falls back
    to the session's default schema.
    """
    schema, dot, obj = name.partition(".")
    if not dot:
        return ObjectName(default_schema, name)
    return ObjectName(schema, obj)

def quote_identifier(identifier: str, quote_char: str = '"') -> str:
    escaped = identifier.replace(quote_char, quote_char * 2)
    return f"{quote_char}{escaped}{quote_char}"

def quote_object_name(name: str, quote_char: Optional[str] = '"') -> str:
    """
    Quotes schema and object parts independently: my schema.t"1 -> "my schema"."t""1".
    With quote_char=None the name is returned untouched.
    """
    if quote_char is None:
        return name
    schema, dot, obj = name.partition(".")
    if not dot:
        return quote_identifier(name, quote_char)
    return f"{quote_identifier(schema, quote_char)}.{quote_identifier(obj, quote_char)}"
