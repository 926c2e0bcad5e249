"""
Exceptions raised while projecting a decoded document into torrent metadata.
"""

__all__ = [
    "MetainfoError",
    "TopLevelNotDictionary",
    "MissingRequiredField",
    "FieldWrongType",
    "InvalidFieldValue",
    "ConflictingLengthAndFiles",
    "MissingLengthOrFiles",
    "InvalidPathSegment",
]


class MetainfoError(Exception):
    """
    Base class for metainfo schema errors.

    `context` lists the enclosing fields (outermost first) the error was
    raised under, e.g. ["info", "files[2]"].
    """

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.context = []

    def within(self, field: str) -> "MetainfoError":
        """Records that the error happened inside `field`. Returns self."""
        self.context.insert(0, field)
        return self

    def __str__(self):
        prefix = "".join(f"error parsing '{name}': " for name in self.context)
        return prefix + self.message


class TopLevelNotDictionary(MetainfoError):
    def __init__(self, found: str):
        super().__init__(f"top-level value is {found}, not a dictionary")


class MissingRequiredField(MetainfoError):
    def __init__(self, field: str):
        super().__init__(f"missing required field '{field}'", field)


class FieldWrongType(MetainfoError):
    def __init__(self, field: str, expected: str):
        self.expected = expected
        super().__init__(f"field '{field}' is not {expected}", field)


class InvalidFieldValue(MetainfoError):
    def __init__(self, field: str, reason: str):
        super().__init__(f"field '{field}' {reason}", field)


class ConflictingLengthAndFiles(MetainfoError):
    def __init__(self):
        super().__init__("info contains both 'length' and 'files'")


class MissingLengthOrFiles(MetainfoError):
    def __init__(self):
        super().__init__("info contains neither 'length' nor 'files'")


class InvalidPathSegment(MetainfoError):
    def __init__(self, reason: str):
        super().__init__(f"invalid path segment: {reason}", "path")
