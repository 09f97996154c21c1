"""
Exceptions raised by the option tree.

Lookup misses inside the tree are reported as ``None`` by the resolver; the
facade turns them into OptionNotFoundError. Integrity errors signal broken
invariants (a missing template, a dangling alias) and are not meant to be
recovered from at runtime.
"""


class OptionError(Exception):
    """Base class for option tree errors."""
    pass


class OptionNotFoundError(OptionError, KeyError):
    """Raised when a dotted path does not resolve to an option."""

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path

    def __str__(self) -> str:
        return f"No such option: {self.path}"


class OptionValueError(OptionError, ValueError):
    """Raised when a value is rejected by an option's type or bounds."""
    pass


class OptionIntegrityError(OptionError, RuntimeError):
    """Raised when the tree violates one of its structural invariants."""
    pass


class TemplateMissingError(OptionIntegrityError):
    """Raised when an autocreating tree has no _template_ child."""
    pass


class AliasTargetError(OptionIntegrityError):
    """Raised when an alias points to an option that does not exist."""
    pass
