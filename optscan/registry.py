"""
Ordered collection of OptionSpec owned by a Parser.

Registration order defines both the help display order and the lookup order.
Forms are unique across the registry: a second spec reusing a short or long
form is rejected when it is registered, so lookups never have to pick between
colliding entries.
"""
from .options import OptionSpec


class OptionRegistry:
    """
    Append-only, insertion-ordered sequence of specs.

    Lookups
    - find_by_short(char) → spec | None
    - find_by_long_prefix(text) → (spec, remainder) | None
      The long form must match the beginning of `text` exactly and be followed
      by either nothing or "=": remainder is "" or "=value". Abbreviations are
      not supported.
    """

    def __init__(self):
        self._specs = []
        self._shorts = {}
        self._longs = {}

    def register(self, spec, /):
        if not isinstance(spec, OptionSpec):
            raise TypeError("register() argument must be an option spec")
        if spec.short is not None and spec.short in self._shorts:
            raise ValueError("short form -%s is already registered" % spec.short)
        if spec.long is not None and spec.long in self._longs:
            raise ValueError("long form --%s is already registered" % spec.long)

        self._specs.append(spec)
        if spec.short is not None:
            self._shorts[spec.short] = spec
        if spec.long is not None:
            self._longs[spec.long] = spec
        return spec

    def find_by_short(self, char, /):
        for spec in self._specs:
            if spec.short is not None and spec.short == char:
                return spec
        return None

    def find_by_long_prefix(self, text, /):
        for spec in self._specs:
            if spec.long is None or not text.startswith(spec.long):
                continue
            remainder = text[len(spec.long):]
            if not remainder or remainder.startswith("="):
                return spec, remainder
        return None

    def __iter__(self):
        return iter(self._specs)

    def __len__(self):
        return len(self._specs)

    def __getitem__(self, index):
        return self._specs[index]

    def __repr__(self):
        return "OptionRegistry(%r)" % (self._specs,)


__all__ = (
    "OptionRegistry",
)
