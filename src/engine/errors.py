"""Error types raised by the pixel engine and its surface layer."""


class NotARenderableSurface(TypeError):
    """The target is not a surface whose pixels can be read and written."""


class UnknownFilterMethod(LookupError):
    """A filter id or color method name is not registered."""

    def __init__(self, name: str, known=()):
        self.name = name
        self.known = sorted(known)
        message = f"unknown filter: {name!r}"
        if self.known:
            message += f" (known: {', '.join(self.known)})"
        super().__init__(message)
