class FracticonError(ValueError):
    """Base class for caller-input errors raised by the generator."""


class InvalidHexError(FracticonError):
    pass


class UnknownPresetError(FracticonError):
    pass


class InvalidOptionError(FracticonError):
    pass


class InvalidDescriptorError(FracticonError):
    pass
