"""Exception types raised by the intercept engine."""


# Message shown to the user for any failed foreground action
ENGINE_ERROR_MESSAGE = "AI Engine reported a bypass error or safety trigger."

# Message shown when a background sweep fails
SWEEP_ERROR_MESSAGE = "Downlink saturated. Retrying..."


class PulseError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(PulseError):
    """A required credential or setting is missing."""


class ClassificationError(PulseError):
    """The intent classifier call failed."""


class GenerationError(PulseError):
    """A media generation pipeline failed."""


class ImageGenerationError(GenerationError):
    pass


class VideoGenerationError(GenerationError):
    pass


class IdentityLookupError(PulseError):
    """The dossier call failed or returned an unusable record."""


class SweepError(PulseError):
    """A news sweep failed or returned an unusable payload."""


class EngineBusyError(PulseError):
    """A foreground action is already running."""
