"""Exception types raised by textoutline.

ConfigError and PathError stop a run before any file is processed.
ImageDecodeError, DetectionError and WriteError are confined to a single
file or a single (file, detector) task and are logged by the coordinator.
"""


class AnnotationError(Exception):
    """Base class for all textoutline errors."""


class ConfigError(AnnotationError):
    """Bad or missing command-line configuration."""


class PathError(AnnotationError):
    """Input root missing or an output root could not be created."""


class ImageDecodeError(AnnotationError, ValueError):
    """An input file could not be decoded as an image."""


class DetectionError(AnnotationError, RuntimeError):
    """A model could not be loaded or inference failed."""


class WriteError(AnnotationError, ValueError):
    """An annotated image could not be encoded or persisted."""
