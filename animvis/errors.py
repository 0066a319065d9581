class AnimVisError(Exception):
    """Base class for scene errors."""


class ConfigurationError(AnimVisError, ValueError):
    """Raised when a scene is built from malformed input."""


class TransientRenderSkip(AnimVisError):
    """The container has no usable size yet; skip this frame and retry on the next."""
