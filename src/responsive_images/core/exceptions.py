"""Exception hierarchy for responsive-images."""


class ResponsiveImagesError(Exception):
    """Base exception for all responsive-images errors."""


class ConfigurationError(ResponsiveImagesError):
    """Raised when loader options or the resource query are unusable."""


class PlanningError(ConfigurationError):
    """Raised when size, min, max or steps values cannot be turned into widths."""


class AdapterError(ResponsiveImagesError):
    """Raised when an image adapter fails to decode, resize or encode."""
