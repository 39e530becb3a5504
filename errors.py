class LocationParseError(ValueError):
    """Raised when a bin location or start location string is malformed."""

    def __init__(self, location, reason="Invalid location format"):
        self.location = location
        super().__init__(f"{reason}: {location!r}")


class ConfigurationError(ValueError):
    """Raised when a warehouse geometry field needed by a calculation is unusable."""

    def __init__(self, field_name, value, reason="must be positive"):
        self.field_name = field_name
        self.value = value
        super().__init__(f"WarehouseCfg.{field_name} {reason} (got {value!r})")
