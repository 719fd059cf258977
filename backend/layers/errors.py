from __future__ import annotations


class UnknownLayerError(KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown layer: {self.name}"


class UnknownFilterFieldError(ValueError):
    def __init__(self, field: str, supported: tuple[str, ...]):
        super().__init__(
            f"Unsupported filter field '{field}'; expected one of: {', '.join(supported)}"
        )
        self.field = field
        self.supported = supported


class UnknownBaseMapError(KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown base map: {self.name}"


class UnknownFeatureError(KeyError):
    def __init__(self, layer: str, feature_id: str):
        super().__init__(f"{layer}/{feature_id}")
        self.layer = layer
        self.feature_id = feature_id

    def __str__(self) -> str:
        return f"Unknown feature '{self.feature_id}' in layer {self.layer}"
