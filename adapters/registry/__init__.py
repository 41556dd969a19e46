from .iot_registry import IoTRegistryClient  # noqa: F401
