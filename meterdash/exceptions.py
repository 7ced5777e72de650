class MeterDashError(Exception): ...


class FetchError(MeterDashError): ...


class PayloadError(FetchError): ...


class ReadingsError(MeterDashError): ...


class FilterError(MeterDashError): ...


class ConfigError(MeterDashError): ...


def require(condition: bool, message: str, exc: type[MeterDashError] = MeterDashError):
    """Raise the given exception if condition is False."""
    if not condition:
        raise exc(message)
