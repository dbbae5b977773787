class ConfigurationError(RuntimeError):
    pass


class UpstreamError(RuntimeError):
    pass
