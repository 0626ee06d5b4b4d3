from __future__ import annotations


class OutageBotError(RuntimeError):
    pass


class ConfigError(OutageBotError):
    pass


class UpstreamError(OutageBotError):
    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class UpstreamHttpError(UpstreamError):
    def __init__(self, source: str, status: int) -> None:
        super().__init__(source, f"HTTP error {status}")
        self.status = status


class UpstreamParseError(UpstreamError):
    pass


class UpstreamTimeout(UpstreamError):
    pass


class ResolutionError(OutageBotError):
    pass


class RenderError(OutageBotError):
    pass


class UnsupportedCommandError(OutageBotError):
    pass
