"""Exception hierarchy for startup failures and request-scoped errors."""


class SPAHostError(Exception):
    """Base error carrying the HTTP status the error boundary responds with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StartupError(SPAHostError):
    """Unrecoverable failure before the server accepts traffic."""


class ConfigError(StartupError):
    pass


class OutputDirectoryError(StartupError):
    pass


class BuildError(StartupError):
    pass


class EntryDocumentMissingError(StartupError):
    pass


class ApplicationUnavailableError(SPAHostError):
    """Neither the shell document nor the not-found document could be sent."""


class DevServerUnavailableError(SPAHostError):
    status_code = 502
