class TimeularClientException(Exception):
    step = None


class ConfigError(TimeularClientException):
    pass


class AuthError(TimeularClientException):
    pass


class TransportError(TimeularClientException):
    def __init__(self, message, status_code=None, url=None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class DecodeError(TimeularClientException):
    pass
