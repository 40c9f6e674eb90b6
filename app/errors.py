# app/errors.py


class ConfigError(RuntimeError):
    """Missing or malformed environment configuration. Fatal at startup."""


class AppError(Exception):
    """
    Base for every error the API turns into an envelope.
    `message` is what the client sees; `detail` is only logged.
    """

    status_code = 500
    message = "Server Side Error"

    def __init__(self, message: str | None = None, detail: str | None = None):
        if message is not None:
            self.message = message
        self.detail = detail
        super().__init__(detail or self.message)

    @property
    def is_client_error(self) -> bool:
        return self.status_code < 500


class ClientInputError(AppError):
    status_code = 400
    message = "Invalid Request"


class GatewayError(AppError):
    message = "Failed to reach the language model"


class TranslationError(AppError):
    message = "Failed to translate query to SQL"


class ExecutionError(AppError):
    message = "Failed to execute SQL query"
