"""Custom exception classes for the webhook client."""


class WebhookClientError(Exception):
    """Base exception for the webhook client."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(WebhookClientError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} '{resource_id}' not found",
            status_code=404,
        )


class ConfigNotFoundError(WebhookClientError):
    """No webhook config is registered under the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__("CONFIG_NOT_FOUND", f"No webhook config named '{name}'")


class InvalidConfigError(WebhookClientError):
    """A webhook config is incomplete or references an unknown capability."""

    def __init__(self, message: str):
        super().__init__("INVALID_CONFIG", message)


class SignatureInvalidError(WebhookClientError):
    """The request signature did not match."""

    def __init__(self, config_name: str):
        self.config_name = config_name
        super().__init__("INVALID_SIGNATURE", f"Invalid signature for webhook config '{config_name}'")


class PersistenceError(WebhookClientError):
    """The webhook call could not be stored."""

    def __init__(self, message: str):
        super().__init__("PERSISTENCE_ERROR", message)


class DispatchError(WebhookClientError):
    """The processing task could not be enqueued. The stored call is kept."""

    def __init__(self, webhook_call_id: str, message: str):
        self.webhook_call_id = webhook_call_id
        super().__init__("DISPATCH_ERROR", message, details={"webhook_call_id": webhook_call_id})
