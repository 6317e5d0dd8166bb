"""Assistant engine errors."""


class AssistantError(Exception):
    """Base class for assistant engine errors."""
    pass


class GatewayNotConfiguredError(AssistantError):
    """Raised when the engine has neither a gateway nor a way to build one."""
    pass


class ClientNotFoundError(AssistantError):
    """Raised when an operation targets a client the store does not know."""

    def __init__(self, client_id: str):
        self.client_id = client_id
        super().__init__(f"Client {client_id} not found")
