"""Services d'accès au backend."""

from adminconsole.services.api_client import ApiClientError, SessionApiClient

__all__ = ["ApiClientError", "SessionApiClient"]
