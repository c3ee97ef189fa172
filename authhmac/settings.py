"""Configuration loaded from AUTHHMAC_* environment variables."""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FAILURE_MESSAGE = "HMAC Authentication failed"


class Settings(BaseSettings):
	"""Client and server settings for authhmac."""

	model_config = SettingsConfigDict(
		env_prefix="AUTHHMAC_",
		env_file=".env",
		env_file_encoding="utf-8",
		extra="ignore",
	)

	# Client
	access_key_id: str | None = Field(
		default=None,
		description="Access key id used to sign outgoing requests",
	)
	secret_key: SecretStr | None = Field(
		default=None,
		description="Secret paired with access_key_id",
	)

	# Server
	credentials: dict[str, SecretStr] = Field(
		default_factory=dict,
		description="Access key id to secret map (JSON object)",
	)
	failure_message: str = Field(
		default=DEFAULT_FAILURE_MESSAGE,
		description="Body of the 403 response sent when authentication fails",
	)
	exempt_paths: list[str] = Field(
		default_factory=list,
		description="Path prefixes served without authentication (JSON list)",
	)

	def credential_store(self) -> dict[str, str]:
		"""Secrets by access key id, including the client key pair if set."""
		store = {key: secret.get_secret_value() for key, secret in self.credentials.items()}
		if self.access_key_id and self.secret_key is not None:
			store.setdefault(self.access_key_id, self.secret_key.get_secret_value())
		return store


@lru_cache
def get_settings() -> Settings:
	"""Get cached settings instance."""
	return Settings()
