"""Connection settings loaded from the environment.

Reads CLOUDCONNEXA_* variables, with a ``.env`` file in the working
directory taken into account through python-dotenv:

    CLOUDCONNEXA_BASE_URL             https://<account>.api.openvpn.com
    CLOUDCONNEXA_CLIENT_ID            OAuth client ID
    CLOUDCONNEXA_CLIENT_SECRET        OAuth client secret
    CLOUDCONNEXA_ALLOW_INSECURE_HTTP  "true" to allow http:// on loopback hosts
"""
import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .api.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_BASE_URL = "CLOUDCONNEXA_BASE_URL"
ENV_CLIENT_ID = "CLOUDCONNEXA_CLIENT_ID"
ENV_CLIENT_SECRET = "CLOUDCONNEXA_CLIENT_SECRET"
ENV_ALLOW_INSECURE_HTTP = "CLOUDCONNEXA_ALLOW_INSECURE_HTTP"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ClientConfig:
    base_url: str
    client_id: str
    client_secret: str = field(repr=False)
    allow_insecure_http: bool = False

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "ClientConfig":
        """Build a config from the environment.

        Raises:
            ConfigurationError: If any required variable is missing or empty
        """
        if load_env_file:
            load_dotenv()

        values = {
            key: os.getenv(key, "").strip()
            for key in (ENV_BASE_URL, ENV_CLIENT_ID, ENV_CLIENT_SECRET)
        }
        missing = [key for key, value in values.items() if not value]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}",
                missing_keys=missing,
            )

        insecure = os.getenv(ENV_ALLOW_INSECURE_HTTP, "").strip().lower() in _TRUTHY
        logger.debug(f"Loaded configuration for {values[ENV_BASE_URL]}")
        return cls(
            base_url=values[ENV_BASE_URL],
            client_id=values[ENV_CLIENT_ID],
            client_secret=values[ENV_CLIENT_SECRET],
            allow_insecure_http=insecure,
        )
