"""Async Python client for the CloudConnexa cloud VPN API.

    from cloudconnexa import Client

    async with await Client.connect(base_url, client_id, client_secret) as client:
        for network in await client.networks.list():
            print(network.name)
"""
__version__ = "0.1.0"

from .api import *  # noqa: E402,F401,F403
from .api import __all__ as _api_names  # noqa: E402
from .config import ClientConfig  # noqa: E402

__all__ = ["__version__", "ClientConfig", *_api_names]
