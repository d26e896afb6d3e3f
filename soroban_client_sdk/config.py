"""
Network configuration for the Soroban client SDK.
"""
import importlib.resources
import json
import logging
import os
from typing import Any, Dict, Optional

from .models import ClientOptions

logger = logging.getLogger(__name__)


class NetworkConfig:
    """
    Known Soroban networks, loaded from the packaged networks.json.

    The RPC URL of any network can be overridden with $SOROBAN_RPC_URL.
    """

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load network definitions, caching them on the class.

        Returns:
            Mapping of network name to its definition
        """
        if cls._networks_cache is not None:
            return cls._networks_cache

        resource = importlib.resources.files("soroban_client_sdk").joinpath("data/networks.json")
        with resource.open("r", encoding="utf-8") as f:
            cls._networks_cache = json.load(f)
        logger.debug(f"Loaded {len(cls._networks_cache)} network definitions")
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get the definition of a named network.

        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise ValueError(f"Unknown network '{network}'. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_rpc_url(cls, network: str) -> str:
        override = os.environ.get("SOROBAN_RPC_URL")
        if override:
            logger.debug(f"Using RPC URL from SOROBAN_RPC_URL for {network}")
            return override
        return cls.get_network(network)["rpc"]

    @classmethod
    def get_network_passphrase(cls, network: str) -> str:
        return cls.get_network(network)["networkPassphrase"]

    @classmethod
    def client_options(cls, network: str, **overrides: Any) -> ClientOptions:
        """
        Build ClientOptions for a named network.

        Args:
            network: Network name (e.g., "testnet")
            **overrides: Extra ClientOptions fields (contract_id, public_key...)

        Returns:
            ClientOptions with rpc_url, network_passphrase and allow_http filled in
        """
        definition = cls.get_network(network)
        fields: Dict[str, Any] = {
            "rpc_url": cls.get_rpc_url(network),
            "network_passphrase": definition["networkPassphrase"],
            "allow_http": definition.get("allowHttp", False),
        }
        fields.update(overrides)
        return ClientOptions(**fields)
