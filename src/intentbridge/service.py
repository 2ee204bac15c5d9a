"""
Service assembly for IntentBridge.

Builds every component from one Config, starts the platform adapters,
serves the HTTP facade, and tears everything down on exit.
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from intentbridge.actions.client import RemoteActionClient
from intentbridge.api.server import create_app
from intentbridge.audit import AuditLogger
from intentbridge.config.loader import ConfigurationError
from intentbridge.config.schema import Config
from intentbridge.platforms.factory import create_adapters
from intentbridge.platforms.router import MessageRouter
from intentbridge.providers.factory import create_provider

logger = logging.getLogger(__name__)


class IntentBridgeService:
    """Owns the router, adapters, action client and API for one process.

    Startup order is: provider, action client, router, then each adapter
    registered with the router before it is initialized. Any failure
    along the way shuts down whatever was already started and propagates.
    """

    def __init__(self, config: Config):
        self.config = config
        self.router: Optional[MessageRouter] = None
        self.action_client: Optional[RemoteActionClient] = None
        self.audit: Optional[AuditLogger] = None
        self._started = False

    async def start(self) -> None:
        """Bring up all components.

        Raises:
            ConfigurationError: If the configuration has startup problems
            ProviderConfigurationError: If no language provider can be built
            PlatformError: If an enabled adapter cannot be created or connected
        """
        if self._started:
            logger.warning("Service already started")
            return

        problems = self.config.startup_problems()
        if problems:
            raise ConfigurationError("; ".join(problems))

        provider = create_provider(self.config.ai)

        remote = self.config.remote_action
        if remote.enable and remote.server_url:
            self.action_client = RemoteActionClient(timeout=remote.timeout, rpc_path=remote.rpc_path)
            await self.action_client.connect(remote.server_url)
        else:
            logger.info("Remote action server disabled, actions will be simulated")

        self.audit = AuditLogger.from_config(self.config.audit) if self.config.audit.enable else None
        self.router = MessageRouter(provider, self.action_client, self.audit)

        try:
            for adapter in create_adapters(self.config):
                platform_name = adapter.platform_type.value
                self.router.register_adapter(adapter)
                try:
                    await adapter.initialize()
                except Exception as e:
                    if self.audit:
                        self.audit.log_platform_adapter_error(platform_name, str(e))
                    raise
                if self.audit:
                    self.audit.log_platform_adapter_started(platform_name)
                logger.info(f"{platform_name} adapter started")
        except Exception:
            await self.router.shutdown()
            raise

        self._started = True
        active = ", ".join(self.router.active_platforms) or "none"
        logger.info(f"IntentBridge started (platforms: {active})")

    def create_app(self) -> FastAPI:
        """Build the HTTP facade over the started components."""
        if self.router is None:
            raise RuntimeError("Service not started")
        return create_app(self.config, self.router, self.action_client)

    async def stop(self) -> None:
        """Shut down adapters and the action client. Safe to call twice."""
        if self.router is None:
            return

        router, self.router = self.router, None
        self._started = False
        await router.shutdown()
        logger.info("IntentBridge stopped")

    async def run(self) -> None:
        """Start, serve HTTP until interrupted, then stop.

        uvicorn installs the SIGINT/SIGTERM handlers and returns from
        serve() once a shutdown signal arrives.
        """
        await self.start()
        try:
            server = uvicorn.Server(
                uvicorn.Config(
                    self.create_app(),
                    host=self.config.server.host,
                    port=self.config.server.port,
                    log_config=None,
                    log_level=self.config.logging.level.lower(),
                )
            )
            logger.info(
                f"API server listening on {self.config.server.host}:{self.config.server.port}"
            )
            await server.serve()
        finally:
            await self.stop()
