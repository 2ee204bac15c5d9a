"""
Pydantic configuration schema for IntentBridge.

This module defines all configuration models with validation.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Server Configuration
# =============================================================================


class ServerConfig(BaseModel):
    """HTTP listener configuration."""

    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    static_dir: str | None = "client/dist"


# =============================================================================
# AI Provider Configuration
# =============================================================================


class AIConfig(BaseModel):
    """Natural-language provider selection and credentials."""

    model_config = ConfigDict(extra="allow")

    provider: Literal["openai", "anthropic"] = "openai"
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    openai_model: str | None = None
    anthropic_model: str | None = None
    timeout: float = Field(default=30.0, gt=0)


# =============================================================================
# Platform Messaging Configuration
# =============================================================================


class PlatformAdapterConfig(BaseModel):
    """Base configuration for platform adapters."""

    enable: bool = False

    def missing_credentials(self) -> list[str]:
        """Names of required settings that are empty."""
        return []


class WhatsAppConfig(PlatformAdapterConfig):
    """WhatsApp Business Cloud API configuration.

    Inbound messages arrive on a webhook, so the API server must be
    reachable by Meta.
    """

    phone_number_id: str = ""
    access_token: str = ""
    verify_token: str = ""
    api_version: str = "v19.0"
    webhook_path: str = "/api/whatsapp/webhook"

    def missing_credentials(self) -> list[str]:
        return [
            name
            for name in ("phone_number_id", "access_token", "verify_token")
            if not getattr(self, name)
        ]


class TelegramConfig(PlatformAdapterConfig):
    """Telegram bot configuration.

    Uses long polling, so no public URL is required.
    """

    bot_token: str = ""
    allowed_users: list[str] = Field(default_factory=list)
    polling_interval: float = 2.0

    def missing_credentials(self) -> list[str]:
        return [] if self.bot_token else ["bot_token"]


class SlackConfig(PlatformAdapterConfig):
    """Slack bot configuration.

    Uses Socket Mode, which needs both the bot token and an app-level token.
    """

    bot_token: str = ""
    app_token: str = ""
    allowed_channels: list[str] = Field(default_factory=list)

    def missing_credentials(self) -> list[str]:
        return [name for name in ("bot_token", "app_token") if not getattr(self, name)]


class TeamsConfig(PlatformAdapterConfig):
    """Microsoft Teams bot configuration (Bot Framework)."""

    app_id: str = ""
    app_password: str = ""
    webhook_path: str = "/api/teams/messages"

    def missing_credentials(self) -> list[str]:
        return [name for name in ("app_id", "app_password") if not getattr(self, name)]


class PlatformsConfig(BaseModel):
    """Multi-platform messaging configuration."""

    model_config = ConfigDict(extra="allow")

    whatsapp: WhatsAppConfig = Field(default_factory=WhatsAppConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    slack: SlackConfig = Field(default_factory=SlackConfig)
    teams: TeamsConfig = Field(default_factory=TeamsConfig)

    def items(self) -> list[tuple[str, PlatformAdapterConfig]]:
        """(name, config) pairs in a stable order."""
        return [
            ("whatsapp", self.whatsapp),
            ("telegram", self.telegram),
            ("slack", self.slack),
            ("teams", self.teams),
        ]


# =============================================================================
# Remote Action Server Configuration
# =============================================================================


class RemoteActionConfig(BaseModel):
    """JSON-RPC action server configuration."""

    enable: bool = False
    server_url: str | None = None
    timeout: float = Field(default=30.0, gt=0)
    rpc_path: str = "/rpc"


# =============================================================================
# API / Logging / Audit Configuration
# =============================================================================


class ApiConfig(BaseModel):
    """REST facade authentication."""

    auth_enabled: bool = False
    secret_key: str | None = None


class LoggingConfig(BaseModel):
    """Application logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: str | None = None


class AuditConfig(BaseModel):
    """Audit trail configuration."""

    enable: bool = False
    path: str = "~/.intentbridge/audit.jsonl"
    include_messages: bool = False


# =============================================================================
# Root Configuration
# =============================================================================


class Config(BaseModel):
    """Root configuration, built once at startup and passed to components."""

    model_config = ConfigDict(extra="allow")

    server: ServerConfig = Field(default_factory=ServerConfig)
    ai: AIConfig = Field(default_factory=AIConfig)
    platforms: PlatformsConfig = Field(default_factory=PlatformsConfig)
    remote_action: RemoteActionConfig = Field(default_factory=RemoteActionConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)

    def enabled_platforms(self) -> list[str]:
        """Names of platforms with enable=true."""
        return [name for name, platform in self.platforms.items() if platform.enable]

    def startup_problems(self) -> list[str]:
        """
        Find settings that would leave the service partially configured.

        Returns:
            Human-readable problems. Empty when the service may start.
        """
        problems: list[str] = []

        for name, platform in self.platforms.items():
            if not platform.enable:
                continue
            for field_name in platform.missing_credentials():
                problems.append(f"platforms.{name}.{field_name} is required when {name} is enabled")

        if self.ai.provider == "anthropic" and not self.ai.anthropic_api_key:
            if not self.ai.openai_api_key:
                problems.append("ai.anthropic_api_key (or ai.openai_api_key) is required")
        elif self.ai.provider == "openai" and not self.ai.openai_api_key:
            problems.append("ai.openai_api_key is required when ai.provider is openai")

        if self.remote_action.enable and not self.remote_action.server_url:
            problems.append("remote_action.server_url is required when remote_action is enabled")

        if self.api.auth_enabled and not self.api.secret_key:
            problems.append("api.secret_key is required when api.auth_enabled is true")

        return problems
