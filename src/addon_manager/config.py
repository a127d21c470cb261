"""Settings for talking to the cluster.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Inside a pod the defaults point at the in-cluster API server and the mounted
service account token.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")


class ManagerSettings(BaseSettings):
    """Settings for the workflow lifecycle tooling.

    Environment variables:
    - KUBE_API_SERVER                   (optional)
    - KUBE_TOKEN / KUBE_TOKEN_FILE      (optional)
    - KUBE_CA_CERT                      (optional)
    - KUBE_VERIFY_SSL                   (optional)
    - ADDONMGR_EVENT_COMPONENT          (optional)
    - ADDONMGR_REQUEST_TIMEOUT_SECONDS  (optional)
    - LOG_LEVEL                         (optional)

    Notes:
        Tests can point at a specific env file via
        `ManagerSettings(_env_file=path_to_env)`.
    """

    kube_api_server: str = Field(
        default="https://kubernetes.default.svc",
        validation_alias="KUBE_API_SERVER",
        description="Base URL of the cluster API server",
    )
    kube_token: str = Field(
        default="",
        validation_alias="KUBE_TOKEN",
        description="Bearer token; takes precedence over KUBE_TOKEN_FILE",
    )
    kube_token_file: Path = Field(
        default=_SERVICE_ACCOUNT_DIR / "token",
        validation_alias="KUBE_TOKEN_FILE",
        description="File holding the bearer token (read when KUBE_TOKEN is unset)",
    )
    kube_ca_cert: Path | None = Field(
        default=None,
        validation_alias="KUBE_CA_CERT",
        description="CA bundle used to verify the API server certificate",
    )
    kube_verify_ssl: bool = Field(
        default=True,
        validation_alias="KUBE_VERIFY_SSL",
    )

    event_component: str = Field(
        default="addons",
        validation_alias="ADDONMGR_EVENT_COMPONENT",
        description="Component name stamped on recorded events",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="ADDONMGR_REQUEST_TIMEOUT_SECONDS",
        description="Upper bound for a single API request",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_api_server(self) -> ManagerSettings:
        if not self.kube_api_server.strip():
            raise ValueError("KUBE_API_SERVER must not be empty")
        if not self.event_component.strip():
            raise ValueError("ADDONMGR_EVENT_COMPONENT must not be empty")
        return self

    def resolve_token(self) -> str:
        """Return the bearer token, reading the token file if needed."""

        if self.kube_token.strip():
            return self.kube_token.strip()
        if self.kube_token_file.is_file():
            return self.kube_token_file.read_text(encoding="utf-8").strip()
        return ""

    def resolve_ca_cert(self) -> Path | None:
        """Return the CA bundle path, defaulting to the in-cluster one if mounted."""

        if self.kube_ca_cert is not None:
            return self.kube_ca_cert
        in_cluster = _SERVICE_ACCOUNT_DIR / "ca.crt"
        return in_cluster if in_cluster.is_file() else None
