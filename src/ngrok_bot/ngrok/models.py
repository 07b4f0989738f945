"""Models of the ngrok local status API."""

from pydantic import BaseModel, ConfigDict, Field


class ApiTunnel(BaseModel):
    """Single entry of the ngrok ``/api/tunnels`` response."""

    model_config = ConfigDict(extra="ignore")

    public_url: str


class ApiTunnels(BaseModel):
    """Body of the ngrok ``/api/tunnels`` response."""

    model_config = ConfigDict(extra="ignore")

    tunnels: list[ApiTunnel]


class TunnelInfo(BaseModel):
    """Public endpoint of the running tunnel."""

    model_config = ConfigDict(frozen=True)

    public_url: str = Field(description="URL as reported by ngrok")
    host: str = Field(description="Public host name")
    port: int | None = Field(default=None, description="Public port, scheme default if implicit")
