"""Configuration for GitHub Actions workflow engine."""

from pydantic import BaseModel, SecretStr


class GitHubActionsConfig(BaseModel):
    """Configuration for GitHub Actions workflow engine.

    The token may be absent so that the engine can be built at startup;
    operations refuse to run until it is configured.
    """

    token: SecretStr | None = None
    owner: str
    repo: str
    api_base_url: str = "https://api.github.com"
    request_timeout: float = 30.0
