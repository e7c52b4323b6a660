"""Settings for the load test panel, resolved once from the environment."""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from load_test_panel.errors import ConfigurationError
from load_test_panel.providers.github_actions.config import GitHubActionsConfig


class PanelSettings(BaseSettings):
    """Settings loaded from environment variables (and a local .env file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: SecretStr | None = Field(
        default=None, description="Token used for every GitHub API call"
    )
    github_owner: str = "andy-t-wang"
    github_repo: str = "xmtp-load-test-web"
    github_api_base_url: str = "https://api.github.com"

    workflow_file: str = Field(
        default="load-test.yml", description="File name under .github/workflows"
    )
    workflow_name: str = "XMTP Load Test"
    workflow_ref: str = "main"

    request_timeout: float = Field(default=30.0, gt=0)
    history_limit: int = Field(default=20, ge=1, le=100)
    status_page_size: int = Field(default=50, ge=1, le=100)
    artifact_concurrency: int = Field(default=4, ge=1)

    @property
    def workflow_path(self) -> str:
        return f".github/workflows/{self.workflow_file}"

    def require_token(self) -> SecretStr:
        """Return the GitHub token.

        Raises:
            ConfigurationError: If no token is configured

        """
        if self.github_token is None or not self.github_token.get_secret_value():
            raise ConfigurationError("GitHub token not configured")
        return self.github_token

    def github_config(self) -> GitHubActionsConfig:
        """Build the GitHub Actions engine configuration."""
        return GitHubActionsConfig(
            token=self.github_token,
            owner=self.github_owner,
            repo=self.github_repo,
            api_base_url=self.github_api_base_url,
            request_timeout=self.request_timeout,
        )
