"""GitHub Actions workflow engine module."""

from load_test_panel.providers.github_actions.config import GitHubActionsConfig
from load_test_panel.providers.github_actions.provider import GitHubActionsEngine

__all__ = ["GitHubActionsConfig", "GitHubActionsEngine"]
