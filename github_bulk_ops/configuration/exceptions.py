"""Contains exceptions raised when reconciling application configuration."""


class GitHubAuthenticationConfigurationUndefinedError(Exception):
    """Raised when no GitHub token was supplied by the caller or the environment."""

    pass


class InvalidConfigurationError(Exception):
    """Raised when a configuration element has an unusable value."""

    def __init__(self, name: str, cli_name: str, env_name: str, reason: str) -> None:
        """Initializes the exception with the name of the offending element."""
        super().__init__(f"Invalid configuration element {name} (command line option {cli_name}, environment variable {env_name}): {reason}")
        self.name = name
        self.cli_name = cli_name
        self.env_name = env_name
