"""Configuration for the Azure DevOps PAT MCP server.

Settings come from the process environment, optionally populated from a ``.env`` file by
``server.load_config``. Only the organization URL and the Personal Access Token are
required.
"""

import os
from dataclasses import dataclass
from tl.azure_devops_pat_mcp_server import __version__
from tl.azure_devops_pat_mcp_server.errors import ConfigurationError
from typing import Mapping, Optional


ORG_URL_ENV = 'AZURE_DEVOPS_ORG_URL'
PAT_ENV = 'AZURE_DEVOPS_PAT'
TIMEOUT_ENV = 'AZURE_DEVOPS_TIMEOUT'
LOG_LEVEL_ENV = 'AZURE_DEVOPS_MCP_LOG_LEVEL'

DEFAULT_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = 'INFO'
USER_AGENT = f'azure-devops-pat-mcp-server/{__version__}'

REQUIRED_PAT_SCOPES = (
    'Code (Read & Write)',
    'Work Items (Read & Write)',
    'Build (Read & Execute)',
    'Project and Team (Read)',
    'Wiki (Read & Write)',
    'Test Management (Read & Write)',
    'Advanced Security (Read)',
)


@dataclass(frozen=True)
class Settings:
    """Runtime settings for one server process."""

    organization_url: str
    personal_access_token: str
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL
    user_agent: str = USER_AGENT

    def __repr__(self) -> str:
        return (
            f'Settings(organization_url={self.organization_url!r}, '
            f'personal_access_token=***, timeout={self.timeout!r}, '
            f'log_level={self.log_level!r})'
        )


def missing_credentials_message(variable: str) -> str:
    """Build the diagnostic shown when a required variable is absent."""
    lines = [f'{variable} environment variable is required']
    if variable == ORG_URL_ENV:
        lines.append('Example: https://dev.azure.com/your-organization')
    else:
        lines.append('Generate a PAT at: https://dev.azure.com/{org}/_usersSettings/tokens')
        lines.append('Required PAT scopes:')
        lines.extend(f'  - {scope}' for scope in REQUIRED_PAT_SCOPES)
    return '\n'.join(lines)


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError as e:
        raise ConfigurationError(f'{TIMEOUT_ENV} must be a number of seconds, got {raw!r}') from e
    if timeout <= 0:
        raise ConfigurationError(f'{TIMEOUT_ENV} must be positive, got {raw!r}')
    return timeout


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Load settings from the environment.

    Args:
        environ: Mapping to read from (defaults to ``os.environ``)

    Returns:
        Settings for the server process

    Raises:
        ConfigurationError: If a required variable is missing or a value is invalid
    """
    env = os.environ if environ is None else environ

    organization_url = env.get(ORG_URL_ENV, '').strip()
    if not organization_url:
        raise ConfigurationError(missing_credentials_message(ORG_URL_ENV))

    personal_access_token = env.get(PAT_ENV, '').strip()
    if not personal_access_token:
        raise ConfigurationError(missing_credentials_message(PAT_ENV))

    log_level = env.get(LOG_LEVEL_ENV, '').strip().upper() or DEFAULT_LOG_LEVEL

    return Settings(
        organization_url=organization_url.rstrip('/'),
        personal_access_token=personal_access_token,
        timeout=_parse_timeout(env.get(TIMEOUT_ENV)),
        log_level=log_level,
    )
