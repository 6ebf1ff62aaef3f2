"""Configuration module for ssh_oneshot.

- SSHConfigParser / parse_client_config: resolve one alias from ~/.ssh/config
- policy_from_settings: choose a host key policy
- Settings: environment variable configuration
"""

from ssh_oneshot.config.host_keys import policy_from_settings
from ssh_oneshot.config.parser import SSHConfigParser, parse_client_config
from ssh_oneshot.config.settings import Settings

__all__ = ["SSHConfigParser", "Settings", "parse_client_config", "policy_from_settings"]
