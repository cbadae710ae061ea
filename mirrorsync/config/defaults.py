# MirrorSync Default Configuration
# Full default configuration as Python dict and YAML generator

import copy
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "destination": "~/mirror",
    "sync": {
        "handler_timeout": None,
        "exclude": [".DS_Store", "*.swp", "*~", ".git", "__pycache__"],
    },
    "tumblr": {
        "api_host": "https://api.tumblr.com",
        "api_key": "",
        "blogs": [],
        "page_size": 20,
        "timeout": 30.0,
    },
    "output": {
        "verbose": False,
        "colored": True,
        "log_file": None,
    },
}

_HEADER = """\
# mirrorsync configuration
#
# destination: default local root leaves are written under
# sync.handler_timeout: seconds to wait on one expansion (null = no limit)
# tumblr.blogs: blogs mirrored when syncing the API root, e.g.
#   mirrorsync sync https://api.tumblr.com
"""


def default_config() -> dict[str, Any]:
    """Return a fresh copy of the default configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


def generate_default_config() -> str:
    """Generate the default configuration as commented YAML."""
    body = yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return _HEADER + "\n" + body
