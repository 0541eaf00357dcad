"""core.settings

Environment-driven configuration for callers that don't want to pass the
credential around by hand. The transport itself never reads the environment;
only the ``from_env`` convenience constructors go through here.
"""

from __future__ import annotations

import os

from dotenv import find_dotenv, load_dotenv

from cordyceps.core.exceptions import ConfigurationError

DEFAULT_API_KEY_VAR = 'OPENAI_API_KEY'


def load_api_key(env_var: str = DEFAULT_API_KEY_VAR) -> str:
    """Return the API key from *env_var*, consulting a ``.env`` file first.

    The ``.env`` file is looked up from the current working directory
    upwards, i.e. it belongs to the application, not to this package.

    Variables already present in the process environment win over ``.env``.

    Raises
    ------
    ConfigurationError
        If the variable is unset or empty.

    """
    load_dotenv(find_dotenv(usecwd=True))
    if not (api_key := os.getenv(env_var, '').strip()):
        raise ConfigurationError(f'{env_var} is not set')
    return api_key
