"""
Helpers for environment-specific settings.

Each settings module asks for its own python-decouple config object so that
values come from the matching `.env.<environment>` file at the repository root.
"""

from pathlib import Path

from decouple import Config, RepositoryEnv
from decouple import config as default_config

ENV_FILES = {
    "development": ".env.dev",
    "pre-production": ".env.ppe",
    "production": ".env.production",
}

REPOSITORY_ROOT = Path(__file__).resolve().parent.parent.parent.parent


def load_environment_config(environment):
    """
    Build a config callable bound to the .env file of `environment`.

    Args:
        environment (str): 'development', 'pre-production' or 'production'

    Returns:
        Callable config(key, default=..., cast=...) reading the environment
        file when it exists, otherwise decouple's default (os.environ + .env).
    """
    env_file_name = ENV_FILES.get(environment, ".env")
    env_file_path = REPOSITORY_ROOT / env_file_name

    if not env_file_path.exists():
        print(f"✗ Warning: {env_file_name} not found, using default config")
        return default_config

    print(f"✓ Loading environment: {environment} from {env_file_name}")
    return Config(RepositoryEnv(str(env_file_path)))
