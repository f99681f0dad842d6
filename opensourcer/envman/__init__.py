from .synthesize import synthesize, env_name, generated_credentials, KEY_TRANSLATIONS
from .envfile import write_env_file, read_env_file, render_env, ENV_FILENAME

__all__ = [
    "synthesize",
    "env_name",
    "generated_credentials",
    "KEY_TRANSLATIONS",
    "write_env_file",
    "read_env_file",
    "render_env",
    "ENV_FILENAME",
]
