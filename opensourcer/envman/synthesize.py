from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping, Tuple

from opensourcer.catalog.models import SoftwareDefinition
from opensourcer.tokens import generate_token

logger = logging.getLogger(__name__)

# Catalog input key -> environment variable name. Checked in order.
KEY_TRANSLATIONS: Tuple[Tuple[str, str], ...] = (
    ("domain", "DOMAIN"),
    ("timezone", "TIMEZONE"),
    ("basic_auth_user", "BASIC_AUTH_USER"),
    ("basic_auth_password", "BASIC_AUTH_PASSWORD"),
    ("admin_user", "ADMIN_USER"),
    ("admin_password", "ADMIN_PASSWORD"),
    ("admin_email", "ADMIN_EMAIL"),
    ("site_title", "SITE_TITLE"),
)

# (variable, length) always generated before user inputs are applied
BASELINE_SECRETS: Tuple[Tuple[str, int], ...] = (
    ("DB_PASSWORD", 16),
    ("ADMIN_PASSWORD", 12),
    ("SECRET_KEY", 48),
)

GENERATED_INPUT_LENGTH = 12
DEFAULT_DOMAIN = "localhost"


def env_name(key: str) -> str:
    for input_key, variable in KEY_TRANSLATIONS:
        if input_key == key:
            return variable
    return key.replace("-", "_").upper()


def synthesize(
    definition: SoftwareDefinition,
    user_inputs: Mapping[str, str] | None,
    token_generator: Callable[[int], str] = generate_token,
) -> Dict[str, str]:
    """
    Build the environment for a composition.

    User values always win over generated ones. Every ``password`` input
    declared by the definition ends up with a value.
    """
    env: Dict[str, str] = {}
    for variable, length in BASELINE_SECRETS:
        env[variable] = token_generator(length)

    for key, value in (user_inputs or {}).items():
        if not value:
            continue
        env[env_name(key)] = value

    for key in definition.secret_inputs():
        variable = env_name(key)
        if variable not in env:
            env[variable] = token_generator(GENERATED_INPUT_LENGTH)

    env.setdefault("DOMAIN", DEFAULT_DOMAIN)

    logger.debug("Synthesized environment for %s: %s", definition.slug, sorted(env))
    return env


def generated_credentials(env: Mapping[str, str], user_inputs: Mapping[str, str] | None) -> Dict[str, str]:
    """Credentials worth showing the user once after deploy."""
    user_inputs = user_inputs or {}
    shown: Dict[str, str] = {}
    for variable in ("DB_PASSWORD", "ADMIN_PASSWORD"):
        if variable in env:
            shown[variable] = env[variable]
    if "BASIC_AUTH_PASSWORD" in env and not user_inputs.get("basic_auth_password"):
        shown["BASIC_AUTH_PASSWORD"] = env["BASIC_AUTH_PASSWORD"]
    return shown
