"""
Startup check of the environment configuration.

Problems that only degrade the service are logged as warnings; problems that
would make a production deployment unsafe stop startup.
"""
import os
import logging
from typing import Dict, List

from dotenv import load_dotenv

from app.utils.security import DEFAULT_SECRET_KEY

load_dotenv()
logger = logging.getLogger(__name__)

VALID_ENVIRONMENTS = ("development", "production", "test")
MIN_SECRET_LENGTH = 32


class EnvironmentConfigError(RuntimeError):
    pass


def get_environment() -> str:
    return os.getenv("ENVIRONMENT", "development")


def collect_environment_issues() -> Dict[str, List[str]]:
    errors: List[str] = []
    warnings: List[str] = []
    environment = get_environment()

    secret = os.getenv("SECRET_KEY")
    if not secret or secret == DEFAULT_SECRET_KEY:
        message = "SECRET_KEY not set, tokens are signed with the built-in fallback key"
        (errors if environment == "production" else warnings).append(message)
    elif len(secret) < MIN_SECRET_LENGTH:
        warnings.append(f"SECRET_KEY should be at least {MIN_SECRET_LENGTH} characters")

    if not os.getenv("OMDB_API_KEY"):
        warnings.append("OMDB_API_KEY not set, only custom movies will be searchable")

    if not os.getenv("DATABASE_URL"):
        warnings.append("DATABASE_URL not set, using local SQLite database")

    if environment not in VALID_ENVIRONMENTS:
        warnings.append(f"ENVIRONMENT should be one of: {', '.join(VALID_ENVIRONMENTS)}")

    return {"errors": errors, "warnings": warnings}


def validate_environment() -> bool:
    """
    Log configuration problems.

    Raises:
        EnvironmentConfigError: If a required production setting is missing
    """
    issues = collect_environment_issues()

    for warning in issues["warnings"]:
        logger.warning(f"Environment: {warning}")

    if issues["errors"]:
        for error in issues["errors"]:
            logger.error(f"Environment: {error}")
        raise EnvironmentConfigError("Environment validation failed: " + "; ".join(issues["errors"]))

    logger.info(f"Environment validation passed ({get_environment()})")
    return True


