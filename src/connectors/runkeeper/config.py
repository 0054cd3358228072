"""
Runkeeper Connector Configuration
---------------------------------
Defines the Health Graph endpoints, media types and resource defaults.
Resource definitions are loaded from resources.yaml.
"""
import yaml
from pathlib import Path
import logging

# Load resource configuration from YAML file
resources_file = Path(__file__).parent / "resources.yaml"

try:
    with open(resources_file, "r") as f:
        RESOURCES_CONFIG = yaml.safe_load(f)
except Exception as e:
    logging.error(f"Failed to load resources.yaml: {e}")
    raise RuntimeError(f"Could not load resources configuration: {e}")

CONNECTOR_ID = "runkeeper"
CONNECTOR_NAME = "Runkeeper"

# Staging databases are recreated on every run, one per data set
RECREATE_TARGET_DB = True
USE_CUSTOM_TABLES = True

API_DOMAIN = "api.runkeeper.com"

MEDIA_TYPE_TEMPLATE = "application/vnd.com.runkeeper.{}+json"

USER_URI = "/user"
USER_MEDIA_TYPE = MEDIA_TYPE_TEMPLATE.format("User")

DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_TIMEZONE = "Europe/Paris"

ALL_DATA_SETS_LABEL = "All data sets"

REQUIRED_ENV_VARS = [
    "RUNKEEPER_CLIENT_ID",
    "RUNKEEPER_CLIENT_SECRET",
    "RUNKEEPER_ACCESS_TOKEN",
]
API_DOMAIN_ENV_VAR = "RUNKEEPER_API_DOMAIN"

# URI keys returned by the /user call, with their compiled-in defaults
DEFAULT_URIS = {
    conf["uri_key"]: conf["default_uri"] for conf in RESOURCES_CONFIG.values()
}
