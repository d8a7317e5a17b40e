"""
Project constants definitions
"""

# ============================================================
# Service Configuration
# ============================================================

DEFAULT_CONFIG_FILENAME = "serverless.yml"
CONFIG_FILENAME_CANDIDATES = (
    "serverless.yml",
    "serverless.yaml",
    "serverless.json",
    "serverless.js",
    "serverless.ts",
    "serverless.mjs",
    "serverless.cjs",
)
YAML_SUFFIXES = (".yml", ".yaml")
JSON_SUFFIXES = (".json",)

WATCH_CUSTOM_KEY = "serverlessWatch"
WATCH_INCLUDES_KEY = "includes"

# ============================================================
# Deploy Primitive
# ============================================================

DEFAULT_SERVERLESS_BIN = "serverless"

# User options forwarded to the full service deploy
SERVICE_FORWARDED_OPTIONS = ("stage", "config", "function", "verbose")

# ============================================================
# Settings
# ============================================================

SETTINGS_FILENAME = "deploywatch.toml"
ENV_PREFIX = "DEPLOYWATCH_"

# ============================================================
# Feedback Messages
# ============================================================

MSG_WATCHING = "Watching for changes"
MSG_DEPLOY_FUNCTION = "Deploying function {name}. See logs for details"
MSG_DEPLOY_SERVICE = "Deploying service. See logs for details"
MSG_DEPLOY_ALL = "Deploying all functions. See logs for details"
