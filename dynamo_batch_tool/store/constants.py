"""
Constants for batched store operations.
"""

# Default table name
DEFAULT_TABLE_NAME = "dynamo-batch-tool-store"

# Secrets table and default secrets key
SECRETS_TABLE_NAME = "secrets"
DEFAULT_SECRETS_PK = "lambda-secrets"

# DynamoDB attribute names
ATTR_PK = "PK"
ATTR_SK = "SK"

# Native batch limits (hard limits imposed by DynamoDB per call)
BATCH_WRITE_STEP = 25
BATCH_GET_STEP = 100

# Write retry behavior
MAX_WRITE_RETRIES = 6  # Total wait time if all requests fail ~= 1.2s
WRITE_BACKOFF_BASE_MS = 10

# Read retry behavior
DEFAULT_GET_RETRIES = 3

# Range queries start below any real sort key
DEFAULT_WATERMARK = -1

# Worker pool used for concurrent chunk submission
DEFAULT_MAX_WORKERS = 10

# Region used when talking to a local/mock endpoint
LOCAL_REGION = "local"
