"""
Index Provider Configuration
Constants shared by the index resource and its connection bootstrap
"""

# ============================================================================
# CONNECTION
# ============================================================================

# Environment fallback when the provider block has no url
MONGODB_URL_ENV = "MONGODB_URL"

# Default deadline (seconds) applied to every store call; unset = no deadline
OPERATION_TIMEOUT_ENV = "INDEX_OPERATION_TIMEOUT_SECONDS"

# Stable API version requested from the server
SERVER_API_VERSION = "1"


# ============================================================================
# INDEX RESOURCE
# ============================================================================

# Resource type name exposed to the host ("<provider>_index")
PROVIDER_TYPE_NAME = "mongodb"
RESOURCE_TYPE_NAME = f"{PROVIDER_TYPE_NAME}_index"

# Text indexes are out of scope for this resource type
RESERVED_INDEX_TYPES = ["text"]

# Import ids look like <database>.<collection>.<index_name>
IDENTITY_SEPARATOR = "."
IDENTITY_SEGMENTS = 3

# Computed "id" attribute; carries no meaning, never parsed or compared
PLACEHOLDER_ID = "to_be_ignored"

# expire_after_seconds is an int32 on the server
INT32_MAX = 2**31 - 1
