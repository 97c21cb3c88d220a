"""
Log codes for configuration and submission operations.
"""

CONFIG = "config"

# Proxy Configuration
PROXY = f"{CONFIG}.proxy"
PROXY_RESOLVED = f"{PROXY}.resolved"
PROXY_NOT_DEFINED = f"{PROXY}.not_defined"
PROXY_HOST_EMPTY = f"{PROXY}.host_empty"
PROXY_PROTOCOL_INVALID = f"{PROXY}.invalid_protocol"
PROXY_CONFIG_MISSING_SECTION = f"{PROXY}.missing_section"

# Credentials
CREDENTIALS = f"{CONFIG}.credentials"
CREDENTIALS_RESOLVED = f"{CREDENTIALS}.resolved"
CREDENTIALS_NOT_DEFINED = f"{CREDENTIALS}.not_defined"
CREDENTIALS_PARTIAL = f"{CREDENTIALS}.partial"

# Submission
SUBMIT = "submit"
SUBMIT_STARTED = f"{SUBMIT}.started"
SUBMIT_BATCH_DISPATCHED = f"{SUBMIT}.batch_dispatched"
SUBMIT_BATCH_SKIPPED = f"{SUBMIT}.batch_skipped"
SUBMIT_PROBLEM_RECORDED = f"{SUBMIT}.problem_recorded"
SUBMIT_SUCCEEDED = f"{SUBMIT}.succeeded"
SUBMIT_FAILED = f"{SUBMIT}.failed"
