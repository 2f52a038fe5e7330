"""
Application-wide constants.
Centralizes magic numbers and response codes for better maintainability.
"""

# Rate limiting (fixed window, per client identifier)
RATE_LIMIT_MAX_REQUESTS = 5
RATE_LIMIT_WINDOW_SECONDS = 60
RATE_LIMIT_SWEEP_INTERVAL_SECONDS = 300  # 5 minutes
RETRY_AFTER_SECONDS = 60

# Client identity
UNKNOWN_CLIENT = "unknown"

# Error codes returned by the contact endpoint
CODE_RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
CODE_INVALID_JSON = "INVALID_JSON"
CODE_VALIDATION_ERROR = "VALIDATION_ERROR"
CODE_SERVER_ERROR = "SERVER_ERROR"

# User-facing messages
MESSAGE_SENT = "Message sent successfully!"
MESSAGE_RATE_LIMITED = "Too many requests. Please try again in a minute."
MESSAGE_INVALID_JSON = "Invalid JSON body"
MESSAGE_INVALID_DATA = "Invalid submission data"
MESSAGE_SERVER_ERROR = "An error occurred while sending the message."

# Brevo transactional email API
BREVO_API_URL = "https://api.brevo.com/v3/smtp/email"
BREVO_TIMEOUT_SECONDS = 10.0
DEV_MESSAGE_ID = "dev-console"
UNKNOWN_MESSAGE_ID = "unknown"
