"""
Events emitted by AuthCoordinator to its handlers.

Handlers are called as handler(event, data); the data column lists the payload.
"""


class AuthEvent:
    READY = "auth:ready"                          # None
    SIGN_IN_ATTEMPT = "auth:sign_in_attempt"      # None
    SIGN_IN_SUCCESS = "auth:sign_in_success"      # ProviderUser
    SIGN_IN_FAILED = "auth:sign_in_failed"        # str
    TOKEN_RECEIVED = "auth:token_received"        # str, truncated token
    SIGN_OUT_COMPLETE = "auth:sign_out_complete"  # None
    API_CALLED = "api:called"                     # None
    API_SUCCESS = "api:success"                   # Profile
    API_FAILED = "api:failed"                     # str
    ACCOUNT_NOTICE = "account:notice"             # str
    ACCOUNT_FAILED = "account:failed"             # str
