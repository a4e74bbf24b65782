DEFAULT_TABLE_NAME = "error_logs"

DEFAULT_STATUS = 500
DEFAULT_CODE = "GENERIC_ERROR"

SYNTAX_ERR = "SYNTAX_ERR"
RUNTIME_ERR = "RUNTIME_ERR"
HANA_DB_ERR = "HANA_DB_ERR"
CPI_HTTP_ERR = "CPI_HTTP_ERR"
UNKNOWN_ERR = "UNKNOWN_ERR"
VALIDATION_ERR = "VALIDATION_ERR"
AUTHORIZATION_ERR = "AUTHORIZATION_ERR"
BUSINESS_ERR = "BUSINESS_ERR"

# SQLSTATE class prefixes treated as database failures
DB_ERROR_CODE_PREFIXES = ("HY", "3A")
DB_ERROR_MESSAGE_MARKER = "SAP DBTech"

EMAIL_SUBJECT_TEMPLATE = "Exception occurred in {env}"
EMAIL_TRANSPORT_TIMEOUT = 30.0
