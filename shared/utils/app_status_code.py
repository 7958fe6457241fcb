class AppStatusCode:
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    CREATED_SUCCESSFULLY = "101"
    UPDATED_SUCCESSFULLY = "102"
    DELETED_SUCCESSFULLY = "103"

    OPERATION_FAILED = "200"
    INVALID_INPUT = "201"
    NOT_FOUND = "202"

    AUTHENTICATION_TOKEN_INVALID = "300"
    AUTHENTICATION_TOKEN_EXPIRED = "301"

    CALENDAR_CONFIGURATION_UNAVAILABLE = "400"
    CALENDAR_LEDGER_WRITE_FAILED = "401"
