class VoiceLedgerError(Exception):
    """Base error carrying a stable code for API clients."""

    code = "SERVER_ERROR"
    status_code = 500
    default_message = "Unexpected error while processing the voice transaction"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "message": self.message}


class InvalidInput(VoiceLedgerError):
    code = "INVALID_INPUT"
    status_code = 400
    default_message = "Text is empty or too long"


class ExtractionDisabled(VoiceLedgerError):
    code = "AI_PARSING_DISABLED"
    status_code = 503
    default_message = "AI parsing is not enabled"


class ExtractionTimeout(VoiceLedgerError):
    code = "AI_TIMEOUT"
    status_code = 504
    default_message = "AI parsing timed out, please try again"


class ExtractionUnparseable(VoiceLedgerError):
    code = "AI_PARSE_ERROR"
    status_code = 422
    default_message = "AI response could not be parsed"


class ExtractionIncomplete(VoiceLedgerError):
    code = "AI_INCOMPLETE_RESPONSE"
    status_code = 422
    default_message = "AI response is missing the transaction type or amount"


class ExtractionFailed(VoiceLedgerError):
    code = "PARSE_ERROR"
    status_code = 502
    default_message = "Text could not be parsed"


class TypeUndetermined(VoiceLedgerError):
    code = "TRANSACTION_TYPE_UNDETERMINED"
    status_code = 422
    default_message = "Transaction type could not be determined"


class DefaultCategoryMissing(VoiceLedgerError):
    code = "DEFAULT_CATEGORY_NOT_FOUND"
    status_code = 500
    default_message = "Default category not found"


class InvalidCategory(VoiceLedgerError):
    code = "INVALID_CATEGORY"
    status_code = 400
    default_message = "Category does not exist or does not match the transaction type"


class LedgerUnavailable(VoiceLedgerError):
    code = "LEDGER_ERROR"
    status_code = 502
    default_message = "Ledger service request failed"
