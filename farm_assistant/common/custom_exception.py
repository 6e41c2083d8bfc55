# farm_assistant/common/custom_exception.py
import sys
from typing import Optional


class CustomException(Exception):
    """
    Application error that records where it was raised.
    The detailed form goes to the logs; callers that talk to users should use
    the plain message instead.
    """

    def __init__(self, message: str, error_detail: Optional[BaseException] = None):
        self.message = message
        self.error_detail = error_detail
        self.error_message = self.get_detailed_error_message(message, error_detail)
        super().__init__(self.error_message)

    @staticmethod
    def get_detailed_error_message(message: str, error_detail: Optional[BaseException]) -> str:
        _, _, exc_tb = sys.exc_info()
        file_name = exc_tb.tb_frame.f_code.co_filename if exc_tb else "unknown file"
        line_number = exc_tb.tb_lineno if exc_tb else "unknown line"
        if error_detail is None:
            return f"{message} (in {file_name}, line {line_number})"
        return f"{message} | Error: {error_detail} (in {file_name}, line {line_number})"

    def __str__(self):
        return self.error_message


class UpstreamAPIError(CustomException):
    """
    Failure talking to an external HTTP API (model or weather provider).
    `user_message` is shown to the user verbatim.
    """

    def __init__(self, message: str, error_detail: Optional[BaseException] = None, status_code: Optional[int] = None):
        super().__init__(message, error_detail)
        self.status_code = status_code

    @property
    def user_message(self) -> str:
        return self.message
