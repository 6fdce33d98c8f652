"""JSON formatter for Trinity reports."""

import json

from ..models import TrinityValidationResult
from .base import NO_RESULT_MESSAGE, BaseFormatter, is_result


class JsonFormatter(BaseFormatter):
    """Render the full result as JSON."""

    def render(self, result: TrinityValidationResult) -> None:
        print(self.format(result))

    def format(self, result: TrinityValidationResult) -> str:
        if not is_result(result):
            return json.dumps({"error": NO_RESULT_MESSAGE}, indent=2)
        return json.dumps(result.to_dict(), indent=2)
