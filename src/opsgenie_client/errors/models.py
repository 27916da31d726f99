"""OpsGenie error body model."""

import json
from dataclasses import dataclass, field


@dataclass
class ErrorResponse:
    """Error body returned by the OpsGenie API.

    Wire format: `{"message": "...", "code": 404, "errors": ["..."]}` where
    `errors` is optional.
    """

    message: str
    code: int = 0
    errors: list[str] = field(default_factory=list)

    @classmethod
    def from_body(cls, body: bytes | str) -> "ErrorResponse | None":
        """Parse an error body.

        Args:
            body: Raw response body

        Returns:
            ErrorResponse, or None if the body is not JSON, is not an object,
            has an empty/missing `message`, or has a field of the wrong type
            (`code` not an integer, `errors` not a list of strings)
        """
        try:
            data = json.loads(body)
        except (ValueError, TypeError):
            return None

        if not isinstance(data, dict):
            return None

        message = data.get("message")
        if not isinstance(message, str) or not message:
            return None

        code = data.get("code")
        if code is None:
            code = 0
        elif isinstance(code, bool) or not isinstance(code, int):
            return None

        errors = data.get("errors")
        if errors is None:
            errors = []
        elif not isinstance(errors, list) or not all(isinstance(e, str) for e in errors):
            return None

        return cls(message=message, code=code, errors=list(errors))

    def to_exception_message(self) -> str:
        """Render as `OpsGenie API error <code>: <message> (details: ...)`."""
        message = f"OpsGenie API error {self.code}: {self.message}"
        if self.errors:
            message += f" (details: {', '.join(self.errors)})"
        return message
