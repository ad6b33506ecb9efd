from dataclasses import dataclass

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class ResponseEnvelope:
    """Status/message pair carried by every API response body."""

    status: str = STATUS_SUCCESS
    message: str = ""

    @property
    def is_success(self) -> bool:
        return self.status == STATUS_SUCCESS

    @classmethod
    def success(cls, message: str = "") -> "ResponseEnvelope":
        return cls(status=STATUS_SUCCESS, message=str(message))

    @classmethod
    def failure(cls, message: str) -> "ResponseEnvelope":
        return cls(status=STATUS_FAILED, message=str(message))
