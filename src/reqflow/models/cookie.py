from pydantic import BaseModel, ConfigDict


class Cookie(BaseModel):
    """A cookie attached to an outgoing request."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str

    def header_value(self) -> str:
        return f"{self.name}={self.value}"
