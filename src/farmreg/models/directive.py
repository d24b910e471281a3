"""Stage engine output: what to tell the gateway."""

from pydantic import BaseModel

from farmreg.models.enums import DirectiveKind


class Directive(BaseModel):
    """Continue the dialogue or end it, with the message to show."""

    kind: DirectiveKind
    message: str

    @classmethod
    def cont(cls, message: str) -> "Directive":
        return cls(kind=DirectiveKind.CONTINUE, message=message)

    @classmethod
    def end(cls, message: str) -> "Directive":
        return cls(kind=DirectiveKind.TERMINATE, message=message)

    @property
    def is_terminal(self) -> bool:
        return self.kind is DirectiveKind.TERMINATE

    def render(self) -> str:
        """Gateway wire format: `CON <message>` or `END <message>`."""
        return f"{self.kind.value} {self.message}"
