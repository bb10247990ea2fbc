from dataclasses import dataclass
from typing import Literal, Protocol


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


class CompletionError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable"):
        super().__init__(message)
        self.code = code


class CompletionClient(Protocol):
    model: str

    def complete(
        self,
        messages: list[ChatMessage],
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> str: ...
