"""Pydantic models for the chat endpoint contract."""

from typing import Literal

from pydantic import BaseModel


class ApiMessage(BaseModel):
    """A single role/content entry sent upstream."""

    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Body POSTed to the chat endpoint."""

    messages: list[ApiMessage]


class CompletionMessage(BaseModel):
    content: str | None = None


class CompletionChoice(BaseModel):
    message: CompletionMessage | None = None


class CompletionResponse(BaseModel):
    """The part of a completion response the widget reads."""

    choices: list[CompletionChoice] = []
