import time
import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_serializer


def new_completion_id() -> str:
    return f"cmpl-{uuid.uuid4().hex}"

# ChatCompletionRequest 모델
class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str

class ChatCompletionRequest(BaseModel):
    model: str
    messages: List[ChatMessage]
    stream: Optional[bool] = None
    # 샘플링 파라미터는 받기만 하고 사용하지 않음
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

# Non-Streaming 응답 모델
class ChatCompletionResponseChoice(BaseModel):
    index: int = 0
    message: ChatMessage
    finish_reason: str = "stop"

class ChatCompletionResponse(BaseModel):
    id: str = Field(default_factory=new_completion_id)
    object: str = "chat.completion"
    created: int = Field(default_factory=lambda: int(time.time()))
    model: str
    choices: List[ChatCompletionResponseChoice]

# Streaming 응답 모델
class DeltaMessage(BaseModel):
    role: Optional[str] = None
    content: Optional[str] = None

    @model_serializer(mode="wrap")
    def omit_missing(self, handler):
        # 값이 없는 필드는 직렬화하지 않음 (마지막 청크의 delta 는 {})
        return {key: value for key, value in handler(self).items() if value is not None}

class ChatCompletionStreamChoice(BaseModel):
    index: int = 0
    delta: DeltaMessage
    finish_reason: Optional[str] = None

class ChatCompletionStreamResponse(BaseModel):
    id: str = Field(default_factory=new_completion_id)
    object: str = "chat.completion.chunk"
    created: int = Field(default_factory=lambda: int(time.time()))
    model: str
    choices: List[ChatCompletionStreamChoice]
