import asyncio
from typing import AsyncGenerator, Awaitable, Callable, Optional, Sequence

from llm_mock_server.app.models.chat import (
    ChatMessage,
    ChatCompletionResponse,
    ChatCompletionResponseChoice,
    ChatCompletionStreamChoice,
    ChatCompletionStreamResponse,
    DeltaMessage,
)
from llm_mock_server.app.core.logger import get_logger
logger = get_logger(__name__)

DONE_EVENT = "data: [DONE]\n\n"

def format_event(chunk: ChatCompletionStreamResponse) -> str:
    """청크 하나를 SSE 이벤트 한 개로 직렬화"""
    return f"data: {chunk.model_dump_json()}\n\n"

async def stream_generator(
    model: str,
    tokens: Sequence[str],
    delay: float = 0.05,
    is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None,
) -> AsyncGenerator[str, None]:
    """
    Streaming 응답 생성 로직
    토큰마다 청크 1개 -> finish_reason="stop" 청크 -> [DONE] 순서로 항상 동일하게 전송
    """
    logger.info(f"stream started: model={model}, tokens={len(tokens)}")
    try:
        for sent, token in enumerate(tokens):
            # 클라이언트가 끊겼으면 남은 토큰은 버림
            if is_disconnected is not None and await is_disconnected():
                logger.info(f"client disconnected after {sent}/{len(tokens)} tokens, stream abandoned")
                return

            chunk = ChatCompletionStreamResponse(
                model=model,
                choices=[ChatCompletionStreamChoice(delta=DeltaMessage(content=token))],
            )
            yield_data = format_event(chunk)
            logger.debug(f"{yield_data.strip()}")
            yield yield_data
            await asyncio.sleep(delay)
    except asyncio.CancelledError:
        logger.info("stream cancelled by server shutdown or client disconnect")
        raise

    final_chunk = ChatCompletionStreamResponse(
        model=model,
        choices=[ChatCompletionStreamChoice(delta=DeltaMessage(), finish_reason="stop")],
    )
    yield_data = format_event(final_chunk)
    logger.debug(f"{yield_data.strip()}")
    yield yield_data
    yield DONE_EVENT
    logger.info(f"stream finished: model={model}")

def create_non_streaming_response(model: str, content: str) -> ChatCompletionResponse:
    """Non-Streaming 응답 생성 로직"""
    response = ChatCompletionResponse(
        model=model,
        choices=[
            ChatCompletionResponseChoice(
                message=ChatMessage(role="assistant", content=content)
            )
        ],
    )
    logger.info(f"{response.model_dump_json(indent=2)}")
    return response
