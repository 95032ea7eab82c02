from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from llm_mock_server.app.models.chat import ChatCompletionRequest, ChatCompletionResponse
from llm_mock_server.app.services import chat_service

router = APIRouter()

@router.post("/completions", response_model=None)
async def chat_completions(payload: ChatCompletionRequest, request: Request) -> ChatCompletionResponse | StreamingResponse:
    """LLM Mock Endpoint"""
    settings = request.app.state.settings
    if payload.stream:
        return StreamingResponse(
            chat_service.stream_generator(
                payload.model,
                settings.stream_tokens,
                delay=settings.stream_delay_seconds,
                is_disconnected=request.is_disconnected,
            ),
            media_type="text/event-stream"
        )
    else:
        return chat_service.create_non_streaming_response(payload.model, settings.non_streaming_text)
