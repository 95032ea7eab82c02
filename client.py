import asyncio
import json
import logging
import time
from typing import Any, Dict, Iterable, List, Optional, Tuple

import aiohttp
from tqdm.asyncio import tqdm

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# --- 클라이언트 설정 (기본값) ---
DEFAULT_BASE_URL = "http://127.0.0.1:3000"
DEFAULT_MODEL = "mock-1"

# --- 재시도 설정 ---
MAX_RETRIES = 5
RETRY_COOLDOWN_SECONDS = 10

def parse_sse_data(lines: Iterable[str]) -> List[str]:
    """SSE 스트림의 줄들에서 data: 필드 값만 순서대로 추출합니다."""
    events = []
    for line in lines:
        line = line.rstrip("\r\n")
        if line.startswith("data:"):
            events.append(line[len("data:"):].strip())
    return events

def assemble_stream(events: List[str]) -> Dict[str, Any]:
    """청크 이벤트들을 하나의 결과로 합칩니다. [DONE] 이후의 이벤트는 무시합니다."""
    content, finish_reason, chunks, done = [], None, 0, False
    for data in events:
        if data == "[DONE]":
            done = True
            break
        chunk = json.loads(data)
        chunks += 1
        choice = chunk["choices"][0]
        content.append(choice["delta"].get("content", ""))
        finish_reason = choice.get("finish_reason") or finish_reason
    return {"content": "".join(content), "finish_reason": finish_reason, "chunks": chunks, "done": done}

async def fetch_token(
    session: aiohttp.ClientSession,
    base_url: str,
    user_id: str,
    company: str,
) -> str:
    """/generate-token 으로 테스트용 토큰을 받아옵니다."""
    async with session.post(f"{base_url}/generate-token", json={"user_id": user_id, "company": company}) as response:
        response.raise_for_status()
        return (await response.json())["token"]

async def _send_single_request(
    session: aiohttp.ClientSession,
    task_id: int,
    prompt: str,
    api_url: str,
    token: Optional[str],
    model: str,
    stream: bool,
) -> Tuple[int, Dict[str, Any]]:
    """단일 요청을 Mock 서버에 비동기적으로 보내는 내부 헬퍼 함수."""
    payload = {"model": model, "stream": stream, "messages": [{"role": "user", "content": prompt}]}
    headers = {"Authorization": f"Bearer {token}"} if token else {}

    for attempt in range(MAX_RETRIES):
        try:
            async with session.post(api_url, json=payload, headers=headers) as response:
                # 성공 (2xx) 또는 클라이언트 오류 (4xx)는 즉시 반환 (재시도 안 함)
                if response.status < 500:
                    if response.status != 200:
                        body = await response.text()
                        logger.warning(f"Task #{task_id}: Received non-200 status: {response.status} - Response: {body!r}")
                        return task_id, {"error": f"HTTP {response.status}", "status": response.status}
                    if stream:
                        lines = [raw.decode("utf-8") async for raw in response.content]
                        return task_id, assemble_stream(parse_sse_data(lines))
                    return task_id, await response.json()

                # 서버 오류 (5xx)인 경우 재시도
                logger.warning(f"Task #{task_id}: Attempt {attempt + 1}/{MAX_RETRIES} failed with server error: {response.status}. Retrying in {RETRY_COOLDOWN_SECONDS}s...")

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Task #{task_id}: Attempt {attempt + 1}/{MAX_RETRIES} failed with client error: {e}. Retrying in {RETRY_COOLDOWN_SECONDS}s...")

        # 마지막 시도가 아니면 재시도 전 대기
        if attempt < MAX_RETRIES - 1:
            await asyncio.sleep(RETRY_COOLDOWN_SECONDS)

    logger.error(f"Task #{task_id}: FAILED after {MAX_RETRIES} attempts.")
    return task_id, {"error": f"Failed after {MAX_RETRIES} attempts."}

async def send_request(
    prompt_list: List[str],
    base_url: str = DEFAULT_BASE_URL,
    user_id: str = "client",
    company: str = "local",
    model: str = DEFAULT_MODEL,
    stream: bool = False,
) -> List[Tuple[int, Dict[str, Any]]]:
    """
    토큰을 발급받은 뒤 프롬프트 목록을 Mock 서버에 병렬로 전송하고 모든 결과를 수집합니다.
    """
    num_requests = len(prompt_list)
    api_url = f"{base_url}/v1/chat/completions"
    logger.info(f"--- Sending {num_requests} prompts to {api_url} (stream={stream}) ---")

    start_time = time.perf_counter()

    async with aiohttp.ClientSession() as session:
        token = await fetch_token(session, base_url, user_id, company)
        tasks = [
            asyncio.create_task(_send_single_request(session, i, prompt, api_url, token, model, stream))
            for i, prompt in enumerate(prompt_list)
        ]
        results = await tqdm.gather(*tasks, desc="Processing prompts", disable=num_requests < 2)

    end_time = time.perf_counter()

    logger.info(f"--- All {num_requests} tasks completed in {end_time - start_time:.2f} seconds ---")

    return sorted(results, key=lambda x: x[0])

if __name__ == "__main__":
    my_prompts = [f"This is a test prompt number {i}." for i in range(20)]

    results = asyncio.run(send_request(prompt_list=my_prompts, stream=True))

    succeeded_count = sum(1 for _, res in results if "error" not in res)
    failed_count = len(results) - succeeded_count
    logger.info(f"성공: {succeeded_count}, 실패: {failed_count}")

    logger.info("--- 첫 5개 결과 ---")
    for task_id, result in results[:5]:
        content = result.get('content') or result.get('choices', [{}])[0].get('message', {}).get('content', 'Error')
        logger.info(f"Task {task_id}: {content[:80]}")
