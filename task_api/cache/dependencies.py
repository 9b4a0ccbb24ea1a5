from fastapi import Request

from task_api.cache.service import ResponseCache


def get_response_cache(request: Request) -> ResponseCache:
    return request.app.state.response_cache


def build_cache_key(subject_id: str, request: Request) -> str:
    # Raw query string is kept as sent, so reordered parameters get their own slot
    key = f"{subject_id}:{request.url.path}"
    if request.url.query:
        key += f"?{request.url.query}"
    return key
