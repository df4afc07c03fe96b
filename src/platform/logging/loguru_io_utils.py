from inspect import FullArgSpec, getfile, getfullargspec, getsourcelines
from os.path import basename
import re
from time import time
from typing import Any, Callable

from src.platform.logging.loguru_io_config import (
    SENSITIVE_KEYWORDS,
    call_depth_var,
    chain_start_time_var,
)


MASK = '********'
MAX_LOGGED_CHARS = 500

# key='value' / key: value pairs inside repr() output of attrs/pydantic objects
_SENSITIVE_PAIR = re.compile(
    r"(\b(?:%s)\b)(=|: ?)('[^']*'|\"[^\"]*\"|[^,)\s]+)" % '|'.join(SENSITIVE_KEYWORDS),
    re.IGNORECASE,
)


def get_chain_start_time() -> float:
    if not (start_time := chain_start_time_var.get()):
        start_time = time()
        chain_start_time_var.set(start_time)
    return start_time


def build_call_target_func_path(func: Callable[..., Any]) -> str:
    try:
        lineno = getsourcelines(func)[1]
    except (OSError, TypeError):
        lineno = 0
    return f'{basename(getfile(getattr(func, "__func__", func)))}::{func.__qualname__}:{lineno}'


def reset_call_depth() -> None:
    layer = call_depth_var.get() - 1
    call_depth_var.set(layer)
    if not layer:
        chain_start_time_var.set(0)


def normalize_args_kwargs(
    func: Callable[..., Any], *args: Any, **kwargs: Any
) -> tuple[tuple[Any, ...], dict[Any, Any]]:
    """Drop kwargs the wrapped function cannot accept (e.g. injected by FastAPI)."""
    if hasattr(func, '__wrapped__'):
        func = func.__wrapped__  # type: ignore
    full_arg_spec: FullArgSpec = getfullargspec(func)
    if not full_arg_spec.varkw:
        accepted = set(full_arg_spec.args) | set(full_arg_spec.kwonlyargs)
        kwargs = {k: v for k, v in kwargs.items() if k in accepted}
    return args, kwargs


def mask_sensitive(data: Any) -> Any:
    try:
        data_str = str(data)
    except Exception:
        return data
    masked = _SENSITIVE_PAIR.sub(rf"\1\2'{MASK}'", data_str)
    return data if masked == data_str else masked


def should_mask_keyword(keyword: Any, value: Any) -> Any:
    return MASK if isinstance(keyword, str) and keyword.lower() in SENSITIVE_KEYWORDS else value


def truncate_content(data: Any) -> Any:
    text = data if isinstance(data, str) else str(data)
    if len(text) <= MAX_LOGGED_CHARS:
        return data
    return f'{text[:MAX_LOGGED_CHARS]}...(+{len(text) - MAX_LOGGED_CHARS} chars)'


def mask_nested(data: Any, *, truncate: bool = True) -> Any:
    """Mask sensitive values inside containers and reprs, then optionally truncate."""
    if isinstance(data, dict):
        processed: Any = {
            key: mask_nested(should_mask_keyword(key, value), truncate=False)
            for key, value in data.items()
        }
    elif isinstance(data, list | tuple):
        processed = type(data)(mask_nested(item, truncate=False) for item in data)
    else:
        processed = mask_sensitive(data)
    return truncate_content(processed) if truncate else processed
