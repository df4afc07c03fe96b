"""
`Logger.io`: call tracing for use cases, adapters and routes.

Each decorated call logs its (masked) arguments and return value at DEBUG and
its failure once, at the deepest decorated frame that saw it. Classified
errors (`CustomBaseError`) are logged without a traceback.

    @Logger.io
    async def resolve(self, *, raw_input: str, now: datetime) -> ...

    @Logger.io(truncate_content=False)
    async def get_stats(self, event_id: str) -> CheckInStats
"""

from functools import wraps
from inspect import iscoroutinefunction
import time
import types
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar, cast, overload


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io_config import ExtraField, call_depth_var, custom_logger
from src.platform.logging.loguru_io_utils import (
    build_call_target_func_path,
    get_chain_start_time,
    mask_nested,
    normalize_args_kwargs,
    reset_call_depth,
)

_F = TypeVar('_F', bound=Callable[..., Any])
_P = ParamSpec('_P')
_T = TypeVar('_T')

# Frames between the decorated function and the loguru call
_WRAPPER_DEPTH = 2


class LoguruIO:
    def __init__(
        self, custom_logger: 'LoguruLogger', *, reraise: bool = True, truncate_content: bool = True
    ) -> None:
        self._custom_logger = custom_logger
        self.reraise = reraise
        self.truncate_content = truncate_content
        self.call_target = ''

    def _bound(self) -> 'LoguruLogger':
        return self._custom_logger.bind(
            **{
                ExtraField.CALL_TARGET: self.call_target,
                ExtraField.CHAIN_START_TIME: get_chain_start_time(),
            }
        ).opt(depth=_WRAPPER_DEPTH)

    def _on_enter(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> float:
        call_depth_var.set(call_depth_var.get() + 1)
        if settings.DEBUG:
            self._bound().debug(
                f'⬅️ args: {mask_nested(args, truncate=self.truncate_content)}, '
                f'kwargs: {mask_nested(kwargs, truncate=self.truncate_content)}'
            )
        return time.perf_counter()

    def _on_return(self, return_value: Any, started: float) -> None:
        if settings.DEBUG:
            elapsed_ms = (time.perf_counter() - started) * 1000
            self._bound().debug(
                f'➡️ return ({elapsed_ms:.1f}ms): '
                f'{mask_nested(return_value, truncate=self.truncate_content)}'
            )

    def _on_error(self, e: Exception) -> None:
        if getattr(e, '_has_logged', False):
            return
        e._has_logged = True  # type: ignore[attr-defined]
        bound = self._bound()
        if isinstance(e, CustomBaseError):
            bound.error(f'{type(e).__name__}: {e}')
        else:
            bound.exception(f'{type(e).__name__}: {e}')

    def _hide_from_traceback(self, func: Callable[..., Any]) -> Callable[..., Any]:
        func.__code__ = func.__code__.replace(  # type: ignore[attr-defined]
            co_filename=cast(types.FunctionType, self._custom_logger.catch).__code__.co_filename
        )
        return func

    def __call__(self, func: _F) -> _F:
        self.call_target = build_call_target_func_path(func)

        if iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                started = self._on_enter(args, kwargs)
                try:
                    args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                    return_value = await func(*args, **kwargs)
                    self._on_return(return_value, started)
                except Exception as e:
                    self._on_error(e)
                    if self.reraise:
                        raise
                    return None
                finally:
                    reset_call_depth()
                return return_value

            return cast(_F, self._hide_from_traceback(async_wrapper))

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            started = self._on_enter(args, kwargs)
            try:
                args, kwargs = normalize_args_kwargs(func, *args, **kwargs)
                return_value = func(*args, **kwargs)
                self._on_return(return_value, started)
            except Exception as e:
                self._on_error(e)
                if self.reraise:
                    raise
                return None
            finally:
                reset_call_depth()
            return return_value

        return cast(_F, self._hide_from_traceback(sync_wrapper))


class Logger:
    base = custom_logger

    @overload
    @staticmethod
    def io(func: Callable[_P, _T]) -> Callable[_P, _T]: ...

    @overload
    @staticmethod
    def io(func: None = ..., *, reraise: bool = ..., truncate_content: bool = ...) -> LoguruIO: ...

    @staticmethod
    def io(
        func: Callable[_P, _T] | None = None, *, reraise: bool = True, truncate_content: bool = True
    ) -> Callable[_P, _T] | LoguruIO:
        decorator = LoguruIO(
            custom_logger=custom_logger, reraise=reraise, truncate_content=truncate_content
        )
        return decorator(func) if func else decorator
