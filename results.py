"""
툴 실행 결과 타입(results.py)
=============================

툴 핸들러는 예외를 던지는 대신 아래 두 값 중 하나를 돌려줍니다.

- `Ok(text)`          : 성공. text는 클라이언트(LLM)에게 그대로 전달될 문자열
- `Err(kind, message)`: 입력 검증 실패. kind에 따라 디스패처가 JSON-RPC 오류 코드로 변환

오류 종류 → JSON-RPC 코드 매핑은 `dispatcher.py` 한 곳에서만 수행합니다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ErrorKind(str, Enum):
    """툴이 보고할 수 있는 오류 종류."""

    INVALID_ARGUMENT = "invalid_argument"
    INVALID_PARAMS = "invalid_params"


@dataclass(frozen=True)
class Ok:
    text: str


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str


ToolOutcome = Union[Ok, Err]
