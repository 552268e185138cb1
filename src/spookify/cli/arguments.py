"""命令行参数解析：``--flag`` / ``--flag=value`` 与单个位置参数。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Union

from spookify.core.exceptions import MalformedInvocationError

FlagValue = Union[str, bool]


@dataclass(slots=True)
class ParsedArguments:
    input: Optional[str] = None
    flags: Dict[str, FlagValue] = field(default_factory=dict)


def parse_arguments(tokens: Sequence[str]) -> ParsedArguments:
    """把扁平的参数列表拆分为输入路径与标志映射。

    ``--name=value`` 按第一个 ``=`` 切分，``--name`` 的值为 ``True``；
    第一个非标志参数作为输入路径，出现第二个时抛出
    :class:`MalformedInvocationError`。
    """

    parsed = ParsedArguments()
    for token in tokens:
        if token.startswith("--"):
            name, sep, value = token[2:].partition("=")
            parsed.flags[name] = value if sep else True
        elif parsed.input is None:
            parsed.input = token
        else:
            raise MalformedInvocationError(f"多余的位置参数: {token}")
    return parsed
