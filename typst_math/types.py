"""
TypstMath 类型定义
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union

# markdown token 上的元数据键
MATH_TYPE_META_KEY = "mathType"

# HTML 元素上的元数据属性
MATH_TYPE_ATTR = "data-math-type"


class MathType(str, Enum):
    """数学公式类型"""

    LATEX = "latex"
    TYPST = "typst"

    @classmethod
    def from_tag(cls, value: Any) -> Optional["MathType"]:
        """解析节点上附带的类型标记，无效标记返回 None"""
        if isinstance(value, cls):
            return value
        if isinstance(value, list):
            # BeautifulSoup 可能把属性解析为列表
            value = " ".join(value)
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


StrictPolicy = Union[bool, str, Callable[[str, str], Union[bool, str]]]
TrustPolicy = Union[bool, Callable[[dict], bool]]


@dataclass(frozen=True)
class LatexOptions:
    """LaTeX 后端配置（不可变）"""

    macros: Mapping[str, str] = field(default_factory=dict)
    error_color: str = "#cc0000"
    strict: StrictPolicy = "warn"
    trust: TrustPolicy = False
    fleqn: bool = False
    leqno: bool = False
    # 未识别的选项，原样透传
    extra: Mapping[str, Any] = field(default_factory=dict)


# 配置键 -> LatexOptions 字段
_LATEX_KEYS = {
    "macros": "macros",
    "errorColor": "error_color",
    "error_color": "error_color",
    "strict": "strict",
    "trust": "trust",
    "fleqn": "fleqn",
    "leqno": "leqno",
}

# 由渲染器自身决定的选项
_IGNORED_KEYS = {"displayMode", "display_mode", "throwOnError", "throw_on_error"}


@dataclass(frozen=True)
class RenderOptions:
    """渲染配置（不可变）"""

    fallback_to_latex: bool = True
    prefer_typst: bool = True
    latex: LatexOptions = field(default_factory=LatexOptions)

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]] = None) -> "RenderOptions":
        """从配置字典构建，兼容 camelCase 与 snake_case 键名"""
        if not config:
            return cls()

        fallback = config.get("fallbackToLatex", config.get("fallback_to_latex", True))
        prefer = config.get("preferTypst", config.get("prefer_typst", True))

        latex_kwargs: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in config.items():
            if key in ("fallbackToLatex", "fallback_to_latex", "preferTypst", "prefer_typst"):
                continue
            if key in _IGNORED_KEYS:
                continue
            if key in _LATEX_KEYS:
                latex_kwargs[_LATEX_KEYS[key]] = value
            else:
                extra[key] = value

        if latex_kwargs.get("macros") is None:
            latex_kwargs.pop("macros", None)
        else:
            latex_kwargs["macros"] = dict(latex_kwargs["macros"])

        return cls(
            fallback_to_latex=bool(fallback),
            prefer_typst=bool(prefer),
            latex=LatexOptions(extra=extra, **latex_kwargs),
        )
