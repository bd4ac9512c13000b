"""
HTML 树工具
片段解析、数学节点查找与替换
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from bs4 import BeautifulSoup, PageElement, Tag

from ...domain.errors import FragmentParseError

MATH_LANGUAGE_CLASS = "language-math"
MATH_INLINE_CLASS = "math-inline"
MATH_DISPLAY_CLASS = "math-display"
ERROR_CLASS = "math-error"

HtmlTree = Union[BeautifulSoup, Tag]


@dataclass
class MathElement:
    """树中的一个数学节点

    Attributes:
        element: 承载公式文本的元素
        splice_target: 渲染结果替换的目标
        display_mode: 是否为块级公式
        replaces_target: True 替换整个目标，False 只替换 element 的子节点
    """

    element: Tag
    splice_target: Tag
    display_mode: bool
    replaces_target: bool = True


def parse_fragment(markup: str) -> BeautifulSoup:
    """以片段模式解析 HTML，不补全 html/body"""
    try:
        return BeautifulSoup(markup, "html.parser")
    except Exception as e:
        raise FragmentParseError(f"HTML 片段解析失败: {e}")


def class_list(element: Tag) -> list[str]:
    classes = element.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)


def as_math_element(element: Tag) -> Optional[MathElement]:
    """判断元素是否为数学节点"""
    classes = class_list(element)

    if element.name == "code" and MATH_LANGUAGE_CLASS in classes:
        # 代码块默认为显示模式
        display_mode = MATH_INLINE_CLASS not in classes
        parent = element.parent
        if isinstance(parent, Tag) and parent.name == "pre":
            return MathElement(element, parent, display_mode)
        return MathElement(element, element, display_mode)

    if MATH_INLINE_CLASS in classes or MATH_DISPLAY_CLASS in classes:
        return MathElement(
            element, element, MATH_DISPLAY_CLASS in classes, replaces_target=False
        )

    return None


def collect_math_elements(tree: HtmlTree) -> list[MathElement]:
    """按文档顺序收集数学节点"""
    candidates: list[Tag] = []
    if not isinstance(tree, BeautifulSoup):
        candidates.append(tree)
    candidates.extend(tree.find_all(True))

    found = []
    for element in candidates:
        math_element = as_math_element(element)
        if math_element is not None:
            found.append(math_element)
    return found


def is_attached(node: PageElement, tree: HtmlTree) -> bool:
    """节点是否仍在树中（可能已随先前的替换被移除）"""
    if node is tree:
        return True
    return any(parent is tree for parent in node.parents)


def text_content(element: Tag) -> str:
    """提取文本内容，保留原始空白"""
    return element.get_text()


def replace_children(element: Tag, nodes: Iterable[PageElement]) -> None:
    element.clear()
    for node in list(nodes):
        element.append(node)


def replace_node(target: Tag, nodes: Iterable[PageElement]) -> None:
    """用 nodes 替换 target，保持兄弟节点顺序"""
    nodes = list(nodes)
    if nodes:
        target.replace_with(*nodes)
    else:
        target.extract()


def splice(math_element: MathElement, fragment: BeautifulSoup) -> None:
    """把渲染结果放入树中"""
    nodes = list(fragment.contents)
    if math_element.replaces_target:
        replace_node(math_element.splice_target, nodes)
    else:
        replace_children(math_element.element, nodes)


def error_element(message: str, color: str) -> Tag:
    """创建行内错误提示元素"""
    factory = BeautifulSoup("", "html.parser")
    span = factory.new_tag("span", attrs={"class": [ERROR_CLASS], "style": f"color: {color};"})
    span.string = message
    return span
