"""
Pytest 配置和共享 fixture

渲染后端用 tests.helpers 中的假实现替代
"""

import pytest

from typst_math.domain.errors import LatexRenderError, TypstRenderError
from typst_math.infrastructure.backend import typst_backend

from tests.helpers import FakeLatexBackend, FakeTypstBackend


@pytest.fixture
def latex_backend() -> FakeLatexBackend:
    return FakeLatexBackend()


@pytest.fixture
def typst_backend_fake() -> FakeTypstBackend:
    return FakeTypstBackend()


@pytest.fixture
def failing_typst_backend() -> FakeTypstBackend:
    return FakeTypstBackend(error=TypstRenderError("unknown variable: foo"))


@pytest.fixture
def failing_latex_backend() -> FakeLatexBackend:
    return FakeLatexBackend(error=LatexRenderError("latex exploded"))


@pytest.fixture(autouse=True)
def clear_typst_cache():
    """编译缓存跨测试共享，每个测试前后清空"""
    typst_backend.compile_svg.cache_clear()
    yield
    typst_backend.compile_svg.cache_clear()
