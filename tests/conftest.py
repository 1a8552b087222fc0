import sys
from pathlib import Path

import pytest
from jinja2 import Environment

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'tmpltool'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from tmpltool.core.context import TemplateContext  # noqa: E402
from tmpltool.core.environment import MappingEnvironment  # noqa: E402
from tmpltool.core.renderer import build_environment  # noqa: E402
from tmpltool.core.stdlib_logging import reset_stdlib_logging_for_tests  # noqa: E402
from tmpltool.data import clear_caches  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Ensure data caches and logging handlers are fresh for each test."""
    clear_caches()
    yield
    clear_caches()
    reset_stdlib_logging_for_tests()


@pytest.fixture
def fake_environ() -> MappingEnvironment:
    """Fixed environment-variable provider used by env-reading functions."""
    return MappingEnvironment(
        {
            "APP_NAME": "shop",
            "SERVER_HOST": "localhost",
            "SERVER_PORT": "8080",
            "CLIENT_HOST": "10.0.0.5",
            "DB_PASSWORD": "hunter2",
        }
    )


@pytest.fixture
def template_context(tmp_path: Path) -> TemplateContext:
    return TemplateContext(base_dir=tmp_path, trust_mode=False)


@pytest.fixture
def env(template_context: TemplateContext, fake_environ: MappingEnvironment) -> Environment:
    """Jinja2 environment with the full catalog registered."""
    return build_environment(template_context, environ=fake_environ)


@pytest.fixture
def render(env: Environment):
    """Render a template string against ``variables``."""

    def _render(source: str, /, **variables) -> str:
        return env.from_string(source).render(**variables)

    return _render
