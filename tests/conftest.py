"""
conftest.py
-----------
Shared pytest fixtures for pagegen tests.
"""
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory


LAYOUT = (
    "<html><head><title>{{title}}</title>"
    '<meta name="description" content="{{description}}">'
    '<meta name="author" content="{{author}}">'
    '<meta name="keywords" content="{{tags}}">'
    "</head><body>"
    '<main>{{text}}</main>'
    "<footer>{{update_at}}|{{pubdate}}</footer>"
    "</body></html>"
)


@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def site_root(tmp_dir):
    """Repository-shaped directory with content/ and layouts/default.html."""
    (tmp_dir / "content").mkdir()
    layouts = tmp_dir / "layouts"
    layouts.mkdir()
    (layouts / "default.html").write_text(LAYOUT, encoding="utf-8")
    return tmp_dir


@pytest.fixture
def write_content(site_root):
    """Write a file under content/, creating parent directories."""

    def _write(rel: str, text: str) -> Path:
        path = site_root / "content" / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
