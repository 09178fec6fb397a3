"""
Smoke tests to verify all critical dependencies are installed correctly.

These tests confirm that:
1. Python 3.11+ is installed
2. All core dependencies are importable
3. The application object and project version load

Run with: pytest tests/unit/test_smoke.py -v
"""

import sys


class TestPythonVersion:
    def test_python_311_or_higher(self) -> None:
        assert sys.version_info >= (3, 11), (
            f"Python 3.11+ required, "
            f"got {sys.version_info.major}.{sys.version_info.minor}"
        )


class TestCoreFramework:
    """Verify core framework dependencies."""

    def test_pydantic_v2(self) -> None:
        """Pydantic v2 must be installed (camelCase aliases rely on it)."""
        import pydantic

        major_version = int(pydantic.VERSION.split(".")[0])
        assert major_version >= 2, f"Pydantic v2 required, got {pydantic.VERSION}"

    def test_uvicorn_import(self) -> None:
        import uvicorn

        assert uvicorn is not None

    def test_httpx_async_import(self) -> None:
        from httpx import AsyncClient, MockTransport

        assert AsyncClient is not None
        assert MockTransport is not None

    def test_structlog_configuration(self) -> None:
        import structlog

        bound_logger = structlog.get_logger().bind(component="smoke", operation="test")
        assert bound_logger is not None


class TestApplication:
    def test_app_routes_registered(self) -> None:
        from tip_triage.api.main import app

        paths = {route.path for route in app.routes}
        assert {
            "/tips", "/queue/claim", "/queue/assign", "/review", "/stats", "/health"
        } <= paths

    def test_version_format(self, project_version: str) -> None:
        parts = project_version.split(".")
        assert len(parts) >= 2, f"Version must be semver format, got {project_version}"
