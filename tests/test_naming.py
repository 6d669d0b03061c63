"""Tests for default image and container names."""

from __future__ import annotations

from taskdock.helpers.naming import (
    get_default_container_name,
    get_default_image_name,
    get_valid_image_name,
    infer_image_name,
)
from taskdock.models import BuildOptions, RunOptions


class TestGetValidImageName:
    """Tests for get_valid_image_name function."""

    def test_strips_and_lowercases(self) -> None:
        assert get_valid_image_name("My App!") == "myapp"
        assert get_valid_image_name("web-api_v2.1") == "webapiv21"

    def test_non_ascii_removed(self) -> None:
        assert get_valid_image_name("café") == "caf"

    def test_fallback(self) -> None:
        assert get_valid_image_name("!!!") == "image"
        assert get_valid_image_name("") == "image"


class TestDefaultNames:
    """Tests for get_default_image_name and get_default_container_name."""

    def test_image_name(self) -> None:
        assert get_default_image_name("My App!") == "myapp:latest"
        assert get_default_image_name("!!!") == "image:latest"
        assert get_default_image_name("WebApp", "dev") == "webapp:dev"

    def test_container_name(self) -> None:
        assert get_default_container_name("WebApp") == "webapp-dev"
        assert get_default_container_name("WebApp", "latest") == "webapp-latest"


class TestInferImageName:
    """Tests for infer_image_name function."""

    def test_explicit_image_wins(self) -> None:
        result = infer_image_name(RunOptions(image="x"), BuildOptions(tag="y"), "z")
        assert result == "x"

    def test_build_tag_next(self) -> None:
        assert infer_image_name(RunOptions(), BuildOptions(tag="y"), "z") == "y"

    def test_default_last(self) -> None:
        assert infer_image_name(None, None, "z") == "z:latest"
        assert infer_image_name(RunOptions(), BuildOptions(), "z", "dev") == "z:dev"
