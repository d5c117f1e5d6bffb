import pytest

from wehoware.utils.sanitize import like_pattern, slugify


@pytest.mark.unit
class TestSlugify:
    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Hello, World!", "hello-world"),
            ("  Spring   Sale -- 20% off ", "spring-sale-20-off"),
            ("Already-a-slug", "already-a-slug"),
        ],
    )
    def test_slugify(self, title: str, expected: str) -> None:
        assert slugify(title) == expected

    def test_fallback_when_nothing_survives(self) -> None:
        assert slugify("!!!", fallback="post") == "post"


@pytest.mark.unit
class TestLikePattern:
    def test_wraps_term(self) -> None:
        assert like_pattern(" teeth ") == "%teeth%"

    def test_escapes_wildcards(self) -> None:
        assert like_pattern("50%_off") == "%50\\%\\_off%"

    def test_escapes_escape_char(self) -> None:
        assert like_pattern("a\\b") == "%a\\\\b%"
