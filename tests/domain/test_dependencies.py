"""Tests for dependency declaration parsing."""

from monoboot.domain.dependencies import (
    LocalLink,
    SemverRange,
    parse_dependency_map,
    parse_dependency_spec,
)


class TestParseDependencySpec:
    def test_semver_range(self) -> None:
        spec = parse_dependency_spec("^1.0.0")
        assert isinstance(spec, SemverRange)
        assert spec.range == "^1.0.0"
        assert spec.raw == "^1.0.0"

    def test_local_link(self) -> None:
        spec = parse_dependency_spec("file:../core")
        assert isinstance(spec, LocalLink)
        assert spec.path == "../core"
        assert spec.raw == "file:../core"

    def test_whitespace_stripped(self) -> None:
        spec = parse_dependency_spec("  ~2.1.0 ")
        assert isinstance(spec, SemverRange)
        assert spec.range == "~2.1.0"

    def test_file_inside_range_is_not_a_link(self) -> None:
        spec = parse_dependency_spec(">=1.0.0 file:")
        assert isinstance(spec, SemverRange)


class TestParseDependencyMap:
    def test_none_is_empty(self) -> None:
        assert parse_dependency_map(None) == {}

    def test_preserves_declaration_order(self) -> None:
        parsed = parse_dependency_map({"zeta": "^1.0.0", "alpha": "file:../alpha", "mid": "*"})
        assert list(parsed) == ["zeta", "alpha", "mid"]
        assert isinstance(parsed["alpha"], LocalLink)
