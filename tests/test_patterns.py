"""Tests for glob matching of project-relative paths."""

from trinity.scanning.patterns import expand_braces, match_any, match_path, split_patterns, translate


class TestExpandBraces:
    def test_no_braces(self):
        assert expand_braces("src/*.ts") == ["src/*.ts"]

    def test_single_group(self):
        assert expand_braces("*.{js,ts}") == ["*.js", "*.ts"]

    def test_multiple_groups(self):
        assert sorted(expand_braces("*.{test,spec}.{js,ts}")) == [
            "*.spec.js",
            "*.spec.ts",
            "*.test.js",
            "*.test.ts",
        ]


class TestMatchPath:
    """``**`` stands for zero or more directories; ``*`` crosses slashes."""

    def test_globstar_prefix_matches_top_level(self):
        assert match_path("foo.test.ts", "**/*.test.ts")

    def test_globstar_prefix_matches_nested(self):
        assert match_path("a/b/foo.test.ts", "**/*.test.ts")

    def test_globstar_segment_matches_zero_dirs(self):
        assert match_path("src/foo.ts", "src/**/*.ts")

    def test_globstar_segment_matches_many_dirs(self):
        assert match_path("src/a/b/c/foo.ts", "src/**/*.ts")

    def test_star_crosses_slash(self):
        assert match_path("src/a/foo.ts", "src/*.ts")

    def test_trailing_globstar(self):
        assert match_path("node_modules/pkg/index.js", "node_modules/**")

    def test_wrong_extension(self):
        assert not match_path("src/foo.js", "src/**/*.ts")

    def test_braces_in_pattern(self):
        assert match_path("lib/x.tsx", "lib/**/*.{ts,tsx}")

    def test_case_sensitive(self):
        assert not match_path("SRC/foo.ts", "src/**/*.ts")

    def test_translate_is_deduplicated(self):
        variants = translate("**/*.{js,js}")
        assert len(variants) == len(set(variants))


class TestMatchAny:
    def test_split_patterns(self):
        positive, negative = split_patterns(["src/**/*.ts", "!**/*.d.ts"])
        assert positive == ["src/**/*.ts"]
        assert negative == ["**/*.d.ts"]

    def test_negation_excludes(self):
        patterns = ["src/**/*.ts", "!**/*.d.ts"]
        assert match_any("src/foo.ts", patterns)
        assert not match_any("src/types/foo.d.ts", patterns)

    def test_needs_a_positive_match(self):
        assert not match_any("src/foo.ts", ["!**/*.d.ts"])

    def test_empty_list(self):
        assert not match_any("src/foo.ts", [])
