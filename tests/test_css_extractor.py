"""Tests for CSS module selector extraction."""

import pytest

from cssmdoc.analyzer.css_extractor import (
    CssParseError,
    decode_css_escapes,
    extract_selectors,
    parse_css_selectors,
)


class TestParseCssSelectors:
    """Selector collection from stylesheet source."""

    def test_class_selectors(self):
        css = """
        .header { color: red; }
        .title, .subtitle { margin: 0; }
        """
        assert parse_css_selectors(css) == {'header', 'title', 'subtitle'}

    def test_compound_and_combinator_selectors(self):
        css = """
        .card .cardTitle { color: red; }
        .list > .item + .item { margin-top: 4px; }
        button.primary.large { padding: 0; }
        """
        assert parse_css_selectors(css) == {'card', 'cardTitle', 'list', 'item', 'primary', 'large'}

    def test_pseudo_classes_are_not_selectors(self):
        css = ".link:hover, .link:focus-visible { outline: none; }"
        assert parse_css_selectors(css) == {'link'}

    def test_selectors_inside_media_queries(self):
        css = """
        @media (max-width: 600px) {
          .mobileOnly { display: block; }
        }
        """
        assert parse_css_selectors(css) == {'mobileOnly'}

    def test_keyframe_names_are_skipped(self):
        css = """
        .spinner { animation: spin 1s linear infinite; }
        @keyframes spin {
          from { transform: rotate(0deg); }
          to { transform: rotate(360deg); }
        }
        """
        assert parse_css_selectors(css) == {'spinner'}

    def test_id_selectors_are_exported(self):
        assert parse_css_selectors("#main .content { color: red; }") == {'main', 'content'}

    def test_hex_colors_are_not_ids(self):
        assert parse_css_selectors(".box { color: #fff; background: #00ff00; }") == {'box'}

    def test_global_selectors_are_skipped(self):
        css = """
        :global(.external) { color: red; }
        .local :global(.thirdParty) { color: blue; }
        """
        assert parse_css_selectors(css) == {'local'}

    def test_negated_selectors_are_exported(self):
        assert parse_css_selectors(".button:not(.disabled) { cursor: pointer; }") == {'button', 'disabled'}

    def test_empty_stylesheet(self):
        assert parse_css_selectors("") == set()

    def test_media_range_queries_keep_selectors(self):
        css = ".a {}\n.b {}\n@media (width >= 600px) {\n  .a {}\n  .wide {}\n}\n"
        assert parse_css_selectors(css) == {'a', 'b', 'wide'}

    def test_named_container_queries_keep_selectors(self):
        css = """
        @container sidebar (min-width: 400px) {
          .sidebarCard { display: grid; }
        }
        .layout { container: sidebar / inline-size; }
        """
        assert parse_css_selectors(css) == {'sidebarCard', 'layout'}

    def test_escaped_class_names_are_decoded(self):
        css = ".sm\\:hidden { display: none; }\n.md\\:flex { display: flex; }\n"
        assert parse_css_selectors(css) == {'sm:hidden', 'md:flex'}

    def test_malformed_css_raises_with_location(self):
        css = ".valid { color: red; }\n\n.broken { color: red\n"
        with pytest.raises(CssParseError) as exc_info:
            parse_css_selectors(css)

        assert exc_info.value.line is not None
        assert exc_info.value.line >= 1
        assert exc_info.value.column >= 1


class TestExtractSelectors:
    """File-level extraction with error tolerance."""

    def test_extracts_from_file(self, tmp_path):
        css_file = tmp_path / 'styles.module.css'
        css_file.write_text(".a { color: red; }\n.b { color: blue; }\n", encoding='utf-8')

        assert extract_selectors(css_file) == {'a', 'b'}

    def test_missing_file_has_no_selectors(self, tmp_path, capsys):
        assert extract_selectors(tmp_path / 'nope.css') == set()
        assert capsys.readouterr().err == ''

    def test_directory_has_no_selectors(self, tmp_path):
        assert extract_selectors(tmp_path) == set()

    def test_parse_failure_is_logged_and_recovered(self, tmp_path, capsys):
        css_file = tmp_path / 'broken.css'
        css_file.write_text(".valid { color: red; }\n\n.broken { color: red\n", encoding='utf-8')

        assert extract_selectors(css_file) == set()

        err = capsys.readouterr().err
        assert 'CSS Parse Error' in err
        assert 'broken.css' in err
        assert 'line' in err

    def test_at_rule_errors_do_not_drop_file(self, tmp_path, capsys):
        css_file = tmp_path / 'responsive.css'
        css_file.write_text(".a {}\n.b {}\n@media (width >= 600px) { .a {} }\n", encoding='utf-8')

        assert extract_selectors(css_file) == {'a', 'b'}
        assert 'CSS Parse Error' not in capsys.readouterr().err


class TestDecodeCssEscapes:

    def test_plain_escape(self):
        assert decode_css_escapes('sm\\:hidden') == 'sm:hidden'

    def test_hex_escape_consumes_one_space(self):
        assert decode_css_escapes('\\31 0') == '10'
        assert decode_css_escapes('\\000031x') == '1x'

    def test_invalid_code_points_become_replacement_char(self):
        assert decode_css_escapes('a\\0 b') == 'a�b'
        assert decode_css_escapes('\\D800 ') == '�'

    def test_unescaped_text_is_unchanged(self):
        assert decode_css_escapes('plainName') == 'plainName'
