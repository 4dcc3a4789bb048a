"""Tests for run configuration loading."""

import os

from cssmdoc.config import DEFAULT_EXTS, DEFAULT_STYLE_GLOBS, Config, split_values


class TestSplitValues:

    def test_repeated_and_comma_separated(self):
        assert split_values(['jsx,tsx', ' js ']) == ['jsx', 'tsx', 'js']

    def test_single_string(self):
        assert split_values('.css, .scss,') == ['.css', '.scss']

    def test_empty(self):
        assert split_values(None) == []
        assert split_values([]) == []


class TestConfigLoad:

    def test_defaults(self, tmp_path):
        config = Config.load(tmp_path)

        assert config.style_globs == DEFAULT_STYLE_GLOBS
        assert config.exts == DEFAULT_EXTS
        assert config.ignore == []
        assert config.reverse is False
        assert config.output is None
        assert config.output_format is None

    def test_explicit_values(self, tmp_path):
        config = Config.load(
            tmp_path,
            ignore=['legacy'],
            style_globs=['.module.css,.scss'],
            exts=['tsx'],
            reverse=True,
            output='report.md',
            output_format='md',
        )

        assert config.ignore == ['legacy']
        assert config.style_globs == ['.module.css', '.scss']
        assert config.exts == ['tsx']
        assert config.reverse is True
        assert config.output == 'report.md'
        assert config.output_format == 'md'

    def test_environment_variables(self, tmp_path, monkeypatch):
        monkeypatch.setenv('CSSMDOC_EXTS', 'js,jsx')
        monkeypatch.setenv('CSSMDOC_REVERSE', 'yes')
        monkeypatch.setenv('CSSMDOC_OUTPUT_FORMAT', 'json')

        config = Config.load(tmp_path)

        assert config.exts == ['js', 'jsx']
        assert config.reverse is True
        assert config.output_format == 'json'

    def test_explicit_values_beat_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv('CSSMDOC_EXTS', 'js')

        assert Config.load(tmp_path, exts=['tsx']).exts == ['tsx']

    def test_dotenv_in_project_root(self, tmp_path):
        (tmp_path / '.env').write_text(
            "CSSMDOC_STYLE_GLOBS=.module.css\nCSSMDOC_IGNORE=generated,vendor.css\n",
            encoding='utf-8',
        )

        config = Config.load(tmp_path)

        assert config.style_globs == ['.module.css']
        assert config.ignore == ['generated', 'vendor.css']

    def test_dotenv_does_not_leak_into_process_environment(self, tmp_path):
        (tmp_path / '.env').write_text("CSSMDOC_STYLE_GLOBS=.module.css\nCSSMDOC_REVERSE=true\n", encoding='utf-8')

        assert Config.load(tmp_path).reverse is True

        assert 'CSSMDOC_STYLE_GLOBS' not in os.environ
        assert 'CSSMDOC_REVERSE' not in os.environ
        assert Config.load(tmp_path / 'other').style_globs == DEFAULT_STYLE_GLOBS

    def test_environment_beats_dotenv(self, tmp_path, monkeypatch):
        (tmp_path / '.env').write_text("CSSMDOC_EXTS=js\n", encoding='utf-8')
        monkeypatch.setenv('CSSMDOC_EXTS', 'tsx')

        assert Config.load(tmp_path).exts == ['tsx']
