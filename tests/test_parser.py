"""Tests for grammar selection and parse-failure detection."""
import pytest

from component_extractor.analyzer.parser import LanguageParser, has_parse_errors, is_source_file


class TestLanguageSelection:
    """Extension to grammar mapping."""

    @pytest.mark.parametrize('path, language', [
        ('src/App.jsx', 'javascript'),
        ('src/lib.mjs', 'javascript'),
        ('src/api.ts', 'typescript'),
        ('src/Modal.TSX', 'tsx'),
    ])
    def test_source_extensions(self, path, language):
        assert LanguageParser.from_file_extension(path).language == language
        assert is_source_file(path)

    def test_assets_have_no_parser(self):
        assert LanguageParser.from_file_extension('src/Button.css') is None
        assert not is_source_file('src/logo.svg')

    def test_unknown_language(self):
        with pytest.raises(ValueError):
            LanguageParser('python')

    def test_parsers_are_shared(self):
        assert LanguageParser('tsx').parser is LanguageParser('tsx').parser


class TestParsing:
    """Trees and the error signal."""

    def test_jsx_parses_cleanly(self):
        tree = LanguageParser('javascript').parse_source("const App = () => <div className='x' />;\n")
        assert not has_parse_errors(tree)

    def test_typed_jsx_needs_tsx_grammar(self):
        code = "const App = (props: Props) => <div>{props.title}</div>;\n"
        assert not has_parse_errors(LanguageParser('tsx').parse_source(code))

    def test_broken_source_is_reported(self):
        tree = LanguageParser('javascript').parse_source("export const a = (;\n")
        assert has_parse_errors(tree)

