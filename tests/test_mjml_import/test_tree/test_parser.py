"""Tests for the strict structural parser wrapper."""

from mjml_import.tree.parser import StructuralParseResult, parse_markup


class TestParseMarkup:
    """Tests for parse_markup."""

    def test_well_formed_markup(self):
        """Test well-formed markup yields a root element."""
        result = parse_markup("<mjml><mj-body/></mjml>")

        assert isinstance(result, StructuralParseResult)
        assert result.success is True
        assert result.diagnostic is None
        assert result.root.tag == "mjml"

    def test_xml_declaration_accepted(self):
        """Test a document may start with an encoding declaration."""
        result = parse_markup('<?xml version="1.0" encoding="UTF-8"?>\n<mjml/>')

        assert result.success is True
        assert result.root.tag == "mjml"

    def test_declared_encoding_ignored(self):
        """Test a non-UTF-8 declaration does not re-decode the text."""
        result = parse_markup(
            '<?xml version="1.0" encoding="ISO-8859-1"?>'
            "<mjml><mj-raw>café</mj-raw></mjml>"
        )

        assert result.success is True
        assert result.root[0].text == "café"

    def test_mismatched_tags_reported(self):
        """Test nesting errors become a diagnostic, not an exception."""
        result = parse_markup("<mjml><mj-body></mjml>")

        assert result.success is False
        assert result.root is None
        assert result.diagnostic
        assert result.line == 1

    def test_duplicate_attribute_reported(self):
        """Test the parser itself rejects repeated attributes."""
        result = parse_markup('<mjml a="1" a="2"/>')

        assert result.success is False
        assert result.diagnostic

    def test_undefined_entity_reported(self):
        """Test unknown named references fail to parse."""
        result = parse_markup("<mjml>&hearts;</mjml>")

        assert result.success is False
        assert "hearts" in result.diagnostic

    def test_empty_input(self):
        """Test blank input is a diagnostic."""
        result = parse_markup("   \n ")

        assert result.success is False
        assert result.diagnostic == "Document is empty"

    def test_non_markup_input(self):
        """Test plain text is a diagnostic."""
        result = parse_markup("just some words")

        assert result.success is False
        assert result.diagnostic
