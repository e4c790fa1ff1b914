import pytest
from conftest import MENU_ROOT

from gopherlib import (
    BrokenLinkError,
    GopherURL,
    IndexOutOfBoundsError,
    MenuDocument,
    MenuEntry,
    MenuLineError,
    NegativeIndexError,
    NoLinksError,
    TextDocument,
    parse_document,
    parse_menu,
    parse_menu_line,
    parse_text,
    resolve_link,
)


class TestMenuLine:
    @pytest.mark.parametrize("line, expected", [
        ("1Floodgap Home\t/home\tgopher.floodgap.com\t70",
         MenuEntry("1", "Floodgap Home", "/home", "gopher.floodgap.com", 70)),
        ("i              ,-.      .-,\t\terror.host\t1",
         MenuEntry("i", "              ,-.      .-,", "", "error.host", 1)),
        ("0RFC 1436 (gopher protocol)\t/rfc1436.txt\tkhzae.net\t70",
         MenuEntry("0", "RFC 1436 (gopher protocol)", "/rfc1436.txt", "khzae.net", 70)),
        ("7Search dictionary\t/dict/search\tkhzae.net\t70",
         MenuEntry("7", "Search dictionary", "/dict/search", "khzae.net", 70)),
        ("0Some file or other\tmoo selector\thost2\t70\t+",
         MenuEntry("0", "Some file or other", "moo selector", "host2", 70)),
    ])
    def test_parses_four_fields(self, line, expected):
        assert parse_menu_line(line) == expected

    def test_to_url(self):
        entry = parse_menu_line("0RFC 1436 (gopher protocol)\t/rfc1436.txt\tkhzae.net\t70")
        assert entry.to_url().url == "gopher://khzae.net:70/0/rfc1436.txt"

    @pytest.mark.parametrize("line, field", [
        ("\t\t''.      ....      \t70", "item type"),
        ("idescription   ", "selector"),
        ("idescription\tselector", "host"),
        ("ior taken the time to contribute in other way. false\tnull.host\t1", "port"),
    ])
    def test_reports_first_missing_field(self, line, field):
        result = parse_menu_line(line)
        assert isinstance(result, MenuLineError)
        assert result.raw == line
        assert result.reason == f'Could not parse {field} in: "{line}"'


class TestParseMenu:
    def test_example_menu(self):
        raw = (
            b"i info\t\terror.host\t1\r\n"
            b"1About\t/about\tkhzae.net\t70\r\n"
            b"0Doc\t/doc.txt\tkhzae.net\t70\r\n"
            b"."
        )
        menu = parse_menu(raw)
        assert len(menu.entries) == 3
        assert menu.links == (1, 2)
        assert resolve_link(menu, "1") == GopherURL("khzae.net", 70, "1", "/about")
        assert resolve_link(menu, "2") == GopherURL("khzae.net", 70, "0", "/doc.txt")
        with pytest.raises(IndexOutOfBoundsError):
            resolve_link(menu, "3")

    def test_stops_at_first_blank_line(self):
        menu = parse_menu(b"1A\t/a\th\t70\r\n\r\n1B\t/b\th\t70\r\n")
        assert len(menu.entries) == 1

    def test_no_terminator_consumes_everything(self):
        menu = parse_menu(b"1A\t/a\th\t70\r\n0B\t/b\th\t70")
        assert len(menu.entries) == 2
        assert menu.links == (0, 1)

    def test_malformed_line_is_kept_in_place(self):
        menu = parse_menu(b"iheader\t\th\t1\r\nbroken line\r\n1A\t/a\th\t70\r\n.\r\n")
        assert isinstance(menu.entries[1], MenuLineError)
        assert menu.links == (2,)
        assert resolve_link(menu, 1) == GopherURL("h", 70, "1", "/a")

    def test_other_types_are_not_linkable(self):
        menu = parse_menu(MENU_ROOT.replace(b"0RFC", b"7RFC"))
        assert len(menu.links) == 2


class TestParseText:
    def test_keeps_lines_until_dot(self):
        doc = parse_text(b"hello\n  world\n\n.\nafter")
        assert doc.lines == ("hello", "  world", "")

    def test_crlf_lines_are_kept_verbatim(self):
        doc = parse_text(b"one\r\ntwo\r\n.\r\n")
        assert doc.lines == ("one\r", "two\r")

    def test_no_terminator_keeps_trailing_empty_line(self):
        assert parse_text(b"a\r\nb\r\n").lines == ("a\r", "b\r", "")

    def test_dot_with_text_is_content(self):
        assert parse_text(b"..\n. \nend").lines == ("..", ". ", "end")

    def test_dispatch_trusts_requested_type(self):
        raw = b"1About\t/about\tkhzae.net\t70\r\n.\r\n"
        assert isinstance(parse_document(GopherURL("khzae.net", 70, "1", "/"), raw), MenuDocument)
        doc = parse_document(GopherURL("khzae.net", 70, "0", "/x"), raw)
        assert isinstance(doc, TextDocument)
        assert doc.lines[0] == "1About\t/about\tkhzae.net\t70\r"


class TestResolveLink:
    @pytest.fixture
    def menu(self):
        return parse_menu(MENU_ROOT)

    def test_resolves_each_link(self, menu):
        assert resolve_link(menu, "1").url == "gopher://khzae.net:70/1/about"
        assert resolve_link(menu, "2").url == "gopher://sdf.org:70/1/"
        assert resolve_link(menu, "3").url == "gopher://khzae.net:70/0/rfc4266.txt"

    @pytest.mark.parametrize("index", ["0", "4", "20", 0, 4])
    def test_out_of_bounds(self, menu, index):
        with pytest.raises(IndexOutOfBoundsError, match="out of bounds"):
            resolve_link(menu, index)

    @pytest.mark.parametrize("index", ["-10", "abc", "", "1.5", -1])
    def test_unparsable_index(self, menu, index):
        with pytest.raises(NegativeIndexError, match="can't be negative"):
            resolve_link(menu, index)

    @pytest.mark.parametrize("index", ["1", "-1", "x"])
    def test_text_has_no_links(self, index):
        with pytest.raises(NoLinksError):
            resolve_link(TextDocument(("1About",)), index)

    def test_broken_entry(self):
        menu = MenuDocument(entries=(MenuLineError("x", "bad"),), links=(0,))
        with pytest.raises(BrokenLinkError) as exc:
            resolve_link(menu, "1")
        assert exc.value.reason == "bad"
