"""Tests for the doc-comment tag parser and the per-file line automaton."""

import logging

import pytest
from todoc.base import SourceReadError, UnsupportedLanguageError
from todoc.extractors import (
    LuaParser,
    build_document,
    create_parser,
    extract_docs,
    is_declaration_complete,
    is_doc_comment,
)
from todoc.models import DescriptionKind, FormulaKind, LanguageId


class TestBuildDocument:
    """Two-level tag parsing: @tags, then \\subtags under @description."""

    def test_brief_param_return(self):
        doc = build_document(
            [
                "-- @brief does a thing",
                "-- @param x number the x value",
                "-- @return number the result",
            ]
        )
        assert doc.brief == "does a thing"
        assert len(doc.parameters) == 1
        p = doc.parameters[0]
        assert (p.name, p.type_name, p.description, p.number) == (
            "x",
            "number",
            "the x value",
            0,
        )
        ret = doc.return_value
        assert (ret.name, ret.type_name, ret.description) == ("", "number", "the result")

    def test_doc_markers(self):
        assert is_doc_comment("---@brief a")
        assert is_doc_comment("  --@brief a")
        assert is_doc_comment("-- @brief a")
        assert not is_doc_comment("-- plain comment")
        assert not is_doc_comment("local x = 1")

        doc = build_document(["---@brief a"])
        assert doc.brief == "a"

    def test_param_numbers_follow_order(self):
        doc = build_document(
            [
                "-- @param a string",
                "-- @param broken",
                "-- @param b table the   options",
            ]
        )
        assert [p.name for p in doc.parameters] == ["a", "b"]
        assert [p.number for p in doc.parameters] == [0, 1]
        assert doc.parameters[0].description == ""
        assert doc.parameters[1].description == "the options"

    def test_return_last_wins(self):
        doc = build_document(["-- @return number first", "-- @return string"])
        assert doc.return_value.type_name == "string"
        assert doc.return_value.description == ""

    def test_empty_return_ignored(self):
        doc = build_document(["-- @return"])
        assert doc.return_value is None

    def test_includes_and_note(self):
        doc = build_document(
            [
                "-- @includes <a>, <b> ,c, c",
                "-- @note first",
                "-- @note second",
            ]
        )
        assert doc.includes == ["<a>", "<b>", "c", "c"]
        assert doc.note == "second"

    def test_unknown_tag_ignored(self):
        doc = build_document(["-- @!all hidden", "-- @brief kept"])
        assert doc.brief == "kept"
        assert not doc.parameters

    def test_description_subtags(self):
        doc = build_document(
            [
                "-- @brief B",
                "-- @description",
                r"--     \text Some text",
                r"--     \code{lua} print(1)",
                r"--     \code raw()",
                r"--     \formula{block} E = mc^2",
                r"--     \formula x^2",
                r"--     \list",
                "--         - item1",
                "--         - item2",
                r"--     \html https://example.com",
                r"--     \bogus nothing",
            ]
        )
        kinds = [d.kind for d in doc.descriptions]
        assert kinds == [
            DescriptionKind.TEXT,
            DescriptionKind.CODE,
            DescriptionKind.CODE,
            DescriptionKind.FORMULA,
            DescriptionKind.FORMULA,
            DescriptionKind.BULLET,
            DescriptionKind.BULLET,
            DescriptionKind.BULLET,
            DescriptionKind.HTML_LINK,
        ]
        text, code, raw, block, inline, head, item1, item2, link = doc.descriptions
        assert text.body == "Some text"
        assert code.language is LanguageId.LUA
        assert code.body == "print(1)"
        assert raw.language is LanguageId.NONE
        assert block.formula is FormulaKind.BLOCK
        assert inline.formula is FormulaKind.INLINE
        assert inline.content == "x^2"
        assert (head.indent, head.body) == (0, "")
        assert (item1.indent, item1.body) == (1, "- item1")
        assert item2.body == "- item2"
        assert link.body == "https://example.com"

    def test_subtags_outside_description_ignored(self):
        doc = build_document(["-- @brief B", r"-- \text ignored"])
        assert doc.descriptions == []

    def test_subtags_stop_after_other_tag(self):
        doc = build_document(
            [
                "-- @description",
                r"-- \text kept",
                "-- @note n",
                r"-- \text dropped",
            ]
        )
        assert [d.body for d in doc.descriptions] == ["kept"]


class TestDeclarationComplete:
    def test_single_line_forms(self):
        assert is_declaration_complete("function f()")
        assert is_declaration_complete("function f() end")
        assert is_declaration_complete("function f(x) if x then")

    def test_open_forms(self):
        assert not is_declaration_complete("function f(a,")
        assert not is_declaration_complete("function f")
        assert not is_declaration_complete("function append")


class TestLuaParser:
    """Association of documentation runs with the declaration that follows."""

    def test_empty_input(self, parse):
        result = parse("")
        assert result.documents == []
        assert result.all_declarations == []

    def test_documents_in_file_order(self, parse):
        result = parse(
            """
            -- @brief first
            -- @param a number
            -- @param b number
            function M.first(a, b)
              return a + b
            end

            -- @brief second
            local function second() end
            """
        )
        assert [d.brief for d in result.documents] == ["first", "second"]
        first, second = result.documents
        assert [p.number for p in first.parameters] == [0, 1]
        assert first.signature == "function M.first(a, b)"
        assert first.line_number == 4
        assert second.is_local
        assert result.all_declarations == ["M.first", "second"]

    def test_blank_line_severs_documentation(self, parse):
        result = parse(
            """
            -- @brief X

            function f() end
            """
        )
        assert len(result.documents) == 1
        doc = result.documents[0]
        assert doc.signature == "function f() end"
        assert doc.brief == ""
        assert not doc.is_documented

    def test_code_between_discards_documentation(self, parse):
        result = parse(
            """
            -- @brief X
            local y = 1
            function f() end
            """
        )
        assert result.documents == []
        assert result.all_declarations == ["f"]

    def test_stray_comment_does_not_start_run(self, parse):
        result = parse(
            """
            -- just a comment
            function f() end
            """
        )
        assert result.documents == []

    def test_plain_comment_continues_run(self, parse):
        result = parse(
            """
            -- @brief X
            -- more words
            function f() end
            """
        )
        assert result.documents[0].brief == "X"

    def test_multiline_declaration(self, parse):
        result = parse(
            """
            -- @brief Sub
            function A.sub( x,
                y)
                return x - y
            end
            """
        )
        doc = result.documents[0]
        assert doc.signature == "function A.sub( x, y)"
        assert doc.owner_object == "A"
        assert not doc.is_member
        assert doc.line_number == 2

    def test_trailing_comment_stripped_from_signature(self, parse):
        result = parse(
            """
            -- @brief one
            function A.sub1() -- end
            """
        )
        assert result.documents[0].signature == "function A.sub1()"

    def test_unterminated_declaration_dropped(self, parse):
        result = parse(
            """
            -- @brief X
            function f(a,
              b,
            """
        )
        assert result.documents == []
        assert result.all_declarations == []

    def test_declaration_inside_long_comment_ignored(self, parse):
        result = parse(
            """
            --[[
            function hidden(x)
            ]]
            -- @brief Visible
            function visible() end
            """
        )
        assert [d.signature for d in result.documents] == ["function visible() end"]
        assert result.all_declarations == ["visible"]

    def test_open_declaration_inside_long_string_ignored(self, parse):
        """String contents must not start a multi-line declaration."""
        result = parse(
            """
            local tmpl = [[
            function f(a,
            ]]
            -- @brief real
            function g() end
            """
        )
        assert [d.brief for d in result.documents] == ["real"]
        assert result.all_declarations == ["g"]

    def test_declaration_inside_long_string_not_counted(self, parse):
        result = parse(
            """
            local s = [==[
            function fake() end
            ]==]
            """
        )
        assert result.documents == []
        assert result.all_declarations == []

    def test_doc_comment_inside_long_string_ignored(self, parse):
        result = parse(
            """
            local help = [[
            -- @brief not documentation
            ]]
            function f() end
            """
        )
        assert result.documents == []
        assert result.all_declarations == ["f"]

    def test_code_after_long_comment_closer(self, parse):
        result = parse(
            """
            -- @brief X
            --[[
            ]] function g() end
            """
        )
        assert result.all_declarations == ["g"]
        assert [d.brief for d in result.documents] == ["X"]

    def test_code_after_long_string_closer(self, parse):
        result = parse(
            """
            local s = [[
            text
            ]] function h() end
            """
        )
        assert result.all_declarations == ["h"]

    def test_comment_inside_open_declaration_logged(self, parse, caplog):
        with caplog.at_level(logging.DEBUG, logger="todoc.extractors"):
            result = parse(
                """
                -- @brief f
                function f(a,
                  -- @param a number
                  b)
                """
            )
        doc = result.documents[0]
        assert doc.brief == "f"
        assert doc.parameters == []
        assert doc.signature == "function f(a, b)"
        assert "comment inside declaration ignored" in caplog.text

    def test_member_classification_applied(self, parse):
        result = parse(
            """
            -- @brief m
            function Obj:method(a, b) end
            """
        )
        doc = result.documents[0]
        assert doc.owner_object == "Obj"
        assert doc.is_member
        assert not doc.is_local

    def test_parser_is_reusable(self):
        parser = LuaParser()
        lines = ["-- @brief once", "function f() end"]
        assert len(parser.parse_lines(lines).documents) == 1
        assert len(parser.parse_lines(lines).documents) == 1


class TestExtractDocs:
    def test_lua_file(self, write_source, tmp_path):
        path = write_source(
            "lib/util.lua",
            """
            -- @brief Util
            function util() end
            """,
        )
        result = extract_docs(path, tmp_path)
        assert result.source_file == "lib/util.lua"
        assert result.language is LanguageId.LUA
        assert result.documents[0].brief == "Util"

    def test_supported_but_unimplemented_language(self, write_source):
        path = write_source("x.c", "/* @brief nope */\nint f(void);\n")
        result = extract_docs(path)
        assert result.language is LanguageId.C
        assert result.documents == []

    def test_unknown_extension(self, write_source):
        path = write_source("notes.txt", "hello")
        with pytest.raises(UnsupportedLanguageError):
            extract_docs(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceReadError) as exc:
            extract_docs(tmp_path / "missing.lua")
        assert exc.value.path.endswith("missing.lua")

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "bad.lua"
        path.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(SourceReadError):
            extract_docs(path)

    def test_create_parser_falls_back_to_noop(self):
        parser = create_parser(LanguageId.NONE)
        assert parser.parse_text("-- @brief x\nfunction f() end").documents == []
