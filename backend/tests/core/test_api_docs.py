"""API Docs tests — block comment extraction, handler docs, doc index.

Tests cover:
    - First /** ... */ or /* ... */ region captured verbatim, markers excluded
    - No block comment → None
    - Docstring wins over source comments; comment fallback when no docstring
    - Partials and callable objects never pick up their class docstring
    - Index keyed by (module, verb, route), grouped by module
"""

import functools

from transwarp.core.api_docs import ApiDocIndex, extract_doc_block, handler_doc


def test_extracts_double_star_block():
    text = "def f():\n    /**\n     * List articles.\n     */\n"
    assert extract_doc_block(text) == "\n     * List articles.\n     "


def test_extracts_single_star_block():
    assert extract_doc_block("x /* plain */ y") == " plain "


def test_first_block_wins():
    assert extract_doc_block("/** one */ code /** two */") == " one "


def test_no_block_returns_none():
    assert extract_doc_block("def f():\n    return 1\n") is None


def test_unclosed_block_returns_none():
    assert extract_doc_block("/** never closed") is None


def test_handler_doc_uses_docstring():
    async def documented():
        """Get one article.

        Returns the article JSON.
        """

    assert handler_doc(documented) == "Get one article.\n\nReturns the article JSON."


def test_handler_doc_falls_back_to_block_comment_in_source():
    async def commented():
        # /** Create an article. */
        return None

    assert handler_doc(commented) == " Create an article. "


def test_handler_doc_missing_returns_none():
    async def bare():
        return None

    assert handler_doc(bare) is None


def test_handler_doc_ignores_partial_class_docstring():
    async def bare(kind):
        return kind

    assert handler_doc(functools.partial(bare, "x")) is None


def test_handler_doc_reads_through_partial():
    async def documented(kind):
        """List things of one kind."""

    assert handler_doc(functools.partial(documented, "x")) == "List things of one kind."


def test_handler_doc_callable_object_uses_call_not_class():
    class Lister:
        """Class-level docs are not handler docs."""

        async def __call__(self):
            return []

    class DocumentedLister:
        async def __call__(self):
            """List everything."""

    assert handler_doc(Lister()) is None
    assert handler_doc(DocumentedLister()) == "List everything."


def test_index_add_and_get():
    index = ApiDocIndex()
    entry = index.add("articles", "GET", "/api/articles", "List.")
    assert index.get("articles", "GET", "/api/articles") is entry
    assert len(index) == 1
    assert list(index) == [entry]


def test_index_groups_by_module():
    index = ApiDocIndex()
    index.add("a", "GET", "/api/a", "A")
    index.add("b", "POST", "/api/b", "B")
    index.add("a", "POST", "/api/a", "A2")
    grouped = index.by_module()
    assert [e.route for e in grouped["a"]] == ["/api/a", "/api/a"]
    assert [e.verb for e in grouped["b"]] == ["POST"]


def test_index_discard():
    index = ApiDocIndex()
    index.add("a", "GET", "/api/a", "A")
    index.discard("a", "GET", "/api/a")
    index.discard("missing", "GET", "/api/a")
    assert len(index) == 0
