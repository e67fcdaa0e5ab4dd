"""Tests for rebuilding the page tree."""

import time

from sitemap_crawler.crawler.state import TreeNode
from sitemap_crawler.crawler.tree import build_tree, flatten
from sitemap_crawler.crawler.urls import path_level


def _node(url_path: str, parent_path=None, title: str = "") -> TreeNode:
    url = f"https://example.com{url_path}"
    parent = f"https://example.com{parent_path}" if parent_path is not None else None
    return TreeNode(url=url, title=title, parent=parent, path=url_path, level=path_level(url_path))


def _urls(branches):
    return [branch.url for branch in branches]


class TestBuildTree:
    """Tests for build_tree."""

    def test_children_grouped_under_parents(self):
        nodes = [
            _node("/"),
            _node("/a", "/"),
            _node("/b", "/"),
            _node("/a/x", "/a"),
        ]
        forest = build_tree(nodes)

        assert _urls(forest) == ["https://example.com/"]
        root = forest[0]
        assert _urls(root.children) == ["https://example.com/a", "https://example.com/b"]
        assert _urls(root.children[0].children) == ["https://example.com/a/x"]

    def test_parent_with_deeper_path_than_child(self):
        # /a/b/c links back up to /top, so the child has the lower level
        nodes = [
            _node("/"),
            _node("/a/b/c", "/"),
            _node("/top", "/a/b/c"),
        ]
        forest = build_tree(nodes)

        assert _urls(forest) == ["https://example.com/"]
        deep = forest[0].children[0]
        assert deep.url == "https://example.com/a/b/c"
        assert _urls(deep.children) == ["https://example.com/top"]

    def test_unknown_parent_becomes_root(self):
        forest = build_tree([_node("/"), _node("/orphan", "/missing")])
        assert _urls(forest) == ["https://example.com/", "https://example.com/orphan"]

    def test_cycles_are_broken(self):
        nodes = [
            _node("/a", "/b"),
            _node("/b", "/a"),
            _node("/c", "/a"),
        ]
        forest = build_tree(nodes)

        assert set(_urls(forest)) == {"https://example.com/a", "https://example.com/b"}
        by_url = {branch.url: branch for branch in forest}
        assert _urls(by_url["https://example.com/a"].children) == ["https://example.com/c"]

    def test_self_parent_is_root(self):
        forest = build_tree([_node("/a", "/a")])
        assert _urls(forest) == ["https://example.com/a"]
        assert forest[0].children == []

    def test_duplicate_urls_keep_first(self):
        forest = build_tree([_node("/", title="first"), _node("/", title="second")])
        assert len(forest) == 1
        assert forest[0].node.title == "first"

    def test_ties_keep_discovery_order(self):
        nodes = [_node("/"), _node("/z", "/"), _node("/m", "/"), _node("/a", "/")]
        forest = build_tree(nodes)
        assert _urls(forest[0].children) == [
            "https://example.com/z",
            "https://example.com/m",
            "https://example.com/a",
        ]

    def test_label_falls_back_to_url(self):
        forest = build_tree([_node("/", title="Home"), _node("/a", "/")])
        assert forest[0].label == "Home"
        assert forest[0].children[0].label == "https://example.com/a"

    def test_empty_input(self):
        assert build_tree([]) == []


class TestFlatten:
    """Tree reconstruction keeps every URL and orders parents first."""

    def test_flatten_contains_every_url_and_parents_come_first(self):
        nodes = [
            _node("/"),
            _node("/a", "/"),
            _node("/a/b/c", "/a"),
            _node("/d", "/a/b/c"),
            _node("/e", "/"),
            _node("/lost", "/nowhere"),
        ]
        flat = list(flatten(build_tree(nodes)))

        assert {n.url for n in flat} == {n.url for n in nodes}
        assert len(flat) == len(nodes)

        position = {n.url: i for i, n in enumerate(flat)}
        for n in flat:
            if n.parent in position:
                assert position[n.parent] < position[n.url]

    def test_flatten_is_preorder(self):
        nodes = [_node("/"), _node("/a", "/"), _node("/a/x", "/a"), _node("/b", "/")]
        flat = [n.url for n in flatten(build_tree(nodes))]
        assert flat == [
            "https://example.com/",
            "https://example.com/a",
            "https://example.com/a/x",
            "https://example.com/b",
        ]


class TestLongChains:
    """Discovery chains as deep as the site is long."""

    def _chain(self, length):
        nodes = [_node("/0")]
        nodes.extend(_node(f"/{i}", f"/{i - 1}") for i in range(1, length))
        return nodes

    def test_long_chain_builds_quickly(self):
        nodes = self._chain(25000)

        started = time.perf_counter()
        forest = build_tree(nodes)
        elapsed = time.perf_counter() - started

        assert elapsed < 2.0
        assert _urls(forest) == ["https://example.com/0"]
        assert len(list(flatten(forest))) == 25000

    def test_cycle_at_end_of_long_chain(self):
        nodes = self._chain(5000)
        nodes[0] = _node("/0", "/4999")

        forest = build_tree(nodes)

        # every node is on the loop, so each one is its own root
        assert len(forest) == 5000

    def test_chain_feeding_into_cycle(self):
        nodes = [_node("/a", "/b"), _node("/b", "/a")]
        nodes.extend(_node(f"/t{i}", f"/t{i - 1}" if i else "/a") for i in range(3000))

        forest = build_tree(nodes)

        assert set(_urls(forest)) == {"https://example.com/a", "https://example.com/b"}
        assert len(list(flatten(forest))) == 3002
