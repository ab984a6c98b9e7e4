from evalhub.core.comparison import ComparisonSet, parse_compare_param
from evalhub.core.url_state import UrlState


def test_add_same_path_twice():
    comparison = ComparisonSet()
    assert comparison.add("/a") is True
    assert comparison.add("/a") is False
    assert comparison.count == 1


def test_fifth_item_is_refused():
    comparison = ComparisonSet()
    for path in ["/a", "/b", "/c", "/d"]:
        assert comparison.add(path)
    assert not comparison.can_add_more

    assert comparison.add("/e") is False
    assert comparison.selected_paths == ["/a", "/b", "/c", "/d"]


def test_remove_preserves_order():
    comparison = ComparisonSet()
    for path in ["/a", "/b", "/c"]:
        comparison.add(path)
    comparison.remove("/b")
    assert comparison.selected_paths == ["/a", "/c"]

    comparison.remove("/missing")
    assert comparison.selected_paths == ["/a", "/c"]


def test_toggle_accepts_items_and_paths():
    comparison = ComparisonSet()
    assert comparison.toggle({"path": "/a"}) is True
    assert comparison.is_in_comparison("/a")
    assert comparison.toggle("/a") is False
    assert comparison.count == 0


def test_derived_flags():
    comparison = ComparisonSet()
    comparison.add("/a")
    assert not comparison.can_compare
    comparison.add("/b")
    assert comparison.can_compare
    assert comparison.can_add_more
    comparison.clear()
    assert comparison.selected_paths == []


def test_modal_needs_two_items():
    comparison = ComparisonSet()
    comparison.add("/a")
    comparison.open_compare_modal()
    assert comparison.is_compare_modal_open is False

    comparison.add("/b")
    comparison.open_compare_modal()
    assert comparison.is_compare_modal_open is True

    comparison.close_compare_modal()
    assert comparison.is_compare_modal_open is False


def test_register_items_replaces_registry(items):
    comparison = ComparisonSet()
    kept = comparison.register_items(items + [{"path": "/no-title", "description": "x"}])
    assert kept == len(items)

    comparison.register_items(items[:1])
    assert list(comparison.item_registry) == ["/evalite/rag/faithfulness"]


def test_comparison_items_follow_selection_order(eval_items):
    comparison = ComparisonSet()
    comparison.register_items(eval_items)
    comparison.add("/langsmith/rag/correctness")
    comparison.add("/gone")
    comparison.add("/evalite/rag/faithfulness")

    resolved = comparison.comparison_items

    assert [item.path for item in resolved] == [
        "/langsmith/rag/correctness",
        "/evalite/rag/faithfulness",
    ]
    assert resolved[0].languages == ["python"]
    assert resolved[1].use_case == "rag"


def test_parse_compare_param():
    assert parse_compare_param("/a,,/b,/a,/c,/d,/e") == ["/a", "/b", "/c", "/d"]
    assert parse_compare_param(None) == []


def test_url_initialization_and_sync():
    url = UrlState("compare=/a,/b&tags=safety")
    comparison = ComparisonSet(url)
    assert comparison.selected_paths == ["/a", "/b"]

    comparison.add("/c")
    assert url.query == {"compare": "/a,/b,/c", "tags": "safety"}

    comparison.clear()
    assert url.query == {"tags": "safety"}


def test_modal_flag_is_not_in_url():
    url = UrlState("compare=/a,/b")
    comparison = ComparisonSet(url)
    comparison.open_compare_modal()
    assert url.query == {"compare": "/a,/b"}


def test_back_navigation_restores_selection():
    url = UrlState("compare=/a,/b")
    comparison = ComparisonSet(url)
    comparison.open_compare_modal()

    url.navigate("compare=/a")

    assert comparison.selected_paths == ["/a"]
    assert comparison.is_compare_modal_open is False
