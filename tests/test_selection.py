import pytest

from d3lite import EnterNode, PendingNodeError, Selection, select


def append_rects(doc, values):
    return select(doc).select_all("rect").data(values).enter().append("rect")


def test_select_document_root(doc):
    root = select(doc)
    assert len(root) == 1
    assert root.node() is doc.root
    assert root.attr("width") == "100"


def test_select_by_selector_includes_root(doc):
    assert select("svg", doc).node() is doc.root


def test_select_selector_without_document_raises():
    with pytest.raises(ValueError):
        select("svg")


def test_document_select_shortcut(grouped_doc):
    assert grouped_doc.select("#g1").attr("id") == "g1"


def test_attr_constant_round_trip(doc):
    rects = append_rects(doc, [1, 2, 3])
    assert rects.attr("fill", "red").attr("fill") == "red"
    assert [node.get("fill") for node in rects.nodes()] == ["red", "red", "red"]


def test_attr_function_receives_datum_and_index(doc):
    rects = append_rects(doc, [1, 2, 3])
    rects.attr("height", lambda d, i: d * 10 + i)
    assert [node.get("height") for node in rects.nodes()] == ["10", "21", "32"]


def test_attr_function_can_inspect_node(doc):
    rects = append_rects(doc, ["a"])
    rects.attr("data-tag", lambda d, i, node: node.tag.split("}")[1])
    assert rects.attr("data-tag") == "rect"


def test_attr_accepts_single_argument_callables(doc):
    rects = append_rects(doc, [2, 4])
    rects.attr("width", lambda d: d * 2)
    assert [node.get("width") for node in rects.nodes()] == ["4", "8"]


def test_attr_none_removes_attribute(doc):
    rects = append_rects(doc, [1]).attr("fill", "red")
    rects.attr("fill", None)
    assert rects.attr("fill") is None


def test_style_merges_properties(doc):
    rects = append_rects(doc, [1])
    rects.style("fill", "red").style("stroke", lambda d: "blue")
    assert rects.style("fill") == "red"
    assert rects.node().get("style") == "fill:red;stroke:blue"


def test_style_skips_nodes_without_style_support():
    from d3lite import Document
    doc = Document.from_string('<svg xmlns="http://www.w3.org/2000/svg"><!-- note --><rect/></svg>')
    comment = doc.root[0]
    Selection([comment], [None], doc).style("fill", "red")
    assert doc.root[1].get("style") is None


def test_text_replaces_content(doc):
    group = select(doc).append("g")
    group.append("rect")
    group.text("hello")
    assert group.text() == "hello"
    assert len(group.node()) == 0


def test_text_function(doc):
    labels = append_rects(doc, ["a", "b"])
    labels.text(lambda d, i: f"{d}{i}")
    assert [node.text for node in labels.nodes()] == ["a0", "b1"]


def test_getters_on_empty_selection_return_none(doc):
    empty = select(doc).select_all("circle")
    assert empty.attr("r") is None
    assert empty.text() is None
    assert empty.empty()


def test_missing_nodes_propagate(doc):
    missing = select(doc).select("circle")
    assert len(missing) == 1
    assert list(missing) == [None]
    missing.attr("r", 5).style("fill", "red").text("x")
    appended = missing.append("g")
    assert list(appended) == [None]
    assert len(doc.root) == 0


def test_select_uses_current_nodes_as_parents(grouped_doc):
    groups = select(grouped_doc).select_all("g")
    rects = groups.select("rect")
    assert len(rects) == 3
    assert rects._parents is groups._nodes
    assert [node is None for node in rects] == [True, False, True]


def test_select_all_flattens_groups_in_order():
    from d3lite import Document
    doc = Document.from_string(
        '<svg xmlns="http://www.w3.org/2000/svg">'
        '<g><rect id="a"/><rect id="b"/></g><g><rect id="c"/></g>'
        '</svg>'
    )
    groups = select(doc).select_all("g")
    rects = groups.select_all("rect")
    assert [node.get("id") for node in rects] == ["a", "b", "c"]
    assert len(rects._parents) == 2


def test_select_excludes_the_node_itself(doc):
    assert list(select(doc).select("svg")) == [None]


def test_append_returns_one_child_per_node(grouped_doc):
    groups = select(grouped_doc).select_all("g")
    circles = groups.append("circle")
    assert len(circles) == 3
    for group, circle in zip(groups, circles):
        assert circle.getparent() is group


def test_data_longer_than_nodes(grouped_doc):
    rects = select(grouped_doc).select_all("rect")
    joined = rects.data([1, 2, 3, 4])
    assert len(joined) == 4
    assert grouped_doc.get_datum(joined.node()) == 1

    entering = joined.enter()
    assert len(entering) == 3
    assert [node.datum for node in entering] == [2, 3, 4]
    assert all(isinstance(node, EnterNode) and node.entering for node in entering)


def test_data_shorter_than_nodes_keeps_excess_nodes(doc):
    rects = append_rects(doc, ["a", "b", "c"])
    joined = select(doc).select_all("rect").data(["z"])
    assert len(joined) == 3
    assert joined.size() == 3
    assert [doc.get_datum(node) for node in joined] == ["z", "b", "c"]
    assert joined.enter().empty()
    assert len(rects) == 3


def test_data_join_is_positional(doc):
    append_rects(doc, [1, 2])
    rects = select(doc).select_all("rect").data([2, 1])
    assert [doc.get_datum(node) for node in rects] == [2, 1]


def test_enter_counts_missing_positions(grouped_doc):
    rects = select(grouped_doc).select_all("g").select("rect")
    joined = rects.data(["a", "b", "c", "d"])
    entering = joined.enter()
    assert len(entering) == 4 - 1
    assert [node.datum for node in entering] == ["a", "c", "d"]
    assert [node.index for node in entering] == [0, 2, 3]


def test_enter_append_inserts_into_parent(grouped_doc):
    groups = select(grouped_doc).select_all("g")
    rects = groups.select("rect").data(["a", "b", "c", "d"])
    circles = rects.enter().append("circle").attr("class", lambda d: d)

    g0, g1, g2 = groups.nodes()
    assert [c.get("class") for c in g0] == ["a"]
    assert len(g1) == 1
    # the fourth datum has no group of its own and lands in the last parent
    assert [c.get("class") for c in g2] == ["c", "d"]
    assert [grouped_doc.get_datum(node) for node in circles] == ["a", "c", "d"]


def test_enter_append_under_root(doc):
    bars = append_rects(doc, [5, 10]).attr("height", lambda d: d)
    assert [node.getparent() is doc.root for node in bars] == [True, True]
    assert [node.get("height") for node in doc.root] == ["5", "10"]
    assert select(doc).select_all("rect").size() == 2


def test_enter_without_data_is_empty(doc):
    assert len(select(doc).enter()) == 0


def test_placeholder_in_joined_selection_raises(doc):
    joined = select(doc).select_all("rect").data([1])
    with pytest.raises(PendingNodeError, match="non-tree node"):
        joined.attr("x", 1)
    with pytest.raises(PendingNodeError):
        joined.text()


def test_enter_append_without_parent_raises(doc):
    entering = select(doc).data([1, 2]).enter()
    assert len(entering) == 1
    with pytest.raises(PendingNodeError) as excinfo:
        entering.append("rect")
    assert excinfo.value.operation == "append"
    assert excinfo.value.node.datum == 2


def test_append_inherits_parent_datum(doc):
    groups = append_rects(doc, ["x"])
    labels = groups.append("title")
    assert labels.datum() == "x"


def test_datum_sets_and_reads(doc):
    root = select(doc).datum({"name": "chart"})
    assert root.datum() == {"name": "chart"}
    assert doc.get_datum(doc.root) == {"name": "chart"}


def test_each_and_call(doc):
    seen = []
    rects = append_rects(doc, ["a", "b"])
    rects.each(lambda d, i: seen.append((d, i)))
    assert seen == [("a", 0), ("b", 1)]

    def colour(selection, value):
        selection.attr("fill", value)

    assert rects.call(colour, "green") is rects
    assert rects.attr("fill") == "green"
