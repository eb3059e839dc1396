"""
Deterministic Build Test
Same rules by value and same layout must give an identical view,
whichever builder instance produced it.
"""

from hypothesis import given, settings, strategies as st

from chainview.config import LayoutConfig
from chainview.mapper import PreviewMapper
from chainview.visualization.graph import GraphBuilder

from tests.contract_tests.test_invariants import rule_lists
from tests.fixtures import preview_payload


def test_golden_preview_determinism():
    """Two independent mapping + build passes over one payload agree exactly."""
    views = []
    for _ in range(2):
        preview = PreviewMapper().map_preview(preview_payload())
        views.append(GraphBuilder().build(preview.rules))

    assert views[0] == views[1]
    assert views[0].view_id == views[1].view_id


@given(rule_lists)
@settings(deadline=None)
def test_rebuild_is_identical(rule_list):
    first = GraphBuilder().build(rule_list)
    second = GraphBuilder(LayoutConfig()).build(list(rule_list))

    assert first == second
    assert [n.position for n in first.nodes] == [n.position for n in second.nodes]
    assert [e.color_token for e in first.edges] == [e.color_token for e in second.edges]


@given(rule_lists, st.integers(min_value=1, max_value=400))
@settings(deadline=None)
def test_layout_change_changes_view_id(rule_list, row_gap):
    default = GraphBuilder().build(rule_list)
    other = GraphBuilder(LayoutConfig(row_gap=row_gap + 180)).build(rule_list)
    assert default.view_id != other.view_id


# JSON-like values the admin API could plausibly send in any field.
json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.floats(allow_nan=False) | st.text(max_size=8),
    lambda children: st.lists(children, max_size=4) | st.dictionaries(st.text(max_size=8), children, max_size=4),
    max_leaves=20,
)

rule_like = st.fixed_dictionaries({}, optional={
    "ruleId": json_values,
    "ruleName": json_values,
    "enabled": json_values,
    "links": st.lists(
        st.fixed_dictionaries({}, optional={
            "type": st.sampled_from(["template_group", "custom_group", "dynamic_node", "x"]) | json_values,
            "name": json_values,
            "nodes": json_values,
        }) | json_values,
        max_size=3,
    ) | json_values,
    "targetType": st.sampled_from(["all", "conditions", "specified_node", "geo"]) | json_values,
    "targetNodes": json_values,
    "effectiveNodes": json_values,
    "fullyCovered": json_values,
})


@given(st.lists(rule_like | json_values, max_size=5))
@settings(deadline=None)
def test_arbitrary_payload_never_fails(raw_rules):
    """Malformed input degrades; mapping and building always succeed and stay stable."""
    first = PreviewMapper().map_preview({"rules": raw_rules})
    second = PreviewMapper().map_preview({"rules": raw_rules})

    view = GraphBuilder().build(first.rules)
    assert view.rule_count == len(raw_rules)
    assert view == GraphBuilder().build(second.rules)
    assert first.degradations == second.degradations
