"""Tests for --filter string parsing."""

from ec2_skim.discovery.filters import (
    RUNNING_STATE_FILTER,
    parse_clause,
    parse_filter_group,
    parse_filter_groups,
)
from ec2_skim.discovery.models import Filter, FilterGroup


class TestParseClause:
    def test_name_and_values(self):
        assert parse_clause("tag:Team=infra,platform") == Filter("tag:Team", ("infra", "platform"))

    def test_name_without_values(self):
        assert parse_clause("tag-key") == Filter("tag-key", None)

    def test_only_first_equals_splits(self):
        assert parse_clause("tag:Expr=a=b,c") == Filter("tag:Expr", ("a=b", "c"))

    def test_empty_value_passed_through(self):
        assert parse_clause("tag:Team=") == Filter("tag:Team", ("",))

    def test_empty_clause_passed_through(self):
        assert parse_clause("") == Filter("", None)


class TestParseFilterGroups:
    def test_no_filters_gives_single_running_group(self):
        groups = parse_filter_groups([])
        assert groups == [FilterGroup((Filter("instance-state-name", ("running",)),))]

    def test_none_behaves_like_empty(self):
        assert parse_filter_groups(None) == parse_filter_groups([])

    def test_one_group_per_raw_string(self):
        raw = ["tag:Team=infra", "instance-type=t3.micro;tag-key=Owner", ""]
        groups = parse_filter_groups(raw)
        assert len(groups) == 3
        for group in groups:
            assert group.filters[0] == RUNNING_STATE_FILTER

    def test_tag_filter_merged_with_running_state(self):
        group = parse_filter_group("tag:Team=infra,platform")
        assert group.filters == (
            Filter("instance-state-name", ("running",)),
            Filter("tag:Team", ("infra", "platform")),
        )

    def test_semicolon_separates_clauses_in_order(self):
        group = parse_filter_group("a=1;b;c=2,3")
        assert [f.name for f in group] == ["instance-state-name", "a", "b", "c"]
        assert group.filters[2].values is None

    def test_trailing_semicolon_yields_empty_clause(self):
        group = parse_filter_group("a=1;")
        assert group.filters[-1] == Filter("", None)

    def test_state_clause_keeps_running_prefix(self):
        group = parse_filter_group("instance-state-name=stopped,running;tag:Env=dev")
        assert group.filters == (
            RUNNING_STATE_FILTER,
            Filter("instance-state-name", ("stopped", "running")),
            Filter("tag:Env", ("dev",)),
        )

    def test_to_api(self):
        group = parse_filter_group("tag:Team=infra;tag-key")
        assert group.to_api() == [
            {"Name": "instance-state-name", "Values": ["running"]},
            {"Name": "tag:Team", "Values": ["infra"]},
            {"Name": "tag-key"},
        ]

    def test_state_clause_group_still_contains_running_filter(self):
        (group,) = parse_filter_groups(["instance-state-name=stopped"])
        assert group.filters == (RUNNING_STATE_FILTER, Filter("instance-state-name", ("stopped",)))
