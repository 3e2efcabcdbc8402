"""Tests for the stage registry, stage cache and config coercion."""

import logging

import pytest

import docmonitor_tables.stages  # noqa: F401  (registers strategies)
from docmonitor_tables.core.base import PassThroughStage
from docmonitor_tables.core.cache import StageCache, make_hashable
from docmonitor_tables.core.config import (
    FilterConfig,
    MultiSortConfig,
    PaginationConfig,
    SingleSortConfig,
    coerce_columns,
    coerce_filter_config,
    coerce_pagination_config,
    coerce_row_actions_config,
    coerce_sort_config,
    coerce_sort_entries,
)
from docmonitor_tables.core.errors import TableConfigError
from docmonitor_tables.core.registry import (
    get_stage_class,
    is_registered,
    list_registered_stages,
    modes_for,
    register_stage,
)
from docmonitor_tables.core.types import Column, SortEntry
from docmonitor_tables.stages import (
    ClientFilterStage,
    ClientPaginateStage,
    ClientSortStage,
    ServerSortStage,
)


class TestRegistry:
    """Tests for (stage, mode) strategy lookup."""

    def test_every_stage_has_both_modes(self):
        for stage in ("filter", "sort", "paginate"):
            for mode in ("client", "server"):
                assert is_registered(stage, mode)
        assert len(list_registered_stages()) >= 6

    def test_lookup(self):
        assert get_stage_class("filter", "client") is ClientFilterStage
        assert get_stage_class("sort", "server") is ServerSortStage
        assert ServerSortStage._stage_name == "sort"
        assert ServerSortStage._mode == "server"

    def test_unknown_stage_lists_known_stages(self):
        with pytest.raises(KeyError, match="known stages"):
            get_stage_class("group", "client")

    def test_unknown_mode_lists_available_modes(self):
        with pytest.raises(KeyError, match=r"available modes: \['client', 'server'\]"):
            get_stage_class("sort", "hybrid")
        assert modes_for("paginate") == ["client", "server"]
        assert modes_for("group") == []

    def test_duplicate_registration_rejected(self):
        with pytest.raises(ValueError, match="already registered"):

            @register_stage("filter", "client")
            class AnotherFilter(PassThroughStage):
                pass


class TestStages:
    """Tests for stage strategies."""

    def test_client_stages_compute(self, numbered_rows):
        columns = [Column("name")]
        filtered = ClientFilterStage(FilterConfig(value="row 9")).apply(
            numbered_rows, columns
        )
        assert len(filtered) == 6
        ordered = ClientSortStage(SingleSortConfig(column="id", direction="desc")).apply(
            filtered, columns
        )
        assert ordered[0]["id"] == 95
        page = ClientPaginateStage(PaginationConfig(current_page=2, page_size=4)).apply(
            ordered, columns
        )
        assert [row["id"] for row in page] == [91, 90]

    def test_server_stage_passes_through(self, numbered_rows):
        stage = ServerSortStage(SingleSortConfig(mode="server"))
        assert stage.apply(numbered_rows, []) is numbered_rows
        assert not stage.computes_locally
        assert stage.signature() == ()

    def test_blank_filters_share_signature(self):
        blank = ClientFilterStage(FilterConfig(value="  "))
        empty = ClientFilterStage(FilterConfig(value=""))
        assert blank.signature() == empty.signature()

    def test_multi_sort_signature(self):
        stage = ClientSortStage(MultiSortConfig(sorts=(SortEntry("a", "asc", 0),)))
        assert stage.signature() == ("multi", (("a", "asc", 0),))


class TestStageCache:
    """Tests for the one-entry-per-stage cache."""

    def test_hit_and_miss(self):
        cache = StageCache()
        assert cache.get("filter", ("k", 1)) is None
        cache.set("filter", ("k", 1), [1, 2])
        assert cache.get("filter", ("k", 1)) == [1, 2]
        assert cache.get("filter", ("k", 2)) is None
        assert (cache.hits, cache.misses) == (1, 2)

    def test_one_entry_per_stage(self):
        cache = StageCache()
        cache.set("sort", 1, ["a"])
        cache.set("sort", 2, ["b"])
        assert len(cache) == 1
        assert cache.get("sort", 1) is None

    def test_invalidate(self):
        cache = StageCache()
        cache.set("sort", 1, [])
        cache.set("filter", 1, [])
        cache.invalidate("sort")
        assert len(cache) == 1
        cache.invalidate()
        assert len(cache) == 0

    def test_make_hashable(self):
        assert make_hashable({"b": 1, "a": 2}) == make_hashable({"a": 2, "b": 1})
        assert make_hashable([1, 2]) == "[1, 2]"
        assert make_hashable(5) == 5


class TestConfigCoercion:
    """Tests for lenient and strict config normalisation."""

    def test_sort_entries_renumbered(self):
        entries = coerce_sort_entries(
            [
                {"column": "b", "direction": "desc", "priority": 5},
                SortEntry("a", "asc", 2),
                {"column": "", "direction": "asc"},
                ("c", "sideways"),
            ]
        )
        assert entries == (SortEntry("a", "asc", 0), SortEntry("b", "desc", 1))

    def test_columns_from_mixed_shapes(self):
        columns = coerce_columns(
            ["id", {"field": "name", "title": "Name", "hozAlign": "right"}, {"title": "x"}]
        )
        assert [c.key for c in columns] == ["id", "name"]
        assert columns[1].header == "Name"
        assert columns[1].align == "right"

    def test_filter_value_normalised(self):
        assert coerce_filter_config({"value": None}).value == ""
        assert coerce_filter_config({"value": 42}).value == "42"
        assert coerce_filter_config(None) is None

    def test_sort_dict_dispatches_on_type(self):
        single = coerce_sort_config({"type": "single", "column": "id", "direction": "asc"})
        multi = coerce_sort_config({"type": "multi", "sorts": [("id", "desc")]})
        assert isinstance(single, SingleSortConfig)
        assert isinstance(multi, MultiSortConfig)
        assert multi.sorts == (SortEntry("id", "desc", 0),)

    def test_lenient_returns_none(self):
        assert coerce_sort_config({"type": "single", "direction": "up"}) is None
        assert coerce_pagination_config({"page_size": "10"}) is None
        assert coerce_row_actions_config({"width": "10px"}) is None

    def test_strict_raises(self):
        with pytest.raises(TableConfigError, match="Invalid pagination configuration"):
            coerce_pagination_config(PaginationConfig(page_size=0), strict=True)
        with pytest.raises(TableConfigError) as exc_info:
            coerce_sort_config({"type": "multi", "max_sorts": 0}, strict=True)
        assert exc_info.value.feature == "sort"

    def test_multi_sort_entries_capped_at_max_sorts(self, caplog):
        value = {
            "type": "multi",
            "sorts": [("a", "asc"), ("b", "asc"), ("c", "asc"), ("d", "asc")],
            "max_sorts": 3,
        }
        with caplog.at_level(logging.WARNING):
            config = coerce_sort_config(value)
        assert [entry.column for entry in config.sorts] == ["a", "b", "c"]
        assert "Keeping the first 3 of 4 sort entries" in caplog.text

        with pytest.raises(TableConfigError, match="exceed max_sorts=3"):
            coerce_sort_config(value, strict=True)

    def test_max_page_buttons_below_minimum(self):
        assert coerce_pagination_config({"max_page_buttons": 2}) is None
        assert coerce_pagination_config({"max_page_buttons": 5}) is not None
        with pytest.raises(TableConfigError, match="max_page_buttons must be >= 5"):
            coerce_pagination_config(PaginationConfig(max_page_buttons=0), strict=True)

    def test_unknown_keys_ignored(self):
        config = coerce_filter_config({"value": "x", "colour": "red"})
        assert config == FilterConfig(value="x")
