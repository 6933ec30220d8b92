"""Tests for configuration validation and listing plans."""

import io

import pytest

from treels.config import DisplayMode, ListingConfig, SortKey, SymlinkMode, TimeField
from treels.core.compare import MasterComparator
from treels.core.traverser import TraversalController
from treels.display import LongRenderer, SingleColumnRenderer
from treels.error_policies import CollectErrorsPolicy, ReportErrorsPolicy
from treels.errors import ConfigurationError
from treels.planning import ListingPlan


class TestListingConfig:
    """Test the configuration value."""

    def test_defaults_are_valid(self):
        assert ListingConfig().validate() == []

    @pytest.mark.parametrize("changes,message", [
        ({"term_width": 0}, "term_width"),
        ({"block_size": -1}, "block_size"),
        ({"see_dot": True}, "see_dot"),
        ({"display_mode": "long"}, "display mode"),
        ({"sort_key": "size"}, "sort key"),
    ])
    def test_invalid(self, changes, message):
        errors = ListingConfig(**changes).validate()
        assert any(message in error for error in errors)

    def test_immutable(self):
        config = ListingConfig()
        with pytest.raises(Exception):
            config.recursive = True
        assert config.replace(recursive=True).recursive
        assert not config.recursive

    def test_convenience_constructors(self):
        terminal = ListingConfig.for_terminal(100)
        assert terminal.display_mode == DisplayMode.COLUMNS
        assert terminal.nonprint and terminal.term_width == 100

        long = ListingConfig.long_listing(numeric_only=True)
        assert long.long_format and long.numeric_only

        assert ListingConfig.recursive_listing().recursive

    def test_needs_stats(self):
        assert not ListingConfig().needs_stats
        assert ListingConfig(show_inode=True).needs_stats
        assert ListingConfig(show_blocks=True).needs_stats
        assert ListingConfig.long_listing().needs_stats

    @pytest.mark.parametrize("changes", [
        {"display_mode": DisplayMode.LONG},
        {"show_inode": True},
        {"show_blocks": True},
        {"classify": True},
        {"classify_dirs": True},
        {"sort_key": SortKey.SIZE},
        {"sort_key": SortKey.MTIME},
    ])
    def test_stat_required(self, changes):
        assert not ListingConfig(**changes).walk_options().nostat

    @pytest.mark.parametrize("changes,follow", [
        ({}, True),
        ({"display_mode": DisplayMode.LONG}, False),
        ({"list_directory": True}, False),
        ({"classify": True}, False),
        ({"classify_dirs": True}, True),
    ])
    def test_command_line_links_followed(self, changes, follow):
        assert ListingConfig(**changes).walk_options().comfollow is follow

    def test_walk_options(self):
        options = ListingConfig(symlink_mode=SymlinkMode.LOGICAL, show_hidden=True,
                                see_dot=True).walk_options()
        assert options.logical and options.seedot and options.nochdir

    def test_time_field_sort_keys(self):
        assert TimeField.MODIFICATION.sort_key() == SortKey.MTIME
        assert TimeField.ACCESS.sort_key() == SortKey.ATIME
        assert TimeField.STATUS.sort_key() == SortKey.CTIME


class TestListingPlan:
    """Test component selection."""

    def test_invalid_config_rejected(self):
        with pytest.raises(ConfigurationError) as info:
            ListingPlan(ListingConfig(term_width=-5))
        assert "term_width" in str(info.value)

    def test_components_selected(self):
        plan = ListingPlan(ListingConfig.long_listing(sort_key=SortKey.SIZE, reverse=True))
        assert isinstance(plan.renderer, LongRenderer)
        assert isinstance(plan.comparator, MasterComparator)
        assert plan.comparator.field_comparator.__name__ == "revsizecmp"
        assert isinstance(plan.error_policy, ReportErrorsPolicy)
        assert not plan.walk_options.nostat

    def test_no_sort_has_no_comparator(self):
        plan = ListingPlan(ListingConfig(no_sort=True))
        assert plan.comparator is None
        assert plan.create_adapter().comparator is None

    def test_create_controller(self):
        policy = CollectErrorsPolicy()
        plan = ListingPlan(ListingConfig(), policy)
        stream = io.StringIO()
        controller = plan.create_controller(stream)

        assert isinstance(controller, TraversalController)
        assert isinstance(controller.renderer, SingleColumnRenderer)
        assert controller.error_policy is policy
        assert controller.stream is stream
        assert controller.collector.error_policy is policy

    def test_summary(self):
        summary = ListingPlan(ListingConfig(recursive=True)).get_summary()
        assert summary["display_mode"] == "single"
        assert summary["sort_key"] == "name"
        assert summary["recursive"] is True
        assert summary["renderer"] == "SingleColumnRenderer"
        assert summary["nostat"] is True
        assert ListingPlan(ListingConfig(no_sort=True)).get_summary()["sort_key"] is None
