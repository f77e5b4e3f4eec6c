"""SqliteSpindleCache 유닛 테스트."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from yarn_guardian.infra.database.sqlite_spindle_cache import (
    SqliteSpindleCache,
)


@pytest.fixture
def cache(tmp_path):
    return SqliteSpindleCache.from_path(str(tmp_path / 'cache.db'))


class TestDistanceValues:
    def test_spindle_maps_to_index_minus_one(self, cache):
        cache.replace_distance_values(3, [10.5, 20.5, 30.5])

        assert cache.get_distance_value(3, 1) == 10.5
        assert cache.get_distance_value(3, 3) == 30.5
        assert cache.get_distance_value(3, 4) is None
        assert cache.get_distance_value(3, 0) is None

    def test_replace_is_total(self, cache):
        cache.replace_distance_values(3, [1.0, 2.0])
        cache.replace_distance_values(3, [3.0])

        assert cache.get_distance_value(3, 1) == 3.0
        assert cache.get_distance_value(3, 2) is None

    def test_sides_are_independent(self, cache):
        cache.replace_distance_values(3, [1.0])
        cache.replace_distance_values(4, [9.0])
        cache.replace_distance_values(3, [])

        assert cache.get_distance_value(3, 1) is None
        assert cache.get_distance_value(4, 1) == 9.0

    def test_failed_replace_keeps_previous_snapshot(self, cache):
        cache.replace_distance_values(3, [1.0, 2.0])

        # INSERT 단계 실패 시 DELETE도 롤백되어야 한다
        with pytest.raises((SQLAlchemyError, TypeError, ValueError)):
            cache.replace_distance_values(3, [5.0, 'not-a-number'])

        assert cache.get_distance_value(3, 1) == 1.0
        assert cache.get_distance_value(3, 2) == 2.0

    def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / 'cache.db')
        SqliteSpindleCache.from_path(path).replace_distance_values(1, [7.5])

        assert SqliteSpindleCache.from_path(path).get_distance_value(1, 1) == 7.5


class TestSideBreakValues:
    def test_round_trip_preserves_order(self, cache):
        cache.replace_side_break_values(5, [9, 2, 7])
        assert cache.get_side_break_values(5) == [9, 2, 7]

    def test_replace(self, cache):
        cache.replace_side_break_values(5, [1, 2])
        cache.replace_side_break_values(5, [3])
        assert cache.get_side_break_values(5) == [3]

    def test_missing_side_empty(self, cache):
        assert cache.get_side_break_values(99) == []


class TestPointIds:
    def test_switch_point_replaced_per_side(self, cache):
        cache.replace_switch_point_id(3, 101)
        cache.replace_switch_point_id(3, 105)
        cache.replace_switch_point_id(4, 102)

        assert cache.get_switch_point_id(3) == 105
        assert cache.get_switch_point_id(4) == 102
        assert cache.get_switch_point_id(5) is None

    def test_wait_point_replaced_per_machine(self, cache):
        cache.replace_wait_point_id(2, 900)
        cache.replace_wait_point_id(2, 901)

        assert cache.get_wait_point_id(2) == 901
        assert cache.get_wait_point_id(1) is None

    def test_point_ids_persist(self, tmp_path):
        path = str(tmp_path / 'cache.db')
        first = SqliteSpindleCache.from_path(path)
        first.replace_switch_point_id(1, 11)
        first.replace_wait_point_id(1, 99)

        reopened = SqliteSpindleCache.from_path(path)
        assert reopened.get_switch_point_id(1) == 11
        assert reopened.get_wait_point_id(1) == 99


class TestLogging:
    def test_replace_logs_count(self, cache):
        with patch(
            'yarn_guardian.infra.database.sqlite_spindle_cache.logger'
        ) as log:
            cache.replace_distance_values(2, [1.0, 2.0])
        log.debug.assert_called_once()
        assert log.debug.call_args.args[1:] == (2, 2)
