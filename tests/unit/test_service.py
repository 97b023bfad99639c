"""
Тесты для публичного фасада dasha_engine

Проверяет:
1. compute_children: сценарий Venus mahadasha, валидация системы и тела
2. resolve_path: внешнее дерево как tuple и как PeriodChildren
3. End-to-end: payload внешнего сервиса → load_external_tree → resolve_path
4. Ключ мемоизации для кэша вызывающего кода
"""

from datetime import timedelta
from fractions import Fraction

import pytest

import dasha_engine
from dasha_engine import (
    ChildSource,
    DegeneratePeriodError,
    EngineConfig,
    InvalidDepthError,
    Period,
    PeriodChildren,
    UnknownBodyError,
    UnknownSystemError,
    compute_children,
    load_external_tree,
    resolve_path,
)


# =============================================================================
# COMPUTE CHILDREN
# =============================================================================


class TestComputeChildren:
    """Один уровень разбиения через фасад."""

    def test_venus_scenario(self, venus_maha):
        children = compute_children(venus_maha, "vimshottari")

        assert [c.body for c in children] == [
            "Venus", "Sun", "Moon", "Mars", "Rahu", "Jupiter", "Saturn", "Mercury", "Ketu",
        ]
        assert [c.duration_years for c in children] == [
            Fraction(20 * years, 120) for years in (20, 6, 10, 7, 18, 16, 19, 17, 7)
        ]
        assert children[-1].end_instant == venus_maha.end_instant

    def test_system_alias(self, epoch):
        parent = Period.from_start("Venus", epoch, Fraction(20, 3))
        children = compute_children(parent, "Tribhagi-40")
        assert children[0].duration_years == Fraction(20, 3) * Fraction(20, 3) / 40

    def test_yogini(self, epoch):
        parent = Period.from_start("Sankata", epoch, 8)
        children = compute_children(parent, "yogini")
        assert children[0].body == "Sankata"
        assert children[1].body == "Mangala"
        assert sum(c.duration_years for c in children) == 8

    def test_unknown_system(self, venus_maha):
        with pytest.raises(UnknownSystemError):
            compute_children(venus_maha, "kalachakra")

    def test_unknown_body(self, epoch):
        with pytest.raises(UnknownBodyError):
            compute_children(Period.from_start("Ketu", epoch, 7), "ashtottari")

    def test_degenerate(self, epoch):
        parent = Period(body="Sun", start_instant=epoch, duration_years=0, end_instant=epoch)
        with pytest.raises(DegeneratePeriodError):
            compute_children(parent, "vimshottari")

    def test_config(self, epoch):
        savana = Fraction(360)
        parent = Period.from_start("Venus", epoch, 20, days_per_year=savana)
        children = compute_children(parent, "vimshottari", EngineConfig(days_per_year=savana))
        assert children[0].end_instant == epoch + timedelta(days=1200)

    def test_cache_key_stable(self, venus_maha):
        """Одинаковый ключ → одинаковый результат."""
        same = Period.from_start("Venus", venus_maha.start_instant, 20.0)
        assert same.cache_key("vimshottari") == venus_maha.cache_key("vimshottari")
        assert compute_children(same, "vimshottari") == compute_children(venus_maha, "vimshottari")


# =============================================================================
# RESOLVE PATH
# =============================================================================


class TestResolvePath:
    """Разрешение пути через фасад."""

    def test_tuple_roots(self, external_tree_2_levels):
        result = resolve_path(
            external_tree_2_levels, ["Venus", "Venus", "Mercury", "Saturn"], "vimshottari"
        )
        assert result.sources == (
            ChildSource.EXTERNAL,
            ChildSource.EXTERNAL,
            ChildSource.COMPUTED,
            ChildSource.COMPUTED,
        )

    def test_period_children_roots(self, external_tree_1_level):
        roots = PeriodChildren.external(external_tree_1_level)
        result = resolve_path(roots, ["Moon", "Moon"], "vimshottari", include_children=True)

        assert result.period.body == "Moon"
        assert result.source is ChildSource.COMPUTED
        assert result.children.bodies[0] == "Moon"

    def test_list_roots(self, external_tree_1_level):
        result = resolve_path(list(external_tree_1_level), ["Ketu"], "vimshottari")
        assert result.period == external_tree_1_level[0]

    def test_caller_depth_limit(self, external_tree_1_level):
        with pytest.raises(InvalidDepthError):
            resolve_path(
                external_tree_1_level,
                ["Venus", "Venus", "Venus"],
                "vimshottari",
                config=EngineConfig(max_depth=2),
            )

    def test_unknown_system(self, external_tree_1_level):
        with pytest.raises(UnknownSystemError):
            resolve_path(external_tree_1_level, ["Venus"], "kalachakra")

    def test_short_external_end(self, epoch):
        """Внешний end_date короче duration_years: все подпериоды ненулевые."""
        venus = Period(
            body="Venus",
            start_instant=epoch,
            duration_years=20,
            end_instant=epoch + timedelta(days=7200),
        )
        result = resolve_path([venus], ["Venus", "Ketu"], "vimshottari", include_children=True)

        assert result.period.start_instant == epoch + timedelta(days=6780)
        assert result.period.end_instant == venus.end_instant
        assert result.children.periods[-1].end_instant == venus.end_instant
        for child in result.children.periods:
            assert child.span > timedelta(0)
        saturn = result.children.find("Saturn")
        assert saturn.span == result.period.span * 19 / 120


# =============================================================================
# END-TO-END
# =============================================================================


class TestEndToEnd:
    """Payload внешнего сервиса → ResolvedPath."""

    @pytest.fixture
    def payload(self) -> dict:
        """Ответ сервиса: Venus mahadasha с двумя antardasha, без более глубоких уровней."""
        return {
            "data": {
                "mahadashas": [
                    {
                        "planet": "VENUS",
                        "start_date": "2000-01-01T00:00:00Z",
                        "end_date": "2020-01-01T00:00:00Z",
                        "duration_years": 20,
                        "antardashas": [
                            {
                                "planet": "Venus",
                                "start_date": "2000-01-01T00:00:00Z",
                                "end_date": "2003-05-02T12:00:00Z",
                                "duration_years": "10/3",
                                "pratyantardashas": [],
                            },
                            {
                                "planet": "Sun",
                                "start_date": "2003-05-02T12:00:00Z",
                                "end_date": "2004-05-01T18:00:00Z",
                                "duration_years": 1,
                            },
                        ],
                    }
                ]
            }
        }

    def test_fallback_below_external(self, payload):
        roots = load_external_tree(payload, system="vimshottari")
        result = resolve_path(roots, ["venus", "sun", "jupiter"], "vimshottari")

        assert result.period.body == "Jupiter"
        assert result.sources == (
            ChildSource.EXTERNAL,
            ChildSource.EXTERNAL,
            ChildSource.COMPUTED,
        )
        sun = result.ancestry[-1]
        assert result.period.start_instant >= sun.start_instant
        assert result.period.end_instant <= sun.end_instant

    def test_missing_external_antardasha(self, payload):
        """Mars отсутствует среди внешних antardasha — не вычисляется."""
        roots = load_external_tree(payload, system="vimshottari")
        with pytest.raises(dasha_engine.PathNotFoundError) as exc_info:
            resolve_path(roots, ["Venus", "Mars"], "vimshottari")
        assert exc_info.value.available == ("Venus", "Sun")

    def test_empty_nested_level_is_computed(self, payload):
        roots = load_external_tree(payload, system="vimshottari")
        result = resolve_path(roots, ["Venus", "Venus"], "vimshottari", include_children=True)

        assert result.children.source is ChildSource.COMPUTED
        assert len(result.children) == 9
        assert result.children.periods[-1].end_instant == result.period.end_instant


class TestPackageExports:
    """Публичный API пакета."""

    def test_all_exports_resolve(self):
        for name in dasha_engine.__all__:
            assert hasattr(dasha_engine, name)

    def test_systems_listed(self):
        assert "vimshottari" in dasha_engine.list_systems()
