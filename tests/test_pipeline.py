#!/usr/bin/env python3
"""
Tests for the filter/sort pipeline, the view selector and the render projection.

Run with:
    python -m pytest tests/test_pipeline.py
"""
import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from library.models import (
    Card, FilterState, GameRecord, SortMode, ViewMode, ViewStatus,
)
from library.services import filter_service, render_service, view_service

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

ZELDA = GameRecord(id=1, title='Zelda', description='Open-world adventure',
                   genre='adventure', year=2017, rating=4.8)
STARDEW = GameRecord(id=2, title='Stardew Valley', description='Farming life',
                     genre='sim', year=2016, rating=4.5)
CATALOG = [ZELDA, STARDEW]

MIXED = [
    GameRecord(id=10, title='Hades', description='Escape the underworld', genre='roguelike', year=2020, rating=4.8),
    GameRecord(id=11, title='Celeste', description='Climb the mountain', genre='platformer', year=2018, rating=4.6),
    GameRecord(id=12, title='Dead Cells', description='Roguevania ADVENTURE', genre='roguelike', year=2018, rating=4.6),
    GameRecord(id=13, title='Okami', description='Paint the world', genre='adventure', year=2006, rating=None),
    GameRecord(id=14, title='Hollow Knight', description='Bug kingdom', genre='Roguelike', year=2017, rating=4.6),
]


def ids(records):
    return [r.id for r in records]


# ===========================================================================
# Text and genre filters
# ===========================================================================

class TestFilters(unittest.TestCase):

    def test_scenario_default_filters_sort_by_rating(self):
        self.assertEqual(ids(filter_service.apply(CATALOG, FilterState())), [1, 2])

    def test_scenario_search_stardew(self):
        result = filter_service.apply(CATALOG, FilterState(search='stardew'))
        self.assertEqual(ids(result), [2])

    def test_no_filters_is_a_permutation(self):
        result = filter_service.apply(MIXED, FilterState(sort=SortMode.TITLE))
        self.assertCountEqual(ids(result), ids(MIXED))
        self.assertEqual(len(result), len(MIXED))

    def test_search_matches_title_case_insensitive(self):
        result = filter_service.apply(MIXED, FilterState(search='HADES'))
        self.assertEqual(ids(result), [10])

    def test_search_matches_description(self):
        result = filter_service.apply(MIXED, FilterState(search='adventure'))
        self.assertEqual(ids(result), [12])

    def test_search_output_is_exactly_the_matching_set(self):
        term = 'the'
        result = filter_service.apply(MIXED, FilterState(search=term))
        expected = [r for r in MIXED
                    if term in r.title.lower() or term in r.description.lower()]
        self.assertCountEqual(ids(result), ids(expected))
        for record in result:
            self.assertTrue(filter_service.matches_search(record, term))

    def test_search_is_not_trimmed(self):
        result = filter_service.apply(MIXED, FilterState(search=' knight'))
        self.assertEqual(ids(result), [14])
        self.assertEqual(filter_service.apply(MIXED, FilterState(search='knight ')), [])

    def test_search_without_matches_is_empty_list(self):
        self.assertEqual(filter_service.apply(MIXED, FilterState(search='tetris')), [])

    def test_genre_filter_is_exact_and_case_sensitive(self):
        result = filter_service.apply(MIXED, FilterState(genre='roguelike'))
        self.assertEqual(ids(result), [10, 12])

    def test_genre_all_is_noop(self):
        result = filter_service.apply(MIXED, FilterState(genre='all'))
        self.assertEqual(len(result), len(MIXED))

    def test_search_and_genre_combine(self):
        result = filter_service.apply(MIXED, FilterState(search='world', genre='adventure'))
        self.assertEqual(ids(result), [13])

    def test_empty_input(self):
        for mode in SortMode:
            self.assertEqual(filter_service.apply([], FilterState(search='x', sort=mode)), [])

    def test_inputs_not_mutated(self):
        source = list(MIXED)
        filter_service.apply(source, FilterState(sort=SortMode.TITLE))
        self.assertEqual(source, MIXED)

    def test_empty_fields_do_not_fail(self):
        blank = GameRecord(id=99, title='')
        result = filter_service.apply([blank], FilterState(search='a', sort=SortMode.TITLE))
        self.assertEqual(result, [])
        self.assertEqual(filter_service.apply([blank], FilterState(sort=SortMode.TITLE)), [blank])


# ===========================================================================
# Sorting
# ===========================================================================

class TestSorting(unittest.TestCase):

    def test_rating_descending_and_stable(self):
        result = filter_service.apply(MIXED, FilterState(sort=SortMode.RATING))
        # 11, 12 and 14 tie on 4.6 and keep their input order
        self.assertEqual(ids(result), [10, 11, 12, 14, 13])

    def test_rating_stability_follows_input_order(self):
        reversed_input = list(reversed(MIXED))
        result = filter_service.apply(reversed_input, FilterState(sort=SortMode.RATING))
        self.assertEqual(ids(result), [10, 14, 12, 11, 13])

    def test_unrated_sorts_last(self):
        result = filter_service.apply(MIXED, FilterState(sort=SortMode.RATING))
        self.assertIsNone(result[-1].rating)

    def test_year_descending_and_stable(self):
        result = filter_service.apply(MIXED, FilterState(sort=SortMode.YEAR))
        self.assertEqual(ids(result), [10, 11, 12, 14, 13])

    def test_title_ascending(self):
        result = filter_service.apply(MIXED, FilterState(sort=SortMode.TITLE))
        self.assertEqual([r.title for r in result],
                         ['Celeste', 'Dead Cells', 'Hades', 'Hollow Knight', 'Okami'])

    def test_title_sort_places_accented_letters_with_base_letter(self):
        records = [
            GameRecord(id=1, title='Zoo'),
            GameRecord(id=2, title='Ōkami'),
            GameRecord(id=3, title='Outer Wilds'),
            GameRecord(id=4, title='Éclair'),
            GameRecord(id=5, title='apex'),
        ]
        result = filter_service.apply(records, FilterState(sort=SortMode.TITLE))
        self.assertEqual([r.title for r in result],
                         ['apex', 'Éclair', 'Ōkami', 'Outer Wilds', 'Zoo'])

    def test_title_sort_ignores_case_at_first_level(self):
        records = [GameRecord(id=1, title='banjo'), GameRecord(id=2, title='Alan Wake'),
                   GameRecord(id=3, title='Celeste')]
        result = filter_service.apply(records, FilterState(sort=SortMode.TITLE))
        self.assertEqual(ids(result), [2, 1, 3])

    def test_title_sort_unaccented_before_accented_tie(self):
        records = [GameRecord(id=1, title='Élan'), GameRecord(id=2, title='Elan')]
        result = filter_service.apply(records, FilterState(sort=SortMode.TITLE))
        self.assertEqual(ids(result), [2, 1])

    def test_title_sort_lowercase_before_uppercase_tie(self):
        records = [GameRecord(id=1, title='Doom'), GameRecord(id=2, title='doom')]
        result = filter_service.apply(records, FilterState(sort=SortMode.TITLE))
        self.assertEqual(ids(result), [2, 1])

    def test_title_sort_punctuation_and_digits_before_letters(self):
        records = [GameRecord(id=1, title='Zork'), GameRecord(id=2, title='1942'),
                   GameRecord(id=3, title='_underscore'), GameRecord(id=4, title='[bracket]')]
        result = filter_service.apply(records, FilterState(sort=SortMode.TITLE))
        self.assertEqual(ids(result)[-2:], [2, 1])

    def test_title_sort_expands_sharp_s(self):
        records = [GameRecord(id=1, title='ssb'), GameRecord(id=2, title='ßa')]
        result = filter_service.apply(records, FilterState(sort=SortMode.TITLE))
        self.assertEqual(ids(result), [2, 1])

    def test_sort_records_rejects_unknown_mode(self):
        with self.assertRaises(ValueError):
            filter_service.sort_records(MIXED, 'rating')

    def test_available_genres(self):
        self.assertEqual(filter_service.available_genres(MIXED),
                         ['adventure', 'platformer', 'roguelike', 'Roguelike'])

    def test_available_genres_skips_empty(self):
        self.assertEqual(filter_service.available_genres([GameRecord(id=1, title='x')]), [])


class TestSortModeParsing(unittest.TestCase):

    def test_values(self):
        self.assertIs(SortMode.parse('rating'), SortMode.RATING)
        self.assertIs(SortMode.parse('YEAR'), SortMode.YEAR)
        self.assertIs(SortMode.parse(' title '), SortMode.TITLE)

    def test_legacy_az_alias(self):
        self.assertIs(SortMode.parse('az'), SortMode.TITLE)

    def test_enum_passthrough(self):
        self.assertIs(SortMode.parse(SortMode.YEAR), SortMode.YEAR)

    def test_unknown_raises(self):
        with self.assertRaises(ValueError):
            SortMode.parse('popularity')


# ===========================================================================
# View selector
# ===========================================================================

class TestViewSelector(unittest.TestCase):

    def test_library_returns_catalog_unchanged(self):
        selection = view_service.select(ViewMode.LIBRARY, MIXED, set())
        self.assertEqual(list(selection.records), MIXED)
        self.assertIs(selection.status, ViewStatus.READY)
        self.assertFalse(selection.empty_favorites)

    def test_favorites_subset_keeps_catalog_order(self):
        selection = view_service.select(ViewMode.FAVORITES, MIXED, {14, 10})
        self.assertEqual(ids(selection.records), [10, 14])
        self.assertIs(selection.status, ViewStatus.READY)

    def test_no_favorites_signal(self):
        selection = view_service.select(ViewMode.FAVORITES, CATALOG, set())
        self.assertTrue(selection.empty_favorites)
        self.assertIs(selection.status, ViewStatus.NO_FAVORITES)
        self.assertEqual(selection.records, ())

    def test_favorites_missing_from_catalog_count_as_empty(self):
        selection = view_service.select(ViewMode.FAVORITES, CATALOG, {42})
        self.assertTrue(selection.empty_favorites)

    def test_empty_favorites_distinguishable_from_no_matches(self):
        selection = view_service.select(ViewMode.FAVORITES, CATALOG, set())
        filtered = filter_service.apply([], FilterState(search='x'))
        self.assertTrue(selection.empty_favorites)
        self.assertEqual(filtered, [])
        self.assertIsInstance(filtered, list)

    def test_scenario_favorites_then_year_sort(self):
        selection = view_service.select(ViewMode.FAVORITES, CATALOG, {2})
        self.assertEqual(ids(selection.records), [2])
        result = filter_service.apply(selection.records, FilterState(sort=SortMode.YEAR))
        self.assertEqual(ids(result), [2])

    def test_accepts_string_mode(self):
        selection = view_service.select('favorites', CATALOG, {1})
        self.assertIs(selection.mode, ViewMode.FAVORITES)

    def test_view_mode_from_path(self):
        self.assertIs(ViewMode.from_path('/favoritos.html'), ViewMode.FAVORITES)
        self.assertIs(ViewMode.from_path('/favorites'), ViewMode.FAVORITES)
        self.assertIs(ViewMode.from_path('/index.html'), ViewMode.LIBRARY)
        self.assertIs(ViewMode.from_path(''), ViewMode.LIBRARY)


# ===========================================================================
# Render projection
# ===========================================================================

class TestRenderProjection(unittest.TestCase):

    def test_project_pairs_records_with_flags(self):
        cards = render_service.project(CATALOG, {2})
        self.assertEqual(cards, [Card(ZELDA, False), Card(STARDEW, True)])

    def test_build_result_ready(self):
        result = render_service.build_result(ViewMode.LIBRARY, ViewStatus.READY, CATALOG,
                                             {1}, FilterState())
        self.assertIs(result.status, ViewStatus.READY)
        self.assertEqual(result.records, CATALOG)
        self.assertTrue(result.cards[0].is_favorite)
        self.assertEqual(result.message, '')

    def test_build_result_no_matches(self):
        result = render_service.build_result(ViewMode.LIBRARY, ViewStatus.READY, [],
                                             set(), FilterState(search='x'))
        self.assertIs(result.status, ViewStatus.NO_MATCHES)
        self.assertEqual(result.message, 'No games match these filters.')

    def test_build_result_no_favorites(self):
        result = render_service.build_result(ViewMode.FAVORITES, ViewStatus.NO_FAVORITES, [],
                                             set(), FilterState())
        self.assertIs(result.status, ViewStatus.NO_FAVORITES)
        self.assertEqual(result.message, 'No favorites saved yet.')
        self.assertEqual(result.cards, [])

    def test_card_to_dict(self):
        data = render_service.card_to_dict(Card(STARDEW, True))
        self.assertEqual(data['id'], 2)
        self.assertEqual(data['title'], 'Stardew Valley')
        self.assertTrue(data['is_favorite'])
        self.assertEqual(data['favorite_label'], render_service.FAVORITE_LABEL)

    def test_result_to_dict(self):
        result = render_service.build_result(ViewMode.LIBRARY, ViewStatus.READY, CATALOG,
                                             set(), FilterState(sort=SortMode.YEAR))
        data = render_service.result_to_dict(result)
        self.assertEqual(data['view'], 'library')
        self.assertEqual(data['status'], 'ready')
        self.assertEqual(data['filters'], {'search': '', 'genre': 'all', 'sort': 'year'})
        self.assertEqual(data['count'], 2)

    def test_format_rating(self):
        self.assertEqual(render_service.format_rating(None), 'N/A')
        self.assertEqual(render_service.format_rating(4.5), '4.5')
        self.assertEqual(render_service.format_rating(9.0), '9')

    def test_render_text_lists_titles(self):
        result = render_service.build_result(ViewMode.LIBRARY, ViewStatus.READY, CATALOG,
                                             {1}, FilterState())
        text = render_service.render_text(result)
        self.assertIn('Zelda', text)
        self.assertIn('Stardew Valley', text)
        self.assertIn(render_service.FAVORITE_LABEL, text)
        self.assertIn('2 game(s)', text)

    def test_render_text_empty_states(self):
        for status, message in ((ViewStatus.NO_FAVORITES, 'No favorites saved yet.'),
                                (ViewStatus.LOAD_FAILED, 'Could not load the game catalog')):
            result = render_service.build_result(ViewMode.FAVORITES, status, [], set(), FilterState())
            self.assertIn(message, render_service.render_text(result))


if __name__ == '__main__':
    unittest.main()
