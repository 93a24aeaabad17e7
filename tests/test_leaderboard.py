"""Tests for score stores, the leaderboard service and name entry."""

import json
import logging

import pytest

from rising_lion.leaderboard import (
    DEFAULT_NAME, JsonFileStore, Leaderboard, LeaderboardEntry,
    LeaderboardError, MemoryStore, NameEntry, clean_name, rank
)


class ExplodingStore:
    def fetch_top(self, n):
        raise OSError('connection refused')

    def submit(self, name, score):
        raise LeaderboardError('read-only')


class TestRank:
    def test_highest_first_ties_keep_arrival_order(self):
        entries = [
            LeaderboardEntry('a', 10, 1.0),
            LeaderboardEntry('b', 30, 2.0),
            LeaderboardEntry('c', 10, 3.0),
            LeaderboardEntry('d', 30, 4.0),
        ]
        assert [e.name for e in rank(entries, 3)] == ['b', 'd', 'a']

    def test_negative_limit(self):
        assert rank([LeaderboardEntry('a', 1, 0.0)], -1) == []


class TestMemoryStore:
    def test_submit_and_fetch(self):
        store = MemoryStore()
        for name, score in [('x', 5), ('y', 15), ('z', 10), ('w', 1)]:
            store.submit(name, score)
        assert [(e.name, e.score) for e in store.fetch_top(3)] == [
            ('y', 15), ('z', 10), ('x', 5)
        ]


class TestJsonFileStore:
    def test_missing_file_is_empty(self, tmp_path):
        assert JsonFileStore(tmp_path / 'scores.json').fetch_top(3) == []

    def test_persists_between_instances(self, tmp_path):
        path = tmp_path / 'nested' / 'scores.json'
        JsonFileStore(path).submit('Maverick', 42)
        JsonFileStore(path).submit('Goose', 17)

        top = JsonFileStore(path).fetch_top(3)
        assert [(e.name, e.score) for e in top] == [('Maverick', 42), ('Goose', 17)]
        rows = json.loads(path.read_text())
        assert set(rows[0]) == {'name', 'score', 'timestamp'}

    @pytest.mark.parametrize('content', ['not json', '{"name": 1}', '[{"name": "a"}]'])
    def test_corrupt_file_raises(self, tmp_path, content):
        path = tmp_path / 'scores.json'
        path.write_text(content)
        with pytest.raises(LeaderboardError):
            JsonFileStore(path).fetch_top(3)


class TestLeaderboardService:
    def test_refresh_keeps_top_slots(self):
        store = MemoryStore()
        for score in (1, 2, 3, 4):
            store.submit('p', score)
        board = Leaderboard(store, slots=3)
        assert [e.score for e in board.refresh()] == [4, 3, 2]
        assert board.scores() == [4, 3, 2]

    def test_failures_degrade_to_empty(self, caplog):
        board = Leaderboard(ExplodingStore())
        board.entries = [LeaderboardEntry('old', 1, 0.0)]
        with caplog.at_level(logging.WARNING, logger='rising_lion.leaderboard'):
            assert board.refresh() == []
            assert board.submit('me', 5) is False
        assert 'Failed to load high scores' in caplog.text
        assert 'Failed to save high score' in caplog.text

    def test_any_store_exception_degrades(self):
        class FlakyStore:
            def fetch_top(self, n):
                raise RuntimeError('backend down')

            def submit(self, name, score):
                raise KeyError(name)

        board = Leaderboard(FlakyStore())
        assert board.refresh() == []
        assert board.submit('me', 5) is False

    def test_corrupt_file_degrades_to_empty(self, tmp_path):
        path = tmp_path / 'scores.json'
        path.write_text('garbage')
        assert Leaderboard(JsonFileStore(path)).refresh() == []

    def test_without_store(self):
        board = Leaderboard(None)
        assert not board.available
        assert board.refresh() == []
        assert board.submit('me', 5) is False

    def test_submit_cleans_name(self):
        store = MemoryStore()
        board = Leaderboard(store)
        assert board.submit('  Viper  ', 9)
        assert store.entries[0].name == 'Viper'
        assert board.entries[0].score == 9


class TestNames:
    @pytest.mark.parametrize('raw, expected', [
        ('Iceman', 'Iceman'),
        ('  ', DEFAULT_NAME),
        ('', DEFAULT_NAME),
        (None, DEFAULT_NAME),
    ])
    def test_clean_name(self, raw, expected):
        assert clean_name(raw) == expected

    def test_accepts_allowed_characters(self):
        entry = NameEntry()
        for char in 'Ab9 -_.':
            assert entry.type_char(char)
        assert entry.text == 'Ab9 -_.'

    @pytest.mark.parametrize('char', ['!', '@', 'é', '\n', 'ab', ''])
    def test_rejects_other_input(self, char):
        entry = NameEntry()
        assert not entry.type_char(char)
        assert entry.text == ''

    def test_type_text_keeps_allowed_prefix(self):
        entry = NameEntry(max_length=5)
        assert entry.type_text('a!b c@defg') == 5
        assert entry.text == 'ab cd'

    def test_length_limit_and_backspace(self):
        entry = NameEntry(max_length=3)
        for char in 'abcd':
            entry.type_char(char)
        assert entry.text == 'abc'
        entry.backspace()
        assert entry.text == 'ab'
        entry.clear()
        entry.backspace()
        assert entry.text == ''
