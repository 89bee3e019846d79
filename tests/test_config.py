from __future__ import annotations

import pytest

from connectron import GameSettings, InvalidSettings, PlayerType, RuleConfig


@pytest.mark.parametrize(
    "label,expected",
    [
        ("Easy AI", PlayerType.EASY_AI),
        ("medium", PlayerType.MEDIUM_AI),
        ("HARD_AI", PlayerType.HARD_AI),
        ("Person", PlayerType.HUMAN),
        ("human", PlayerType.HUMAN),
        (PlayerType.HARD_AI, PlayerType.HARD_AI),
    ],
)
def test_player_type_labels(label, expected):
    assert PlayerType.from_label(label) is expected


def test_unknown_player_type():
    with pytest.raises(InvalidSettings):
        PlayerType.from_label("Grandmaster")


@pytest.mark.parametrize("win_length", [3, 11])
def test_win_length_bounds(win_length):
    with pytest.raises(InvalidSettings):
        RuleConfig(win_length=win_length)


def test_corner_bonus_points():
    assert RuleConfig(win_length=6).corner_bonus_points == 2
    assert RuleConfig(win_length=7).corner_bonus_points == 3


@pytest.mark.parametrize(
    "kwargs",
    [
        {"width": 5},
        {"height": 101},
        {"player_count": 0},
        {"player_count": 11},
        {"best_of": 2},
        {"best_of": 0},
        {"best_of": 3, "round_counter": 3},
        {"player_count": 1, "player_types": ("Person", "Easy AI")},
    ],
)
def test_invalid_settings(kwargs):
    with pytest.raises(InvalidSettings):
        GameSettings(**kwargs)


def test_seat_types_fill_missing_players():
    with_ai = GameSettings(player_count=3, player_types=("Person",), rules=RuleConfig(ai_for_missing_players=True))
    assert with_ai.seat_types() == [PlayerType.HUMAN, PlayerType.EASY_AI, PlayerType.EASY_AI]

    without_ai = GameSettings(player_count=2)
    assert without_ai.seat_types() == [PlayerType.HUMAN, PlayerType.HUMAN]


def test_from_dict_defaults():
    settings = GameSettings.from_dict({})
    assert (settings.width, settings.height, settings.player_count, settings.best_of) == (6, 6, 1, 1)
    assert settings.rules == RuleConfig()


def test_from_dict_full_payload():
    settings = GameSettings.from_dict(
        {
            "width": 9,
            "height": 8,
            "players": 3,
            "win_length": 5,
            "best_of": 3,
            "player_types": ["Person", "Hard AI"],
            "ai_for_missing": True,
            "corner_bonus": True,
            "overflow_rule": True,
            "alliances_enabled": True,
            "alliances": [["Player-1", "Player-2"]],
        }
    )
    assert settings.player_types == (PlayerType.HUMAN, PlayerType.HARD_AI)
    assert settings.rules.corner_bonus_enabled and settings.rules.overflow_rule_enabled
    assert not settings.rules.bomb_counter_enabled
    assert settings.alliances == (("Player-1", "Player-2"),)
    assert settings.seat_types()[2] is PlayerType.EASY_AI


def test_from_dict_rejects_garbage():
    with pytest.raises(InvalidSettings):
        GameSettings.from_dict({"width": "wide"})


@pytest.mark.parametrize(
    "raw, expected",
    [(True, True), (False, False), (0, False), (1, True), ("false", False), ("False", False),
     ("true", True), ("yes", True), ("off", False), ("0", False)],
)
def test_from_dict_reads_rule_switches(raw, expected):
    settings = GameSettings.from_dict({"bomb_counter": raw, "alliances_enabled": raw})
    assert settings.rules.bomb_counter_enabled is expected
    assert settings.rules.alliances_enabled is expected


def test_from_dict_rejects_unreadable_switch():
    with pytest.raises(InvalidSettings):
        GameSettings.from_dict({"solitaire_rule": "maybe"})


def test_rule_dict_reads_back_unchanged():
    rules = RuleConfig(
        win_length=7,
        corner_bonus_enabled=True,
        bomb_counter_enabled=True,
        alliances_enabled=True,
        ai_for_missing_players=True,
    )
    assert GameSettings.from_dict(rules.to_dict()).rules == rules
