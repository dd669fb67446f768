"""
回合状态机的单元测试.

覆盖发牌与起始牌结算、出牌效果、摸牌与回收、uno声明与抓uno、
回合结束通知以及快照恢复的校验.
"""

import copy

import pytest

from uno.core.deck import Card
from uno.core.exceptions import GameConfigError, IllegalActionError, StateInvariantError, ValidationError
from uno.core.random_utils import identity_shuffler
from uno.core.round import Direction, Round, RoundPhase, RoundResult
from uno.tests.helpers import (
    BLUE, GREEN, RED, EndRecorder, place_at, round_snapshot, staged_shuffler
)

FOUR = ['p0', 'p1', 'p2', 'p3']


def restore(snapshot):
    return Round.from_snapshot(snapshot, identity_shuffler)


def four_player_round(seat0_hand, discard=None, **kwargs):
    """座位0行动的4人回合，其他座位各持一张绿牌"""
    hands = [seat0_hand, [Card.numbered(GREEN, 1)], [Card.numbered(GREEN, 2)], [Card.numbered(GREEN, 3)]]
    return restore(round_snapshot(hands, discard or [Card.numbered(RED, 5)], **kwargs))


class TestRoundSetup:
    """发牌与起始牌结算测试."""

    def test_deal_round_robin_from_dealer_left(self, ordered_round):
        """从庄家下家开始逐张轮流发牌."""
        assert ordered_round.hand(1) == (
            Card.numbered(BLUE, 0), Card.numbered(BLUE, 2), Card.numbered(BLUE, 3),
            Card.numbered(BLUE, 5), Card.numbered(BLUE, 6), Card.numbered(BLUE, 8),
            Card.numbered(BLUE, 9),
        )
        assert ordered_round.hand(0)[-1] == Card.numbered(GREEN, 1)
        assert [ordered_round.hand_size(seat) for seat in range(3)] == [7, 7, 7]

    def test_start_card_numbered(self, ordered_round, invariants):
        """起始数字牌：庄家下家先行动."""
        assert ordered_round.discard_top() == Card.numbered(GREEN, 1)
        assert ordered_round.current_color is GREEN
        assert ordered_round.current_direction is Direction.CLOCKWISE
        assert ordered_round.player_in_turn() == 1
        assert ordered_round.draw_pile().size == 86
        assert ordered_round.phase is RoundPhase.IN_PROGRESS
        assert invariants.is_valid_state(ordered_round.state_view())

    def test_start_turn_follows_dealer(self):
        """庄家在最后一个座位时从座位0开始."""
        round_ = Round(['a', 'b', 'c'], dealer=2, shuffler=identity_shuffler)
        assert round_.player_in_turn() == 0
        assert round_.dealer == 2

    def test_start_card_skip(self):
        round_ = Round(FOUR, dealer=0, shuffler=place_at(Card.skip(RED), 28))
        assert round_.discard_top() == Card.skip(RED)
        assert round_.player_in_turn() == 2

    def test_start_card_reverse(self):
        round_ = Round(FOUR, dealer=0, shuffler=place_at(Card.reverse(RED), 28))
        assert round_.current_direction is Direction.COUNTERCLOCKWISE
        assert round_.player_in_turn() == 3

    def test_start_card_reverse_two_players(self):
        """两人局起始反转牌等同跳过，庄家先行动."""
        round_ = Round(['a', 'b'], dealer=0, shuffler=place_at(Card.reverse(RED), 14))
        assert round_.current_direction is Direction.CLOCKWISE
        assert round_.player_in_turn() == 0

    def test_start_card_draw(self):
        """起始加二牌：庄家下家摸两张并被跳过."""
        round_ = Round(FOUR, dealer=0, shuffler=place_at(Card.draw(RED), 28))
        assert round_.hand_size(1) == 9
        assert round_.player_in_turn() == 2
        assert round_.draw_pile().size == 108 - 28 - 1 - 2

    @pytest.mark.parametrize("wild", [Card.wild(), Card.wild_draw()])
    def test_start_card_wild_is_returned(self, wild):
        """翻到王牌时放回底部重新洗牌再翻."""
        round_ = Round(FOUR, dealer=0, shuffler=staged_shuffler(place_at(wild, 28)))
        assert round_.discard_top() == Card.numbered(GREEN, 5)
        assert round_.discard_pile().size == 1
        assert round_.draw_pile().cards[-1] == wild
        assert round_.current_color is GREEN
        assert round_.player_in_turn() == 1

    @pytest.mark.parametrize("players,dealer,cards", [
        (['solo'], 0, 7),
        (['a', 'b'], 2, 7),
        (['a', 'b'], 0, 0),
        (['a', 'b'], 0, 50),
    ])
    def test_invalid_setup(self, players, dealer, cards):
        with pytest.raises(GameConfigError):
            Round(players, dealer, identity_shuffler, cards)


class TestPlay:
    """出牌测试."""

    def test_numbered_advances_one(self):
        round_ = four_player_round([Card.numbered(RED, 7), Card.numbered(BLUE, 9)])
        played = round_.play(0)
        assert played == Card.numbered(RED, 7)
        assert round_.player_in_turn() == 1
        assert round_.discard_top() == Card.numbered(RED, 7)
        assert round_.hand(0) == (Card.numbered(BLUE, 9),)

    def test_skip_advances_two(self):
        round_ = four_player_round([Card.skip(RED), Card.numbered(BLUE, 9)])
        round_.play(0)
        assert round_.player_in_turn() == 2

    def test_reverse_flips_direction(self):
        round_ = four_player_round([Card.reverse(RED), Card.numbered(BLUE, 9)])
        round_.play(0)
        assert round_.current_direction is Direction.COUNTERCLOCKWISE
        assert round_.player_in_turn() == 3

    def test_reverse_in_counterclockwise_round(self):
        round_ = four_player_round([Card.reverse(RED), Card.numbered(BLUE, 9)], direction='counterclockwise')
        round_.play(0)
        assert round_.current_direction is Direction.CLOCKWISE
        assert round_.player_in_turn() == 1

    def test_reverse_with_two_players_acts_as_skip(self):
        round_ = restore(round_snapshot(
            [[Card.reverse(RED), Card.numbered(BLUE, 9)], [Card.numbered(GREEN, 1)]],
            [Card.numbered(RED, 5)]
        ))
        round_.play(0)
        assert round_.player_in_turn() == 0
        assert round_.current_direction is Direction.CLOCKWISE

    def test_draw_two(self):
        round_ = four_player_round([Card.draw(RED), Card.numbered(BLUE, 9)])
        round_.play(0)
        assert round_.hand_size(1) == 3
        assert round_.player_in_turn() == 2

    def test_wild_draw_four_with_color(self):
        round_ = four_player_round([Card.wild_draw(), Card.numbered(BLUE, 9)])
        round_.play(0, BLUE)
        assert round_.hand_size(1) == 5
        assert round_.player_in_turn() == 2
        assert round_.current_color is BLUE

    def test_wild_color_as_string(self):
        round_ = four_player_round([Card.wild(), Card.numbered(BLUE, 9)])
        round_.play(0, 'GREEN')
        assert round_.current_color is GREEN
        assert round_.player_in_turn() == 1

    def test_after_wild_chosen_color_applies(self):
        round_ = four_player_round([Card.numbered(GREEN, 4), Card.numbered(RED, 4)],
                                   discard=[Card.wild()], current_color=GREEN)
        assert round_.can_play(0)
        assert not round_.can_play(1)
        assert round_.playable_indices() == [0]

    def test_number_and_symbol_match(self):
        round_ = four_player_round([Card.numbered(BLUE, 5), Card.numbered(BLUE, 9)])
        round_.play(0)
        assert round_.current_color is BLUE

        round_ = four_player_round([Card.skip(BLUE), Card.numbered(BLUE, 9)], discard=[Card.skip(RED)])
        round_.play(0)
        assert round_.player_in_turn() == 2

    @pytest.mark.parametrize("hand,index,color", [
        ([Card.numbered(BLUE, 9), Card.numbered(BLUE, 8)], 0, None),   # 不合法
        ([Card.numbered(RED, 7), Card.numbered(BLUE, 8)], 2, None),    # 越界
        ([Card.numbered(RED, 7), Card.numbered(BLUE, 8)], -1, None),   # 越界
        ([Card.numbered(RED, 7), Card.numbered(BLUE, 8)], True, None),  # 不是下标
        ([Card.wild(), Card.numbered(BLUE, 8)], 0, None),              # 王牌没有颜色
        ([Card.wild(), Card.numbered(BLUE, 8)], 0, 'PURPLE'),          # 颜色无效
        ([Card.numbered(RED, 7), Card.numbered(BLUE, 8)], 0, 'RED'),   # 非王牌指定颜色
    ])
    def test_illegal_play_leaves_state_untouched(self, hand, index, color):
        round_ = four_player_round(hand)
        before = round_.to_snapshot()
        with pytest.raises(IllegalActionError):
            round_.play(index, color)
        assert round_.to_snapshot() == before

    def test_can_play_any(self, ordered_round):
        """座位1全是蓝牌，不能打在绿1上."""
        assert ordered_round.player_in_turn() == 1
        assert not ordered_round.can_play_any()
        assert ordered_round.playable_indices() == []


class TestDraw:
    """摸牌测试."""

    def test_draw_gives_top_card_and_passes(self, ordered_round):
        drawn = ordered_round.draw()
        assert drawn == Card.numbered(GREEN, 2)
        assert ordered_round.hand_size(1) == 8
        assert ordered_round.player_in_turn() == 2
        assert ordered_round.draw_pile().size == 85
        # 座位2有蓝1和绿0
        assert ordered_round.playable_indices() == [0, 6]

    def test_draw_respects_direction(self):
        round_ = four_player_round([Card.numbered(BLUE, 9)], direction='counterclockwise')
        round_.draw()
        assert round_.player_in_turn() == 3

    def test_draw_recycles_discard_pile(self, invariants):
        """摸牌堆为空时回收弃牌堆（保留顶部）."""
        round_ = restore(round_snapshot(
            [[Card.numbered(RED, 7), Card.numbered(BLUE, 9)], [Card.numbered(GREEN, 1)]],
            [Card.numbered(RED, 5)],
            leftover='discard'
        ))
        assert round_.draw_pile().is_empty

        drawn = round_.draw()
        assert drawn == Card.numbered(BLUE, 0)
        assert round_.discard_pile().cards == [Card.numbered(RED, 5)]
        assert round_.draw_pile().size == 103
        assert invariants.is_valid_state(round_.state_view())

    def test_draw_with_no_cards_still_passes_turn(self):
        round_ = restore(round_snapshot(
            [[Card.numbered(RED, 7)], [Card.numbered(GREEN, 1)]],
            [Card.numbered(RED, 5)],
            player_in_turn=1,
            leftover=0
        ))
        assert round_.draw() is None
        assert round_.hand_size(1) == 1
        assert round_.player_in_turn() == 0


class TestUno:
    """uno声明与抓uno测试."""

    def uno_round(self):
        return restore(round_snapshot(
            [[Card.numbered(RED, 7), Card.numbered(BLUE, 9)],
             [Card.numbered(GREEN, 1), Card.numbered(GREEN, 2)],
             [Card.numbered(GREEN, 3), Card.numbered(GREEN, 4)]],
            [Card.numbered(RED, 5)]
        ))

    def test_catch_undeclared_single_card(self):
        round_ = self.uno_round()
        round_.play(0)
        assert round_.is_uno_exposed(0)

        assert round_.catch_uno_failure(1, 0) is True
        assert round_.hand_size(0) == 3
        assert not round_.is_uno_exposed(0)
        assert round_.catch_uno_failure(2, 0) is False

    def test_exposure_lasts_until_own_action(self):
        round_ = self.uno_round()
        round_.play(0)
        round_.draw()
        assert round_.catch_uno_failure(2, 0) is True

    def test_declare_before_play(self):
        round_ = self.uno_round()
        round_.say_uno(0)
        round_.play(0)
        assert round_.catch_uno_failure(1, 0) is False
        assert round_.hand_size(0) == 1

    def test_declare_after_reaching_one_card(self):
        round_ = self.uno_round()
        round_.play(0)
        round_.say_uno(0)
        assert round_.catch_uno_failure(1, 0) is False
        assert round_.hand_size(0) == 1

    def test_declaration_cleared_by_own_play(self):
        round_ = restore(round_snapshot(
            [[Card.numbered(RED, 7), Card.numbered(RED, 8), Card.numbered(BLUE, 9)],
             [Card.numbered(GREEN, 1)], [Card.numbered(GREEN, 3)]],
            [Card.numbered(RED, 5)]
        ))
        round_.say_uno(0)
        assert round_.has_declared_uno(0)
        round_.play(0)
        assert not round_.has_declared_uno(0)
        assert not round_.is_uno_exposed(0)

    def test_catch_seat_with_several_cards(self):
        round_ = self.uno_round()
        before = round_.to_snapshot()
        assert round_.catch_uno_failure(0, 1) is False
        assert round_.to_snapshot() == before

    @pytest.mark.parametrize("accuser,accused", [(0, 0), (0, 3), (-1, 0), (0, '1')])
    def test_invalid_catch(self, accuser, accused):
        round_ = self.uno_round()
        with pytest.raises(IllegalActionError):
            round_.catch_uno_failure(accuser, accused)

    def test_say_uno_invalid_seat(self):
        with pytest.raises(IllegalActionError):
            self.uno_round().say_uno(5)

    def test_flags_reset_after_restore(self):
        round_ = self.uno_round()
        round_.play(0)
        restored = restore(round_.to_snapshot())
        assert not restored.is_uno_exposed(0)
        assert restored.catch_uno_failure(1, 0) is False


class TestRoundEnd:
    """回合结束测试."""

    def ending_round(self):
        return restore(round_snapshot(
            [[Card.numbered(RED, 7)],
             [Card.numbered(BLUE, 9), Card.wild()],
             [Card.skip(RED)],
             [Card.numbered(GREEN, 0)]],
            [Card.numbered(RED, 5)]
        ))

    def test_emptying_hand_ends_round(self):
        round_ = self.ending_round()
        recorder = EndRecorder()
        round_.on_end(recorder)

        round_.play(0)

        assert round_.has_ended()
        assert round_.phase is RoundPhase.ENDED
        assert round_.player_in_turn() is None
        assert round_.winner() == 0
        assert round_.score() == 79
        assert round_.result() == RoundResult(0, 79)
        assert recorder.results == [RoundResult(0, 79)]

    def test_operations_fail_after_end(self):
        round_ = self.ending_round()
        round_.play(0)
        with pytest.raises(IllegalActionError):
            round_.play(0)
        with pytest.raises(IllegalActionError):
            round_.draw()
        with pytest.raises(IllegalActionError):
            round_.say_uno(1)
        with pytest.raises(IllegalActionError):
            round_.catch_uno_failure(1, 2)
        with pytest.raises(IllegalActionError):
            round_.on_end(EndRecorder())
        assert not round_.can_play_any()

    def test_failing_listener_does_not_block_others(self, caplog):
        round_ = self.ending_round()
        recorder = EndRecorder()

        def broken(result):
            raise RuntimeError("listener failure")

        round_.on_end(broken)
        round_.on_end(recorder)
        round_.play(0)

        assert round_.has_ended()
        assert recorder.results == [RoundResult(0, 79)]
        assert "回合结束监听器执行失败" in caplog.text

    def test_before_end_hook_skipped_for_other_plays(self):
        round_ = four_player_round([Card.numbered(RED, 7), Card.numbered(RED, 8)])
        calls = []
        round_.on_before_end(lambda: calls.append(round_.hand_size(0)))

        round_.play(0)
        assert calls == []

    def test_failing_before_end_hook_aborts_play(self):
        """准备函数的异常传给调用方，回合状态和监听器都不受影响."""
        round_ = self.ending_round()
        recorder = EndRecorder()
        before = round_.to_snapshot()

        def refuse():
            raise RuntimeError("not ready")

        round_.on_before_end(refuse)
        round_.on_end(recorder)

        with pytest.raises(RuntimeError):
            round_.play(0)

        assert not round_.has_ended()
        assert round_.to_snapshot() == before
        assert recorder.results == []

    def test_before_end_hook_runs_before_state_changes(self):
        round_ = self.ending_round()
        seen = []
        round_.on_before_end(lambda: seen.append((round_.hand_size(0), round_.has_ended())))
        round_.play(0)
        assert seen == [(1, False)]
        with pytest.raises(IllegalActionError):
            round_.on_before_end(lambda: None)

    def test_last_card_draw_penalty_counts(self):
        """最后一张是加二时，下家摸的牌也计分."""
        round_ = restore(round_snapshot(
            [[Card.draw(RED)], [Card.numbered(BLUE, 9)]],
            [Card.numbered(RED, 5)]
        ))
        round_.play(0)
        assert round_.hand(1) == (Card.numbered(BLUE, 9), Card.numbered(BLUE, 0), Card.numbered(BLUE, 1))
        assert round_.score() == 10


class TestRoundSnapshot:
    """回合快照测试."""

    def base_snapshot(self):
        return round_snapshot(
            [[Card.numbered(RED, 7), Card.numbered(BLUE, 9)], [Card.numbered(GREEN, 1)], [Card.skip(RED)]],
            [Card.numbered(RED, 5)],
            dealer=2
        )

    def test_round_trip(self, shuffler):
        round_ = Round(['a', 'b', 'c', 'd'], dealer=1, shuffler=shuffler)
        snapshot = round_.to_snapshot()
        assert set(snapshot) == {
            'players', 'hands', 'draw_pile', 'discard_pile',
            'current_color', 'current_direction', 'dealer', 'player_in_turn'
        }
        assert Round.from_snapshot(snapshot).to_snapshot() == snapshot

    def test_restore_ended_round(self):
        snapshot = round_snapshot(
            [[], [Card.numbered(BLUE, 9)]], [Card.numbered(RED, 5)], player_in_turn=None
        )
        round_ = restore(snapshot)
        assert round_.has_ended()
        assert round_.winner() == 0
        assert round_.score() == 9

    @pytest.mark.parametrize("mutate", [
        lambda s: s.pop('dealer'),
        lambda s: s.update(dealer='0'),
        lambda s: s.update(current_direction='left'),
        lambda s: s.update(extra=1),
        lambda s: s.update(players=['only']),
        lambda s: s['hands'][0].append({'type': 'NUMBERED', 'color': 'RED'}),
    ])
    def test_malformed_snapshot(self, mutate):
        snapshot = self.base_snapshot()
        mutate(snapshot)
        with pytest.raises(ValidationError):
            restore(snapshot)

    @pytest.mark.parametrize("mutate", [
        lambda s: s['draw_pile'].pop(),
        lambda s: s['draw_pile'].append({'type': 'WILD'}),
        lambda s: s['draw_pile'].__setitem__(0, {'type': 'WILD'}),
        lambda s: s.update(player_in_turn=None),
        lambda s: s.update(player_in_turn=3),
        lambda s: s.update(dealer=-1),
        lambda s: s.update(current_color='BLUE'),
        lambda s: s.update(current_color=None),
        lambda s: s.update(players=['a', 'b']),
        lambda s: s['draw_pile'].append(s['discard_pile'].pop()),
        lambda s: s['draw_pile'].extend(s['hands'][1]) or s['hands'][1].clear(),
    ])
    def test_inconsistent_snapshot(self, mutate):
        snapshot = self.base_snapshot()
        mutate(snapshot)
        with pytest.raises(StateInvariantError) as exc_info:
            restore(snapshot)
        assert exc_info.value.violations

    def test_snapshot_is_a_copy(self):
        snapshot = self.base_snapshot()
        original = copy.deepcopy(snapshot)
        round_ = restore(snapshot)
        round_.play(0)
        assert snapshot == original

    def test_getters_return_copies(self):
        round_ = restore(self.base_snapshot())
        round_.draw_pile().deal()
        round_.discard_pile().deal()
        assert round_.draw_pile().size == 108 - 5
        assert round_.discard_pile().size == 1
        assert round_.player(1) == 'p1'
        assert round_.players == ('p0', 'p1', 'p2')
        with pytest.raises(IllegalActionError):
            round_.player(3)
