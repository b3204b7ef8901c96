from holdem.models import ActionType, EngineState, Phase

from .helpers import ScriptedPolicy, create_engine, rank_seats


def test_equal_street_bets_complete_the_round():
    engine = create_engine()
    engine.start_new_hand()

    engine.hand.current_bet = 40
    for participant in engine.participants:
        participant.street_bet = 40
    assert engine.is_betting_done()

    engine.participants[2].street_bet = 20
    assert not engine.is_betting_done()

    # A folded seat no longer has to match the bet.
    engine.participants[2].folded = True
    assert engine.is_betting_done()


def test_three_checks_deal_the_flop():
    engine = create_engine()
    engine.start_new_hand()
    assert engine.awaiting_human()

    engine.apply_human_action(ActionType.CHECK)

    assert engine.phase == Phase.FLOP
    assert len(engine.shared_cards) == 3
    assert engine.awaiting_human()
    assert engine.current_bet == 0
    assert list(engine.hand.history) == []
    assert all(p.street_bet == 0 for p in engine.participants)


def test_two_checks_are_not_enough_with_three_live_seats():
    engine = create_engine(first_turn=1)
    engine.start_new_hand()

    # Both bots checked before the human is reached.
    assert engine.awaiting_human()
    assert list(engine.hand.history) == [ActionType.CHECK, ActionType.CHECK]
    assert engine.phase == Phase.PRE_FLOP


def test_fold_between_checks_keeps_the_street_open():
    folder = ScriptedPolicy([(ActionType.FOLD, None)])
    checker = ScriptedPolicy([(ActionType.CHECK, None), (ActionType.CHECK, None)])
    engine = create_engine(policies=[folder, checker])
    engine.start_new_hand()

    engine.apply_human_action(ActionType.CHECK)

    # check, fold, check: the last two actions are not both checks.
    assert engine.awaiting_human()
    assert engine.phase == Phase.PRE_FLOP
    assert [p.seat for p in engine.live_participants()] == [0, 2]

    engine.apply_human_action(ActionType.CHECK)

    assert engine.phase == Phase.FLOP
    assert engine.awaiting_human()
    assert len(folder.views) == 1
    assert len(checker.views) == 2
    assert checker.views[1].phase == Phase.FLOP


def test_everyone_folding_to_one_seat_pays_without_showdown():
    folders = [ScriptedPolicy([(ActionType.FOLD, None)]) for _ in range(2)]
    engine = create_engine(policies=folders)
    evaluator = rank_seats(engine, {0: 1, 1: 2, 2: 3})
    engine.start_new_hand()

    engine.apply_human_action(ActionType.BET, 20)

    assert engine.is_hand_over()
    assert engine.state == EngineState.HAND_OVER
    assert evaluator.calls == 0
    assert [p.chips for p in engine.participants] == [1020, 990, 990]
    payout = engine.last_payout
    assert payout.reason == "uncontested"
    assert payout.awards == {0: 50}
    assert payout.pot == 50
    assert engine.pot == 0
    assert engine.phase == Phase.PRE_FLOP
    assert not engine.awaiting_human()


def test_all_in_call_runs_out_the_board():
    bettor = ScriptedPolicy([(ActionType.BET, 50)])
    caller = ScriptedPolicy([(ActionType.CALL, None)])
    engine = create_engine(policies=[bettor, caller], first_turn=1)
    rank_seats(engine, {0: 1, 1: 3, 2: 2})
    engine.participants[0].chips = 60
    engine.start_new_hand()

    assert engine.awaiting_human()
    assert engine.max_bet_allowed() == 50
    engine.apply_human_action(ActionType.CALL)

    assert engine.is_hand_over()
    assert len(engine.shared_cards) == 5
    assert engine.phase == Phase.SHOWDOWN
    assert engine.last_payout.awards == {1: 180}
    assert [p.chips for p in engine.participants] == [0, 1120, 940]
    assert len(bettor.views) == 1
    assert len(caller.views) == 1


def test_ante_that_empties_a_stack_skips_all_betting():
    quiet = [ScriptedPolicy([]), ScriptedPolicy([])]
    engine = create_engine(policies=quiet)
    rank_seats(engine, {0: 3, 1: 1, 2: 2})
    engine.participants[0].chips = 10

    engine.start_new_hand()

    assert engine.is_hand_over()
    assert len(engine.shared_cards) == 5
    assert all(not policy.views for policy in quiet)
    assert [p.chips for p in engine.participants] == [30, 990, 990]


def test_turn_index_carries_over_between_hands():
    engine = create_engine(first_turn=1)
    rank_seats(engine, {0: 3, 1: 1, 2: 2})
    engine.start_new_hand()
    while engine.awaiting_human():
        engine.apply_human_action(ActionType.CHECK)

    assert engine.turn_index == 1
    engine.start_new_hand()
    assert engine.hand.number == 2
    assert engine.awaiting_human()
    assert list(engine.hand.history) == [ActionType.CHECK, ActionType.CHECK]
