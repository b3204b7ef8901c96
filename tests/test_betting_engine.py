import pytest

from holdem.errors import IllegalAction, IllegalAutomatedAction, InsufficientChips
from holdem.models import ActionType, EngineState, Phase

from .helpers import CheckCallPolicy, ScriptedPolicy, card_universe_intact, create_engine


def bet_then_call(amount: int = 20):
    # Seat 1 opens, seat 2 calls, then the human in seat 0 is facing the bet.
    return [ScriptedPolicy([(ActionType.BET, amount)]), ScriptedPolicy([(ActionType.CALL, None)])]


def test_start_hand_posts_antes_and_deals_hole_cards():
    engine = create_engine()
    ctx = engine.start_new_hand()

    assert ctx.number == 1
    assert engine.pot == 30
    assert [p.chips for p in engine.participants] == [990, 990, 990]
    assert all(len(p.hole_cards) == 2 for p in engine.participants)
    assert all(p.wagered == 10 and p.street_bet == 0 for p in engine.participants)
    assert len(engine.deck) == 46
    assert engine.shared_cards == []
    assert engine.phase == Phase.PRE_FLOP
    assert engine.state == EngineState.AWAITING_ACTION
    assert engine.awaiting_human()
    assert card_universe_intact(engine)


def test_check_when_facing_bet_is_rejected_without_state_change():
    engine = create_engine(policies=bet_then_call(), first_turn=1)
    engine.start_new_hand()
    assert engine.awaiting_human()
    assert engine.pot == 70

    with pytest.raises(IllegalAction, match="Cannot check"):
        engine.apply_human_action(ActionType.CHECK)

    assert engine.pot == 70
    assert engine.participants[0].chips == 990
    assert list(engine.hand.history) == [ActionType.BET, ActionType.CALL]
    assert engine.turn_index == 0


def test_bet_is_only_legal_without_an_open_bet():
    engine = create_engine(policies=bet_then_call(), first_turn=1)
    engine.start_new_hand()
    with pytest.raises(IllegalAction, match="Cannot bet"):
        engine.apply_human_action(ActionType.BET, 20)


def test_raise_and_call_require_an_open_bet():
    engine = create_engine()
    engine.start_new_hand()
    with pytest.raises(IllegalAction, match="Nothing to raise"):
        engine.apply_human_action(ActionType.RAISE, 20)
    with pytest.raises(IllegalAction, match="Nothing to call"):
        engine.apply_human_action(ActionType.CALL)


def test_bet_sizing_is_enforced_by_the_engine():
    engine = create_engine()
    engine.start_new_hand()

    with pytest.raises(IllegalAction, match="outside"):
        engine.apply_human_action(ActionType.BET, 5)
    with pytest.raises(IllegalAction, match="positive"):
        engine.apply_human_action(ActionType.BET, 0)
    with pytest.raises(IllegalAction, match="integer"):
        engine.apply_human_action(ActionType.BET, None)
    with pytest.raises(InsufficientChips):
        engine.apply_human_action(ActionType.BET, 5_000)

    engine.participants[2].chips = 300
    with pytest.raises(IllegalAction, match=r"outside \[10, 300\]"):
        engine.apply_human_action(ActionType.BET, 301)
    assert engine.pot == 30


def test_raise_moves_call_plus_increment_and_street_advances():
    callers = [
        ScriptedPolicy([(ActionType.BET, 20), (ActionType.CALL, None)]),
        ScriptedPolicy([(ActionType.CALL, None), (ActionType.CALL, None)]),
    ]
    engine = create_engine(policies=callers, first_turn=1)
    engine.start_new_hand()

    engine.apply_human_action(ActionType.RAISE, 30)

    assert engine.pot == 180
    assert [p.chips for p in engine.participants] == [940, 940, 940]
    assert len(engine.shared_cards) == 3
    assert engine.phase == Phase.FLOP
    assert engine.current_bet == 0
    assert all(p.street_bet == 0 for p in engine.participants)
    assert all(p.wagered == 60 for p in engine.participants)
    assert len(engine.hand.history) == 0
    assert engine.awaiting_human()
    assert card_universe_intact(engine)


def test_raise_debit_beyond_stack_is_insufficient_chips():
    engine = create_engine(policies=bet_then_call(), first_turn=1)
    engine.start_new_hand()
    engine.participants[0].chips = 40
    with pytest.raises(InsufficientChips, match="50 chips needed"):
        engine.apply_human_action(ActionType.RAISE, 30)
    assert engine.participants[0].chips == 40


def test_call_beyond_stack_is_insufficient_chips():
    engine = create_engine(policies=bet_then_call(50), first_turn=1)
    engine.start_new_hand()
    engine.participants[0].chips = 30
    legal, call_amount, _, _ = engine.legal_actions(0)
    assert ActionType.CALL not in legal
    assert call_amount == 50
    with pytest.raises(InsufficientChips):
        engine.apply_human_action(ActionType.CALL)


def test_unknown_action_is_rejected():
    engine = create_engine()
    engine.start_new_hand()
    with pytest.raises(IllegalAction, match="Unsupported action"):
        engine.apply_human_action("JUMP")  # type: ignore[arg-type]


def test_actions_outside_a_live_hand_are_rejected():
    engine = create_engine(policies=[ScriptedPolicy([(ActionType.FOLD, None)]), CheckCallPolicy()])
    with pytest.raises(IllegalAction, match="No hand in progress"):
        engine.apply_human_action(ActionType.CHECK)

    engine.start_new_hand()
    engine.apply_human_action(ActionType.BET, 10)
    # Seat 1 folded; seat 2 calls and the human is up on the flop.
    engine.apply_human_action(ActionType.FOLD)
    assert engine.is_hand_over()
    with pytest.raises(IllegalAction, match="Hand is over"):
        engine.apply_human_action(ActionType.CHECK)


def test_start_hand_is_rejected_mid_hand():
    engine = create_engine()
    engine.start_new_hand()
    with pytest.raises(IllegalAction, match="already in progress"):
        engine.start_new_hand()


def test_legal_actions_list_and_sizes():
    engine = create_engine(policies=bet_then_call(), first_turn=1)
    engine.start_new_hand()
    legal, call_amount, low, high = engine.legal_actions(0)
    assert legal == [ActionType.FOLD, ActionType.CALL, ActionType.RAISE]
    assert call_amount == 20
    assert low == 10
    assert high == 970

    view = engine.observe(0)
    assert view.to_call == 20
    assert view.current_bet == 20
    assert view.pot == 70
    assert view.live_opponents == 2
    assert view.to_payload()["legal"] == ["FOLD", "CALL", "RAISE"]


def test_policy_sees_legal_opening_options():
    opener = ScriptedPolicy([(ActionType.CHECK, None)])
    engine = create_engine(policies=[opener, CheckCallPolicy()], first_turn=1)
    engine.start_new_hand()
    view = opener.views[0]
    assert view.legal == (ActionType.FOLD, ActionType.CHECK, ActionType.BET)
    assert (view.min_bet, view.max_bet) == (10, 990)
    assert len(view.hole_cards) == 2


def test_illegal_automated_action_is_fatal_and_chained():
    engine = create_engine(policies=[ScriptedPolicy([(ActionType.CHECK, None)]), CheckCallPolicy()])
    engine.start_new_hand()

    with pytest.raises(IllegalAutomatedAction) as excinfo:
        engine.apply_human_action(ActionType.BET, 20)

    assert excinfo.value.seat == 1
    assert isinstance(excinfo.value.__cause__, IllegalAction)
    assert engine.pot == 50
    assert engine.participants[1].chips == 990
    assert not engine.participants[1].folded
