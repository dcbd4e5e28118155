import pytest

from typerace.models import FINISHED, PLAYING, WAITING, Player, Room
from typerace.services.race import InvalidPayload, InvalidTransition, NotHost, PlayerNotFound
from typerace.services.race import state_machine


def make_room(*names):
    room = Room('R1')
    for name in names:
        room.add_player(Player(f"sid-{name}", name))
    return room


def test_host_is_first_player_still_present():
    room = make_room('alice', 'bob', 'cara')
    assert room.host_id == 'sid-alice'
    room.remove_player('sid-alice')
    assert room.host_id == 'sid-bob'
    room.remove_player('sid-bob')
    room.remove_player('sid-cara')
    assert room.host_id is None


def test_rejoin_keeps_position():
    room = make_room('alice', 'bob')
    room.add_player(Player('sid-alice', 'Alice again'))
    assert [p.id for p in room.players] == ['sid-alice', 'sid-bob']
    assert room.get_player('sid-alice').name == 'Alice again'
    assert len(room) == 2


def test_set_text_only_while_waiting():
    room = make_room('alice')
    state_machine.set_text(room, 'hello')
    assert room.text == 'hello'

    state_machine.start(room, now=10)
    with pytest.raises(InvalidTransition):
        state_machine.set_text(room, 'changed')
    assert room.text == 'hello'


def test_start_resets_players_and_rejects_double_start():
    room = make_room('alice')
    player = room.get_player('sid-alice')
    player.progress, player.wpm, player.accuracy = 5, 120, 80
    player.is_finished, player.finish_time = True, 99

    state_machine.start(room, now=1000)
    assert room.status == PLAYING
    assert room.start_time == 1000
    assert (player.progress, player.wpm, player.accuracy) == (0, 0, 100)
    assert player.is_finished is False
    assert player.finish_time is None

    with pytest.raises(InvalidTransition):
        state_machine.start(room, now=2000)
    assert room.start_time == 1000


def test_start_with_empty_text_is_allowed():
    room = make_room('alice')
    state_machine.start(room, now=1)
    assert room.status == PLAYING
    assert room.text == ''


def test_finish_latches_and_completes_room():
    room = make_room('alice', 'bob')
    state_machine.start(room, now=0)

    assert state_machine.apply_progress(room, 'sid-alice', 5, 60, 100, True, now=100) is False
    alice = room.get_player('sid-alice')
    assert alice.finish_time == 100

    # Later reports cannot unset the flag or move the timestamp
    state_machine.apply_progress(room, 'sid-alice', 3, 10, 50, False, now=200)
    assert alice.is_finished is True
    assert alice.finish_time == 100
    assert alice.progress == 3

    assert state_machine.apply_progress(room, 'sid-bob', 5, 40, 90, True, now=300) is True
    assert room.status == FINISHED


def test_progress_while_waiting_never_finishes_room():
    room = make_room('alice')
    finished = state_machine.apply_progress(room, 'sid-alice', 0, 0, 100, True, now=5)
    assert finished is False
    assert room.status == WAITING
    assert room.get_player('sid-alice').is_finished is True


def test_progress_for_unknown_player():
    room = make_room('alice')
    with pytest.raises(PlayerNotFound):
        state_machine.apply_progress(room, 'sid-ghost', 1, 1, 100, False, now=1)


def test_require_host():
    room = make_room('alice', 'bob')
    state_machine.require_host(room, 'sid-alice')
    with pytest.raises(NotHost):
        state_machine.require_host(room, 'sid-bob')
    with pytest.raises(NotHost):
        state_machine.require_host(room, None)


def test_coerce_progress():
    assert state_machine.coerce_progress('7', 61.9, 140, None) == (7, 61, 100, False)
    assert state_machine.coerce_progress(1, 2, -5, True) == (1, 2, 0, True)
    with pytest.raises(InvalidPayload):
        state_machine.coerce_progress(None, 1, 1, False)
    with pytest.raises(InvalidPayload):
        state_machine.coerce_progress(1, 'fast', 1, False)
    with pytest.raises(InvalidPayload):
        state_machine.coerce_progress(1, 1, 1, 'yes')
