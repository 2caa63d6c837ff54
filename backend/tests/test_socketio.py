import pytest
from flask import request

from geoguess.gateway import GENERIC_ERROR_MESSAGE


def payloads(received, name):
    return [pkt['args'][0] for pkt in received if pkt['name'] == name]


def errors(test_client):
    return [p['message'] for p in payloads(test_client.get_received(), 'error_message')]


def create_room(test_client, mode='countries', **avatar):
    test_client.emit('create_room', {'mode': mode, **avatar})
    received = test_client.get_received()
    created = payloads(received, 'room_created')
    assert len(created) == 1, received
    return created[0]['code'], payloads(received, 'joined')[0]


def join_room(test_client, code, **avatar):
    test_client.emit('join_room', {'code': code, **avatar})
    joined = payloads(test_client.get_received(), 'joined')
    assert len(joined) == 1
    return joined[0]


def wrong_words(services, room, count):
    words = [w for w in services.word_pool.words(room.mode) if w != room.answer and len(w) == room.word_length]
    return words[:count]


def test_connect_receives_lobby_history(make_sio_client):
    first = make_sio_client()
    received = first.get_received()
    assert payloads(received, 'lobby_messages') == [[]]

    first.emit('lobby_chat_message', 'hello lobby')
    second = make_sio_client()
    history = payloads(second.get_received(), 'lobby_messages')[0]
    assert [m['text'] for m in history] == ['hello lobby']


def test_lobby_chat_is_broadcast_to_everyone(make_sio_client):
    alice, bob = make_sio_client(), make_sio_client()
    alice.get_received()
    bob.get_received()
    alice.emit('lobby_chat_message', {'text': 'anyone up for a game?'})
    for test_client in (alice, bob):
        messages = payloads(test_client.get_received(), 'lobby_chat_message')
        assert [m['text'] for m in messages] == ['anyone up for a game?']
        assert len(messages[0]['user']) == 5


def test_blank_lobby_message_is_rejected(sio_client):
    sio_client.get_received()
    sio_client.emit('lobby_chat_message', '   ')
    assert errors(sio_client) == ['Message cannot be empty']


def test_create_room_binds_creator(sio_client, services):
    sio_client.get_received()
    code, joined = create_room(sio_client, avatarStyle='bottts', avatarOptions={'mouth': 'smile'})
    room = services.registry.get(code)
    assert room is not None
    assert joined['code'] == code
    assert joined['wordLength'] == room.word_length
    assert joined['maxAttempts'] == 6
    assert joined['yourId'] in room.participants
    assert joined['avatars'][joined['yourId']]['style'] == 'bottts'
    assert joined['messages'] == []


def test_create_room_rejects_invalid_mode(sio_client, services):
    sio_client.get_received()
    sio_client.emit('create_room', {'mode': 'planets'})
    assert errors(sio_client) == ['Invalid game mode']
    assert len(services.registry) == 0


def test_create_room_twice_is_rejected(sio_client, services):
    sio_client.get_received()
    create_room(sio_client)
    sio_client.emit('create_room', {'mode': 'cities'})
    assert errors(sio_client) == ['You are already in a room']
    assert len(services.registry) == 1


def test_join_requires_known_code(sio_client):
    sio_client.get_received()
    sio_client.emit('join_room', {'code': 'ZZZZZZ'})
    assert errors(sio_client) == ['Room not found']
    sio_client.emit('join_room', {})
    assert errors(sio_client) == ['Room code is required']


def test_join_notifies_existing_participants(make_sio_client, services):
    alice, bob = make_sio_client(), make_sio_client()
    alice.get_received()
    bob.get_received()
    code, alice_joined = create_room(alice, avatarStyle='adventurer')

    bob.emit('join_room', {'code': code.lower(), 'avatarStyle': 'pixel-art', 'avatarOptions': {'hat': True}})
    bob_received = bob.get_received()
    bob_joined = payloads(bob_received, 'joined')[0]
    assert payloads(bob_received, 'participant_joined') == []
    assert set(bob_joined['avatars']) == {alice_joined['yourId'], bob_joined['yourId']}

    notices = payloads(alice.get_received(), 'participant_joined')
    assert len(notices) == 1
    assert notices[0]['id'] == bob_joined['yourId']
    assert notices[0]['style'] == 'pixel-art'
    assert notices[0]['options'] == {'hat': True}
    assert notices[0]['seed'] == bob_joined['avatars'][bob_joined['yourId']]['seed']
    assert len(services.registry.get(code)) == 2


@pytest.mark.parametrize('event,data', [
    ('chat_message', 'hi'),
    ('request_hint', None),
    ('make_guess', 'SPAIN'),
])
def test_room_actions_require_a_room(sio_client, event, data):
    sio_client.get_received()
    if data is None:
        sio_client.emit(event)
    else:
        sio_client.emit(event, data)
    assert errors(sio_client) == ['You are not in a room']


def test_room_chat_reaches_every_participant(make_sio_client, services):
    alice, bob = make_sio_client(), make_sio_client()
    code, _ = create_room(alice)
    join_room(bob, code)
    alice.get_received()

    bob.emit('chat_message', 'good luck')
    for test_client in (alice, bob):
        messages = payloads(test_client.get_received(), 'chat_message')
        assert [m['text'] for m in messages] == ['good luck']

    # A late joiner sees the log
    carol = make_sio_client()
    assert [m['text'] for m in join_room(carol, code)['messages']] == ['good luck']


def test_hints_are_shared_and_run_out(make_sio_client, services):
    alice, bob = make_sio_client(), make_sio_client()
    code, _ = create_room(alice)
    join_room(bob, code)
    alice.get_received()
    room = services.registry.get(code)

    indices = []
    for i in range(room.word_length):
        requester = alice if i % 2 == 0 else bob
        requester.emit('request_hint')
        alice_hints = payloads(alice.get_received(), 'hint')
        bob_hints = payloads(bob.get_received(), 'hint')
        assert alice_hints == bob_hints and len(alice_hints) == 1
        hint = alice_hints[0]
        assert hint['letter'] == room.answer[hint['index']]
        indices.append(hint['index'])
    assert sorted(indices) == list(range(room.word_length))

    alice.emit('request_hint')
    assert errors(alice) == ['No more hints available']
    assert bob.get_received() == []


def test_guess_validation_errors_go_to_sender_only(make_sio_client, services):
    alice, bob = make_sio_client(), make_sio_client()
    code, _ = create_room(alice, mode='countries')
    bob_id = join_room(bob, code)['yourId']
    alice.get_received()

    bob.emit('make_guess', 'ROME')
    assert errors(bob) == ['Guess must be 5 letters']
    bob.emit('make_guess', 'PARIS')
    assert errors(bob) == ['Invalid country']
    bob.emit('make_guess', {'guess': 12345})
    assert errors(bob) == ['Invalid guess']
    assert alice.get_received() == []
    assert services.registry.get(code).participants[bob_id].guesses == []


def test_winning_guess_ends_game_for_everyone(make_sio_client, services):
    alice, bob = make_sio_client(), make_sio_client()
    code, alice_joined = create_room(alice, mode='countries')
    bob_joined = join_room(bob, code)
    alice.get_received()
    room = services.registry.get(code)
    answer = room.answer
    wrong = wrong_words(services, room, 1)[0]

    alice.emit('make_guess', wrong.lower())
    for test_client in (alice, bob):
        feedback = payloads(test_client.get_received(), 'feedback')
        assert len(feedback) == 1
        assert feedback[0]['guess'] == wrong
        assert feedback[0]['player'] == alice_joined['yourId']
        assert len(feedback[0]['feedback']) == len(answer)

    bob.emit('make_guess', answer)
    for test_client in (alice, bob):
        received = test_client.get_received()
        assert payloads(received, 'feedback')[0]['feedback'] == ['correct'] * len(answer)
        over = payloads(received, 'game_over')
        assert over == [{'winner': bob_joined['yourId'], 'answer': answer, 'locationHint': room.location_hint}]

    assert services.registry.get(code) is None
    bob.emit('chat_message', 'gg')
    assert errors(bob) == ['You are not in a room']
    # Both players are free to start over
    new_code, _ = create_room(alice)
    assert services.registry.get(new_code) is not room


def test_exhausting_attempts_ends_game_without_winner(sio_client, services):
    code, _ = create_room(sio_client, mode='cities')
    room = services.registry.get(code)
    wrong = wrong_words(services, room, room.max_attempts)
    for guess in wrong[:-1]:
        sio_client.emit('make_guess', guess)
        received = sio_client.get_received()
        assert payloads(received, 'game_over') == []
    sio_client.emit('make_guess', wrong[-1])
    over = payloads(sio_client.get_received(), 'game_over')
    assert over == [{'winner': None, 'answer': room.answer, 'locationHint': room.location_hint}]
    assert services.registry.get(code) is None


def test_disconnect_notifies_room_and_removes_empty_room(make_sio_client, services):
    alice, bob = make_sio_client(), make_sio_client()
    code, _ = create_room(alice)
    bob_joined = join_room(bob, code)
    alice.get_received()

    bob.disconnect()
    assert payloads(alice.get_received(), 'participant_left') == [{'id': bob_joined['yourId']}]
    room = services.registry.get(code)
    assert bob_joined['yourId'] not in room.participants

    alice.disconnect()
    assert services.registry.get(code) is None


def test_unexpected_errors_are_reported_generically(make_sio_client, services, monkeypatch):
    alice, bob = make_sio_client(), make_sio_client()
    code, _ = create_room(alice)
    join_room(bob, code)
    alice.get_received()
    room = services.registry.get(code)

    def boom():
        raise RuntimeError('secret internals')

    monkeypatch.setattr(room, 'request_hint', boom)
    alice.emit('request_hint')
    assert errors(alice) == [GENERIC_ERROR_MESSAGE]
    assert bob.get_received() == []
    # The connection keeps working afterwards
    alice.emit('chat_message', 'still here')
    assert [m['text'] for m in payloads(alice.get_received(), 'chat_message')] == ['still here']


def test_disconnect_removes_participant_even_if_leave_broadcast_fails(make_sio_client, services, monkeypatch):
    alice, bob = make_sio_client(), make_sio_client()
    code, _ = create_room(alice)
    bob_id = join_room(bob, code)['yourId']
    room = services.registry.get(code)

    def transport_down(*args, **kwargs):
        raise ConnectionError('transport down')

    monkeypatch.setattr(services.transport, 'broadcast_room', transport_down)
    bob.disconnect()
    assert bob_id not in room
    assert room.is_open

    alice.disconnect()
    assert not room.is_open
    assert services.registry.get(code) is None


def test_events_from_unknown_sid_do_not_create_sessions(flask_app, services):
    handler = services.events.handler_for('chat_message')
    with flask_app.test_request_context('/'):
        request.sid = 'gone-sid'
        handler('anyone there?')
    assert services.events.gateway('gone-sid') is None
    assert len(services.events) == 0
