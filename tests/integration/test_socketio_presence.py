"""
Socket.IO Presence Integration Tests

Exercises the HTTP routes and Socket.IO events together through the Flask
and Flask-SocketIO test clients.
"""

import pytest


def messages(client):
    """Payloads of every 'message' event received by a Socket.IO test client."""
    # The test client unwraps 'message' events: args holds the payload itself
    return [event['args'] for event in client.get_received() if event['name'] == 'message']


class TestSocketIOPresence:
    """Full presence flows over the test clients"""

    @pytest.fixture
    def http(self, app):
        return app.test_client()

    def join(self, http, name, room_name='sprint1', room_secret='abc'):
        response = http.post('/player', json={'playerName': name, 'roomName': room_name, 'roomSecret': room_secret})
        assert response.status_code == 200
        return response.get_json()['playerId']

    def connect(self, app, socketio, player_id, name):
        client = socketio.test_client(app, query_string=f'id={player_id}&name={name}')
        assert client.is_connected()
        return client

    def test_health(self, http):
        assert http.get('/health').get_json() == {'status': 'healthy'}

    def test_join_validation(self, http):
        response = http.post('/player', json={'playerName': 'Alice', 'roomName': ''})

        assert response.status_code == 400
        assert response.get_json() == {'message': 'Error! Required JSON fields missing: roomName'}
        assert http.get('/players').get_json() == []

    def test_join_connect_vote_and_leave(self, app, socketio, http):
        alice_id = self.join(http, 'Alice')
        bob_id = self.join(http, 'Bob')

        alice = self.connect(app, socketio, alice_id, 'Alice')
        assert messages(alice) == []

        bob = self.connect(app, socketio, bob_id, 'Bob')
        assert messages(alice) == [{'action': 'player-join', 'name': 'Bob', 'id': bob_id}]
        assert messages(bob) == []

        response = http.post('/vote', json={
            'playerId': bob_id, 'playerName': 'Bob', 'roomName': 'sprint1',
            'roomSecret': 'abc', 'cardValue': 0, 'cardTitle': 'Zero'
        })
        assert response.status_code == 200
        assert response.get_json() == {'message': 'Vote accepted!'}
        assert messages(alice) == [
            {'action': 'player-vote', 'name': 'Bob', 'id': bob_id, 'cardValue': 0, 'cardTitle': 'Zero'}
        ]
        assert messages(bob) == []

        bob.disconnect()
        assert messages(alice) == [{'action': 'player-disconnect', 'name': 'Bob', 'id': bob_id}]

        listing = http.get('/players?roomName=sprint1&roomSecret=abc').get_json()
        assert [doc['playerName'] for doc in listing] == ['Alice']
        alice.disconnect()

    def test_new_round_and_messages(self, app, socketio, http):
        alice_id = self.join(http, 'Alice')
        bob_id = self.join(http, 'Bob')
        alice = self.connect(app, socketio, alice_id, 'Alice')
        bob = self.connect(app, socketio, bob_id, 'Bob')
        alice.get_received()

        ack = alice.emit('newgame', {}, callback=True)
        assert ack == {'statusCode': 200}
        assert messages(bob) == [{'action': 'new', 'name': 'Alice', 'id': alice_id}]
        assert messages(alice) == []

        ack = bob.emit('sendmessage', {'message': {'text': 'coffee?'}}, callback=True)
        assert ack == {'statusCode': 200}
        assert messages(alice) == [{'text': 'coffee?'}]
        assert messages(bob) == []

    def test_unrouted_event_is_acknowledged(self, app, socketio, http):
        alice = self.connect(app, socketio, self.join(http, 'Alice'), 'Alice')

        ack = alice.emit('reaction', {'emoji': 'tada'}, callback=True)

        assert ack == {'statusCode': 200, 'body': 'OK'}

    def test_connect_for_unknown_player_is_refused(self, app, socketio):
        client = socketio.test_client(app, query_string='id=unknown&name=Nobody')

        assert not client.is_connected()

    def test_connect_without_query_params_is_refused(self, app, socketio):
        client = socketio.test_client(app)

        assert not client.is_connected()

    def test_other_rooms_are_not_notified(self, app, socketio, http):
        alice = self.connect(app, socketio, self.join(http, 'Alice'), 'Alice')
        self.connect(app, socketio, self.join(http, 'Eve', room_secret='xyz'), 'Eve')
        self.connect(app, socketio, self.join(http, 'Dan', room_secret=None), 'Dan')

        assert messages(alice) == []

    def test_non_finite_vote_is_rejected_and_not_broadcast(self, app, socketio, http):
        alice_id = self.join(http, 'Alice')
        bob_id = self.join(http, 'Bob')
        alice = self.connect(app, socketio, alice_id, 'Alice')
        self.connect(app, socketio, bob_id, 'Bob')
        alice.get_received()

        body = (
            '{"playerId": "%s", "playerName": "Bob", "roomName": "sprint1", '
            '"roomSecret": "abc", "cardValue": Infinity, "cardTitle": "Infinite"}' % bob_id
        )
        response = http.post('/vote', data=body, content_type='application/json')

        assert response.status_code == 400
        assert response.get_json() == {'message': 'Error! Field cardValue must be a finite number'}
        assert messages(alice) == []
