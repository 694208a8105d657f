def test_socket_connect_and_join_leaderboard(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')

    received = sio_client.get_received('/ws')
    connected = [pkt for pkt in received if pkt['name'] == 'connected']
    assert connected and connected[0]['args'][0]['principal'] == 'anonymous'

    sio_client.emit('join_leaderboard', {'window': 'weekly'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'joined' and pkt['args'][0]['room'] == 'leaderboard:weekly' for pkt in received)


def test_join_unknown_leaderboard_errors(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_leaderboard', {'window': 'yearly'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'error' for pkt in received)


def test_recorded_score_broadcasts_leaderboard_update(sio_client, client, make_player, login_player):
    sio_client.emit('join_leaderboard', {'window': 'challenge'}, namespace='/ws')
    sio_client.emit('join_leaderboard', {'window': 'monthly'}, namespace='/ws')
    sio_client.get_received('/ws')  # flush

    make_player()
    login_player()
    assert client.post('/api/game/complete', json={'score': 4}).status_code == 201
    updates = [pkt['args'][0]['window'] for pkt in sio_client.get_received('/ws') if pkt['name'] == 'leaderboard_update']
    assert updates == ['monthly']

    assert client.post('/api/game/complete', json={'score': 4, 'is_challenge': True}).status_code == 201
    updates = [pkt['args'][0]['window'] for pkt in sio_client.get_received('/ws') if pkt['name'] == 'leaderboard_update']
    assert sorted(updates) == ['challenge', 'monthly']


def test_ping_pong(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'n': 1} for pkt in received)
