def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_state_reflects_session(client, sio_client):
    res = client.get('/api/state')
    assert res.status_code == 200
    state = res.get_json()
    assert state['gridSize'] == 10
    assert state['winCondition'] == 3
    assert state['treasureCount'] == 5
    assert state['resetPending'] is False
    assert len(state['treasures']) == 5
    # The Socket.IO client connected by the fixture is a player
    init = [p for p in sio_client.get_received('/ws') if p['name'] == 'init'][0]['args'][0]
    assert init['playerId'] in state['players']
