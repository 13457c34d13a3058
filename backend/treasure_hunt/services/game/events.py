"""Outbound message builders.

Every event is a plain dict carrying its ``type``; gateways serialise it
as-is (one JSON line on the stream transport, one Socket.IO event named
after ``type`` on the web transport).
"""

from typing import Optional

INIT = 'init'
PLAYER_JOINED = 'playerJoined'
PLAYER_LEFT = 'playerLeft'
PLAYER_MOVED = 'playerMoved'
TREASURE_FOUND = 'treasureFound'
NEW_TREASURE = 'newTreasure'
GAME_WON = 'gameWon'
GAME_RESET = 'gameReset'
GAME_RESTARTED = 'gameRestarted'
CHAT = 'chat'


def init(player, grid_size: int, win_condition: int, treasure_count: int, players, treasures):
    return {
        'type': INIT,
        'playerId': player.id,
        'position': player.position.to_dict(),
        'gridSize': grid_size,
        'winCondition': win_condition,
        'treasureCount': treasure_count,
        'treasuresFound': player.treasures_found,
        'players': players,
        'treasures': treasures,
    }


def player_joined(player):
    # Console clients read playerId/position, browser clients read player
    return {
        'type': PLAYER_JOINED,
        'playerId': player.id,
        'position': player.position.to_dict(),
        'player': player.to_dict(),
    }


def player_left(player_id: str):
    return {'type': PLAYER_LEFT, 'playerId': player_id}


def player_moved(player, found_treasure_id: Optional[str] = None):
    return {
        'type': PLAYER_MOVED,
        'playerId': player.id,
        'position': player.position.to_dict(),
        'treasuresFound': player.treasures_found,
        'foundTreasureId': found_treasure_id,
    }


def treasure_found(player):
    return {'type': TREASURE_FOUND, 'treasuresFound': player.treasures_found}


def new_treasure(treasure):
    return {'type': NEW_TREASURE, 'treasure': treasure.to_dict()}


def game_won(player):
    return {
        'type': GAME_WON,
        'playerId': player.id,
        'treasuresFound': player.treasures_found,
    }


def game_reset(player, players, treasures):
    return {
        'type': GAME_RESET,
        'position': player.position.to_dict(),
        'treasuresFound': player.treasures_found,
        'players': players,
        'treasures': treasures,
    }


def game_restarted():
    return {'type': GAME_RESTARTED}


def chat(player_id: str, message: str):
    return {'type': CHAT, 'playerId': player_id, 'message': message}
