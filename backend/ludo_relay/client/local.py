"""Offline stand-in for the relay.

Runs the same turn rule as the server (pass the turn unless a 6 was
rolled) on the caller's thread, with a bot opponent whose pauses stand in
for network latency.
"""
import logging
import random
import time
from dataclasses import dataclass

from ludo_relay.models import Player, generate_room_code
from ludo_relay.services.rooms.relay import next_turn, roll_die
from .base import GameSession, SessionUnavailable

logger = logging.getLogger(__name__)

BOT_NAMES = ['Robot Player', 'AI Challenger', 'Bot Buddy', 'Computer']


@dataclass
class BotDelays:
    """Pauses (seconds) the local simulation waits between bot actions."""

    add_bot: float = 0.5
    before_turn: float = 2.0
    after_roll: float = 1.0
    reroll: float = 1.5


class LocalSession(GameSession):
    online = False

    def __init__(self, sleep=time.sleep, roller=roll_die, rng=None, delays=None, clock=time.time):
        super().__init__()
        self.sleep = sleep
        self.roller = roller
        self.rng = rng or random.Random()
        self.delays = delays or BotDelays()
        self.clock = clock

    def _stamp(self) -> int:
        return int(self.clock() * 1000)

    def _create(self, player_name: str) -> None:
        room_id = generate_room_code()
        player_id = f'local-{self._stamp()}'
        self._dispatch('roomCreated', {
            'roomId': room_id,
            'playerId': player_id,
            'players': [Player(connection_id=player_id, display_name=player_name).to_dict()],
        })
        self.sleep(self.delays.add_bot)
        self.add_bot()
        logger.info("[local-room] room=%s player=%s", room_id, player_name)

    def add_bot(self) -> dict:
        bot = Player(
            connection_id=f'bot-{self._stamp()}-{len(self.state.players)}',
            display_name=self.rng.choice(BOT_NAMES),
            is_bot=True,
        ).to_dict()
        self._dispatch('playerJoined', {
            'players': self.state.players + [bot],
            'playerName': bot['name'],
        })
        return bot

    def _join(self, room_code: str, player_name: str) -> None:
        raise SessionUnavailable('Not connected to server. Cannot join room.')

    def _start(self) -> None:
        self._dispatch('gameStarted', {
            'currentPlayer': 0,
            'players': list(self.state.players),
        })
        self._play_bots()

    def _roll(self) -> None:
        me = self.state.players[self.state.my_index]
        value = self.roller()
        current = next_turn(self.state.current_player, value, len(self.state.players))
        self._dispatch('diceRolled', {
            'value': value,
            'playerId': me['id'],
            'playerName': me['name'],
            'currentPlayer': current,
        })
        if self._is_bot_turn():
            self.sleep(self.delays.before_turn)
            self._play_bots()

    def _move(self, piece_id) -> None:
        me = self.state.players[self.state.my_index]
        self._dispatch('pieceMoved', {
            'playerId': me['id'],
            'pieceId': piece_id,
            'playerName': me['name'],
        })

    def _leave(self) -> None:
        logger.info("[local-leave] room=%s", self.state.room_id)

    def _is_bot_turn(self) -> bool:
        players = self.state.players
        if not self.state.game_started or not players:
            return False
        return bool(players[self.state.current_player].get('isBot'))

    def _play_bots(self) -> None:
        """Let bots roll until the turn comes back to a human player."""
        while self._is_bot_turn():
            bot = self.state.players[self.state.current_player]
            value = self.roller()
            current = next_turn(self.state.current_player, value, len(self.state.players))
            self.sleep(self.delays.after_roll)
            self._dispatch('diceRolled', {
                'value': value,
                'playerId': bot['id'],
                'playerName': bot['name'],
                'currentPlayer': current,
            })
            if value == 6:
                self.sleep(self.delays.reroll)
            elif self._is_bot_turn():
                self.sleep(self.delays.before_turn)
