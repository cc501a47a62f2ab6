"""Round and bet state enums. Integer values match the game server's encoding."""

import enum


class GameState(enum.IntEnum):
    """Global round state."""

    STARTING = 1  # Accepting bets for the next round (about five seconds)
    IN_PROGRESS = 3  # Multiplier running; active bets may cash out
    ENDED = 4  # Busted; transition period before the next round starts


class BetState(enum.IntEnum):
    """Per-slot bet state."""

    IDLE = 1  # No active bet; user may place one
    QUEUED = 2  # Placed before the round accepts wagers; may be cancelled
    PLACING = 3  # Bet request sent; waiting for the server to confirm
    PLAYING = 4  # Bet active this round; user may cash out
    CASHING_OUT = 5  # Cashout request sent; waiting for the server to confirm
