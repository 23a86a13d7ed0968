"""Constants for match enrichment."""

BLUE_TEAM_ID: int = 100

# Divisor for team averages when the resolved team is empty
DEFAULT_TEAM_SIZE: int = 5

MIN_GAME_MINUTES: float = 1.0
SECONDS_PER_MINUTE: float = 60.0

UNKNOWN_CHAMPION: str = "Unknown"
PLACEHOLDER_PLAYER_NAME: str = "Player"

# Roster fields tried in order when deriving a player's role
ROLE_FIELDS: tuple[str, ...] = ("teamPosition", "individualPosition", "lane", "role")
