"""User persistence layer for thegame."""
