"""Domain layer for dmxmoney."""
