"""Yarn Guardian: 단사 보수 AGV/PLC 코디네이터."""
