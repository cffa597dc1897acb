from cricket_cup.generators.team_generator import TeamGenerator

__all__ = ["TeamGenerator"]
