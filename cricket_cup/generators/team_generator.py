"""
Team Generator - a ready-made field of 8 club teams for trying out a tournament
"""
from cricket_cup.models.team import Team
from cricket_cup.stores import TeamStore


SEED_TEAMS = [
    {"name": "Harbour Hawks", "short_name": "HH"},
    {"name": "Riverside Rangers", "short_name": "RR"},
    {"name": "Northgate Nomads", "short_name": "NN"},
    {"name": "Old Town Owls", "short_name": "OTO"},
    {"name": "Hillside Hurricanes", "short_name": "HU"},
    {"name": "Lakeview Lions", "short_name": "LL"},
    {"name": "Station Road Strikers", "short_name": "SRS"},
    {"name": "Mill Lane Mavericks", "short_name": "MLM"},
]


class TeamGenerator:
    """Creates the seed teams through the team store"""

    @classmethod
    def create_teams(cls, team_store: TeamStore, count: int = len(SEED_TEAMS)) -> list[Team]:
        """
        Create up to `count` seed teams, skipping names that already exist.

        Returns:
            The teams that were created
        """
        existing = {team.name for team in team_store.list_teams()}
        created = []
        for team_data in SEED_TEAMS[:count]:
            if team_data["name"] in existing:
                continue
            created.append(team_store.create_team(team_data["name"], team_data["short_name"]))
        return created
