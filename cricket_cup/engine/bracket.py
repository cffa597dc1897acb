"""
Bracket Progression - creates the semi-finals and the final once they are earned
"""
import logging
import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from cricket_cup.config import settings
from cricket_cup.engine.exceptions import TournamentError, DuplicateMatchError
from cricket_cup.engine.result import winner_side
from cricket_cup.engine.score import Side
from cricket_cup.engine.standings import compute_standings, group_stage_matches
from cricket_cup.models.bracket import BracketConfig
from cricket_cup.models.match import (
    Match, MatchStatus, GROUP_STAGE, SEMI_FINAL_1, SEMI_FINAL_2, FINAL,
    KNOCKOUT_MATCH_TYPES, is_knockout_type, is_final_type,
)
from cricket_cup.stores import MatchStore, TeamStore, BracketConfigStore, MatchSpec

logger = logging.getLogger(__name__)

GROUP_STAGE_MATCHES = 12  # 6 per group

# One writer at a time across every monitor in the process
_advancement_lock = threading.RLock()


@dataclass
class AdvancementFlags:
    """Cached view of what the stored matches already say"""
    semi_finals_created: bool = False
    final_created: bool = False

    @classmethod
    def from_matches(cls, matches: list[Match]) -> "AdvancementFlags":
        return cls(
            semi_finals_created=any(is_knockout_type(m.match_type) for m in matches),
            final_created=any(is_final_type(m.match_type) for m in matches),
        )


@dataclass
class AdvancementReport:
    """Outcome of one evaluation pass"""
    created: list[Match] = field(default_factory=list)
    flags: AdvancementFlags = field(default_factory=AdvancementFlags)
    integrity_issues: list[str] = field(default_factory=list)


@dataclass
class KnockoutSlot:
    label: str
    match: Optional[Match] = None
    winner_id: Optional[int] = None
    winner_name: Optional[str] = None


def knockout_winner(match: Match) -> tuple[int, str]:
    """Team with strictly more runs; team 2 when the scores are level"""
    if match.team1_score.runs == match.team2_score.runs:
        logger.warning("%s #%s finished level; team 2 (%s) goes through", match.match_type, match.id, match.team2_name)
    if winner_side(match.team1_score, match.team2_score) == Side.TEAM1:
        return match.team1_id, match.team1_name
    return match.team2_id, match.team2_name


def find_integrity_issues(matches: list[Match]) -> list[str]:
    """Duplicated knockout fixtures are reported, never merged"""
    counts = Counter(m.match_type for m in matches if m.match_type in KNOCKOUT_MATCH_TYPES)
    return [
        f"{count} matches labelled '{label}' exist; expected exactly one"
        for label, count in counts.items()
        if count > 1
    ]


def bracket_overview(matches: list[Match]) -> dict[str, KnockoutSlot]:
    """Semi-finals and final with their winners, plus the champion once the final is done"""
    overview = {}
    for key, label in (("semi_final_1", SEMI_FINAL_1), ("semi_final_2", SEMI_FINAL_2)):
        match = next((m for m in matches if m.match_type == label), None)
        overview[key] = _slot(label, match)
    final = next((m for m in matches if is_final_type(m.match_type)), None)
    overview["final"] = _slot(FINAL, final)
    return overview


def _slot(label: str, match: Optional[Match]) -> KnockoutSlot:
    slot = KnockoutSlot(label=label, match=match)
    if match is not None and match.status == MatchStatus.COMPLETED:
        slot.winner_id, slot.winner_name = knockout_winner(match)
    return slot


class BracketProgressionMonitor:
    """
    Watches the match store and advances the bracket.

    Both checks only trust what is stored: before creating anything they
    look for an existing knockout match, so running them again after a
    creation is a no-op. The flags kept here are a cache of that fact and
    are re-derived on every evaluation.
    """

    def __init__(
        self,
        match_store: MatchStore,
        team_store: TeamStore,
        config_store: BracketConfigStore,
        default_balls_per_team: Optional[int] = None,
    ):
        self.matches = match_store
        self.teams = team_store
        self.config_store = config_store
        self.default_balls_per_team = default_balls_per_team or settings.DEFAULT_BALLS_PER_TEAM
        self.flags = AdvancementFlags()
        self._declined_fingerprint = None
        self._evaluating = False

    def attach(self) -> "BracketProgressionMonitor":
        """Re-evaluate whenever the match store reports a change"""
        self.matches.subscribe(self._on_change)
        return self

    def _on_change(self) -> None:
        # Our own creations notify too; the running pass already covers them
        if self._evaluating:
            return
        try:
            self.evaluate()
        except TournamentError as e:
            # The triggering change is already committed; the next change or an explicit advance retries
            logger.error("Bracket progression failed after a match change: %s", e)

    def evaluate(self) -> AdvancementReport:
        with _advancement_lock:
            self._evaluating = True
            try:
                report = AdvancementReport()
                matches = self.matches.list_matches()
                report.integrity_issues = find_integrity_issues(matches)
                for issue in report.integrity_issues:
                    logger.error("Bracket integrity: %s", issue)

                report.created.extend(self.check_semi_finals(matches))
                if report.created:
                    matches = self.matches.list_matches()
                report.created.extend(self.check_final(matches))

                if report.created:
                    matches = self.matches.list_matches()
                self.flags = AdvancementFlags.from_matches(matches)
                report.flags = self.flags
                return report
            finally:
                self._evaluating = False

    # ---------- Semi-finals ----------

    def _semi_final_inputs(self, config: BracketConfig, matches: list[Match], team_ids: list[int]) -> tuple:
        group_matches = tuple(
            (m.id, m.status, m.team1_id, m.team2_id, m.team1_score, m.team2_score)
            for m in matches
            if m.match_type == GROUP_STAGE
        )
        return tuple(config.group_a), tuple(config.group_b), tuple(team_ids), group_matches

    def check_semi_finals(self, matches: Optional[list[Match]] = None) -> list[Match]:
        """
        Create Semi-Final 1 (A1 v B2) and Semi-Final 2 (B1 v A2) once all 12
        group matches are done. Returns the created matches, or [] when the
        bracket is not eligible yet or the semi-finals already exist.
        """
        if matches is None:
            matches = self.matches.list_matches()

        config = self.config_store.get_bracket_config()
        if not config.is_complete:
            return []

        if any(is_knockout_type(m.match_type) for m in matches):
            self.flags.semi_finals_created = True
            return []

        teams = self.teams.list_teams()
        fingerprint = self._semi_final_inputs(config, matches, [t.id for t in teams])
        if fingerprint == self._declined_fingerprint:
            return []

        completed = group_stage_matches(matches, config.all_teams)
        if len(completed) < GROUP_STAGE_MATCHES:
            self._declined_fingerprint = fingerprint
            return []

        roster = {team.id: team for team in teams}
        group_a = compute_standings(config.group_a_teams, completed, roster)
        group_b = compute_standings(config.group_b_teams, completed, roster)
        if len(group_a) < 2 or len(group_b) < 2:
            self._declined_fingerprint = fingerprint
            return []

        a1, a2 = group_a[0].team, group_a[1].team
        b1, b2 = group_b[0].team, group_b[1].team
        logger.info("Group stage complete. A: %s, %s  B: %s, %s", a1.name, a2.name, b1.name, b2.name)

        specs = [
            MatchSpec(a1.id, b2.id, a1.name, b2.name, SEMI_FINAL_1, self.default_balls_per_team),
            MatchSpec(b1.id, a2.id, b1.name, a2.name, SEMI_FINAL_2, self.default_balls_per_team),
        ]
        try:
            created = self.matches.create_matches(specs)
        except DuplicateMatchError:
            logger.warning("Semi-finals were created by another writer; nothing to do")
            created = []

        self.flags.semi_finals_created = True
        self._declined_fingerprint = None
        return created

    # ---------- Final ----------

    def check_final(self, matches: Optional[list[Match]] = None) -> list[Match]:
        """Create the Final between the two semi-final winners once both are completed"""
        if matches is None:
            matches = self.matches.list_matches()

        if any(is_final_type(m.match_type) for m in matches):
            self.flags.final_created = True
            return []

        semi_final_1 = next((m for m in matches if m.match_type == SEMI_FINAL_1), None)
        semi_final_2 = next((m for m in matches if m.match_type == SEMI_FINAL_2), None)
        if semi_final_1 is None or semi_final_2 is None:
            return []
        if semi_final_1.status != MatchStatus.COMPLETED or semi_final_2.status != MatchStatus.COMPLETED:
            return []

        winner1_id, winner1_name = knockout_winner(semi_final_1)
        winner2_id, winner2_name = knockout_winner(semi_final_2)
        logger.info("Semi-finals complete. Final: %s vs %s", winner1_name, winner2_name)

        spec = MatchSpec(winner1_id, winner2_id, winner1_name, winner2_name, FINAL, self.default_balls_per_team)
        try:
            created = self.matches.create_matches([spec])
        except DuplicateMatchError:
            logger.warning("Final was created by another writer; nothing to do")
            created = []

        self.flags.final_created = True
        return created
