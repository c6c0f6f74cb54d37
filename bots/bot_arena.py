"""AI-vs-AI arena for Nine-Point and Sixty-Six."""

from __future__ import annotations

import argparse
import logging
from collections import Counter
from random import Random
from typing import Iterable, Optional, Sequence

from kabu66.cards import Card
from kabu66.game import NinePointMatch, Phase, SixtySixMatch
from kabu66.ninepoint import Decision
from kabu66.rules_schema import Difficulty, NinePointRules, SixtySixRules
from kabu66.scoring import Side

from .nine_point import NinePointBot
from .sixty_six import SixtySixBot

GAMES = ("nine-point", "sixty-six")


def play_nine_point_match(
    match: NinePointMatch,
    player_bot: NinePointBot,
    opponent_bot: NinePointBot,
) -> NinePointMatch:
    match.start_round()
    while True:
        if player_bot.decide(match.player.cards) is Decision.DRAW:
            match.player_draw()
        else:
            match.player_stand()
        match.play_opponent_turn(opponent_bot.decide)
        if match.phase is Phase.GAME_END:
            return match
        match.next_round()


def play_sixty_six_match(
    match: SixtySixMatch,
    player_bot: SixtySixBot,
    opponent_bot: SixtySixBot,
) -> SixtySixMatch:
    bots = {Side.PLAYER: player_bot, Side.OPPONENT: opponent_bot}
    state = match.start()
    while match.phase is not Phase.GAME_END:
        if match.phase is Phase.TRICK_RESULT:
            match.continue_after_trick()
            continue
        side = state.current_side
        bot = bots[side]
        if bot.wants_exchange(state, side):
            match.exchange_trump_for_nine(side)
        card: Card = bot.choose_card(state, side)
        match.play_card(side, card)
    return match


def run_nine_point(
    player_bot: NinePointBot,
    opponent_bot: NinePointBot,
    *,
    n_matches: int = 10,
    seed: Optional[int] = None,
    rules: Optional[NinePointRules] = None,
) -> dict:
    rng = Random(seed)
    outcomes: Counter[str] = Counter()
    history = []
    for _ in range(n_matches):
        match = play_nine_point_match(NinePointMatch(rng=rng, rules=rules or NinePointRules()), player_bot, opponent_bot)
        assert match.match_outcome is not None
        outcomes[match.match_outcome.value] += 1
        history.append(
            {
                "outcome": match.match_outcome.value,
                "player_wins": match.player_wins,
                "opponent_wins": match.opponent_wins,
                "draws": match.draws,
            }
        )
    return {"outcomes": dict(outcomes), "history": history}


def run_sixty_six(
    player_bot: SixtySixBot,
    opponent_bot: SixtySixBot,
    *,
    n_matches: int = 10,
    seed: Optional[int] = None,
    rules: Optional[SixtySixRules] = None,
) -> dict:
    rng = Random(seed)
    outcomes: Counter[str] = Counter()
    history = []
    for _ in range(n_matches):
        match = play_sixty_six_match(SixtySixMatch(rng=rng, rules=rules or SixtySixRules()), player_bot, opponent_bot)
        assert match.state is not None and match.match_outcome is not None
        state = match.state
        outcomes[match.match_outcome.value] += 1
        history.append(
            {
                "outcome": match.match_outcome.value,
                "tricks": state.trick_number,
                "scores": (state.score(Side.PLAYER), state.score(Side.OPPONENT)),
                "trick_points": (
                    state.sides[Side.PLAYER].trick_points(),
                    state.sides[Side.OPPONENT].trick_points(),
                ),
                "game_points": (
                    state.sides[Side.PLAYER].game_points,
                    state.sides[Side.OPPONENT].game_points,
                ),
            }
        )
    return {"outcomes": dict(outcomes), "history": history}


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run AI-vs-AI matches.")
    parser.add_argument("--game", default="sixty-six", choices=GAMES)
    parser.add_argument("--player", default="medium", choices=[d.value for d in Difficulty])
    parser.add_argument("--opponent", default="hard", choices=[d.value for d in Difficulty])
    parser.add_argument("--n", type=int, default=10, help="Number of matches to play.")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    rng = Random(args.seed)
    if args.game == "nine-point":
        results = run_nine_point(
            NinePointBot(args.player, rng=rng),
            NinePointBot(args.opponent, rng=rng),
            n_matches=args.n,
            seed=args.seed,
        )
    else:
        results = run_sixty_six(
            SixtySixBot(args.player, rng=rng),
            SixtySixBot(args.opponent, rng=rng),
            n_matches=args.n,
            seed=args.seed,
        )

    print(f"{args.game}: {args.player} vs {args.opponent} over {args.n} matches")
    for outcome in ("win", "loss", "draw"):
        print(f"  {outcome:<5} {results['outcomes'].get(outcome, 0)}")


if __name__ == "__main__":
    main()
