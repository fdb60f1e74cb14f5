"""
SoliArt CLI - Command-line interface for the engine.

Usage:
    soliart deal [--seed N]                  Deal a game and print the table
    soliart play [--seed N]                  Play in the terminal
    soliart serve [--host H] [--port P]      Run the HTTP API
"""

import argparse
import sys

from .config import load_settings
from .log import setup_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="SoliArt - Klondike Solitaire Engine",
        prog="soliart",
    )
    parser.add_argument("--log-level", help="Override SOLIART_LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    deal_parser = subparsers.add_parser("deal", help="Deal a game and print the table")
    deal_parser.add_argument("--seed", type=int, help="Deal seed")

    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--seed", type=int, help="Deal seed")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    args = parser.parse_args(argv)
    settings = load_settings()
    setup_logging(args.log_level or settings.log_level)

    if args.command == "deal":
        cmd_deal(args, settings)
    elif args.command == "play":
        cmd_play(args, settings)
    elif args.command == "serve":
        cmd_serve(args, settings)
    else:
        parser.print_help()
        sys.exit(1)


def render_table(state) -> str:
    """Plain-text view of a game state."""
    lines = [f"Score: {state.score} points    Moves: {state.moves}"]

    foundations = []
    for foundation in state.foundations:
        top = foundation.top_card
        foundations.append(str(top) if top else f"[{foundation.suit.symbol}]")
    waste = " ".join(str(card) for card in list(state.deck.upwards)[-3:]) or "--"
    lines.append(
        f"Stock: {len(state.deck.downwards):2d}  Waste: {waste:<12}  Foundations: {' '.join(foundations)}"
    )
    lines.append("")

    for pile in state.piles:
        cards = " ".join(str(card) if card.face_up else "##" for card in pile.cards)
        lines.append(f"  {pile.pile_id}: {cards}")

    if state.is_won:
        lines.append("\nYou won!")
    return "\n".join(lines)


def _new_store(seed, settings):
    from .engine_core import Action, Reducer, make_shuffler
    from .session import ManualScheduler, Store

    seed = seed if seed is not None else settings.seed
    store = Store(
        reducer=Reducer(shuffle_cards=make_shuffler(seed), strict=settings.strict),
        scheduler=ManualScheduler(),
    )
    store.dispatch(Action.shuffle())
    return store


def cmd_deal(args, settings):
    """Deal a game and print it."""
    store = _new_store(args.seed, settings)
    print(render_table(store.state))


PLAY_HELP = """Commands:
  d                 draw a card
  f                 turn the waste over
  m <card> <pile>   move a card (and what is on it) to pile 1-7
  s <card>          score a card on its foundation
  h                 list legal moves
  n                 new game
  q                 quit
Cards are written like AS, 10H, QD."""


def cmd_play(args, settings):
    """Interactive terminal game."""
    from .engine_core import Action, available_hints, parse_card

    store = _new_store(args.seed, settings)
    print(PLAY_HELP)

    while True:
        print()
        print(render_table(store.state))
        try:
            line = input("> ").strip()
        except EOFError:
            break
        if not line:
            continue

        command, *rest = line.split()
        command = command.lower()
        try:
            if command == "q":
                break
            elif command == "d":
                action = Action.draw_card()
            elif command == "f":
                action = Action.flip_deck()
            elif command == "n":
                store.dispatch(Action.reset_game())
                action = Action.shuffle()
            elif command == "m" and len(rest) == 2:
                card = parse_card(rest[0])
                action = Action.move_run(store.state.find_card(card.card_id) or card, int(rest[1]))
            elif command == "s" and len(rest) == 1:
                card = parse_card(rest[0])
                action = Action.score_card(store.state.find_card(card.card_id) or card)
            elif command == "h":
                hints = available_hints(store.state)
                for hint in hints:
                    print(f"  {hint.card} : {hint.origin} -> {hint.destination}")
                if not hints:
                    print("  No moves on the table; try drawing.")
                continue
            else:
                print(PLAY_HELP)
                continue
        except ValueError as e:
            print(f"Error: {e}")
            continue

        result = store.dispatch(action)
        if not result.success:
            print(f"Not allowed: {result.error}")


def cmd_serve(args, settings):
    """Run the HTTP API under uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    from .api import create_app

    uvicorn.run(create_app(settings=settings), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
