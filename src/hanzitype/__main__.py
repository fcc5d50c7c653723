"""Console entry point."""
import asyncio
import logging
import shlex

from hanzitype import __version__
from hanzitype.app import HanziTypeApp
from hanzitype.client.game import GamePhase, GameSession
from hanzitype.errors import HanziTypeError
from hanzitype.logging_config import setup_logging

logger = logging.getLogger(__name__)

HELP = """Commands:
  search <pinyin>        look up characters (e.g. search ni)
  add <n> | toggle <n>   save / toggle result number n from the last search
  remove <character>     remove a saved word
  list                   show saved words
  register <email> <pw>  create an account (your list moves online)
  login <email> <pw>     sign in
  logout                 sign out (back to the list kept in this browser)
  play                   start a timed typing challenge
  import <path>          import a tab-separated dictionary file
  quit"""


async def prompt(text: str) -> str:
    """Read a line without blocking the event loop."""
    return await asyncio.get_running_loop().run_in_executor(None, input, text)


def show_entries(entries) -> None:
    if not entries:
        print("  (none)")
    for number, entry in enumerate(entries, start=1):
        print(f"  {number:>2}. {entry.character}  {entry.pinyin}  {entry.definition}")


def pick_result(results, number: str):
    """Get a search result by its 1-based number as shown by show_entries."""
    index = int(number)
    if not 1 <= index <= len(results):
        raise IndexError(f"No search result number {index}")
    return results[index - 1]


async def play(game: GameSession) -> None:
    """Run one round in the console."""
    def on_event(event: str, session: GameSession) -> None:
        if event == "advanced":
            print(f"\n  {session.current_word.character}")
        elif event == "ended":
            print(f"\nTime's up! {session.score} correct, {session.final_rate} per minute. Press Enter.")

    unsubscribe = game.subscribe(on_event)
    try:
        game.start()
        print(f"Type the pinyin (tones optional). {game.duration_seconds} seconds, go!")
        print(f"\n  {game.current_word.character}")
        while game.phase is GamePhase.RUNNING:
            line = await prompt("> ")
            if game.phase is not GamePhase.RUNNING:
                break
            if game.set_input(line):
                print(f"  correct ({game.remaining_seconds}s left)")
                await asyncio.sleep(game.advance_delay_seconds)
            else:
                print(f"  try again: {game.current_word.character}")
    finally:
        unsubscribe()
        game.reset()


async def console(app: HanziTypeApp) -> None:
    """Read and run commands until quit."""
    print(HELP)
    while True:
        mode = app.store.mode.value
        try:
            line = (await prompt(f"[{mode}, {len(app.store)} words] ")).strip()
        except EOFError:
            break
        if not line:
            continue
        try:
            command, *args = shlex.split(line)
            if command in ("quit", "exit"):
                break
            elif command == "help":
                print(HELP)
            elif command == "search":
                app.search.set_query(" ".join(args))
                await app.search.wait()
                show_entries(app.search.results)
            elif command in ("add", "toggle") and args:
                entry = pick_result(app.search.results, args[0])
                if command == "add":
                    added = await app.store.add(entry)
                    print("  saved" if added else "  not saved")
                else:
                    saved = await app.store.toggle(entry)
                    print("  saved" if saved else "  removed")
            elif command == "remove" and args:
                removed = await app.store.remove(args[0])
                print("  removed" if removed else "  not removed")
            elif command == "list":
                show_entries(app.store.words)
            elif command == "register" and len(args) == 2:
                user = await app.store.register(*args)
                print(f"  signed up as {user.email}")
            elif command == "login" and len(args) == 2:
                user = await app.store.login(*args)
                print(f"  signed in as {user.email}")
            elif command == "logout":
                await app.store.logout()
                print("  signed out")
            elif command == "play":
                await play(app.new_game())
            elif command == "import" and args:
                print(f"  imported {app.import_dictionary(args[0])} entries")
            else:
                print(HELP)
        except HanziTypeError as e:
            print(f"  {e}")
        except (IndexError, ValueError, OSError) as e:
            print(f"  {e}")


async def main() -> None:
    """Run the application."""
    app = HanziTypeApp()
    try:
        await app.start()
        await console(app)
    finally:
        logger.info("Cleaning up...")
        await app.stop()


def run() -> None:
    setup_logging(f"Starting hanzitype v{__version__} ...")

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        loop.run_until_complete(main())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    finally:
        loop.close()


if __name__ == "__main__":
    run()
