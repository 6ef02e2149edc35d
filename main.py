#!/usr/bin/env python3
"""
Chess Scan - photo to editable board

Line-oriented front end: scan a board photo, correct the position by
hand, then export it as FEN or analysis links.
"""

import shlex
import sys

import cv2

from board_renderer import BoardRenderer
from board_session import BoardSession
from config import load_settings
from logger import log_session_start
from rate_limiter import CooldownLimiter
from scanner import ImageScanner
from vision_client import VisionClient

HELP = """Commands:
  scan <path>                 detect pieces in a board photo
  fen <text>                  load a FEN
  place <square> <piece>      e.g. place e4 Q, place e4 white-queen
  remove <square>
  move <from> <to>
  clear | reset | flip | swap
  turn w|b
  castle K|Q|k|q on|off
  links                       analysis links for the current position
  save <path>                 write the board as an image
  show                        print the board
  quit"""


def build_session(settings=None) -> BoardSession:
    settings = settings or load_settings()
    client = VisionClient.from_settings(settings)
    limiter = CooldownLimiter(cooldown=settings.cooldown_seconds)
    return BoardSession(scanner=ImageScanner(client, limiter))


def handle_command(session: BoardSession, line: str, renderer: BoardRenderer = None):
    """
    Run one command line.

    Returns:
        (output_text, keep_running)
    """
    renderer = renderer or BoardRenderer()
    try:
        parts = shlex.split(line)
    except ValueError as e:
        return f"[!] {e}", True
    if not parts:
        return "", True

    cmd, args = parts[0].lower(), parts[1:]

    if cmd in ("quit", "exit", "q"):
        return "", False
    if cmd in ("help", "?"):
        return HELP, True
    if cmd == "show":
        return _board_text(session, renderer), True
    if cmd == "links":
        return _links_text(session), True
    if cmd == "save":
        if len(args) != 1:
            return "Usage: save <path>", True
        if not cv2.imwrite(args[0], renderer.render_image(session.position)):
            return f"[!] Could not write {args[0]}", True
        return f"Saved {args[0]}", True

    if cmd == "fen":
        if not args:
            return "Usage: fen <text>", True
        ok = session.load_fen(" ".join(args))
    elif cmd == "scan" and len(args) == 1:
        ok = session.scan(args[0])
    elif cmd == "place" and len(args) == 2:
        ok = session.place(args[0], args[1])
    elif cmd == "remove" and len(args) == 1:
        ok = session.remove(args[0])
    elif cmd == "move" and len(args) == 2:
        ok = session.move(args[0], args[1])
    elif cmd == "clear" and not args:
        ok = session.clear()
    elif cmd == "reset" and not args:
        ok = session.reset()
    elif cmd == "flip" and not args:
        ok = session.flip()
    elif cmd == "swap" and not args:
        ok = session.swap_colors()
    elif cmd == "turn" and len(args) == 1:
        ok = session.set_turn(args[0])
    elif cmd == "castle" and len(args) == 2 and args[1].lower() in ("on", "off"):
        ok = session.toggle_castling(args[0], args[1].lower() == "on")
    else:
        return f"Unknown command: {line.strip()} (type 'help')", True

    if not ok:
        return f"[!] {session.message}", True

    output = _board_text(session, renderer)
    if session.message:
        output += f"\n[!] {session.message}"
    return output, True


def _board_text(session, renderer):
    return f"{renderer.render_text(session.position)}\nFEN: {session.fen}"


def _links_text(session):
    links = session.analysis_links()
    if not links:
        return f"[!] {session.message}"
    lines = [f"Warning: {w}" for w in session.warnings]
    lines += [f"{site:15} {url}" for site, url in links.items()]
    return "\n".join(lines)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv

    log_session_start()
    session = build_session()
    renderer = BoardRenderer()

    if argv:
        output, _ = handle_command(session, shlex.join(["scan", argv[0]]), renderer)
    else:
        output = _board_text(session, renderer)
    print(output)
    print("Type 'help' for commands.\n")

    while True:
        try:
            line = input("chess> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        output, running = handle_command(session, line, renderer)
        if output:
            print(output)
        if not running:
            break


if __name__ == "__main__":
    main()
