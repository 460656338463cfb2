import logging

import pytest

import termtris.__main__ as cli
from termtris.session import GameSession, Speed


class Console:
    def __init__(self, *answers: str):
        self._answers = list(answers)
        self.prompts: list[str] = []
        self.lines: list[str] = []

    def read(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._answers:
            # Same as input() on a closed stdin or Ctrl-D.
            raise EOFError
        return self._answers.pop(0)

    def write(self, line: str):
        self.lines.append(line)


@pytest.fixture
def played(monkeypatch):
    sessions: list[GameSession] = []

    def fake_play(session: GameSession) -> int:
        sessions.append(session)
        return 30

    monkeypatch.setattr(cli, "play", fake_play)
    return sessions


def test_quit_from_menu_exits_cleanly(played):
    console = Console("2")
    assert cli.main([], read=console.read, write=console.write) == cli.EXIT_OK
    assert played == []
    assert "\t  1: Start" in console.lines


def test_invalid_menu_choice_fails(played):
    console = Console("7")
    assert cli.main([], read=console.read, write=console.write) == cli.EXIT_INVALID_CHOICE
    assert played == []


@pytest.mark.parametrize(
    ("answer", "speed"),
    [("1", Speed.DOABLE), ("2", Speed.FAST), ("3", Speed.SUPER_FAST)],
)
def test_each_speed_choice_runs_exactly_that_speed(played, answer: str, speed: Speed):
    console = Console("1", answer)
    assert cli.main([], read=console.read, write=console.write) == cli.EXIT_OK
    assert len(played) == 1
    assert played[0].speed is speed
    assert console.lines[-1] == "Score : 30"


def test_unknown_speed_falls_back_to_doable(played, caplog):
    console = Console("1", "fast please")
    with caplog.at_level(logging.WARNING, logger="termtris.__main__"):
        assert cli.main([], read=console.read, write=console.write) == cli.EXIT_OK
    assert played[0].speed is Speed.DOABLE
    assert "Unknown speed" in caplog.text


def test_speed_option_skips_speed_menu(played):
    console = Console("1")
    assert cli.main(["--speed", "3"], read=console.read, write=console.write) == cli.EXIT_OK
    assert console.prompts == ["Choice >> "]
    assert played[0].speed is Speed.SUPER_FAST


def test_seed_makes_games_reproducible(played):
    for _ in range(2):
        console = Console("1")
        cli.main(["--speed", "1", "--seed", "42"], read=console.read, write=console.write)
    first, second = played
    assert first.board.active.index == second.board.active.index
    assert first.board.rng.random() == second.board.rng.random()


def test_end_of_input_at_menu_fails(played):
    console = Console()
    assert cli.main([], read=console.read, write=console.write) == cli.EXIT_INVALID_CHOICE
    assert played == []


def test_end_of_input_at_speed_menu_falls_back_to_doable(played):
    console = Console("1")
    assert cli.main([], read=console.read, write=console.write) == cli.EXIT_OK
    assert console.prompts == ["Choice >> ", "Choice>> "]
    assert played[0].speed is Speed.DOABLE


def test_log_file_receives_records(played, tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers.clear()
    log_file = tmp_path / "termtris.log"
    try:
        console = Console("1", "9")
        argv = ["--log-file", str(log_file), "--log-level", "DEBUG"]
        assert cli.main(argv, read=console.read, write=console.write) == cli.EXIT_OK
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    text = log_file.read_text()
    assert "WARNING termtris.__main__: Unknown speed '9'" in text
    assert "DEBUG termtris.board: Spawned" in text
