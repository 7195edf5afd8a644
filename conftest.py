import pytest

from vecalc.commands import Calculator
from vecalc.readers import LineReader
from vecalc.session import Session


class ScriptedReader(LineReader):
    """Replays canned replies; raises EOFError (or a queued exception) when told to."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.prompts = []
        self.defaults = []

    def read_line(self, prompt, default=''):
        self.prompts.append(prompt)
        self.defaults.append(default)
        if not self.replies:
            raise EOFError()
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    if report.when == "call":
        print(f"TEST: {item.name} - {'PASSED' if report.passed else 'FAILED'}")


@pytest.fixture
def make_reader():
    return ScriptedReader


@pytest.fixture
def session():
    return Session()


@pytest.fixture
def calc(session):
    return Calculator(session, ScriptedReader([]))


@pytest.fixture
def in_tmp(tmp_path, monkeypatch):
    """Run the test with the working directory set to a fresh temp dir."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
