from vecalc.session import DEFAULT_DEBUG_LEVEL, Session
from vecalc.values import Number, Vector


def test_new_session_is_empty_with_default_level():
    s = Session()
    assert s.variables == {}
    assert s.debug_level == DEFAULT_DEBUG_LEVEL


def test_set_var_returns_previous_value():
    s = Session()
    assert s.set_var('x', Number(1)) is None
    assert s.set_var('x', Vector([1])) == Number(1)
    assert s.get_var('x') == Vector([1])


def test_change_var_requires_existing_name():
    s = Session()
    assert not s.change_var('x', Number(1))
    assert not s.contains('x')


def test_change_var_is_type_gated():
    s = Session()
    s.set_var('v', Vector([1, 2]))
    assert not s.change_var('v', Number(3))
    assert s.get_var('v') == Vector([1, 2])
    assert s.change_var('v', Vector([4, 5, 6]))
    assert s.get_var('v') == Vector([4, 5, 6])


def test_names_are_case_sensitive():
    s = Session()
    s.set_var('a', Number(1))
    assert s.get_var('A') is None


def test_print_debug_respects_level(capsys):
    s = Session(debug_level=2)
    s.print_debug(3, "hidden")
    s.print_debug(2, "shown")
    assert capsys.readouterr().out == "Debug 2: shown\n"
