"""
Unit tests for the lotuscards.cli.study_ui module.
"""

from unittest.mock import MagicMock, patch

import pytest

from lotuscards.cli.study_ui import (
    delete_prompt,
    render_card,
    render_decks,
    start_study_flow,
)
from lotuscards.constants import NO_DECKS_PLACEHOLDER
from lotuscards.controller import StudyController
from lotuscards.models import SessionState
from lotuscards.render import ViewModel, project


def test_delete_prompt_names_the_deck():
    assert delete_prompt("Spanish") == (
        'Delete deck "Spanish"? This cannot be undone.'
    )


def test_render_decks_marks_active(controller: StudyController, capsys):
    render_decks(controller.view())
    output = capsys.readouterr().out
    assert "Spanish" in output
    assert "Empty" in output
    assert "*" in output


def test_render_decks_placeholder_without_decks(capsys):
    render_decks(ViewModel())
    assert NO_DECKS_PLACEHOLDER in capsys.readouterr().out


def test_render_card_front_then_back(controller: StudyController, capsys):
    render_card(controller.view())
    output = capsys.readouterr().out
    assert "hola" in output
    assert "Front" in output
    assert "1 / 3" in output

    render_card(controller.flip())
    output = capsys.readouterr().out
    assert "hello" in output
    assert "Back" in output


def test_render_card_shows_search_and_warning(sample_document, capsys):
    session = SessionState(search_term="gato")
    view = project(sample_document, session, save_warning="disk full")
    render_card(view)
    output = capsys.readouterr().out
    assert "search: gato" in output
    assert "disk full" in output


def test_study_flow_quits_immediately(controller: StudyController, capsys):
    with patch("rich.console.Console.input", side_effect=["q"]):
        start_study_flow(controller)
    output = capsys.readouterr().out
    assert "Starting study session..." in output
    assert "Study session finished." in output


def test_study_flow_navigates_and_flips(controller: StudyController, capsys):
    with patch(
        "rich.console.Console.input", side_effect=["n", "", "p", "quit"]
    ):
        start_study_flow(controller)
    output = capsys.readouterr().out
    assert "2 / 3" in output
    assert "goodbye" in output
    assert controller.session.active_card_index == 0
    assert controller.session.is_flipped is False


def test_study_flow_search_applies_on_enter(
    controller: StudyController, capsys
):
    with patch("rich.console.Console.input", side_effect=["/gato", "q"]):
        start_study_flow(controller)
    output = capsys.readouterr().out
    assert "1 / 1" in output
    assert controller.session.search_term == "gato"
    assert not controller.debouncer.has_pending


def test_study_flow_unknown_command(controller: StudyController, capsys):
    with patch("rich.console.Console.input", side_effect=["zz", "q"]):
        start_study_flow(controller)
    assert "Unknown command: zz" in capsys.readouterr().out


def test_study_flow_ends_on_eof(capsys):
    controller = MagicMock(spec=StudyController)
    controller.view.return_value = ViewModel()
    with patch("rich.console.Console.input", side_effect=EOFError):
        start_study_flow(controller)
    assert "Study session finished." in capsys.readouterr().out
    controller.flip.assert_not_called()


@pytest.mark.parametrize(
    "command, method",
    [("f", "flip"), ("n", "next_card"), ("p", "prev_card"), ("s", "shuffle")],
)
def test_study_flow_dispatches_commands(command, method, capsys):
    controller = MagicMock(spec=StudyController)
    controller.view.return_value = ViewModel()
    getattr(controller, method).return_value = ViewModel()
    with patch("rich.console.Console.input", side_effect=[command, "q"]):
        start_study_flow(controller)
    getattr(controller, method).assert_called_once()
