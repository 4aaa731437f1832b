import pytest

from summarykit.render.cornell import compose_cornell_text, normalize_cornell
from summarykit.render.text_utils import normalize_general


def test_text_without_pipes_uses_general_normalizer():
    src = "## Cue\n- note one\n1. note two"
    out = normalize_cornell(src)
    assert out == normalize_general(src)
    assert "|" not in out


def test_pipe_table_is_flattened_to_bullets():
    src = """
| Cue | Note | Extra |
| :--- | :--- | :--- |
| **Neuron** | Nerve cell | Fires |
| Synapse |  |  |
Summary line
"""
    out = normalize_cornell(src)
    assert out == "• Cue\nNote — Extra\n• Neuron\nNerve cell — Fires\n• Synapse\nSummary line"


@pytest.mark.parametrize(
    "src",
    [
        "| A | B |\n|---|---|\n| x | y |\n\n\n\nTail",
        "Cue<br>| Neuron | Nerve cell |",
        "|<br>",
        "# | Heading row |\n**| Bold | row |**",
    ],
)
def test_normalize_cornell_is_idempotent(src):
    once = normalize_cornell(src)
    assert normalize_cornell(once) == once


def test_pipe_row_after_break_tag_is_flattened():
    assert normalize_cornell("Cue<br>| Neuron | Nerve cell |") == "Cue\n• Neuron\nNerve cell"
    assert normalize_cornell("|<br>") == ""


def test_compose_uses_placeholders():
    out = compose_cornell_text("", None, "Wrap up")
    assert out == "CUES\nNo cues available.\n\nNOTES\nNo notes available.\n\nSUMMARY\nWrap up"


def test_compose_for_copy_keeps_raw_fields():
    assert compose_cornell_text("a", "b", "c", for_copy=True) == "[CUES]\na\n\n[NOTES]\nb\n\n[SUMMARY]\nc"
