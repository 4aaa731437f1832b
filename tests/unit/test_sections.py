from summarykit.render.models import Section
from summarykit.render.sections import parse_hierarchy, split_sections


def test_empty_text_still_yields_one_section():
    assert split_sections("") == [Section(title="Summary", body="")]
    assert len(split_sections(None)) == 1


def test_known_heading_sets_title():
    out = split_sections("Key Insights\n- The brain is plastic.\n- Sleep matters.")
    assert out == [Section(title="Key Insights", body="• The brain is plastic.\n• Sleep matters.")]


def test_colon_heading_flushes_previous_section():
    out = split_sections("Intro text here.\nCore Ideas:\n- one.\n- two.")
    assert [s.title for s in out] == ["Overview", "Core Ideas"]
    assert out[0].body == "Intro text here."
    assert out[1].body == "• one.\n• two."


def test_heading_like_lines_never_produce_empty_sections():
    out = split_sections("Intro sentence.\nHeading One\nHeading Two\nBody.")
    assert [s.title for s in out] == ["Overview", "Heading One"]
    assert out[1].body == "Heading Two\nBody."
    assert all(s.body for s in out)


def test_known_heading_with_colon():
    out = split_sections("Overview:\nText.")
    assert out == [Section(title="Overview", body="Text.")]


def test_bullet_with_colon_is_not_a_heading():
    out = split_sections("- Mitochondria:\n- Nucleus.")
    assert out == [Section(title="Overview", body="• Mitochondria:\n• Nucleus.")]


def test_hierarchy_groups_indented_children():
    items = parse_hierarchy("- Mitochondria\n  - Function: produces ATP\n- Nucleus")
    assert [i.model_dump() for i in items] == [
        {"text": "Mitochondria", "children": ["Function: produces ATP"]},
        {"text": "Nucleus", "children": []},
    ]


def test_hierarchy_groups_label_children_without_indent():
    items = parse_hierarchy("• Heart\n• Role: pumps blood\n• Example: exercise raises heart rate\n• Lungs")
    assert items[0].text == "Heart"
    assert items[0].children == ["Role: pumps blood", "Example: exercise raises heart rate"]
    assert items[1].text == "Lungs"
    assert items[1].children == []


def test_hierarchy_first_line_always_opens_an_item():
    items = parse_hierarchy("Definition: a thing\n• Next")
    assert [i.text for i in items] == ["Definition: a thing", "Next"]
