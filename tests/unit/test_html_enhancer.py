from bs4 import BeautifulSoup

from summarykit.render.html_enhancer import enhance_html, extract_key_row
from summarykit.render.models import SmartKeyRow


def _soup(html):
    return BeautifulSoup(enhance_html(html), "html.parser")


def test_extract_key_row_splits_glued_title():
    row = extract_key_row("Key Concept: Boss of Your BodyThe brain coordinates everything.")
    assert row == SmartKeyRow(
        label="Key Concept:",
        title="Boss of Your Body",
        detail="The brain coordinates everything.",
    )
    assert row.kind == "Key Concept"


def test_extract_key_row_title_on_next_line():
    row = extract_key_row("Definition:\nNeuron\nA nerve cell.")
    assert (row.title, row.detail) == ("Neuron", "A nerve cell.")


def test_extract_key_row_ignores_examples_and_plain_text():
    assert extract_key_row("Example: Reflexes") is None
    assert extract_key_row("Just a sentence.") is None


def test_key_concept_paragraph_becomes_key_row():
    soup = _soup("<p>Key Concept: Boss of Your BodyThe brain coordinates everything.</p>")
    row = soup.select_one("div.smart-key-row")
    assert row["data-label"] == "Key Concept"
    assert row.select_one(".smart-key-badge").get_text() == "Key Concept:"
    assert row.select_one(".smart-key-title").get_text() == "Boss of Your Body"
    assert row.select_one(".smart-key-detail").get_text() == "The brain coordinates everything."


def test_headings_open_sections():
    soup = _soup("<p>Intro.</p><h2>One</h2><p>a</p><h2>Two</h2><p>b</p>")
    sections = soup.select("div.smart-summary > section.smart-section")
    assert len(sections) == 3
    assert sections[0].find("h2") is None
    assert [s.find("h2").get_text() for s in sections[1:]] == ["One", "Two"]
    assert sections[2].find("p").get_text() == "b"


def test_following_paragraph_becomes_detail():
    soup = _soup("<h2>T</h2><p>Definition: Neuron</p><p>A nerve cell.</p><p>Trailing.</p>")
    row = soup.select_one(".smart-key-row")
    assert row.select_one(".smart-key-title").get_text() == "Neuron"
    assert row.select_one(".smart-key-detail").get_text() == "A nerve cell."
    assert [p.get_text() for p in soup.select("section > p")] == ["Trailing."]


def test_example_paragraph_becomes_blockquote():
    soup = _soup("<p>Example: Reflex arcs</p>")
    quote = soup.select_one("blockquote.smart-example")
    assert quote.get_text() == "Example: Reflex arcs"
    assert quote.find("strong").get_text() == "Example:"
    assert soup.select_one(".smart-key-row") is None


def test_list_item_with_break_becomes_key_row():
    soup = _soup("<ul><li>Definition: Synapse<br />\nGap between neurons</li></ul>")
    li = soup.select_one("li")
    assert "smart-key-item" in li["class"]
    assert li.select_one(".smart-key-title").get_text() == "Synapse"
    assert li.select_one(".smart-key-detail").get_text() == "Gap between neurons"


def test_list_item_with_two_paragraphs_becomes_key_row():
    soup = _soup("<ul><li><p>Figure: 86 billion</p><p>Neurons in the brain</p></li></ul>")
    assert soup.select_one(".smart-key-title").get_text() == "86 billion"
    assert soup.select_one(".smart-key-detail").get_text() == "Neurons in the brain"


def test_example_list_item_becomes_blockquote():
    soup = _soup("<ul><li>Example: Touching a hot stove</li></ul>")
    assert soup.select_one("li > blockquote.smart-example") is not None


def test_existing_facts_list_is_tagged():
    soup = _soup("<h2>Additional Interesting Facts</h2><ul><li>One</li></ul>")
    ul = soup.select_one("ul")
    assert "smart-facts-list" in ul["class"]
    assert "list-disc" in ul["class"]


def test_facts_paragraphs_are_forced_into_a_list():
    soup = _soup(
        "<p>Additional Interesting Facts</p>"
        "<p>Fact one<br />\nFact two</p>"
        "<p>Fact three</p>"
    )
    section = soup.select_one("section")
    assert section.find("p") is None
    assert [li.get_text() for li in section.select("ul.smart-facts-list > li")] == [
        "Fact one",
        "Fact two",
        "Fact three",
    ]


def test_empty_html():
    assert enhance_html("") == ""


def test_facts_subheading_forces_list_below_it():
    soup = _soup(
        "<h2>Brain</h2><p>Intro.</p>"
        "<h3>Additional Interesting Facts</h3>"
        "<p>Fact one</p><p>Fact two</p>"
    )
    section = soup.select_one("section")
    assert [p.get_text() for p in section.find_all("p")] == ["Intro."]
    assert section.find("h3").get_text() == "Additional Interesting Facts"
    assert [li.get_text() for li in section.select("ul.smart-facts-list > li")] == ["Fact one", "Fact two"]


def test_facts_subheading_tags_existing_list():
    soup = _soup("<h3>Additional Interesting Facts</h3><ul><li>One</li></ul>")
    assert "smart-facts-list" in soup.select_one("ul")["class"]


def test_other_subheading_leaves_paragraphs_alone():
    soup = _soup("<h2>Brain</h2><h3>Lobes</h3><p>Four of them.</p>")
    assert soup.select_one("ul") is None
    assert soup.find("p").get_text() == "Four of them."
